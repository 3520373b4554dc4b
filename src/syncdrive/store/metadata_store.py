"""Path-keyed metadata stores for the remote and local side of a sync task."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import ClassVar, Generic, Iterable, Optional, TypeVar, Union

from loguru import logger

from syncdrive.errors import InvalidArgumentError, NotFoundError
from syncdrive.models import LocalFileItem, RemoteFileItem, StorableItem

from .codec import StorageRecord, decode_record, encode_item
from .kv import OrderedKvFile
from .paths import children_scan_bounds, is_immediate_child, normalize_path

T = TypeVar("T", bound=StorableItem)


class MetadataStore(Generic[T]):
    """
    Snapshot of one side of a sync task, keyed by normalized path.

    Every operation takes the instance lock, opens the backing file, does its
    work and closes the file before releasing the lock. Two instances on
    different files never coordinate.
    """

    item_type: ClassVar[type]

    def __init__(self, db_path: Union[str, Path]) -> None:
        self.path = Path(db_path)
        self._kv = OrderedKvFile(self.path)
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self.path)!r})"

    def open(self) -> None:
        """No-op; each operation opens the file itself."""

    def close(self) -> None:
        """No-op; no handle outlives an operation."""

    def add(self, item: T) -> None:
        """Insert or overwrite the record at item.path."""
        record = encode_item(item)
        with self._lock, self._kv.session() as kv:
            kv.put(record)

    def add_batch(self, items: Optional[Iterable[T]]) -> None:
        """
        Insert all items in one transaction.

        Every item is encoded before the file is touched, so a codec failure
        rejects the whole batch with nothing written.
        """
        if items is None:
            raise InvalidArgumentError("items is required")

        records: list[StorageRecord] = [encode_item(item) for item in items]
        if not records:
            return

        with self._lock, self._kv.session() as kv:
            kv.put_many(records)
        logger.debug(f"Stored {len(records)} records in {self.path}")

    def get(self, path: Optional[str]) -> T:
        """
        Return the item stored at path.

        Raises:
            InvalidArgumentError: if path normalizes to "".
            NotFoundError: if no record exists at path.
        """
        key = _require_path(path)
        with self._lock, self._kv.session() as kv:
            record = kv.get(key)
        if record is None:
            raise NotFoundError("No record at path", details={"path": key})
        return decode_record(self.item_type, record)

    def get_children(self, folder_path: Optional[str]) -> list[T]:
        """
        Return the immediate children of folder_path in key order.

        A folder with no children, or one that is not tracked at all, yields [].
        """
        folder = _require_path(folder_path)
        lower, upper = children_scan_bounds(folder)
        with self._lock, self._kv.session() as kv:
            records = kv.scan(lower, upper)
        return [
            decode_record(self.item_type, r)
            for r in records
            if is_immediate_child(folder, r.path)
        ]

    def update(self, item: T) -> None:
        """
        Overwrite an existing record.

        Raises:
            NotFoundError: if nothing is stored at item.path yet.
        """
        record = encode_item(item)
        with self._lock, self._kv.session() as kv:
            replaced = kv.replace(record)
        if not replaced:
            raise NotFoundError("No record to update", details={"path": record.path})

    def delete(self, path: Optional[str]) -> None:
        """Remove the record at path. Deleting an absent path is not an error."""
        key = _require_path(path)
        with self._lock, self._kv.session() as kv:
            kv.delete(key)

    def count(self) -> int:
        with self._lock, self._kv.session() as kv:
            return kv.count()


class RemoteSyncStore(MetadataStore[RemoteFileItem]):
    """Snapshot store for the remote drive side."""

    item_type = RemoteFileItem


class LocalSyncStore(MetadataStore[LocalFileItem]):
    """Snapshot store for the local disk side."""

    item_type = LocalFileItem


def _require_path(path: Optional[str]) -> str:
    key = normalize_path(path)
    if not key:
        raise InvalidArgumentError("path is required", details={"path": path})
    return key
