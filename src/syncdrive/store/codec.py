"""Conversion between file items and the records held by the key-value file."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeVar

from syncdrive.errors import InvalidArgumentError, RecordCodecError
from syncdrive.models import StorableItem

from .paths import normalize_path

T = TypeVar("T", bound=StorableItem)


@dataclass(frozen=True, slots=True)
class StorageRecord:
    """
    Physical unit stored per path.

    The folder flag is hoisted out of the payload so listings can filter
    without deserializing.
    """

    path: str
    is_folder: bool
    payload: bytes


def encode_item(item: StorableItem) -> StorageRecord:
    """
    Build a StorageRecord from an item.

    Raises:
        InvalidArgumentError: if the item is None or its path normalizes to "".
        RecordCodecError: if the payload cannot be produced.
    """
    if item is None:
        raise InvalidArgumentError("item is required")

    path = normalize_path(item.path)
    if not path:
        raise InvalidArgumentError("item path is empty", details={"path": item.path})

    try:
        payload = item.to_payload()
    except RecordCodecError:
        raise
    except Exception as exc:
        raise RecordCodecError(
            "Failed to serialize file item",
            details={"path": path},
            cause=exc,
        ) from exc

    if not isinstance(payload, (bytes, bytearray)):
        raise RecordCodecError(
            "Serialized payload must be bytes",
            details={"path": path, "type": type(payload).__name__},
        )

    return StorageRecord(path=path, is_folder=bool(item.is_folder()), payload=bytes(payload))


def decode_record(item_type: type[T], record: StorageRecord) -> T:
    """Deserialize a record's payload into an item of item_type."""
    return item_type.from_payload(record.payload)
