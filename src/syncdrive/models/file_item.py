"""Snapshot records for files and folders on either side of a sync task."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Literal, Optional, Protocol, TypeVar, runtime_checkable

from syncdrive.errors import RecordCodecError
from syncdrive.util.time import dt_to_str, str_to_dt

FileType = Literal["file", "folder"]

FILE_TYPE_FILE: FileType = "file"
FILE_TYPE_FOLDER: FileType = "folder"

T = TypeVar("T", bound="StorableItem")


@runtime_checkable
class StorableItem(Protocol):
    """
    Capability interface the metadata store relies on.

    The store never looks inside the payload; it only needs the path, the
    folder flag, and a way to turn the item into bytes and back.
    """

    path: str

    def is_folder(self) -> bool: ...

    def to_payload(self) -> bytes: ...

    @classmethod
    def from_payload(cls: type[T], payload: bytes) -> T: ...


@dataclass(slots=True)
class RemoteFileItem:
    """A file or folder as last observed on the remote drive."""

    path: str
    file_name: str = ""
    file_type: FileType = FILE_TYPE_FILE
    file_size: int = 0

    drive_id: str = ""
    file_id: str = ""
    parent_file_id: str = ""
    content_hash: str = ""
    content_hash_name: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    scan_time_at: Optional[datetime] = None

    def is_folder(self) -> bool:
        return self.file_type == FILE_TYPE_FOLDER

    def to_dict(self) -> dict[str, Any]:
        return {
            "driveId": self.drive_id,
            "fileId": self.file_id,
            "parentFileId": self.parent_file_id,
            "fileName": self.file_name,
            "fileSize": self.file_size,
            "fileType": self.file_type,
            "contentHash": self.content_hash,
            "contentHashName": self.content_hash_name,
            "createdAt": dt_to_str(self.created_at),
            "updatedAt": dt_to_str(self.updated_at),
            "path": self.path,
            "scanTimeAt": dt_to_str(self.scan_time_at),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RemoteFileItem:
        return cls(
            path=data["path"],
            file_name=data.get("fileName", ""),
            file_type=data.get("fileType", FILE_TYPE_FILE),
            file_size=int(data.get("fileSize", 0)),
            drive_id=data.get("driveId", ""),
            file_id=data.get("fileId", ""),
            parent_file_id=data.get("parentFileId", ""),
            content_hash=data.get("contentHash", ""),
            content_hash_name=data.get("contentHashName", ""),
            created_at=str_to_dt(data.get("createdAt")),
            updated_at=str_to_dt(data.get("updatedAt")),
            scan_time_at=str_to_dt(data.get("scanTimeAt")),
        )

    def to_payload(self) -> bytes:
        return _dump_payload(self.to_dict())

    @classmethod
    def from_payload(cls, payload: bytes) -> RemoteFileItem:
        return _load_payload(cls, payload)


@dataclass(slots=True)
class LocalFileItem:
    """A file or folder as last observed on the local disk."""

    path: str
    file_name: str = ""
    file_type: FileType = FILE_TYPE_FILE
    file_size: int = 0

    file_extension: str = ""
    sha1_hash: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    scan_time_at: Optional[datetime] = None

    def is_folder(self) -> bool:
        return self.file_type == FILE_TYPE_FOLDER

    def to_dict(self) -> dict[str, Any]:
        return {
            "fileName": self.file_name,
            "fileSize": self.file_size,
            "fileType": self.file_type,
            "fileExtension": self.file_extension,
            "sha1Hash": self.sha1_hash,
            "createdAt": dt_to_str(self.created_at),
            "updatedAt": dt_to_str(self.updated_at),
            "path": self.path,
            "scanTimeAt": dt_to_str(self.scan_time_at),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LocalFileItem:
        return cls(
            path=data["path"],
            file_name=data.get("fileName", ""),
            file_type=data.get("fileType", FILE_TYPE_FILE),
            file_size=int(data.get("fileSize", 0)),
            file_extension=data.get("fileExtension", ""),
            sha1_hash=data.get("sha1Hash", ""),
            created_at=str_to_dt(data.get("createdAt")),
            updated_at=str_to_dt(data.get("updatedAt")),
            scan_time_at=str_to_dt(data.get("scanTimeAt")),
        )

    def to_payload(self) -> bytes:
        return _dump_payload(self.to_dict())

    @classmethod
    def from_payload(cls, payload: bytes) -> LocalFileItem:
        return _load_payload(cls, payload)


def _dump_payload(data: dict[str, Any]) -> bytes:
    try:
        text = json.dumps(data, ensure_ascii=False, sort_keys=True, allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise RecordCodecError(
            "Failed to serialize file item",
            details={"path": data.get("path")},
            cause=exc,
        ) from exc
    return text.encode("utf-8")


def _load_payload(cls: type[T], payload: bytes) -> T:
    try:
        data = json.loads(payload.decode("utf-8"))
        if not isinstance(data, dict):
            raise ValueError("payload must be a JSON object")
        return cls.from_dict(data)  # type: ignore[attr-defined]
    except (UnicodeDecodeError, KeyError, TypeError, ValueError) as exc:
        raise RecordCodecError(
            f"Failed to deserialize {cls.__name__}",
            cause=exc,
        ) from exc
