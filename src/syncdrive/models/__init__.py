"""Public model exports for syncdrive."""

from __future__ import annotations

from .file_item import (
    FILE_TYPE_FILE,
    FILE_TYPE_FOLDER,
    FileType,
    LocalFileItem,
    RemoteFileItem,
    StorableItem,
)

__all__ = [
    "FileType",
    "FILE_TYPE_FILE",
    "FILE_TYPE_FOLDER",
    "StorableItem",
    "RemoteFileItem",
    "LocalFileItem",
]
