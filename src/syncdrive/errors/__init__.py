"""Public error exports for syncdrive."""

from __future__ import annotations

from .exceptions import (
    AuthError,
    ConfigCorruptError,
    InvalidArgumentError,
    InvalidStateError,
    NoTasksConfiguredError,
    NotFoundError,
    RecordCodecError,
    StorageError,
    SyncDriveError,
)

__all__ = [
    "SyncDriveError",
    "InvalidArgumentError",
    "NotFoundError",
    "InvalidStateError",
    "ConfigCorruptError",
    "NoTasksConfiguredError",
    "StorageError",
    "RecordCodecError",
    "AuthError",
]
