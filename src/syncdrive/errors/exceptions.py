"""Exception hierarchy for syncdrive."""

from __future__ import annotations

from typing import Any, Optional


class SyncDriveError(Exception):
    """
    Base exception for syncdrive.

    Attributes:
        details: Optional structured information (e.g., path, task id).
        cause: Optional original exception that triggered this error.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.details = details or {}
        self.cause = cause


class InvalidArgumentError(SyncDriveError):
    """Raised when a required input (path, item, collection) is absent or empty."""


class NotFoundError(SyncDriveError):
    """Raised when a point lookup or update target does not exist."""


class InvalidStateError(SyncDriveError):
    """Raised when the library is used in an invalid state (e.g., load not called)."""


class ConfigCorruptError(SyncDriveError):
    """Raised when the persisted sync drive configuration cannot be parsed."""


class NoTasksConfiguredError(SyncDriveError):
    """Raised by SyncTaskManager.start when the task list is absent or empty."""


class StorageError(SyncDriveError):
    """Raised when the metadata store file cannot be opened, read or written."""


class RecordCodecError(SyncDriveError):
    """Raised when a file item cannot be serialized or deserialized."""


class AuthError(SyncDriveError):
    """Raised when remote-access credentials cannot be obtained."""
