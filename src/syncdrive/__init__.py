"""syncdrive public API."""

from __future__ import annotations

from syncdrive.config import SyncDriveConfig, SyncDriveSettings, TaskRegistry, load_settings
from syncdrive.errors import (
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
from syncdrive.log import setup_logging
from syncdrive.manager import SyncTaskManager, TaskFailure, sync_task_manager_from_settings
from syncdrive.models import LocalFileItem, RemoteFileItem, StorableItem
from syncdrive.remote import RemoteAuthInfo, RemoteClient
from syncdrive.store import LocalSyncStore, MetadataStore, RemoteSyncStore, normalize_path
from syncdrive.task import SyncMode, SyncTask, TaskContext, TaskRunner, TaskState

__all__ = [
    # High-level
    "SyncTaskManager",
    "TaskFailure",
    "sync_task_manager_from_settings",
    "TaskRegistry",
    "SyncDriveConfig",
    "SyncDriveSettings",
    "load_settings",
    "setup_logging",
    # Tasks
    "SyncTask",
    "SyncMode",
    "TaskState",
    "TaskRunner",
    "TaskContext",
    # Stores / Models
    "MetadataStore",
    "RemoteSyncStore",
    "LocalSyncStore",
    "normalize_path",
    "StorableItem",
    "RemoteFileItem",
    "LocalFileItem",
    # Remote
    "RemoteAuthInfo",
    "RemoteClient",
    # Errors
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
