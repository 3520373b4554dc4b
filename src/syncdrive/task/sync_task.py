"""SyncTask: one configured local/remote folder pairing and its lifecycle."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from loguru import logger

from syncdrive.errors import InvalidArgumentError, InvalidStateError, StorageError
from syncdrive.store import LocalSyncStore, RemoteSyncStore
from syncdrive.util.time import now_utc, parse_rfc3339, to_rfc3339

from .runner import TaskContext, TaskRunner, TaskRunnerFactory

PAN_DB_FILE_NAME = "pan.db"
LOCAL_DB_FILE_NAME = "local.db"


class SyncMode(str, Enum):
    """Direction in which a task keeps its folders in step."""

    UPLOAD = "upload"
    DOWNLOAD = "download"
    SYNC = "sync"


class TaskState(str, Enum):
    UNSTARTED = "unstarted"
    RUNNING = "running"
    STOPPED = "stopped"


@dataclass
class SyncTask:
    """
    A configured synchronization relationship.

    Persisted fields round-trip through to_dict()/from_dict(). The runtime
    fields are set by bind_runtime() right before start() and are never
    written to the config file.
    """

    name: str
    local_folder_path: str
    pan_folder_path: str
    mode: SyncMode = SyncMode.SYNC
    id: str = ""
    drive_id: str = ""
    last_sync_time: str = ""

    sync_db_folder_path: Optional[str] = field(default=None, repr=False, compare=False)
    remote_client: Any = field(default=None, repr=False, compare=False)
    runner_factory: Optional[TaskRunnerFactory] = field(default=None, repr=False, compare=False)

    state: TaskState = field(default=TaskState.UNSTARTED, repr=False, compare=False)
    _runner: Optional[TaskRunner] = field(default=None, init=False, repr=False, compare=False)
    _remote_store: Optional[RemoteSyncStore] = field(
        default=None, init=False, repr=False, compare=False
    )
    _local_store: Optional[LocalSyncStore] = field(
        default=None, init=False, repr=False, compare=False
    )

    def __str__(self) -> str:
        return (
            f"task: {self.name_label()}\n"
            f"mode: {self.mode.value}\n"
            f"local: {self.local_folder_path}\n"
            f"remote: {self.pan_folder_path}"
        )

    def name_label(self) -> str:
        return f"{self.name}({self.id})"

    # ----------------------------
    # Persistence
    # ----------------------------
    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "id": self.id,
            "driveId": self.drive_id,
            "localFolderPath": self.local_folder_path,
            "panFolderPath": self.pan_folder_path,
            "mode": self.mode.value,
            "lastSyncTime": self.last_sync_time,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SyncTask:
        """
        Build a task from its config-file form.

        Raises:
            ValueError: if a field has the wrong type or mode is unknown.
        """
        if not isinstance(data, dict):
            raise ValueError("sync task entry must be an object")

        values: dict[str, str] = {}
        for key in (
            "name",
            "id",
            "driveId",
            "localFolderPath",
            "panFolderPath",
            "lastSyncTime",
        ):
            value = data.get(key)
            if value is None:
                value = ""
            if not isinstance(value, str):
                raise ValueError(f"sync task field '{key}' must be a string")
            values[key] = value

        return cls(
            name=values["name"],
            id=values["id"],
            drive_id=values["driveId"],
            local_folder_path=values["localFolderPath"],
            pan_folder_path=values["panFolderPath"],
            mode=SyncMode(data.get("mode") or SyncMode.SYNC.value),
            last_sync_time=values["lastSyncTime"],
        )

    @property
    def last_sync_at(self) -> Optional[datetime]:
        if not self.last_sync_time:
            return None
        return parse_rfc3339(self.last_sync_time)

    def mark_synced(self, at: Optional[datetime] = None) -> None:
        """Record a successful sync pass (defaults to now)."""
        self.last_sync_time = to_rfc3339(at or now_utc())

    # ----------------------------
    # Runtime
    # ----------------------------
    @property
    def remote_store(self) -> RemoteSyncStore:
        if self._remote_store is None:
            raise InvalidStateError("Task is not started", details={"task": self.name_label()})
        return self._remote_store

    @property
    def local_store(self) -> LocalSyncStore:
        if self._local_store is None:
            raise InvalidStateError("Task is not started", details={"task": self.name_label()})
        return self._local_store

    def bind_runtime(
        self,
        *,
        drive_id: str,
        sync_db_folder_path: str,
        remote_client: Any,
        runner_factory: Optional[TaskRunnerFactory],
    ) -> None:
        """Inject the owning drive and the process-level collaborators."""
        if self.state is TaskState.RUNNING:
            raise InvalidStateError(
                "Cannot rebind a running task",
                details={"task": self.name_label()},
            )
        self.drive_id = drive_id
        self.sync_db_folder_path = sync_db_folder_path
        self.remote_client = remote_client
        self.runner_factory = runner_factory

    def start(self) -> None:
        """
        Open this task's snapshot stores and start its runner.

        Raises:
            InvalidStateError: if already running, the id is unassigned or the
                runtime context is missing.
            InvalidArgumentError: if either folder path is empty.
            StorageError: if the store directory cannot be created.
        """
        if self.state is TaskState.RUNNING:
            raise InvalidStateError("Task is already running", details={"task": self.name_label()})
        if not self.id:
            raise InvalidStateError("Task id is not assigned", details={"task": self.name})
        if not self.sync_db_folder_path or self.runner_factory is None:
            raise InvalidStateError(
                "Task runtime is not bound. Call bind_runtime() first.",
                details={"task": self.name_label()},
            )
        if not self.local_folder_path.strip() or not self.pan_folder_path.strip():
            raise InvalidArgumentError(
                "Task folder paths must be non-empty",
                details={
                    "task": self.name_label(),
                    "localFolderPath": self.local_folder_path,
                    "panFolderPath": self.pan_folder_path,
                },
            )

        db_dir = Path(self.sync_db_folder_path) / self.id
        try:
            db_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(
                "Failed to create task store directory",
                details={"path": str(db_dir)},
                cause=exc,
            ) from exc

        remote_store = RemoteSyncStore(db_dir / PAN_DB_FILE_NAME)
        local_store = LocalSyncStore(db_dir / LOCAL_DB_FILE_NAME)
        remote_store.open()
        local_store.open()

        runner = self.runner_factory(
            TaskContext(
                task=self,
                remote_store=remote_store,
                local_store=local_store,
                remote_client=self.remote_client,
            )
        )
        runner.start()

        self._remote_store = remote_store
        self._local_store = local_store
        self._runner = runner
        self.state = TaskState.RUNNING
        logger.debug(f"Task {self.name_label()} stores at {db_dir}")

    def stop(self) -> None:
        """
        Ask the runner to wind down. A task that is not running is left as is.

        The task counts as stopped even when the runner's stop() raises; the
        error still propagates.
        """
        if self.state is not TaskState.RUNNING or self._runner is None:
            logger.debug(f"Task {self.name_label()} is not running; nothing to stop")
            return

        runner = self._runner
        try:
            runner.stop()
        finally:
            self.remote_store.close()
            self.local_store.close()
            self._runner = None
            self.state = TaskState.STOPPED
