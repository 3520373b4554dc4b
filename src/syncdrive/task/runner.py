"""Contract between a SyncTask and the engine that does the actual syncing."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Protocol

from syncdrive.store import LocalSyncStore, RemoteSyncStore

if TYPE_CHECKING:
    from .sync_task import SyncTask


class TaskRunner(Protocol):
    """The sync/diff/transfer engine for one task. Owns its own progress loop."""

    def start(self) -> None: ...

    def stop(self) -> None: ...


@dataclass(frozen=True)
class TaskContext:
    """Everything a runner receives when its task starts."""

    task: SyncTask
    remote_store: RemoteSyncStore
    local_store: LocalSyncStore
    remote_client: Any


TaskRunnerFactory = Callable[[TaskContext], TaskRunner]
