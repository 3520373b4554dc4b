"""Public task exports for syncdrive."""

from __future__ import annotations

from .runner import TaskContext, TaskRunner, TaskRunnerFactory
from .sync_task import LOCAL_DB_FILE_NAME, PAN_DB_FILE_NAME, SyncMode, SyncTask, TaskState

__all__ = [
    "SyncTask",
    "SyncMode",
    "TaskState",
    "TaskRunner",
    "TaskRunnerFactory",
    "TaskContext",
    "PAN_DB_FILE_NAME",
    "LOCAL_DB_FILE_NAME",
]
