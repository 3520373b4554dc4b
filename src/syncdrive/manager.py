"""SyncTaskManager: drives every configured sync task through start and stop."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Optional

from loguru import logger

from syncdrive.config import SyncDriveSettings, TaskRegistry
from syncdrive.errors import InvalidStateError, NoTasksConfiguredError
from syncdrive.remote import RemoteClient
from syncdrive.task import SyncTask, TaskRunnerFactory, TaskState

TaskPhase = Literal["start", "stop"]


@dataclass(frozen=True)
class TaskFailure:
    """A per-task error recorded during a start or stop pass."""

    task_id: str
    name: str
    phase: TaskPhase
    error: BaseException


class SyncTaskManager:
    """
    Walks the registry's task list once per start()/stop() call.

    Tasks are independent: one task failing to start or stop is logged and
    recorded in `failures`, and the pass continues with the next task.
    """

    def __init__(
        self,
        registry: TaskRegistry,
        drive_id: str,
        remote_client: Any,
        sync_config_folder_path: str,
        runner_factory: Optional[TaskRunnerFactory] = None,
    ) -> None:
        self.registry = registry
        self.drive_id = drive_id
        self.remote_client = remote_client
        self.sync_config_folder_path = sync_config_folder_path
        self.runner_factory = runner_factory
        self.failures: list[TaskFailure] = []

    def start(self) -> bool:
        """
        Start every task in list order, loading the config on first use.

        An already loaded registry is reused, so tasks added in memory and
        tasks stopped earlier keep their objects.

        Raises:
            InvalidStateError: if tasks from a previous start() are still running.
            ConfigCorruptError: if the config file cannot be parsed.
            NoTasksConfiguredError: if there are no tasks.
        """
        running = self.running_tasks()
        if running:
            raise InvalidStateError(
                "Sync tasks are already running. Call stop() first.",
                details={"running": [t.name_label() for t in running]},
            )

        config = self.registry.config if self.registry.is_loaded else self.registry.load()
        if not config.sync_task_list:
            raise NoTasksConfiguredError(
                "No sync task configured",
                details={"config_file": str(self.registry.config_file_path)},
            )

        assigned = self.registry.assign_missing_ids()
        if assigned:
            logger.debug(f"Assigned ids to {len(assigned)} sync tasks: {assigned}")

        self.failures = []
        for task in config.sync_task_list:
            try:
                task.bind_runtime(
                    drive_id=self.drive_id,
                    sync_db_folder_path=self.sync_config_folder_path,
                    remote_client=self.remote_client,
                    runner_factory=self.runner_factory,
                )
                task.start()
            except Exception as exc:
                self._record_failure(task, "start", exc)
                continue
            logger.info(f"Started sync task {task.name_label()}")

        self.registry.save()
        return True

    def stop(self) -> bool:
        """
        Stop every task in list order and persist the config.

        Raises:
            InvalidStateError: if start() (or registry.load()) has not run.
        """
        if not self.registry.is_loaded:
            raise InvalidStateError("Sync drive config is not loaded. Call start() first.")

        self.failures = []
        for task in self.registry.tasks:
            if task.state is not TaskState.RUNNING:
                continue
            try:
                task.stop()
            except Exception as exc:
                self._record_failure(task, "stop", exc)
                continue
            logger.info(f"Stopped sync task {task.name_label()}")

        self.registry.save()
        return True

    def running_tasks(self) -> list[SyncTask]:
        if not self.registry.is_loaded:
            return []
        return [t for t in self.registry.tasks if t.state is TaskState.RUNNING]

    def _record_failure(self, task: SyncTask, phase: TaskPhase, exc: Exception) -> None:
        logger.opt(exception=exc).error(f"Failed to {phase} sync task {task.name_label()}: {exc}")
        self.failures.append(TaskFailure(task_id=task.id, name=task.name, phase=phase, error=exc))


def sync_task_manager_from_settings(
    settings: SyncDriveSettings,
    runner_factory: Optional[TaskRunnerFactory],
    remote_client: Any = None,
) -> SyncTaskManager:
    """
    Construct a SyncTaskManager from settings.

    When remote_client is not given and OAuth files are configured, an
    unconnected RemoteClient is created for the tasks to share.
    """
    if remote_client is None:
        auth_info = settings.remote_auth_info()
        if auth_info is not None:
            remote_client = RemoteClient(auth_info)

    registry = TaskRegistry(settings.config_dir, file_name=settings.config_file_name)
    return SyncTaskManager(
        registry=registry,
        drive_id=settings.drive_id,
        remote_client=remote_client,
        sync_config_folder_path=settings.config_dir,
        runner_factory=runner_factory,
    )
