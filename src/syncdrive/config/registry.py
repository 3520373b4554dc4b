"""TaskRegistry: the sync drive config document and its backing JSON file."""

from __future__ import annotations

import json
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

from loguru import logger

from syncdrive.errors import ConfigCorruptError, InvalidArgumentError, InvalidStateError
from syncdrive.task import SyncTask
from syncdrive.util.ids import new_task_id

CONFIG_VERSION = "1.0"
DEFAULT_CONFIG_FILE_NAME = "sync_drive_config.json"


@dataclass
class SyncDriveConfig:
    """Root document of the config file: a version tag plus the ordered task list."""

    config_ver: str = CONFIG_VERSION
    sync_task_list: list[SyncTask] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "configVer": self.config_ver,
            "syncTaskList": [task.to_dict() for task in self.sync_task_list],
        }

    @classmethod
    def from_dict(cls, data: Any) -> SyncDriveConfig:
        """
        Raises:
            ValueError: if the document does not have the expected shape.
        """
        if not isinstance(data, dict):
            raise ValueError("config root must be an object")

        config_ver = data.get("configVer") or CONFIG_VERSION
        if not isinstance(config_ver, str):
            raise ValueError("configVer must be a string")

        raw_tasks = data.get("syncTaskList")
        if raw_tasks is None:
            raw_tasks = []
        if not isinstance(raw_tasks, list):
            raise ValueError("syncTaskList must be a list")

        tasks = [SyncTask.from_dict(item) for item in raw_tasks]
        seen: set[str] = set()
        for task in tasks:
            if not task.id:
                continue
            if task.id in seen:
                raise ValueError(f"duplicate sync task id: {task.id}")
            seen.add(task.id)

        return cls(config_ver=config_ver, sync_task_list=tasks)


class TaskRegistry:
    """
    Owns the SyncDriveConfig and the file it lives in.

    Nothing else reads or writes the config file.
    """

    def __init__(
        self,
        config_folder_path: Union[str, Path],
        file_name: str = DEFAULT_CONFIG_FILE_NAME,
    ) -> None:
        self.config_folder_path = Path(config_folder_path)
        self.config_file_path = self.config_folder_path / file_name
        self._config: Optional[SyncDriveConfig] = None

    @property
    def is_loaded(self) -> bool:
        return self._config is not None

    @property
    def config(self) -> SyncDriveConfig:
        """Return the loaded config. Requires load() first."""
        if self._config is None:
            raise InvalidStateError("Sync drive config is not loaded. Call load() first.")
        return self._config

    @property
    def tasks(self) -> list[SyncTask]:
        return self.config.sync_task_list

    def load(self) -> SyncDriveConfig:
        """
        Read the config file, creating an empty one if it does not exist.

        Raises:
            ConfigCorruptError: if the file exists but cannot be parsed.
        """
        path = self.config_file_path
        if not path.exists():
            self._config = SyncDriveConfig()
            self.save()
            logger.info(f"Created empty sync drive config at {path}")
            return self._config

        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ConfigCorruptError(
                "Failed to read sync drive config",
                details={"path": str(path)},
                cause=exc,
            ) from exc

        if not text.strip():
            self._config = SyncDriveConfig()
            return self._config

        try:
            config = SyncDriveConfig.from_dict(json.loads(text))
        except ValueError as exc:
            # json.JSONDecodeError is a ValueError too.
            logger.debug(f"Parse sync drive config error: {exc}")
            raise ConfigCorruptError(
                "Sync drive config is malformed",
                details={"path": str(path)},
                cause=exc,
            ) from exc

        self._config = config
        logger.debug(f"Loaded {len(config.sync_task_list)} sync tasks from {path}")
        return config

    def save(self) -> None:
        """Overwrite the config file with the current document."""
        text = json.dumps(self.config.to_dict(), ensure_ascii=False, indent=1)
        self.config_folder_path.mkdir(parents=True, exist_ok=True)

        fd, tmp_path = tempfile.mkstemp(
            prefix=".sync_drive_config.",
            dir=str(self.config_folder_path),
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_path, 0o600)
            os.replace(tmp_path, self.config_file_path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def add_task(self, task: SyncTask) -> SyncTask:
        """Append a task definition. Ids stay empty until assign_missing_ids()."""
        if task.id and self.find_task(task.id) is not None:
            raise InvalidArgumentError("Duplicate sync task id", details={"id": task.id})
        self.tasks.append(task)
        return task

    def find_task(self, id_or_name: str) -> Optional[SyncTask]:
        """Find a task by id, falling back to name."""
        for task in self.tasks:
            if task.id and task.id == id_or_name:
                return task
        for task in self.tasks:
            if task.name == id_or_name:
                return task
        return None

    def assign_missing_ids(self) -> list[str]:
        """Give every task without an id a fresh one. Returns the new ids."""
        assigned: list[str] = []
        for task in self.tasks:
            if not task.id:
                task.id = new_task_id()
                assigned.append(task.id)
        return assigned
