"""Public config exports for syncdrive."""

from __future__ import annotations

from .registry import CONFIG_VERSION, DEFAULT_CONFIG_FILE_NAME, SyncDriveConfig, TaskRegistry
from .settings import SyncDriveSettings, load_settings

__all__ = [
    "CONFIG_VERSION",
    "DEFAULT_CONFIG_FILE_NAME",
    "SyncDriveConfig",
    "TaskRegistry",
    "SyncDriveSettings",
    "load_settings",
]
