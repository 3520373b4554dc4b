"""Process settings loaded from environment variables."""

import os
from dataclasses import dataclass
from typing import Optional

from syncdrive.remote import RemoteAuthInfo

from .registry import DEFAULT_CONFIG_FILE_NAME


@dataclass(frozen=True)
class SyncDriveSettings:
    """Settings for one sync drive installation.

    Required fields have no defaults and cause a KeyError at startup if the
    corresponding environment variable is missing.
    """

    # Required
    config_dir: str
    drive_id: str

    # Optional
    client_secrets_file: Optional[str] = None
    token_file: Optional[str] = None
    config_file_name: str = DEFAULT_CONFIG_FILE_NAME
    log_level: str = "INFO"
    log_file: Optional[str] = None

    def remote_auth_info(self) -> Optional[RemoteAuthInfo]:
        """Return OAuth file locations, or None when they are not configured."""
        if not self.client_secrets_file or not self.token_file:
            return None
        return RemoteAuthInfo(
            client_secrets_file=self.client_secrets_file,
            token_file=self.token_file,
        )


def load_settings() -> SyncDriveSettings:
    """Construct SyncDriveSettings from environment variables.

    Required environment variables:
        SYNCDRIVE_CONFIG_DIR: Folder holding the config file and task stores.
        SYNCDRIVE_DRIVE_ID: Identifier of the remote drive the tasks belong to.

    Optional environment variables:
        SYNCDRIVE_CLIENT_SECRETS: OAuth client secrets JSON.
        SYNCDRIVE_TOKEN_FILE: OAuth token JSON (created on first authorization).
        SYNCDRIVE_CONFIG_FILE: Config file name (default: sync_drive_config.json).
        SYNCDRIVE_LOG_LEVEL: Console log level (default: INFO).
        SYNCDRIVE_LOG_FILE: Rotating log file path (default: no file logging).
    """
    return SyncDriveSettings(
        config_dir=os.environ["SYNCDRIVE_CONFIG_DIR"],
        drive_id=os.environ["SYNCDRIVE_DRIVE_ID"],
        client_secrets_file=os.environ.get("SYNCDRIVE_CLIENT_SECRETS") or None,
        token_file=os.environ.get("SYNCDRIVE_TOKEN_FILE") or None,
        config_file_name=os.environ.get("SYNCDRIVE_CONFIG_FILE", DEFAULT_CONFIG_FILE_NAME),
        log_level=os.environ.get("SYNCDRIVE_LOG_LEVEL", "INFO"),
        log_file=os.environ.get("SYNCDRIVE_LOG_FILE") or None,
    )
