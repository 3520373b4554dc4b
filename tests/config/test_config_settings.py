import os
import unittest
from unittest.mock import patch

from syncdrive.config import DEFAULT_CONFIG_FILE_NAME, load_settings
from syncdrive.remote import RemoteAuthInfo

REQUIRED_ENV = {
    "SYNCDRIVE_CONFIG_DIR": "/var/lib/syncdrive",
    "SYNCDRIVE_DRIVE_ID": "19519111",
}


class TestLoadSettings(unittest.TestCase):
    def test_required_and_defaults(self) -> None:
        with patch.dict(os.environ, REQUIRED_ENV, clear=True):
            settings = load_settings()
        self.assertEqual(settings.config_dir, "/var/lib/syncdrive")
        self.assertEqual(settings.drive_id, "19519111")
        self.assertEqual(settings.config_file_name, DEFAULT_CONFIG_FILE_NAME)
        self.assertEqual(settings.log_level, "INFO")
        self.assertIsNone(settings.log_file)
        self.assertIsNone(settings.remote_auth_info())

    def test_missing_required_raises_key_error(self) -> None:
        with patch.dict(os.environ, {"SYNCDRIVE_CONFIG_DIR": "/x"}, clear=True):
            with self.assertRaises(KeyError):
                load_settings()

    def test_optional_overrides(self) -> None:
        env = dict(
            REQUIRED_ENV,
            SYNCDRIVE_CLIENT_SECRETS="/etc/syncdrive/client.json",
            SYNCDRIVE_TOKEN_FILE="/var/lib/syncdrive/token.json",
            SYNCDRIVE_LOG_LEVEL="DEBUG",
            SYNCDRIVE_LOG_FILE="/var/log/syncdrive.log",
            SYNCDRIVE_CONFIG_FILE="drive.json",
        )
        with patch.dict(os.environ, env, clear=True):
            settings = load_settings()
        self.assertEqual(settings.log_level, "DEBUG")
        self.assertEqual(settings.log_file, "/var/log/syncdrive.log")
        self.assertEqual(settings.config_file_name, "drive.json")
        self.assertEqual(
            settings.remote_auth_info(),
            RemoteAuthInfo(
                client_secrets_file="/etc/syncdrive/client.json",
                token_file="/var/lib/syncdrive/token.json",
            ),
        )


if __name__ == "__main__":
    unittest.main()
