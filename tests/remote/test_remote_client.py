import json
import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

from syncdrive.errors import AuthError, InvalidArgumentError, InvalidStateError
from syncdrive.remote import DEFAULT_SCOPES, RemoteAuthInfo, RemoteClient


class TestRemoteAuthInfo(unittest.TestCase):
    def test_rejects_blank_paths(self) -> None:
        with self.assertRaises(ValueError):
            RemoteAuthInfo(client_secrets_file=" ", token_file="/t.json")
        with self.assertRaises(ValueError):
            RemoteAuthInfo(client_secrets_file="/c.json", token_file="")


class TestRemoteClient(unittest.TestCase):
    def _auth(self, tmp: Path) -> RemoteAuthInfo:
        return RemoteAuthInfo(
            client_secrets_file=str(tmp / "client_secrets.json"),
            token_file=str(tmp / "token.json"),
        )

    def test_construction_does_not_connect(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            client = RemoteClient(self._auth(Path(tmp)))
            self.assertFalse(client.is_connected)
            with self.assertRaises(InvalidStateError):
                client.service

    def test_rejects_empty_scopes(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(InvalidArgumentError):
                RemoteClient(self._auth(Path(tmp)), scopes=[])

    def test_from_service(self) -> None:
        service = object()
        client = RemoteClient.from_service(service)
        self.assertTrue(client.is_connected)
        self.assertIs(client.connect(), service)
        with self.assertRaises(InvalidStateError):
            client.get_credentials()

    def test_requires_auth_info_or_service(self) -> None:
        with self.assertRaises(InvalidArgumentError):
            RemoteClient(None)

    def test_prebuilt_service_with_auth_info(self) -> None:
        service = object()
        with tempfile.TemporaryDirectory() as tmp:
            client = RemoteClient(self._auth(Path(tmp)), service=service)
            self.assertTrue(client.is_connected)
            self.assertIs(client.service, service)

    def test_connect_builds_drive_service_once(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            client = RemoteClient(self._auth(Path(tmp)))
            creds = object()
            service = MagicMock()
            with patch.object(RemoteClient, "get_credentials", return_value=creds), patch(
                "googleapiclient.discovery.build", return_value=service
            ) as build:
                self.assertIs(client.connect(), service)
                self.assertIs(client.connect(), service)

            build.assert_called_once_with("drive", "v3", credentials=creds, cache_discovery=False)
            self.assertIs(client.service, service)

    def test_connect_wraps_build_failure(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            client = RemoteClient(self._auth(Path(tmp)))
            with patch.object(RemoteClient, "get_credentials", return_value=object()), patch(
                "googleapiclient.discovery.build", side_effect=RuntimeError("boom")
            ):
                with self.assertRaises(AuthError):
                    client.connect()
            self.assertFalse(client.is_connected)

    def test_get_credentials_loads_token_file_without_refresh(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            tmp_path = Path(tmp)
            token_payload = {
                "token": "fake-token",
                "refresh_token": "fake-refresh-token",
                "token_uri": "https://oauth2.googleapis.com/token",
                "client_id": "fake-client-id",
                "client_secret": "fake-client-secret",
                "scopes": list(DEFAULT_SCOPES),
                "type": "authorized_user",
            }
            (tmp_path / "token.json").write_text(json.dumps(token_payload), encoding="utf-8")

            client = RemoteClient(self._auth(tmp_path))
            creds = client.get_credentials(ensure_valid=False)
            self.assertEqual(creds.refresh_token, "fake-refresh-token")

    def test_get_credentials_rejects_broken_token_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            tmp_path = Path(tmp)
            (tmp_path / "token.json").write_text("{}", encoding="utf-8")
            client = RemoteClient(self._auth(tmp_path))
            with self.assertRaises(AuthError):
                client.get_credentials()


if __name__ == "__main__":
    unittest.main()
