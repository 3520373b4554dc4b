"""Remote-access client handle threaded into every sync task."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from loguru import logger

from syncdrive.errors import AuthError, InvalidArgumentError, InvalidStateError

DEFAULT_SCOPES: tuple[str, ...] = ("https://www.googleapis.com/auth/drive",)


@dataclass(slots=True, frozen=True)
class RemoteAuthInfo:
    """OAuth files used to reach the remote drive."""

    client_secrets_file: str
    token_file: str

    def __post_init__(self) -> None:
        for name in ("client_secrets_file", "token_file"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"RemoteAuthInfo.{name} must be a non-empty string")


class RemoteClient:
    """
    Lazily connected Drive API handle.

    Construction never touches the network. Task runners call connect() when
    they first need the service; the lifecycle manager only passes the
    handle along.
    """

    def __init__(
        self,
        auth_info: Optional[RemoteAuthInfo],
        *,
        scopes: Optional[Sequence[str]] = None,
        service: Any = None,
    ) -> None:
        if auth_info is None and service is None:
            raise InvalidArgumentError("RemoteClient needs auth_info or a pre-built service")
        use_scopes = list(scopes) if scopes is not None else list(DEFAULT_SCOPES)
        if not use_scopes or not all(isinstance(s, str) and s.strip() for s in use_scopes):
            raise InvalidArgumentError("scopes must be a non-empty sequence of strings")
        self._auth_info = auth_info
        self._scopes = use_scopes
        self._service: Any = service

    @classmethod
    def from_service(cls, service: Any) -> "RemoteClient":
        """Wrap an already built service object (useful for tests)."""
        return cls(None, service=service)

    @property
    def is_connected(self) -> bool:
        return self._service is not None

    @property
    def service(self) -> Any:
        if self._service is None:
            raise InvalidStateError("Remote client is not connected. Call connect() first.")
        return self._service

    def connect(self) -> Any:
        """Build the Drive v3 service on first call and return it."""
        if self._service is not None:
            return self._service

        try:
            from googleapiclient.discovery import build
        except Exception as exc:  # pragma: no cover
            raise AuthError(
                "google-api-python-client is not available",
                details={"hint": "Install google-api-python-client"},
                cause=exc,
            ) from exc

        creds = self.get_credentials()
        try:
            self._service = build("drive", "v3", credentials=creds, cache_discovery=False)
        except Exception as exc:
            raise AuthError("Failed to build Drive service", cause=exc) from exc
        logger.info("Remote client connected")
        return self._service

    def get_credentials(self, ensure_valid: bool = True):
        """
        Load, refresh or interactively obtain OAuth credentials.

        Returns:
            google.oauth2.credentials.Credentials

        Raises:
            AuthError: on load/refresh/flow failures.
        """
        if self._auth_info is None:
            raise InvalidStateError("Remote client was built without auth info")

        try:
            from google.auth.transport.requests import Request
            from google.oauth2.credentials import Credentials
            from google_auth_oauthlib.flow import InstalledAppFlow
        except Exception as exc:  # pragma: no cover
            raise AuthError(
                "Google auth libraries are not available",
                details={"hint": "Install google-auth and google-auth-oauthlib"},
                cause=exc,
            ) from exc

        token_file = self._auth_info.token_file
        if os.path.exists(token_file):
            try:
                creds = Credentials.from_authorized_user_file(token_file, scopes=self._scopes)
            except Exception as exc:
                raise AuthError(
                    "Failed to load token_file",
                    details={"token_file": token_file},
                    cause=exc,
                ) from exc

            if not ensure_valid:
                return creds

            if not creds.valid and creds.refresh_token:
                logger.debug("Refreshing remote credentials")
                try:
                    creds.refresh(Request())
                except Exception as exc:
                    raise AuthError(
                        "Failed to refresh OAuth credentials",
                        details={"token_file": token_file},
                        cause=exc,
                    ) from exc
                self._save_credentials(creds)

            if creds.valid:
                return creds

        client_secrets = self._auth_info.client_secrets_file
        logger.info("Starting OAuth authorization flow")
        try:
            flow = InstalledAppFlow.from_client_secrets_file(client_secrets, scopes=self._scopes)
            creds = flow.run_local_server(port=0)
        except Exception as exc:
            raise AuthError(
                "OAuth authorization flow failed",
                details={"client_secrets_file": client_secrets, "token_file": token_file},
                cause=exc,
            ) from exc
        self._save_credentials(creds)
        return creds

    def _save_credentials(self, creds) -> None:
        token_file = self._auth_info.token_file
        token_dir = os.path.dirname(token_file)
        try:
            if token_dir:
                os.makedirs(token_dir, exist_ok=True)
            with open(token_file, "w", encoding="utf-8") as f:
                f.write(creds.to_json())
        except OSError as exc:
            raise AuthError(
                "Failed to save OAuth token file",
                details={"token_file": token_file},
                cause=exc,
            ) from exc
