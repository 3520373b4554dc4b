"""Public remote-access exports for syncdrive."""

from __future__ import annotations

from .client import DEFAULT_SCOPES, RemoteAuthInfo, RemoteClient

__all__ = ["DEFAULT_SCOPES", "RemoteAuthInfo", "RemoteClient"]
