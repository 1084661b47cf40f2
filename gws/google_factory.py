"""
GoogleServiceFactory — single OAuth2 credential shared across all Google API clients.

Service objects (Gmail, Calendar, Sheets, Drive) are built lazily and cached, so
constructing several clients from the same factory does not rebuild them.

Requests go through execute() rather than request.execute(): every call gets its
own AuthorizedHttp transport, because httplib2.Http is not thread-safe and the
fan-out runs detail fetches on worker threads.

Usage:
    factory = GoogleServiceFactory()
    gmail   = GmailClient(factory)
"""
from __future__ import annotations

import logging
from typing import Any, Optional

import google_auth_httplib2
import httplib2
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build

from .google_auth import get_credentials, refresh_credentials

logger = logging.getLogger(__name__)


class GoogleServiceFactory:
    """
    Constructs and caches Google API service objects from one refresh-token credential.

    Pass explicit credentials to bypass the environment lookup.
    """

    def __init__(self, credentials: Optional[Credentials] = None) -> None:
        self._creds: Optional[Credentials] = credentials
        self._services: dict[str, Any] = {}

    # ── Credentials ───────────────────────────────────────────────────────────

    @property
    def credentials(self) -> Credentials:
        """Return valid (refreshed) OAuth2 credentials."""
        if self._creds is None:
            self._creds = get_credentials()
        return refresh_credentials(self._creds)

    # ── Internal builder ──────────────────────────────────────────────────────

    def _build(self, name: str, version: str) -> Any:
        """Build and cache a googleapiclient service object."""
        key = f"{name}/{version}"
        if key not in self._services:
            self._services[key] = build(
                name, version, credentials=self.credentials, cache_discovery=False
            )
        return self._services[key]

    # ── Execution ─────────────────────────────────────────────────────────────

    def execute(self, request: Any) -> dict:
        """Execute an HttpRequest on a fresh authorized transport."""
        http = google_auth_httplib2.AuthorizedHttp(
            self.credentials, http=httplib2.Http()
        )
        logger.debug("%s %s", request.method, request.uri)
        return request.execute(http=http)

    # ── Service properties ────────────────────────────────────────────────────

    @property
    def gmail(self) -> Any:
        """Gmail API v1 service object."""
        return self._build("gmail", "v1")

    @property
    def calendar(self) -> Any:
        """Google Calendar API v3 service object."""
        return self._build("calendar", "v3")

    @property
    def sheets(self) -> Any:
        """Google Sheets API v4 service object."""
        return self._build("sheets", "v4")

    @property
    def drive(self) -> Any:
        """Google Drive API v3 service object."""
        return self._build("drive", "v3")
