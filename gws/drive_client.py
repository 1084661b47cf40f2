"""
DriveClient — read-only wrapper around the Google Drive API v3 service.

Lists and searches files that are not in the trash, newest first.
"""
from __future__ import annotations

import logging
from typing import Any

from .google_factory import GoogleServiceFactory
from .models import DriveFileRef

logger = logging.getLogger(__name__)

_FIELDS = "files(id, name, mimeType, modifiedTime, webViewLink, owners)"
_ORDER_BY = "modifiedTime desc"


def quote_query_value(text: str) -> str:
    """Escape a user string for use inside a single-quoted Drive query literal."""
    return text.replace("\\", "\\\\").replace("'", "\\'")


def build_files_query(name_filter: str = "") -> str:
    q = "trashed = false"
    if name_filter:
        q += f" and (name contains '{quote_query_value(name_filter)}')"
    return q


def build_search_query(text: str) -> str:
    value = quote_query_value(text)
    return f"trashed = false and (name contains '{value}' or fullText contains '{value}')"


def parse_file(raw: dict) -> DriveFileRef:
    owners = raw.get("owners")
    owner = (owners[0].get("emailAddress", "") if owners else raw.get("owner")) or ""
    return DriveFileRef(
        file_id=raw.get("id", ""),
        name=raw.get("name", ""),
        mime_type=raw.get("mimeType", ""),
        modified_time=raw.get("modifiedTime", ""),
        web_view_link=raw.get("webViewLink") or "",
        owner=owner,
    )


class DriveClient:
    """
    Read-only Google Drive listing.

    Usage:
        factory = GoogleServiceFactory()
        drive   = DriveClient(factory)
        files   = drive.search_files("budget")
    """

    def __init__(self, factory: GoogleServiceFactory) -> None:
        self._factory = factory
        self._svc = factory.drive

    def _list(self, q: str, max_results: int) -> list[DriveFileRef]:
        request = self._svc.files().list(
            q=q,
            pageSize=max_results,
            orderBy=_ORDER_BY,
            fields=_FIELDS,
        )
        resp: dict[str, Any] = self._factory.execute(request)
        files = [parse_file(f) for f in resp.get("files", [])]
        logger.debug(
            "%d file(s), %d spreadsheet(s) for %r",
            len(files), sum(f.is_spreadsheet for f in files), q,
        )
        return files

    def list_files(self, max_results: int = 10, name_filter: str = "") -> list[DriveFileRef]:
        """Recently modified files, optionally restricted to names containing name_filter."""
        return self._list(build_files_query(name_filter), max_results)

    def search_files(self, query: str, max_results: int = 10) -> list[DriveFileRef]:
        """Files whose name or full text contains query."""
        return self._list(build_search_query(query), max_results)
