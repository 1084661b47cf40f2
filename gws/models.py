"""
Typed projections for the Google API resources the helpers print.

All classes are plain dataclasses. Parsing raw API dicts into these lives in the
client modules; to_dict() gives the stable JSON shape written to stdout.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


# ── Gmail ─────────────────────────────────────────────────────────────────────

@dataclass
class MessageSummary:
    """Metadata-only view of a Gmail message, as returned by list/search."""

    message_id: str
    thread_id: str
    sender: str
    subject: str
    date: str
    snippet: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.message_id,
            "threadId": self.thread_id,
            "from": self.sender,
            "subject": self.subject,
            "date": self.date,
            "snippet": self.snippet,
        }


@dataclass
class MessageFull:
    """A single Gmail message with its decoded body."""

    message_id: str
    thread_id: str
    sender: str
    recipients: str
    subject: str
    date: str
    snippet: str
    labels: list[str]
    body: str

    @property
    def is_html_fallback(self) -> bool:
        return self.body.startswith("[HTML] ")

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.message_id,
            "threadId": self.thread_id,
            "from": self.sender,
            "to": self.recipients,
            "subject": self.subject,
            "date": self.date,
            "snippet": self.snippet,
            "labels": list(self.labels),
            "body": self.body,
        }


@dataclass
class ThreadSummary:
    """A Gmail conversation, summarised by its first message."""

    thread_id: str
    message_count: int
    sender: str
    subject: str
    date: str
    snippet: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "threadId": self.thread_id,
            "messageCount": self.message_count,
            "from": self.sender,
            "subject": self.subject,
            "date": self.date,
            "snippet": self.snippet,
        }


@dataclass
class Label:
    label_id: str
    name: str
    label_type: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.label_id, "name": self.name, "type": self.label_type}


# ── Calendar ──────────────────────────────────────────────────────────────────

@dataclass
class Attendee:
    email: str
    response_status: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"email": self.email, "responseStatus": self.response_status}


@dataclass
class CalendarEvent:
    """
    A Google Calendar event.

    start/end hold the timed instant (RFC 3339) or, for all-day events, the
    date string exactly as the API returned it.
    """

    event_id: str
    summary: str
    start: str
    end: str
    description: str = ""
    location: str = ""
    status: str = ""
    html_link: str = ""
    creator: str = ""
    attendees: list[Attendee] = field(default_factory=list)
    hangout_link: str = ""
    recurring_event_id: str = ""

    @property
    def is_all_day(self) -> bool:
        return bool(self.start) and "T" not in self.start

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.event_id,
            "summary": self.summary,
            "description": self.description,
            "location": self.location,
            "start": self.start,
            "end": self.end,
            "status": self.status,
            "htmlLink": self.html_link,
            "creator": self.creator,
            "attendees": [a.to_dict() for a in self.attendees],
            "hangoutLink": self.hangout_link,
            "recurringEventId": self.recurring_event_id,
        }


@dataclass
class CalendarRef:
    """One calendar on the user's calendar list."""

    calendar_id: str
    summary: str
    primary: bool
    access_role: str
    time_zone: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.calendar_id,
            "summary": self.summary,
            "primary": self.primary,
            "accessRole": self.access_role,
            "timeZone": self.time_zone,
        }


# ── Drive ─────────────────────────────────────────────────────────────────────

@dataclass
class DriveFileRef:
    """A file in Google Drive."""

    file_id: str
    name: str
    mime_type: str
    modified_time: str
    web_view_link: str = ""
    owner: str = ""

    @property
    def is_spreadsheet(self) -> bool:
        return self.mime_type == "application/vnd.google-apps.spreadsheet"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.file_id,
            "name": self.name,
            "mimeType": self.mime_type,
            "modifiedTime": self.modified_time,
            "webViewLink": self.web_view_link,
            "owner": self.owner,
        }


# ── Sheets ────────────────────────────────────────────────────────────────────

# Type alias for a 2-D grid of cell values
ValueMatrix = list[list[Any]]


@dataclass
class SheetRange:
    """
    A rectangular range of cell values.

    title/sheet/available_sheets are only known when the whole first sheet was
    read; an explicit range read leaves them as None and omits them from output.
    """

    spreadsheet_id: str
    range: str
    values: ValueMatrix = field(default_factory=list)
    spreadsheet_title: Optional[str] = None
    sheet: Optional[str] = None
    available_sheets: Optional[list[str]] = None

    @property
    def row_count(self) -> int:
        return len(self.values)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"spreadsheetId": self.spreadsheet_id}
        if self.spreadsheet_title is not None:
            out["spreadsheetTitle"] = self.spreadsheet_title
        if self.sheet is not None:
            out["sheet"] = self.sheet
        if self.available_sheets is not None:
            out["availableSheets"] = list(self.available_sheets)
        out["range"] = self.range
        out["values"] = self.values
        return out


@dataclass
class SheetTab:
    title: str
    sheet_id: Optional[int]
    index: Optional[int]
    row_count: Optional[int] = None
    column_count: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "sheetId": self.sheet_id,
            "index": self.index,
            "rowCount": self.row_count,
            "columnCount": self.column_count,
        }


@dataclass
class SpreadsheetInfo:
    """Spreadsheet-level metadata and its sheet tabs."""

    spreadsheet_id: str
    title: str
    locale: str = ""
    time_zone: str = ""
    url: str = ""
    sheets: list[SheetTab] = field(default_factory=list)

    @property
    def sheet_names(self) -> list[str]:
        return [s.title for s in self.sheets]

    def to_dict(self) -> dict[str, Any]:
        return {
            "spreadsheetId": self.spreadsheet_id,
            "title": self.title,
            "locale": self.locale,
            "timeZone": self.time_zone,
            "spreadsheetUrl": self.url,
            "sheets": [s.to_dict() for s in self.sheets],
        }
