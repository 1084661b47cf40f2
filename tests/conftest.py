"""
Shared test fixtures: fake Google API services and a recording factory.

The fakes mirror googleapiclient's chained call style
(service.users().messages().get(...).execute()) so the real client classes run
unchanged against them.
"""
from __future__ import annotations

import base64
import copy
import logging
import threading
import time
from typing import Callable, Dict, List, Optional, Set

import pytest
from googleapiclient.errors import HttpError


# === Fake googleapiclient plumbing ===

class FakeExecute:
    """Mock for an HttpRequest: .execute() calls the stored handler"""

    def __init__(self, name: str, kwargs: dict, handler: Callable):
        self.name = name
        self.kwargs = kwargs
        self._handler = handler

    def execute(self):
        return self._handler(**self.kwargs)


class FakeResource:
    """
    Mock for a discovery Resource.

    Nested FakeResources are reached by calling them (service.users()), every
    other member is an API method returning a FakeExecute.
    """

    def __init__(self, path: str, **members):
        self._path = path
        self._members = members

    def __getattr__(self, name: str):
        try:
            member = self._members[name]
        except KeyError:
            raise AttributeError(f"{self._path} has no method {name!r}") from None
        if isinstance(member, FakeResource):
            return lambda: member
        return lambda **kwargs: FakeExecute(f"{self._path}.{name}", kwargs, member)


class MockHttpResponse:
    """Mock HTTP response for HttpError"""

    def __init__(self, status: int, reason: str):
        self.status = status
        self.reason = reason


def make_http_error(status: int, reason: str, content: bytes = b"") -> HttpError:
    return HttpError(resp=MockHttpResponse(status, reason), content=content)


class FakeFactory:
    """Stands in for GoogleServiceFactory; records every executed request"""

    def __init__(self, gmail=None, calendar=None, drive=None, sheets=None):
        self.gmail = gmail
        self.calendar = calendar
        self.drive = drive
        self.sheets = sheets
        self.calls: List[FakeExecute] = []
        self._lock = threading.Lock()

    def execute(self, request: FakeExecute):
        with self._lock:
            self.calls.append(request)
        return request.execute()

    @property
    def call_names(self) -> List[str]:
        return [c.name for c in self.calls]


# === Gmail ===

def b64(text: str) -> str:
    return base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii").rstrip("=")


def make_message(
    message_id: str,
    sender: str = "Alice <alice@example.com>",
    subject: str = "Hello",
    date: str = "Mon, 2 Feb 2026 10:00:00 -0800",
    to: str = "me@example.com",
    body: Optional[dict] = None,
    labels: Optional[List[str]] = None,
) -> dict:
    """Helper to create a message dict matching the Gmail API structure"""
    payload = body or {"mimeType": "text/plain", "body": {"data": b64(f"Body of {message_id}")}}
    payload = dict(payload)
    payload["headers"] = [
        {"name": "From", "value": sender},
        {"name": "To", "value": to},
        {"name": "Subject", "value": subject},
        {"name": "Date", "value": date},
    ]
    return {
        "id": message_id,
        "threadId": f"t_{message_id}",
        "labelIds": labels or ["INBOX"],
        "snippet": f"Snippet {message_id}",
        "historyId": "999",
        "sizeEstimate": 1234,
        "payload": payload,
    }


class FakeMailbox:
    """In-memory mailbox behind the fake Gmail service"""

    def __init__(
        self,
        messages: List[dict],
        threads: Optional[List[dict]] = None,
        labels: Optional[List[dict]] = None,
        fail_ids: Optional[Set[str]] = None,
        before_get: Optional[Dict[str, Callable[[], None]]] = None,
    ):
        self.messages = {m["id"]: m for m in messages}
        self.order = [m["id"] for m in messages]
        self.threads = {t["id"]: t for t in (threads or [])}
        self.thread_order = [t["id"] for t in (threads or [])]
        self.labels = labels or []
        self.fail_ids = fail_ids or set()
        self.before_get = before_get or {}
        self.completed: List[str] = []
        self._lock = threading.Lock()

    def list_messages(self, userId, maxResults=100, q=None):
        ids = self.order[:maxResults]
        if not ids:
            return {"resultSizeEstimate": 0}
        return {
            "messages": [{"id": i, "threadId": self.messages[i]["threadId"]} for i in ids],
            "nextPageToken": "page-2",
            "resultSizeEstimate": len(ids),
        }

    def get_message(self, userId, id, format="full", metadataHeaders=None):
        hook = self.before_get.get(id)
        if hook:
            hook()
        if id in self.fail_ids:
            raise make_http_error(404, "Not Found")
        with self._lock:
            self.completed.append(id)
        return copy.deepcopy(self.messages[id])

    def list_threads(self, userId, maxResults=100, q=None):
        ids = self.thread_order[:maxResults]
        return {"threads": [{"id": i, "snippet": ""} for i in ids]} if ids else {}

    def get_thread(self, userId, id, format="full", metadataHeaders=None):
        if id in self.fail_ids:
            raise make_http_error(404, "Not Found")
        return copy.deepcopy(self.threads[id])

    def list_labels(self, userId):
        return {"labels": self.labels}

    def service(self) -> FakeResource:
        return FakeResource(
            "gmail",
            users=FakeResource(
                "gmail.users",
                messages=FakeResource(
                    "gmail.users.messages", list=self.list_messages, get=self.get_message
                ),
                threads=FakeResource(
                    "gmail.users.threads", list=self.list_threads, get=self.get_thread
                ),
                labels=FakeResource("gmail.users.labels", list=self.list_labels),
            ),
        )


# === Calendar ===

class FakeCalendarStore:
    """In-memory calendar with insert/quickAdd/patch semantics like the real API"""

    def __init__(self, events: Optional[List[dict]] = None, calendars: Optional[List[dict]] = None):
        self.events: Dict[str, dict] = {e["id"]: copy.deepcopy(e) for e in (events or [])}
        self.calendars = calendars or []
        self.list_params: List[dict] = []
        self._next_id = 1

    def _new_id(self) -> str:
        event_id = f"new{self._next_id}"
        self._next_id += 1
        return event_id

    def list(self, calendarId, **params):
        self.list_params.append(dict(params, calendarId=calendarId))
        items = list(self.events.values())
        if "q" in params:
            items = [e for e in items if params["q"].lower() in e.get("summary", "").lower()]
        if "maxResults" in params:
            items = items[: params["maxResults"]]
        return {"kind": "calendar#events", "nextPageToken": "tok", "etag": '"1"', "items": copy.deepcopy(items)}

    def get(self, calendarId, eventId):
        if eventId not in self.events:
            raise make_http_error(404, "Not Found")
        return copy.deepcopy(self.events[eventId])

    def insert(self, calendarId, body, sendUpdates=None):
        event = copy.deepcopy(body)
        event["id"] = self._new_id()
        event.setdefault("status", "confirmed")
        event["etag"] = '"1"'
        self.events[event["id"]] = event
        return copy.deepcopy(event)

    def quickAdd(self, calendarId, text):
        event = {
            "id": self._new_id(),
            "summary": text,
            "status": "confirmed",
            "start": {"dateTime": "2026-02-10T12:00:00-08:00"},
            "end": {"dateTime": "2026-02-10T13:00:00-08:00"},
        }
        self.events[event["id"]] = event
        return copy.deepcopy(event)

    def patch(self, calendarId, eventId, body, sendUpdates=None):
        if eventId not in self.events:
            raise make_http_error(404, "Not Found")
        self.events[eventId].update(copy.deepcopy(body))
        return copy.deepcopy(self.events[eventId])

    def list_calendars(self):
        return {"items": self.calendars, "nextSyncToken": "sync"}

    def service(self) -> FakeResource:
        return FakeResource(
            "calendar",
            events=FakeResource(
                "calendar.events",
                list=self.list,
                get=self.get,
                insert=self.insert,
                quickAdd=self.quickAdd,
                patch=self.patch,
            ),
            calendarList=FakeResource("calendar.calendarList", list=self.list_calendars),
        )


def make_event(event_id: str, summary: str = "Standup", **extra) -> dict:
    event = {
        "kind": "calendar#event",
        "etag": '"3181161784712000"',
        "id": event_id,
        "status": "confirmed",
        "htmlLink": f"https://www.google.com/calendar/event?eid={event_id}",
        "summary": summary,
        "creator": {"email": "me@example.com", "self": True},
        "organizer": {"email": "me@example.com", "self": True},
        "start": {"dateTime": "2026-02-10T10:00:00-08:00", "timeZone": "America/Los_Angeles"},
        "end": {"dateTime": "2026-02-10T10:30:00-08:00", "timeZone": "America/Los_Angeles"},
        "iCalUID": f"{event_id}@google.com",
        "sequence": 0,
    }
    event.update(extra)
    return event


# === Drive / Sheets ===

class FakeDrive:
    def __init__(self, files: List[dict]):
        self.files = files
        self.list_params: List[dict] = []

    def list(self, **params):
        self.list_params.append(params)
        return {"files": self.files[: params.get("pageSize", 100)], "nextPageToken": "x"}

    def service(self) -> FakeResource:
        return FakeResource("drive", files=FakeResource("drive.files", list=self.list))


class FakeSpreadsheets:
    def __init__(self, spreadsheet: dict, values: Dict[str, List[list]]):
        self.spreadsheet = spreadsheet
        self.values = values
        self.ranges_read: List[str] = []

    def get(self, spreadsheetId):
        return copy.deepcopy(self.spreadsheet)

    def get_values(self, spreadsheetId, range):
        self.ranges_read.append(range)
        sheet = range.split("!")[0].strip("'").replace("''", "'")
        if "!" in range:
            resolved = range
        elif sheet.replace("_", "").isalpha():
            resolved = f"{sheet}!A1:Z1000"
        else:
            resolved = f"{range}!A1:Z1000"
        result = {"range": resolved, "majorDimension": "ROWS"}
        if self.values.get(sheet):
            result["values"] = self.values[sheet]
        return result

    def service(self) -> FakeResource:
        return FakeResource(
            "sheets",
            spreadsheets=FakeResource(
                "sheets.spreadsheets",
                get=self.get,
                values=FakeResource("sheets.spreadsheets.values", get=self.get_values),
            ),
        )


# === Fixtures ===

@pytest.fixture(autouse=True)
def isolated_logging(tmp_path, monkeypatch):
    """Send helper logs to a temp dir and drop package handlers after each test"""
    monkeypatch.setenv("GWS_LOG_DIR", str(tmp_path / "logs"))
    yield
    package_logger = logging.getLogger("gws")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()


@pytest.fixture
def local_zone(monkeypatch):
    """Switch the process-local time zone to the given IANA name"""

    def use(name: str) -> None:
        monkeypatch.setenv("TZ", name)
        time.tzset()

    yield use
    monkeypatch.undo()
    time.tzset()


@pytest.fixture
def no_credentials(tmp_path, monkeypatch):
    """Environment with no OAuth credentials and no dotenv file"""
    for name in ("GOOGLE_CLIENT_ID", "GOOGLE_CLIENT_SECRET", "GOOGLE_REFRESH_TOKEN"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("GWS_ENV_FILE", str(tmp_path / "missing.env"))


@pytest.fixture
def sample_mailbox() -> FakeMailbox:
    messages = [make_message(i, subject=f"Subject {i}") for i in ["A", "B", "C", "D", "E"]]
    threads = [
        {
            "id": "T1",
            "historyId": "1",
            "messages": [
                make_message("T1m1", sender="Bob <bob@example.com>", subject="Plans"),
                make_message("T1m2", sender="Alice <alice@example.com>", subject="Re: Plans"),
            ],
        },
        {"id": "T2", "historyId": "2", "messages": [make_message("T2m1", subject="Solo")]},
    ]
    labels = [
        {"id": "INBOX", "name": "INBOX", "type": "system", "messageListVisibility": "hide"},
        {"id": "Label_1", "name": "Receipts", "type": "user"},
    ]
    return FakeMailbox(messages, threads=threads, labels=labels)


@pytest.fixture
def gmail_factory(sample_mailbox) -> FakeFactory:
    return FakeFactory(gmail=sample_mailbox.service())


@pytest.fixture
def calendar_store() -> FakeCalendarStore:
    return FakeCalendarStore(
        events=[
            make_event(
                "evt1",
                "Planning",
                description="Quarterly planning",
                location="Room 4",
                attendees=[
                    {"email": "bob@example.com", "responseStatus": "accepted", "self": False},
                    {"email": "me@example.com", "responseStatus": "accepted", "self": True},
                ],
                hangoutLink="https://meet.google.com/abc-defg-hij",
            ),
            make_event("evt2", "Standup"),
        ],
        calendars=[
            {"id": "me@example.com", "summary": "Me", "primary": True, "accessRole": "owner",
             "timeZone": "America/Los_Angeles", "etag": '"x"', "colorId": "14"},
            {"id": "team@group.calendar.google.com", "summary": "Team", "accessRole": "reader",
             "timeZone": "UTC"},
        ],
    )


@pytest.fixture
def calendar_factory(calendar_store) -> FakeFactory:
    return FakeFactory(calendar=calendar_store.service())


@pytest.fixture
def drive_files() -> List[dict]:
    return [
        {
            "id": "sheet1",
            "name": "Budget 2026",
            "mimeType": "application/vnd.google-apps.spreadsheet",
            "modifiedTime": "2026-02-01T12:00:00.000Z",
            "webViewLink": "https://docs.google.com/spreadsheets/d/sheet1/edit",
            "owners": [{"emailAddress": "me@example.com", "displayName": "Me"}],
        },
        {
            "id": "doc1",
            "name": "Notes",
            "mimeType": "application/vnd.google-apps.document",
            "modifiedTime": "2026-01-20T08:30:00.000Z",
        },
    ]


@pytest.fixture
def fake_spreadsheets() -> FakeSpreadsheets:
    spreadsheet = {
        "spreadsheetId": "sheet1",
        "properties": {"title": "Budget 2026", "locale": "en_US", "timeZone": "America/New_York"},
        "sheets": [
            {"properties": {"sheetId": 0, "title": "Summary", "index": 0,
                            "gridProperties": {"rowCount": 1000, "columnCount": 26}}},
            {"properties": {"sheetId": 7, "title": "Q1 Detail", "index": 1,
                            "gridProperties": {"rowCount": 50, "columnCount": 4}}},
        ],
        "spreadsheetUrl": "https://docs.google.com/spreadsheets/d/sheet1/edit",
    }
    values = {
        "Summary": [["Item", "Amount"], ["Rent", "1200"], ["Food", "400"]],
        "Q1 Detail": [["Jan", "1"]],
    }
    return FakeSpreadsheets(spreadsheet, values)


@pytest.fixture
def sheets_factory(drive_files, fake_spreadsheets) -> FakeFactory:
    return FakeFactory(drive=FakeDrive(drive_files).service(), sheets=fake_spreadsheets.service())
