"""
CalendarClient — wrapper around the Google Calendar API v3 service.

Reads events and calendars, creates events (from a JSON body or quick-add text)
and patches them. There is deliberately no delete method.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from . import timewindow
from .google_factory import GoogleServiceFactory
from .models import Attendee, CalendarEvent, CalendarRef

logger = logging.getLogger(__name__)

DEFAULT_CALENDAR = "primary"


# ── Parsing helpers ───────────────────────────────────────────────────────────

def event_instant(value: Any) -> str:
    """
    Display value for an event's start/end: the timed dateTime if present,
    else the all-day date. Already-flattened strings pass through.
    """
    if isinstance(value, str):
        return value
    if not value:
        return ""
    return value.get("dateTime") or value.get("date") or ""


def _email_of(value: Any) -> str:
    if isinstance(value, str):
        return value
    return (value or {}).get("email", "")


def parse_event(raw: dict) -> CalendarEvent:
    """Convert a raw Calendar API event dict into a CalendarEvent."""
    return CalendarEvent(
        event_id=raw.get("id", ""),
        summary=raw.get("summary") or "",
        start=event_instant(raw.get("start")),
        end=event_instant(raw.get("end")),
        description=raw.get("description") or "",
        location=raw.get("location") or "",
        status=raw.get("status") or "",
        html_link=raw.get("htmlLink") or "",
        creator=_email_of(raw.get("creator")),
        attendees=[
            Attendee(email=a.get("email", ""), response_status=a.get("responseStatus", ""))
            for a in raw.get("attendees") or []
        ],
        hangout_link=raw.get("hangoutLink") or "",
        recurring_event_id=raw.get("recurringEventId") or "",
    )


def parse_calendar(raw: dict) -> CalendarRef:
    return CalendarRef(
        calendar_id=raw.get("id", ""),
        summary=raw.get("summary") or "",
        primary=bool(raw.get("primary", False)),
        access_role=raw.get("accessRole") or "",
        time_zone=raw.get("timeZone") or "",
    )


class CalendarClient:
    """
    Google Calendar operations: full read, create/quick-add/patch, no delete.

    Usage:
        factory = GoogleServiceFactory()
        cal = CalendarClient(factory)
        events = cal.today_events()

    clock returns the current local-time-aware datetime; tests inject a fixed one.
    """

    def __init__(
        self,
        factory: GoogleServiceFactory,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._factory = factory
        self._svc = factory.calendar
        self._clock = clock or (lambda: datetime.now().astimezone())

    def _execute(self, request: Any) -> dict:
        return self._factory.execute(request)

    # ── Read events ───────────────────────────────────────────────────────────

    def _list(self, calendar_id: str, **params: Any) -> list[CalendarEvent]:
        resp = self._execute(
            self._svc.events().list(
                calendarId=calendar_id,
                singleEvents=True,   # expand recurring events
                orderBy="startTime",
                **params,
            )
        )
        events = [parse_event(e) for e in resp.get("items", [])]
        logger.debug(
            "%s: %d event(s), %d all-day",
            calendar_id, len(events), sum(e.is_all_day for e in events),
        )
        return events

    def list_events(
        self, max_results: int = 10, calendar_id: str = DEFAULT_CALENDAR
    ) -> list[CalendarEvent]:
        """Upcoming events from now, sorted by start time."""
        now = self._clock().astimezone(timezone.utc)
        return self._list(calendar_id, maxResults=max_results, timeMin=now.isoformat())

    def today_events(self, calendar_id: str = DEFAULT_CALENDAR) -> list[CalendarEvent]:
        """All events between local midnight and the end of today."""
        start, end = timewindow.today_window(self._clock())
        return self._list(calendar_id, timeMin=start.isoformat(), timeMax=end.isoformat())

    def week_events(self, calendar_id: str = DEFAULT_CALENDAR) -> list[CalendarEvent]:
        """All events from the start of today through the end of Sunday."""
        start, end = timewindow.week_window(self._clock())
        return self._list(calendar_id, timeMin=start.isoformat(), timeMax=end.isoformat())

    def search_events(
        self,
        query: str,
        max_results: int = 10,
        calendar_id: str = DEFAULT_CALENDAR,
    ) -> list[CalendarEvent]:
        """Upcoming events matching free text in title, description or location."""
        now = self._clock().astimezone(timezone.utc)
        return self._list(
            calendar_id, q=query, maxResults=max_results, timeMin=now.isoformat()
        )

    def get_event(self, event_id: str, calendar_id: str = DEFAULT_CALENDAR) -> CalendarEvent:
        raw = self._execute(self._svc.events().get(calendarId=calendar_id, eventId=event_id))
        return parse_event(raw)

    def list_calendars(self) -> list[CalendarRef]:
        """Every calendar on the user's calendar list."""
        resp = self._execute(self._svc.calendarList().list())
        return [parse_calendar(c) for c in resp.get("items", [])]

    # ── Create / modify events ────────────────────────────────────────────────

    def create_event(
        self, body: dict, calendar_id: str = DEFAULT_CALENDAR
    ) -> CalendarEvent:
        """
        Insert an event from an API-shaped body and notify attendees.

        Example body:
            {"summary": "Meeting with Bob",
             "start": {"dateTime": "2026-02-10T10:00:00-08:00"},
             "end":   {"dateTime": "2026-02-10T11:00:00-08:00"},
             "attendees": [{"email": "bob@example.com"}],
             "reminders": {"useDefault": true}}
        """
        raw = self._execute(
            self._svc.events().insert(calendarId=calendar_id, body=body, sendUpdates="all")
        )
        logger.info("Created event %s: %s", raw.get("id"), raw.get("summary", ""))
        return parse_event(raw)

    def quick_add(self, text: str, calendar_id: str = DEFAULT_CALENDAR) -> CalendarEvent:
        """Create an event from natural-language text ("Lunch with Alice tomorrow at noon")."""
        raw = self._execute(self._svc.events().quickAdd(calendarId=calendar_id, text=text))
        logger.info("Quick-added event %s: %s", raw.get("id"), text)
        return parse_event(raw)

    def update_event(
        self, event_id: str, patch: dict, calendar_id: str = DEFAULT_CALENDAR
    ) -> CalendarEvent:
        """Merge-patch an event: only the top-level fields present in patch change."""
        raw = self._execute(
            self._svc.events().patch(
                calendarId=calendar_id,
                eventId=event_id,
                body=patch,
                sendUpdates="all",
            )
        )
        logger.info("Patched event %s (fields: %s)", event_id, ", ".join(sorted(patch)))
        return parse_event(raw)
