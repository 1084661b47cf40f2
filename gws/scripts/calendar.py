"""
gws-calendar — Google Calendar helper (read + write, no delete).

Usage:
    gws-calendar list [count] [calendar]                 List upcoming events
    gws-calendar today [calendar]                        Today's events
    gws-calendar week [calendar]                         Events through Sunday
    gws-calendar get <event_id> [calendar]               Get event details
    gws-calendar search <query> [count] [calendar]       Search upcoming events
    gws-calendar create <payload> [calendar]             Create event from JSON file or "-"
    gws-calendar quick <text> [calendar]                 Quick-add event from text
    gws-calendar update <event_id> <payload> [calendar]  Patch event from JSON file or "-"
    gws-calendar calendars                               List all calendars

Deleting events is intentionally not supported.

JSON payload for create/update (update only changes the fields given):
    {
      "summary": "Meeting with Bob",
      "description": "Discuss project plan",
      "location": "Zoom",
      "start": {"dateTime": "2026-02-10T10:00:00-08:00"},
      "end": {"dateTime": "2026-02-10T11:00:00-08:00"},
      "attendees": [{"email": "bob@example.com"}],
      "reminders": {"useDefault": true}
    }
"""
from __future__ import annotations

import sys

from ..base import HelperScript
from ..calendar_client import DEFAULT_CALENDAR, CalendarClient
from ..dispatch import Arg, Capability, Command, Domain, load_payload, positive_int
from ..google_factory import GoogleServiceFactory

COUNT = Arg("count", 10, positive_int)
CALENDAR = Arg("calendar", DEFAULT_CALENDAR)
PAYLOAD_NOTE = 'payload: path to a JSON file, or "-" to read JSON from stdin'

CALENDAR_DOMAIN = Domain(
    prog="gws-calendar",
    title="Calendar Helper - Read + Write (No Delete)",
    capabilities=frozenset({Capability.READ, Capability.WRITE}),
    commands=(
        Command(
            "list", Capability.READ, CalendarClient.list_events,
            args=(COUNT, CALENDAR),
            summary="List upcoming events",
        ),
        Command(
            "today", Capability.READ, CalendarClient.today_events,
            args=(CALENDAR,),
            summary="Today's events",
        ),
        Command(
            "week", Capability.READ, CalendarClient.week_events,
            args=(CALENDAR,),
            summary="Events from today through Sunday",
        ),
        Command(
            "get", Capability.READ, CalendarClient.get_event,
            args=(Arg("event_id"), CALENDAR),
            summary="Get event details",
        ),
        Command(
            "search", Capability.READ, CalendarClient.search_events,
            args=(Arg("query"), COUNT, CALENDAR),
            summary="Search upcoming events",
        ),
        Command(
            "create", Capability.WRITE, CalendarClient.create_event,
            args=(Arg("payload", convert=load_payload), CALENDAR),
            summary="Create an event from JSON",
            usage_notes=(PAYLOAD_NOTE,),
        ),
        Command(
            "quick", Capability.WRITE, CalendarClient.quick_add,
            args=(Arg("text"), CALENDAR),
            summary="Quick-add an event from text",
        ),
        Command(
            "update", Capability.WRITE, CalendarClient.update_event,
            args=(Arg("event_id"), Arg("payload", convert=load_payload), CALENDAR),
            summary="Patch an event from JSON",
            usage_notes=(PAYLOAD_NOTE,),
        ),
        Command(
            "calendars", Capability.READ, CalendarClient.list_calendars,
            summary="List all calendars",
        ),
    ),
    examples=(
        "today",
        "week",
        "list 20",
        'search "standup" 5',
        'quick "Lunch with Alice tomorrow at noon"',
        "create event.json",
        "update abc123 patch.json",
        "calendars",
    ),
)


class CalendarHelper(HelperScript):
    """Calendar Helper - read events, create and patch them; never delete."""

    domain = CALENDAR_DOMAIN

    def make_client(self, factory: GoogleServiceFactory) -> CalendarClient:
        return CalendarClient(factory)


def main() -> None:
    sys.exit(CalendarHelper.main())


if __name__ == "__main__":
    main()
