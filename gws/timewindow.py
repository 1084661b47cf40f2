"""
Day and week boundaries in the local time zone, for the calendar today/week queries.

A week runs from the start of today through the end of the upcoming Sunday; on a
Sunday the week ends tonight.

Boundaries are computed on local wall-clock time and only then given an offset,
so a boundary on the far side of a DST change carries that day's offset.
"""
from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

_SUNDAY = 6   # datetime.weekday()


def _wall_clock(now: Optional[datetime]) -> datetime:
    """now as naive local wall-clock time (aware inputs are converted first)."""
    if now is None:
        return datetime.now()
    if now.tzinfo is not None:
        now = now.astimezone()
    return now.replace(tzinfo=None)


def start_of_day(now: Optional[datetime] = None) -> datetime:
    """Midnight at the start of now's local day."""
    wall = _wall_clock(now)
    return wall.replace(hour=0, minute=0, second=0, microsecond=0).astimezone()


def end_of_day(now: Optional[datetime] = None) -> datetime:
    """23:59:59.999 on now's local day."""
    wall = _wall_clock(now)
    return wall.replace(hour=23, minute=59, second=59, microsecond=999000).astimezone()


def end_of_week(now: Optional[datetime] = None) -> datetime:
    """End of day on the upcoming Sunday (today, if today is Sunday)."""
    wall = _wall_clock(now)
    return end_of_day(wall + timedelta(days=_SUNDAY - wall.weekday()))


def today_window(now: Optional[datetime] = None) -> tuple[datetime, datetime]:
    wall = _wall_clock(now)
    return start_of_day(wall), end_of_day(wall)


def week_window(now: Optional[datetime] = None) -> tuple[datetime, datetime]:
    wall = _wall_clock(now)
    return start_of_day(wall), end_of_week(wall)
