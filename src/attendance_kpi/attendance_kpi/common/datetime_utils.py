from __future__ import annotations

from datetime import date, datetime, time, timedelta, tzinfo
from typing import Iterator, Optional
from zoneinfo import ZoneInfo

from ..core.constants import WORKDAY_WEEKDAYS


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_hhmm(value: str) -> time:
    """Parse HH:MM string into time."""
    return datetime.strptime(value, "%H:%M").time()


def get_zone(name: str) -> ZoneInfo:
    return ZoneInfo(name)


def now_local(tz: Optional[tzinfo] = None) -> datetime:
    """Current time in the organization's timezone.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(tz)


def to_local(value: datetime, tz: tzinfo) -> datetime:
    """Express a punch timestamp in the reference timezone.

    Naive values (MySQL DATETIME) are already in organization time and are
    only tagged; aware values are converted.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)


def local_date(value: datetime, tz: tzinfo) -> date:
    return to_local(value, tz).date()


def day_bounds(day: date, tz: tzinfo) -> tuple[datetime, datetime]:
    """Return [start, start + 24h) for a calendar day in tz."""
    start = datetime.combine(day, time.min, tzinfo=tz)
    return start, start + timedelta(days=1)


def range_bounds(start: date, end: date, tz: tzinfo) -> tuple[datetime, datetime]:
    """Timestamp bounds covering every instant of the inclusive date range."""
    return day_bounds(start, tz)[0], day_bounds(end, tz)[1]


def iter_dates(start: date, end: date) -> Iterator[date]:
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def is_workday(day: date) -> bool:
    return day.weekday() in WORKDAY_WEEKDAYS


def count_workdays(start: date, end: date) -> int:
    return sum(1 for d in iter_dates(start, end) if is_workday(d))


def week_start(day: date) -> date:
    """Monday of the ISO week containing day."""
    return day - timedelta(days=day.weekday())


def minutes_to_hhmm(total_minutes: int) -> str:
    return f"{total_minutes // 60:02d}:{total_minutes % 60:02d}"
