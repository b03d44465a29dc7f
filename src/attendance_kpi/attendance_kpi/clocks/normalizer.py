"""Fold raw punches into one observation per (user, calendar date).

Rules per day:
- is_absent: any punch has status ``absent``;
- check_in: the earliest check-in (later check-ins the same day are ignored);
- check_out: the latest check-out.

Input order is not trusted, punches are sorted chronologically first.
Intermediate punches of multi-session days are dropped on purpose.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date, tzinfo
from typing import Iterable, Sequence

from ..common.datetime_utils import to_local
from ..core.enums import ClockStatus
from .model import ClockEvent, DayObservation


def normalize_day(user_id: int, day: date, events: Sequence[ClockEvent], tz: tzinfo) -> DayObservation:
    check_in = None
    check_out = None
    is_absent = False

    for event in sorted(events, key=lambda e: to_local(e.clock_time, tz)):
        stamp = to_local(event.clock_time, tz)
        if event.status == ClockStatus.ABSENT:
            is_absent = True
        elif event.status == ClockStatus.CHECK_IN:
            if check_in is None:
                check_in = stamp
        elif event.status == ClockStatus.CHECK_OUT:
            check_out = stamp

    return DayObservation(
        user_id=int(user_id),
        date=day,
        check_in=check_in,
        check_out=check_out,
        is_absent=is_absent,
        event_count=len(events),
    )


def group_by_user_day(events: Iterable[ClockEvent], tz: tzinfo) -> dict[tuple[int, date], list[ClockEvent]]:
    buckets: dict[tuple[int, date], list[ClockEvent]] = defaultdict(list)
    for event in events:
        buckets[(int(event.user_id), to_local(event.clock_time, tz).date())].append(event)
    return buckets


def normalize_events(events: Iterable[ClockEvent], tz: tzinfo) -> list[DayObservation]:
    """Normalize punches of any number of users, ordered by (user_id, date)."""
    buckets = group_by_user_day(events, tz)
    return [normalize_day(user_id, day, buckets[(user_id, day)], tz) for user_id, day in sorted(buckets)]
