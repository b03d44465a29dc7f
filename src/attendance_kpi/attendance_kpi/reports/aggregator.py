"""Per-day rows and ISO-week rollups over a population.

Rows exist only for (user, date) pairs that had punches; calendar gaps are the
business of absence reconciliation.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date, timedelta
from typing import Iterable, Sequence

from ..clocks.model import DaySummary
from ..common.datetime_utils import week_start as monday_of
from ..users.model import User
from .model import DailyReportRow, WeekSummary


def _index(users: Iterable[User]) -> dict[int, User]:
    return {u.user_id: u for u in users}


def build_daily_reports(users: Sequence[User], summaries: Iterable[DaySummary]) -> list[DailyReportRow]:
    """Date descending, then last name ascending."""
    by_id = _index(users)
    rows = [DailyReportRow(user=by_id[s.user_id], summary=s) for s in summaries if s.user_id in by_id]
    rows.sort(key=lambda r: (-r.date.toordinal(), r.user.last_name, r.user.user_id))
    return rows


def aggregate_week(user: User, summaries: Iterable[DaySummary], week_start: date) -> WeekSummary:
    week_end = week_start + timedelta(days=6)
    in_week = [s for s in summaries if s.user_id == user.user_id and week_start <= s.date <= week_end]

    total = round(sum(s.hours_worked for s in in_week), 2)
    days_worked = len({s.date for s in in_week if s.hours_worked > 0})
    average = round(total / days_worked, 2) if days_worked > 0 else 0.0

    return WeekSummary(
        user=user,
        week_start=week_start,
        week_end=week_end,
        total_hours=total,
        days_worked=days_worked,
        average_daily_hours=average,
    )


def build_weekly_reports(users: Sequence[User], summaries: Iterable[DaySummary]) -> list[WeekSummary]:
    """Week descending, then last name ascending."""
    by_id = _index(users)
    buckets: dict[tuple[int, date], list[DaySummary]] = defaultdict(list)
    for s in summaries:
        if s.user_id in by_id:
            buckets[(s.user_id, monday_of(s.date))].append(s)

    weeks = [aggregate_week(by_id[user_id], days, monday) for (user_id, monday), days in buckets.items()]
    weeks.sort(key=lambda w: (-w.week_start.toordinal(), w.user.last_name, w.user.user_id))
    return weeks
