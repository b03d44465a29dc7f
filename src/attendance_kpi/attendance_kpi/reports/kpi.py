"""Team-level KPIs computed straight from raw punches.

Definitions:
- total_workdays: Mon-Fri dates in [start, end], no holiday calendar;
- average_check_in_time: mean minute-of-day of every check-in, "HH:MM";
- punctuality_rate: share of check-ins at or before the cutoff minute;
- active_employees_today: users whose latest punch today is a check-in;
- overtime_hours: sum of the calculator's hours beyond the standard day, over
  days with both a check-in and a check-out (absent days count 0h);
- total_days_worked: distinct (user, date) pairs with any punch;
- attendance_rate: days worked over workdays x population.

Rates are percentages rounded to two decimals, 0 on an empty denominator.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import Iterable, Optional, Sequence

from ..clocks.calculator.base import WorkingHoursCalculator
from ..clocks.calculator.standard_calculator import StandardWorkingHoursCalculator
from ..clocks.model import Anomaly, ClockEvent
from ..clocks.normalizer import normalize_events
from ..common.datetime_utils import count_workdays, day_bounds, minutes_to_hhmm, to_local
from ..core.enums import AnomalyKind, ClockStatus
from ..core.settings import EngineSettings
from .model import KPISnapshot

logger = logging.getLogger(__name__)


def _percent(part: int | float, whole: int | float) -> float:
    if not whole:
        return 0.0
    return round(100.0 * part / whole, 2)


def _minute_of_day(value: datetime | time) -> int:
    return value.hour * 60 + value.minute


def count_active_today(user_ids: Iterable[int], events: Iterable[ClockEvent], *, now: datetime, settings: EngineSettings) -> int:
    tz = settings.tz
    population = set(user_ids)
    today_start, today_end = day_bounds(to_local(now, tz).date(), tz)

    latest: dict[int, tuple[datetime, int]] = {}
    latest_status: dict[int, ClockStatus] = {}
    for event in events:
        if event.user_id not in population:
            continue
        stamp = to_local(event.clock_time, tz)
        if not today_start <= stamp < today_end:
            continue
        key = (stamp, event.clock_id)
        if event.user_id not in latest or key > latest[event.user_id]:
            latest[event.user_id] = key
            latest_status[event.user_id] = event.status

    return sum(1 for status in latest_status.values() if status == ClockStatus.CHECK_IN)


def compute_kpis(
    user_ids: Sequence[int],
    events: Iterable[ClockEvent],
    *,
    start: date,
    end: date,
    now: datetime,
    settings: EngineSettings,
    today_events: Optional[Iterable[ClockEvent]] = None,
    calculator: Optional[WorkingHoursCalculator] = None,
) -> KPISnapshot:
    """KPIs of a population over [start, end].

    ``today_events`` feeds active_employees_today when "today" lies outside
    the report range; by default the range's own events are used.
    Overtime is taken from ``calculator`` so it matches the daily rows.
    """
    tz = settings.tz
    population = {int(u) for u in user_ids}
    in_range = [
        e for e in events if e.user_id in population and start <= to_local(e.clock_time, tz).date() <= end
    ]

    total_workdays = count_workdays(start, end)

    check_in_minutes = [
        _minute_of_day(to_local(e.clock_time, tz)) for e in in_range if e.status == ClockStatus.CHECK_IN
    ]
    cutoff = _minute_of_day(settings.punctuality_cutoff)
    punctual = sum(1 for m in check_in_minutes if m <= cutoff)
    average_check_in = (
        minutes_to_hhmm(int(round(sum(check_in_minutes) / len(check_in_minutes)))) if check_in_minutes else None
    )

    days = normalize_events(in_range, tz)
    summaries, _ = (calculator or StandardWorkingHoursCalculator()).summarize_all(days)
    overtime = sum(
        (max(0.0, s.hours_worked - settings.standard_workday_hours) for s in summaries if s.check_in and s.check_out),
        0.0,
    )

    anomalies: list[Anomaly] = []
    total_days_worked = len(days)
    attendance_rate = _percent(total_days_worked, total_workdays * len(population))
    if attendance_rate > 100:
        logger.warning(
            "%s: %.2f%% over %d users, clamped to 100",
            AnomalyKind.ATTENDANCE_RATE_OVERFLOW.value,
            attendance_rate,
            len(population),
        )
        anomalies.append(
            Anomaly(
                user_id=None,
                date=end,
                kind=AnomalyKind.ATTENDANCE_RATE_OVERFLOW,
                detail=f"{attendance_rate:.2f}% over {start.isoformat()}..{end.isoformat()}, clamped to 100",
            )
        )
        attendance_rate = 100.0

    return KPISnapshot(
        attendance_rate=attendance_rate,
        active_employees_today=count_active_today(
            population, in_range if today_events is None else today_events, now=now, settings=settings
        ),
        average_check_in_time=average_check_in,
        punctuality_rate=_percent(punctual, len(check_in_minutes)),
        overtime_hours=round(overtime, 2),
        total_workdays=total_workdays,
        total_days_worked=total_days_worked,
        late_arrivals=len(check_in_minutes) - punctual,
        anomalies=tuple(anomalies),
    )
