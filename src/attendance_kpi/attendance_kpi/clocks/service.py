from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Optional

from ..common.datetime_utils import local_date, now_local, range_bounds
from ..common.validators import require_valid_range
from ..core.enums import ClockStatus
from ..core.exceptions import ValidationError
from ..core.settings import EngineSettings
from .calculator.base import WorkingHoursCalculator
from .calculator.standard_calculator import StandardWorkingHoursCalculator
from .model import ClockEvent
from .normalizer import normalize_events
from .repository import ClockRepository

logger = logging.getLogger(__name__)


class ClockService:
    """Use cases around a single user's punches.

    Sequencing (no two identical check-in/check-out punches in a row) is a
    read-last-then-insert check. Two concurrent sessions of the same user can
    both pass it; acceptable for one human per account.
    """

    def __init__(
        self,
        clocks: ClockRepository,
        settings: EngineSettings,
        *,
        calculator: Optional[WorkingHoursCalculator] = None,
    ):
        self._clocks = clocks
        self._settings = settings
        self._calculator = calculator or StandardWorkingHoursCalculator()

    def punch(
        self,
        user_id: int,
        status: str,
        *,
        clock_time: Optional[datetime] = None,
        now: Optional[datetime] = None,
    ) -> ClockEvent:
        try:
            kind = ClockStatus(status)
        except ValueError:
            raise ValidationError("Status must be check-in, check-out, or absent")

        last = self._clocks.get_last_for_user(int(user_id))
        if kind != ClockStatus.ABSENT and last and last.status == kind:
            raise ValidationError(
                f"Cannot {kind.value} twice in a row. Last clock was a {last.status.value} at {last.clock_time.isoformat()}"
            )

        stamp = clock_time or now or now_local(self._settings.tz)
        event = self._clocks.create(user_id=int(user_id), clock_time=stamp, status=kind)
        logger.info("Punch recorded: user=%s status=%s at=%s", user_id, kind.value, stamp.isoformat())
        return event

    def get_status(self, user_id: int, *, now: Optional[datetime] = None) -> dict:
        """Clocked in only when the latest punch is a check-in from today."""
        now = now or now_local(self._settings.tz)
        last = self._clocks.get_last_for_user(int(user_id))
        if not last:
            return {"is_clocked_in": False, "last_clock": None}

        tz = self._settings.tz
        same_day = local_date(last.clock_time, tz) == local_date(now, tz)
        return {
            "is_clocked_in": last.status == ClockStatus.CHECK_IN and same_day,
            "last_clock": last.to_dict(),
        }

    def list_with_hours(
        self,
        user_id: int,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        today: Optional[date] = None,
    ) -> dict:
        tz = self._settings.tz
        end = end or today or now_local(tz).date()
        start = start or end - timedelta(days=self._settings.default_report_days)
        require_valid_range(start, end)

        lo, hi = range_bounds(start, end, tz)
        events = list(self._clocks.find_by_user_ids([int(user_id)], start=lo, end=hi))
        summaries, anomalies = self._calculator.summarize_all(normalize_events(events, tz))
        total = round(sum(s.hours_worked for s in summaries), 2)

        return {
            "clocks": [e.to_dict() for e in events],
            "working_hours": [s.to_dict() for s in summaries],
            "total_hours": total,
            "anomalies": [a.to_dict() for a in anomalies],
        }
