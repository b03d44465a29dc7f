from __future__ import annotations

import logging
from typing import Optional

from ...core.constants import SECONDS_PER_HOUR
from ...core.enums import AnomalyKind
from ..model import Anomaly, DayObservation, DaySummary
from .base import DayResult, WorkingHoursCalculator

logger = logging.getLogger(__name__)


class StandardWorkingHoursCalculator(WorkingHoursCalculator):
    """Standard rule: last check-out minus first check-in, in hours (2 decimals).

    - absent day: 0h, never a missing checkout;
    - check-in only: 0h and missing checkout;
    - check-out only: 0h;
    - no punch timestamps at all: no summary;
    - check-out before check-in: 0h plus a negative_duration anomaly.
    """

    def summarize(self, day: DayObservation) -> DayResult:
        if day.is_absent:
            return DayResult(self._summary(day, hours=0.0, missing_checkout=False))

        if day.check_in and day.check_out:
            seconds = (day.check_out - day.check_in).total_seconds()
            if seconds < 0:
                anomaly = Anomaly(
                    user_id=day.user_id,
                    date=day.date,
                    kind=AnomalyKind.NEGATIVE_DURATION,
                    detail=f"check-out {day.check_out.isoformat()} is before check-in {day.check_in.isoformat()}",
                )
                logger.warning("Zeroed day with negative duration: user=%s date=%s", day.user_id, day.date)
                return DayResult(self._summary(day, hours=0.0, missing_checkout=False), anomaly)
            return DayResult(self._summary(day, hours=round(seconds / SECONDS_PER_HOUR, 2), missing_checkout=False))

        if day.check_in:
            return DayResult(self._summary(day, hours=0.0, missing_checkout=True))

        if day.check_out:
            # Orphan check-out: the day had activity but nothing to measure.
            return DayResult(self._summary(day, hours=0.0, missing_checkout=False))

        return DayResult(None)

    @staticmethod
    def _summary(day: DayObservation, *, hours: float, missing_checkout: bool) -> DaySummary:
        return DaySummary(
            user_id=day.user_id,
            date=day.date,
            check_in=day.check_in,
            check_out=day.check_out,
            hours_worked=hours,
            is_absent=day.is_absent,
            missing_checkout=missing_checkout,
        )


_default = StandardWorkingHoursCalculator()


def compute_day_summary(day: DayObservation) -> Optional[DaySummary]:
    """Summary of one normalized day with the standard rule (None when nothing to report)."""
    return _default.summarize(day).summary
