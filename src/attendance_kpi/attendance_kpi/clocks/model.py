from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AnomalyKind, ClockStatus


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass(frozen=True)
class ClockEvent:
    """Domain entity: one punch. Write-once."""

    clock_id: int
    user_id: int
    clock_time: datetime
    status: ClockStatus
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.clock_id,
            "user_id": self.user_id,
            "clock_time": self.clock_time.isoformat(),
            "status": self.status.value,
            "created_at": _iso(self.created_at),
        }


@dataclass(frozen=True)
class DayObservation:
    """All punches of one user on one calendar date, folded into one view."""

    user_id: int
    date: date
    check_in: Optional[datetime]
    check_out: Optional[datetime]
    is_absent: bool
    event_count: int = 0


@dataclass(frozen=True)
class DaySummary:
    user_id: int
    date: date
    check_in: Optional[datetime]
    check_out: Optional[datetime]
    hours_worked: float
    is_absent: bool
    missing_checkout: bool

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "check_in": _iso(self.check_in),
            "check_out": _iso(self.check_out),
            "hours_worked": self.hours_worked,
            "is_absent": self.is_absent,
            "missing_checkout": self.missing_checkout,
        }


@dataclass(frozen=True)
class Anomaly:
    """Bad data found while building a report; the report still completes.

    ``user_id`` is None for anomalies about the whole population.
    """

    user_id: Optional[int]
    date: date
    kind: AnomalyKind
    detail: str

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "date": self.date.isoformat(),
            "kind": self.kind.value,
            "detail": self.detail,
        }
