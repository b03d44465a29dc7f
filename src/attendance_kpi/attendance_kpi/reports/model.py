from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..clocks.model import Anomaly, DaySummary
from ..users.model import User


@dataclass(frozen=True)
class DailyReportRow:
    """Read-model: one user's DaySummary joined with identity for reports."""

    user: User
    summary: DaySummary

    @property
    def date(self) -> date:
        return self.summary.date

    @property
    def hours_worked(self) -> float:
        return self.summary.hours_worked

    def to_dict(self) -> dict:
        return {
            "user_id": self.user.user_id,
            "first_name": self.user.first_name,
            "last_name": self.user.last_name,
            "email": self.user.email,
            **self.summary.to_dict(),
        }


@dataclass(frozen=True)
class WeekSummary:
    user: User
    week_start: date
    week_end: date
    total_hours: float
    days_worked: int
    average_daily_hours: float

    @property
    def user_id(self) -> int:
        return self.user.user_id

    def to_dict(self) -> dict:
        return {
            "user_id": self.user.user_id,
            "first_name": self.user.first_name,
            "last_name": self.user.last_name,
            "email": self.user.email,
            "week_start": self.week_start.isoformat(),
            "week_end": self.week_end.isoformat(),
            "total_hours": self.total_hours,
            "days_worked": self.days_worked,
            "average_daily_hours": self.average_daily_hours,
        }


@dataclass(frozen=True)
class KPISnapshot:
    attendance_rate: float
    active_employees_today: int
    average_check_in_time: Optional[str]
    punctuality_rate: float
    overtime_hours: float
    total_workdays: int
    total_days_worked: int
    late_arrivals: int
    anomalies: tuple[Anomaly, ...] = ()

    def to_dict(self) -> dict:
        return {
            "attendance_rate": self.attendance_rate,
            "active_employees_today": self.active_employees_today,
            "average_check_in_time": self.average_check_in_time,
            "punctuality_rate": self.punctuality_rate,
            "overtime_hours": self.overtime_hours,
            "total_workdays": self.total_workdays,
            "total_days_worked": self.total_days_worked,
            "late_arrivals": self.late_arrivals,
        }
