from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional, Sequence

from ..clocks.calculator.base import WorkingHoursCalculator
from ..clocks.calculator.standard_calculator import StandardWorkingHoursCalculator
from ..clocks.model import Anomaly, ClockEvent
from ..clocks.normalizer import normalize_events
from ..clocks.repository import ClockRepository
from ..common.datetime_utils import day_bounds, local_date, now_local, range_bounds
from ..common.validators import require_population, require_valid_range
from ..core.enums import ReportType, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..core.settings import EngineSettings
from ..users.access import can_view
from ..users.model import User
from ..users.repository import UserRepository
from .aggregator import build_daily_reports, build_weekly_reports
from .kpi import compute_kpis
from .model import DailyReportRow, KPISnapshot, WeekSummary


@dataclass(frozen=True)
class ReportData:
    daily: list[DailyReportRow]
    weekly: list[WeekSummary]
    kpis: KPISnapshot
    anomalies: list[Anomaly]

    @property
    def total_hours(self) -> float:
        return round(sum(r.hours_worked for r in self.daily), 2)


class ReportService:
    def __init__(
        self,
        clocks: ClockRepository,
        users: UserRepository,
        settings: EngineSettings,
        *,
        calculator: Optional[WorkingHoursCalculator] = None,
    ):
        self._clocks = clocks
        self._users = users
        self._settings = settings
        self._calculator = calculator or StandardWorkingHoursCalculator()

    def resolve_period(self, start: Optional[date], end: Optional[date], *, now: datetime) -> tuple[date, date]:
        end = end or local_date(now, self._settings.tz)
        start = start or end - timedelta(days=self._settings.default_report_days)
        require_valid_range(start, end)
        return start, end

    def build(self, users: Sequence[User], *, start: date, end: date, now: Optional[datetime] = None) -> ReportData:
        """Daily rows, weekly rollups and KPIs for a population over [start, end]."""
        tz = self._settings.tz
        now = now or now_local(tz)
        ids = require_population([u.user_id for u in users])
        require_valid_range(start, end)

        lo, hi = range_bounds(start, end, tz)
        events = list(self._clocks.find_by_user_ids(ids, start=lo, end=hi))
        summaries, anomalies = self._calculator.summarize_all(normalize_events(events, tz))
        kpis = compute_kpis(
            ids,
            events,
            start=start,
            end=end,
            now=now,
            settings=self._settings,
            today_events=self._today_events(ids, events, start=start, end=end, now=now),
            calculator=self._calculator,
        )

        return ReportData(
            daily=build_daily_reports(users, summaries),
            weekly=build_weekly_reports(users, summaries),
            kpis=kpis,
            anomalies=[*anomalies, *kpis.anomalies],
        )

    def _today_events(
        self, user_ids: list[int], events: list[ClockEvent], *, start: date, end: date, now: datetime
    ) -> Sequence[ClockEvent]:
        today = local_date(now, self._settings.tz)
        if start <= today <= end:
            return events
        lo, hi = day_bounds(today, self._settings.tz)
        return self._clocks.find_by_user_ids(user_ids, start=lo, end=hi)

    def build_team_report(
        self,
        *,
        manager_id: int,
        report_type: str = ReportType.TEAM.value,
        team_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        now: Optional[datetime] = None,
    ) -> dict:
        managed = self._users.find_teams_by_manager(int(manager_id))
        if not managed:
            raise ValidationError("Manager not assigned to any team")

        try:
            kind = ReportType(report_type)
        except ValueError:
            raise ValidationError("Invalid report type. Must be: daily, weekly, or team")

        team_id = int(team_id) if team_id is not None else managed[0].team_id
        if team_id not in {t.team_id for t in managed}:
            raise AuthorizationError("Access forbidden: You can only view reports for your teams")

        team = self._users.get_team(team_id)
        if not team:
            raise NotFoundError("Team not found")

        employees = [m for m in self._users.find_members([team_id]) if m.role == Role.EMPLOYEE]
        team_info = {"id": team.team_id, "name": team.team_name, "description": team.description}
        if not employees:
            return {
                "team": team_info,
                "period": {"start": None, "end": None},
                "summary": {"total_employees": 0, "total_hours": 0, "average_hours_per_employee": 0},
                "reports": [],
            }

        now = now or now_local(self._settings.tz)
        start, end = self.resolve_period(start, end, now=now)
        data = self.build(employees, start=start, end=end, now=now)
        average = round(data.total_hours / len(employees), 2)

        if kind == ReportType.TEAM:
            return {
                "team_id": team.team_id,
                "team_name": team.team_name,
                "period_start": start.isoformat(),
                "period_end": end.isoformat(),
                "total_employees": len(employees),
                "total_hours": data.total_hours,
                "average_hours_per_employee": average,
                "daily_reports": [r.to_dict() for r in data.daily],
                "weekly_reports": [w.to_dict() for w in data.weekly],
                "advanced_kpis": data.kpis.to_dict(),
                "anomalies": [a.to_dict() for a in data.anomalies],
            }

        rows = data.daily if kind == ReportType.DAILY else data.weekly
        return {
            "team": team_info,
            "period": {"start": start.isoformat(), "end": end.isoformat()},
            "type": kind.value,
            "summary": {
                "total_employees": len(employees),
                "total_hours": data.total_hours,
                "average_hours_per_employee": average,
            },
            "reports": [r.to_dict() for r in rows],
            "anomalies": [a.to_dict() for a in data.anomalies],
        }

    def build_employee_report(
        self,
        *,
        requester_id: int,
        employee_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
        now: Optional[datetime] = None,
    ) -> dict:
        employee = self._users.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")

        requester = self._users.get_by_id(int(requester_id))
        if not requester:
            raise NotFoundError("Current user not found")

        if not can_view(self._users, requester, employee):
            raise AuthorizationError(
                "Access forbidden: You can only view your own report or reports of your team members"
            )

        now = now or now_local(self._settings.tz)
        start, end = self.resolve_period(start, end, now=now)
        data = self.build([employee], start=start, end=end, now=now)

        days_worked = sum(1 for r in data.daily if r.hours_worked > 0)
        return {
            "employee": employee.to_dict(),
            "period": {"start": start.isoformat(), "end": end.isoformat()},
            "summary": {
                "total_hours": data.total_hours,
                "days_worked": days_worked,
                "average_daily_hours": round(data.total_hours / days_worked, 2) if days_worked else 0,
            },
            "daily_reports": [r.to_dict() for r in data.daily],
            "weekly_reports": [w.to_dict() for w in data.weekly],
            "anomalies": [a.to_dict() for a in data.anomalies],
        }
