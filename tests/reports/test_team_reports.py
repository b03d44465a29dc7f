from __future__ import annotations

from datetime import date

import pytest

from src.attendance_kpi.attendance_kpi.core.enums import Role
from src.attendance_kpi.attendance_kpi.core.exceptions import (
    AuthorizationError,
    InvalidRangeError,
    NotFoundError,
    ValidationError,
)
from src.attendance_kpi.attendance_kpi.reports.service import ReportService
from src.attendance_kpi.attendance_kpi.users.model import Team

from tests.fakes import (
    ALICE_ID,
    BOB_ID,
    MANAGER_ID,
    OTHER_TEAM_ID,
    OUTSIDER_ID,
    TEAM_ID,
    InMemoryUserRepository,
    make_user,
)

START = date(2024, 1, 8)
END = date(2024, 1, 10)


@pytest.fixture
def service(clocks_repo, users_repo, settings) -> ReportService:
    clocks_repo.add(ALICE_ID, "2024-01-08T09:00:00Z", "check-in")
    clocks_repo.add(ALICE_ID, "2024-01-08T17:00:00Z", "check-out")
    clocks_repo.add(BOB_ID, "2024-01-09T09:45:00Z", "check-in")
    clocks_repo.add(BOB_ID, "2024-01-09T18:45:00Z", "check-out")
    clocks_repo.add(BOB_ID, "2024-01-10T09:00:00Z", "check-in")
    clocks_repo.add(MANAGER_ID, "2024-01-09T09:00:00Z", "check-in")
    return ReportService(clocks_repo, users_repo, settings)


def test_team_report_covers_employees_only(service, fixed_now):
    report = service.build_team_report(manager_id=MANAGER_ID, start=START, end=END, now=fixed_now)

    assert report["team_id"] == TEAM_ID
    assert report["team_name"] == "Platform"
    assert report["period_start"] == "2024-01-08"
    assert report["total_employees"] == 2
    assert report["total_hours"] == 17.0
    assert report["average_hours_per_employee"] == 8.5
    assert [(r["date"], r["last_name"]) for r in report["daily_reports"]] == [
        ("2024-01-10", "Baker"),
        ("2024-01-09", "Baker"),
        ("2024-01-08", "Adams"),
    ]
    assert report["daily_reports"][0]["missing_checkout"] is True


def test_team_report_embeds_kpis(service, fixed_now):
    kpis = service.build_team_report(manager_id=MANAGER_ID, start=START, end=END, now=fixed_now)["advanced_kpis"]

    assert kpis["total_workdays"] == 3
    assert kpis["total_days_worked"] == 3
    assert kpis["attendance_rate"] == 50
    assert kpis["late_arrivals"] == 1
    assert kpis["overtime_hours"] == 1
    assert kpis["active_employees_today"] == 1


def test_daily_and_weekly_report_shapes(service, fixed_now):
    daily = service.build_team_report(manager_id=MANAGER_ID, report_type="daily", start=START, end=END, now=fixed_now)
    weekly = service.build_team_report(manager_id=MANAGER_ID, report_type="weekly", start=START, end=END, now=fixed_now)

    assert daily["type"] == "daily"
    assert daily["team"]["name"] == "Platform"
    assert daily["summary"] == {"total_employees": 2, "total_hours": 17.0, "average_hours_per_employee": 8.5}
    assert len(daily["reports"]) == 3

    assert weekly["type"] == "weekly"
    assert [(w["last_name"], w["total_hours"], w["days_worked"]) for w in weekly["reports"]] == [
        ("Adams", 8.0, 1),
        ("Baker", 9.0, 1),
    ]


def test_team_report_defaults_to_the_last_thirty_days(service, fixed_now):
    report = service.build_team_report(manager_id=MANAGER_ID, now=fixed_now)

    assert report["period_end"] == "2024-01-10"
    assert report["period_start"] == "2023-12-11"


def test_manager_without_team_is_rejected(service, fixed_now):
    with pytest.raises(ValidationError, match="Manager not assigned to any team"):
        service.build_team_report(manager_id=ALICE_ID, now=fixed_now)


def test_unknown_report_type_is_rejected(service, fixed_now):
    with pytest.raises(ValidationError, match="Invalid report type"):
        service.build_team_report(manager_id=MANAGER_ID, report_type="monthly", now=fixed_now)


def test_manager_cannot_report_on_another_team(service, fixed_now):
    with pytest.raises(AuthorizationError):
        service.build_team_report(manager_id=MANAGER_ID, team_id=OTHER_TEAM_ID, now=fixed_now)


def test_inverted_range_is_rejected(service, fixed_now):
    with pytest.raises(InvalidRangeError):
        service.build_team_report(manager_id=MANAGER_ID, start=END, end=START, now=fixed_now)


def test_team_without_employees_returns_zero_summary(clocks_repo, settings, fixed_now):
    users = InMemoryUserRepository(
        users=[make_user(7, "Lone", role=Role.MANAGER, team_id=30)],
        teams=[Team(team_id=30, team_name="Empty", manager_id=7)],
    )

    report = ReportService(clocks_repo, users, settings).build_team_report(manager_id=7, now=fixed_now)

    assert report["summary"] == {"total_employees": 0, "total_hours": 0, "average_hours_per_employee": 0}
    assert report["reports"] == []


def test_employee_report_for_self(service, fixed_now):
    report = service.build_employee_report(
        requester_id=BOB_ID, employee_id=BOB_ID, start=START, end=END, now=fixed_now
    )

    assert report["employee"]["id"] == BOB_ID
    assert report["summary"] == {"total_hours": 9.0, "days_worked": 1, "average_daily_hours": 9.0}
    assert len(report["daily_reports"]) == 2


def test_manager_can_view_team_member_but_not_outsider(service, fixed_now):
    report = service.build_employee_report(requester_id=MANAGER_ID, employee_id=ALICE_ID, now=fixed_now)
    assert report["employee"]["last_name"] == "Adams"

    with pytest.raises(AuthorizationError):
        service.build_employee_report(requester_id=MANAGER_ID, employee_id=OUTSIDER_ID, now=fixed_now)


def test_employee_cannot_view_a_colleague(service, fixed_now):
    with pytest.raises(AuthorizationError):
        service.build_employee_report(requester_id=ALICE_ID, employee_id=BOB_ID, now=fixed_now)


def test_unknown_employee(service, fixed_now):
    with pytest.raises(NotFoundError):
        service.build_employee_report(requester_id=MANAGER_ID, employee_id=404, now=fixed_now)


def test_attendance_overflow_is_listed_with_report_anomalies(service, clocks_repo, fixed_now):
    clocks_repo.add(ALICE_ID, "2024-01-06T09:00:00Z", "check-in")
    clocks_repo.add(ALICE_ID, "2024-01-07T09:00:00Z", "check-in")

    report = service.build_team_report(
        manager_id=MANAGER_ID, start=date(2024, 1, 6), end=START, now=fixed_now
    )

    assert report["advanced_kpis"]["attendance_rate"] == 100
    assert [a["kind"] for a in report["anomalies"]] == ["attendance_rate_overflow"]
