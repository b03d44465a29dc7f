from __future__ import annotations

from datetime import date

import pytest

from src.attendance_kpi.attendance_kpi.clocks.service import ClockService
from src.attendance_kpi.attendance_kpi.core.enums import ClockStatus
from src.attendance_kpi.attendance_kpi.core.exceptions import InvalidRangeError, ValidationError

from tests.fakes import at


@pytest.fixture
def service(clocks_repo, settings) -> ClockService:
    return ClockService(clocks_repo, settings)


def test_punch_rejects_unknown_status(service, fixed_now):
    with pytest.raises(ValidationError, match="Status must be check-in, check-out, or absent"):
        service.punch(2, "lunch", now=fixed_now)


def test_punch_rejects_same_status_twice_in_a_row(service, fixed_now):
    service.punch(2, "check-in", clock_time=at("2024-01-10T09:00:00Z"))

    with pytest.raises(ValidationError, match="Cannot check-in twice in a row"):
        service.punch(2, "check-in", now=fixed_now)


def test_absent_may_be_repeated(service, fixed_now):
    service.punch(2, "absent", now=fixed_now)
    event = service.punch(2, "absent", now=fixed_now)

    assert event.status == ClockStatus.ABSENT


def test_punch_uses_explicit_clock_time(service, fixed_now):
    event = service.punch(2, "check-in", clock_time=at("2024-01-10T08:45:00Z"), now=fixed_now)

    assert event.clock_time == at("2024-01-10T08:45:00Z")


def test_status_is_clocked_in_only_for_a_check_in_from_today(service, clocks_repo, fixed_now):
    clocks_repo.add(2, "2024-01-09T09:00:00Z", "check-in")
    assert service.get_status(2, now=fixed_now)["is_clocked_in"] is False

    clocks_repo.add(3, "2024-01-10T09:00:00Z", "check-in")
    status = service.get_status(3, now=fixed_now)
    assert status["is_clocked_in"] is True
    assert status["last_clock"]["status"] == "check-in"

    assert service.get_status(99, now=fixed_now) == {"is_clocked_in": False, "last_clock": None}


def test_list_with_hours_returns_events_days_and_total(service, clocks_repo):
    clocks_repo.add(2, "2024-01-08T09:00:00Z", "check-in")
    clocks_repo.add(2, "2024-01-08T17:00:00Z", "check-out")
    clocks_repo.add(2, "2024-01-09T09:00:00Z", "check-in")
    clocks_repo.add(2, "2024-01-09T13:30:00Z", "check-out")
    clocks_repo.add(3, "2024-01-09T09:00:00Z", "check-in")

    result = service.list_with_hours(2, start=date(2024, 1, 8), end=date(2024, 1, 10))

    assert len(result["clocks"]) == 4
    assert [d["hours_worked"] for d in result["working_hours"]] == [8.0, 4.5]
    assert result["total_hours"] == 12.5
    assert result["anomalies"] == []


def test_list_with_hours_rejects_inverted_range(service):
    with pytest.raises(InvalidRangeError):
        service.list_with_hours(2, start=date(2024, 1, 10), end=date(2024, 1, 1))
