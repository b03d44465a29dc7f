from __future__ import annotations

from datetime import date

import pytest

from src.attendance_kpi.attendance_kpi.absences.service import AbsenceService
from src.attendance_kpi.attendance_kpi.core.enums import AbsenceStatus, AbsenceType, Role
from src.attendance_kpi.attendance_kpi.core.exceptions import (
    AuthorizationError,
    EmptyPopulationError,
    NotFoundError,
    ValidationError,
)
from src.attendance_kpi.attendance_kpi.users.access import can_view

from tests.fakes import ALICE_ID, BOB_ID, MANAGER_ID, OTHER_MANAGER_ID, OUTSIDER_ID, TEAM_ID, make_user

TODAY = date(2024, 1, 10)
TUESDAY = date(2024, 1, 9)


@pytest.fixture
def service(absences_repo, clocks_repo, users_repo, settings) -> AbsenceService:
    return AbsenceService(absences_repo, clocks_repo, users_repo, settings)


def test_auto_mark_fills_uncovered_workday_once(service, clocks_repo, absences_repo):
    clocks_repo.add(ALICE_ID, "2024-01-08T09:00:00Z", "check-in")
    clocks_repo.add(ALICE_ID, "2024-01-08T17:00:00Z", "check-out")
    start, end = date(2024, 1, 8), TODAY

    assert service.detect_potential_absences(ALICE_ID, start=start, end=end, today=TODAY) == [TUESDAY]

    created = service.auto_mark_absences([ALICE_ID], start=start, end=end, today=TODAY)

    assert len(created) == 1
    assert created[0].date == TUESDAY
    assert created[0].type == AbsenceType.OTHER
    assert created[0].status == AbsenceStatus.PENDING
    assert service.detect_potential_absences(ALICE_ID, start=start, end=end, today=TODAY) == []

    assert service.auto_mark_absences([ALICE_ID], start=start, end=end, today=TODAY) == []
    assert len(absences_repo.find_by_user_ids([ALICE_ID])) == 1


def test_auto_mark_leaves_existing_records_untouched(service, absences_repo):
    declared = service.declare(user_id=ALICE_ID, day=TUESDAY, type="sick", reason="flu")

    created = service.auto_mark_absences([ALICE_ID], start=TUESDAY, end=TUESDAY, today=TODAY)

    assert created == []
    assert absences_repo.get_by_id(declared.absence_id).type == AbsenceType.SICK


def test_auto_mark_requires_users(service):
    with pytest.raises(EmptyPopulationError):
        service.auto_mark_absences([], start=TUESDAY, end=TODAY, today=TODAY)


def test_auto_mark_team_covers_employees_of_managed_teams(service):
    created = service.auto_mark_team(manager_id=MANAGER_ID, start=TUESDAY, end=TUESDAY, today=TODAY)

    assert sorted(r.user_id for r in created) == [ALICE_ID, BOB_ID]


def test_declare_defaults_to_other_and_validates_type(service):
    assert service.declare(user_id=ALICE_ID, day=TUESDAY).type == AbsenceType.OTHER

    with pytest.raises(ValidationError, match="Type must be"):
        service.declare(user_id=ALICE_ID, day=TUESDAY, type="holiday")


def test_redeclaring_updates_details_but_keeps_decision(service):
    record = service.declare(user_id=ALICE_ID, day=TUESDAY, type="personal")
    service.approve(manager_id=MANAGER_ID, absence_id=record.absence_id)

    again = service.declare(user_id=ALICE_ID, day=TUESDAY, type="sick", reason="fever")

    assert again.absence_id == record.absence_id
    assert again.type == AbsenceType.SICK
    assert again.reason == "fever"
    assert again.status == AbsenceStatus.APPROVED


def test_manager_approves_pending_absence_of_team_member(service):
    record = service.declare(user_id=ALICE_ID, day=TUESDAY)

    approved = service.approve(manager_id=MANAGER_ID, absence_id=record.absence_id)

    assert approved.status == AbsenceStatus.APPROVED
    assert approved.approved_by == MANAGER_ID
    assert approved.to_dict()["approved"] is True


def test_decided_absence_cannot_be_decided_again(service):
    record = service.declare(user_id=ALICE_ID, day=TUESDAY)
    service.reject(manager_id=MANAGER_ID, absence_id=record.absence_id)

    with pytest.raises(ValidationError, match="already rejected"):
        service.approve(manager_id=MANAGER_ID, absence_id=record.absence_id)
    with pytest.raises(ValidationError):
        service.reject(manager_id=MANAGER_ID, absence_id=record.absence_id)


def test_only_the_team_manager_may_decide(service):
    record = service.declare(user_id=ALICE_ID, day=TUESDAY)

    with pytest.raises(AuthorizationError):
        service.approve(manager_id=OTHER_MANAGER_ID, absence_id=record.absence_id)
    with pytest.raises(AuthorizationError):
        service.approve(manager_id=BOB_ID, absence_id=record.absence_id)


def test_deciding_unknown_absence(service):
    with pytest.raises(NotFoundError):
        service.approve(manager_id=MANAGER_ID, absence_id=999)


def test_only_owner_updates_or_deletes(service, absences_repo):
    record = service.declare(user_id=ALICE_ID, day=TUESDAY)

    with pytest.raises(AuthorizationError):
        service.update(user_id=BOB_ID, absence_id=record.absence_id, type="sick")
    with pytest.raises(AuthorizationError):
        service.delete(user_id=BOB_ID, absence_id=record.absence_id)

    updated = service.update(user_id=ALICE_ID, absence_id=record.absence_id, reason="  dentist ")
    assert updated.reason == "dentist"
    assert updated.type == AbsenceType.OTHER

    service.delete(user_id=ALICE_ID, absence_id=record.absence_id)
    assert absences_repo.get_by_id(record.absence_id) is None


def test_get_allows_owner_and_team_manager(service):
    record = service.declare(user_id=ALICE_ID, day=TUESDAY)

    assert service.get(requester_id=ALICE_ID, absence_id=record.absence_id) == record
    assert service.get(requester_id=MANAGER_ID, absence_id=record.absence_id) == record
    with pytest.raises(AuthorizationError):
        service.get(requester_id=OUTSIDER_ID, absence_id=record.absence_id)


def test_team_listing_and_status_filter(service):
    service.declare(user_id=ALICE_ID, day=TUESDAY)
    bob = service.declare(user_id=BOB_ID, day=TUESDAY)
    service.declare(user_id=OUTSIDER_ID, day=TUESDAY)
    service.approve(manager_id=MANAGER_ID, absence_id=bob.absence_id)

    assert {r.user_id for r in service.list_for_team(manager_id=MANAGER_ID)} == {ALICE_ID, BOB_ID}
    assert [r.user_id for r in service.list_for_team(manager_id=MANAGER_ID, status="approved")] == [BOB_ID]

    with pytest.raises(ValidationError, match="Manager not assigned to any team"):
        service.list_for_team(manager_id=ALICE_ID)
    with pytest.raises(ValidationError):
        service.list_for_user(ALICE_ID, status="maybe")


def test_detect_issues_reports_missing_checkouts_and_absent_days(service, clocks_repo):
    clocks_repo.add(ALICE_ID, "2024-01-08T09:00:00Z", "check-in")

    issues = service.detect_issues(ALICE_ID, start=date(2024, 1, 8), end=TODAY, today=TODAY)

    assert issues["missing_checkouts"] == [{"date": "2024-01-08", "check_in": "2024-01-08T09:00:00+00:00"}]
    assert issues["absent_days"] == ["2024-01-09"]


def test_stats_for_a_user(service):
    service.declare(user_id=ALICE_ID, day=TUESDAY, type="sick")
    service.declare(user_id=ALICE_ID, day=date(2024, 1, 8), type="vacation")

    stats = service.stats([ALICE_ID])

    assert stats["total"] == 2
    assert stats["pending"] == 2
    assert stats["by_type"]["sick"] == 1


def test_team_member_manager_cannot_decide_without_leading_the_team(service, users_repo):
    users_repo._users[77] = make_user(77, "Mills", role=Role.MANAGER, team_id=TEAM_ID)
    record = service.declare(user_id=ALICE_ID, day=TUESDAY)

    with pytest.raises(AuthorizationError):
        service.approve(manager_id=77, absence_id=record.absence_id)
    with pytest.raises(AuthorizationError):
        service.reject(manager_id=77, absence_id=record.absence_id)

    assert can_view(users_repo, users_repo.get_by_id(77), users_repo.get_by_id(ALICE_ID))
    assert service.approve(manager_id=MANAGER_ID, absence_id=record.absence_id).status == AbsenceStatus.APPROVED


def test_potential_absences_with_period(service, clocks_repo):
    clocks_repo.add(ALICE_ID, "2024-01-08T09:00:00Z", "check-in")

    result = service.potential_absences(ALICE_ID, start=date(2024, 1, 5), end=TODAY, today=TODAY)

    assert result == {
        "potential_absences": ["2024-01-09", "2024-01-05"],
        "period": {"start": "2024-01-05", "end": "2024-01-10"},
    }
