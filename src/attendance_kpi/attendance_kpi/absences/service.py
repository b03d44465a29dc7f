from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Optional, Sequence

from ..clocks.calculator.base import WorkingHoursCalculator
from ..clocks.calculator.standard_calculator import StandardWorkingHoursCalculator
from ..clocks.normalizer import normalize_events
from ..clocks.repository import ClockRepository
from ..common.datetime_utils import local_date, now_local, range_bounds
from ..common.validators import require_population, require_valid_range
from ..core.enums import AbsenceStatus, AbsenceType, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..core.settings import EngineSettings
from ..users.access import leads, manages
from ..users.model import User
from ..users.repository import UserRepository
from .model import AbsenceRecord
from .reconciliation import absence_stats, detect_missing_checkouts, detect_potential_absences
from .repository import AbsenceRepository

logger = logging.getLogger(__name__)


class AbsenceService:
    """Absence declarations, manager decisions and reconciliation against punches.

    Decisions are one-way: pending -> approved | rejected. A decided record
    cannot be decided again; the repository enforces it with a pending-only
    UPDATE so two managers racing on the same record cannot both win.
    """

    def __init__(
        self,
        absences: AbsenceRepository,
        clocks: ClockRepository,
        users: UserRepository,
        settings: EngineSettings,
        *,
        calculator: Optional[WorkingHoursCalculator] = None,
    ):
        self._absences = absences
        self._clocks = clocks
        self._users = users
        self._settings = settings
        self._calculator = calculator or StandardWorkingHoursCalculator()

    @staticmethod
    def _parse_type(value: Optional[str]) -> AbsenceType:
        try:
            return AbsenceType(value or AbsenceType.OTHER.value)
        except ValueError:
            raise ValidationError("Type must be sick, vacation, personal, or other")

    @staticmethod
    def _parse_status(value: Optional[str]) -> Optional[AbsenceStatus]:
        if not value:
            return None
        try:
            return AbsenceStatus(value)
        except ValueError:
            raise ValidationError("Status must be pending, approved, or rejected")

    def _today(self, today: Optional[date]) -> date:
        return today or now_local(self._settings.tz).date()

    def _period(self, start: Optional[date], end: Optional[date], today: date) -> tuple[date, date]:
        end = end or today
        start = start or end - timedelta(days=self._settings.default_report_days)
        require_valid_range(start, end)
        return start, end

    def _get_user(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        return user

    def _team_members(self, manager_id: int) -> Sequence[User]:
        teams = self._users.find_teams_by_manager(int(manager_id))
        if not teams:
            raise ValidationError("Manager not assigned to any team")
        return self._users.find_members([t.team_id for t in teams])

    def _get_record(self, absence_id: int) -> AbsenceRecord:
        record = self._absences.get_by_id(int(absence_id))
        if not record:
            raise NotFoundError("Absence not found")
        return record

    # -------- Declarations --------
    def declare(
        self, *, user_id: int, day: date, type: Optional[str] = None, reason: Optional[str] = None
    ) -> AbsenceRecord:
        """Declare (or re-declare) an absence; re-declaring refreshes type/reason only."""
        kind = self._parse_type(type)
        record = self._absences.upsert(user_id=int(user_id), day=day, type=kind, reason=(reason or "").strip() or None)
        logger.info("Absence declared: user=%s date=%s type=%s", user_id, day.isoformat(), kind.value)
        return record

    def get(self, *, requester_id: int, absence_id: int) -> AbsenceRecord:
        record = self._get_record(absence_id)
        if record.user_id != int(requester_id):
            requester = self._get_user(requester_id)
            if not manages(self._users, requester, self._get_user(record.user_id)):
                raise AuthorizationError("Access forbidden")
        return record

    def list_for_user(
        self,
        user_id: int,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        status: Optional[str] = None,
    ) -> Sequence[AbsenceRecord]:
        return self._absences.find_by_user_ids(
            [int(user_id)], start=start, end=end, status=self._parse_status(status)
        )

    def list_for_team(
        self,
        *,
        manager_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
        status: Optional[str] = None,
    ) -> Sequence[AbsenceRecord]:
        return self._absences.find_by_user_ids(
            [m.user_id for m in self._team_members(manager_id)], start=start, end=end, status=self._parse_status(status)
        )

    def update(
        self, *, user_id: int, absence_id: int, type: Optional[str] = None, reason: Optional[str] = None
    ) -> AbsenceRecord:
        record = self._get_record(absence_id)
        if record.user_id != int(user_id):
            raise AuthorizationError("You can only update your own absences")

        kind = self._parse_type(type) if type else record.type
        new_reason = (reason.strip() or None) if reason is not None else record.reason
        self._absences.update_details(absence_id=record.absence_id, type=kind, reason=new_reason)
        return self._get_record(absence_id)

    def delete(self, *, user_id: int, absence_id: int) -> None:
        record = self._get_record(absence_id)
        if record.user_id != int(user_id):
            raise AuthorizationError("You can only delete your own absences")
        if not self._absences.delete(record.absence_id):
            raise NotFoundError("Absence not found")
        logger.info("Absence deleted: id=%s user=%s", absence_id, user_id)

    def stats(self, user_ids: Sequence[int], *, start: Optional[date] = None, end: Optional[date] = None) -> dict:
        ids = require_population(user_ids)
        if start and end:
            require_valid_range(start, end)
        return absence_stats(self._absences.find_by_user_ids(ids, start=start, end=end))

    # -------- Decisions --------
    def _decide(self, *, manager_id: int, absence_id: int, status: AbsenceStatus) -> AbsenceRecord:
        record = self._get_record(absence_id)
        manager = self._get_user(manager_id)
        if not leads(self._users, manager, self._get_user(record.user_id)):
            raise AuthorizationError("You can only decide absences of your team members")
        if record.is_decided:
            raise ValidationError(f"Absence already {record.status.value}")

        if not self._absences.decide(absence_id=record.absence_id, status=status, decided_by=manager.user_id):
            # Lost a race with another decision.
            raise ValidationError("Absence already decided")

        logger.info(
            "Absence %s: id=%s user=%s by=%s", status.value, record.absence_id, record.user_id, manager.user_id
        )
        return self._get_record(absence_id)

    def approve(self, *, manager_id: int, absence_id: int) -> AbsenceRecord:
        return self._decide(manager_id=manager_id, absence_id=absence_id, status=AbsenceStatus.APPROVED)

    def reject(self, *, manager_id: int, absence_id: int) -> AbsenceRecord:
        return self._decide(manager_id=manager_id, absence_id=absence_id, status=AbsenceStatus.REJECTED)

    # -------- Reconciliation --------
    def _clocked_dates(self, user_ids: Sequence[int], start: date, end: date) -> dict[int, set[date]]:
        tz = self._settings.tz
        lo, hi = range_bounds(start, end, tz)
        out: dict[int, set[date]] = {int(u): set() for u in user_ids}
        for event in self._clocks.find_by_user_ids(list(out), start=lo, end=hi):
            out.setdefault(event.user_id, set()).add(local_date(event.clock_time, tz))
        return out

    def _absence_dates(self, user_ids: Sequence[int], start: date, end: date) -> dict[int, set[date]]:
        out: dict[int, set[date]] = {int(u): set() for u in user_ids}
        for record in self._absences.find_by_user_ids(list(out), start=start, end=end):
            out.setdefault(record.user_id, set()).add(record.date)
        return out

    def detect_potential_absences(
        self,
        user_id: int,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        today: Optional[date] = None,
    ) -> list[date]:
        today = self._today(today)
        start, end = self._period(start, end, today)
        uid = int(user_id)
        return detect_potential_absences(
            start=start,
            end=end,
            today=today,
            clocked_dates=self._clocked_dates([uid], start, end)[uid],
            absence_dates=self._absence_dates([uid], start, end)[uid],
        )

    def potential_absences(
        self,
        user_id: int,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        today: Optional[date] = None,
    ) -> dict:
        today = self._today(today)
        start, end = self._period(start, end, today)
        days = self.detect_potential_absences(user_id, start=start, end=end, today=today)
        return {
            "potential_absences": [d.isoformat() for d in days],
            "period": {"start": start.isoformat(), "end": end.isoformat()},
        }

    def detect_issues(
        self,
        user_id: int,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        today: Optional[date] = None,
    ) -> dict:
        today = self._today(today)
        start, end = self._period(start, end, today)

        tz = self._settings.tz
        lo, hi = range_bounds(start, end, tz)
        events = self._clocks.find_by_user_ids([int(user_id)], start=lo, end=hi)
        summaries, _ = self._calculator.summarize_all(normalize_events(events, tz))

        return {
            "period": {"start": start.isoformat(), "end": end.isoformat()},
            "missing_checkouts": [
                {"date": s.date.isoformat(), "check_in": s.check_in.isoformat() if s.check_in else None}
                for s in detect_missing_checkouts(summaries)
            ],
            "absent_days": [
                d.isoformat() for d in self.detect_potential_absences(user_id, start=start, end=end, today=today)
            ],
        }

    def auto_mark_absences(
        self,
        user_ids: Sequence[int],
        *,
        start: date,
        end: date,
        today: Optional[date] = None,
    ) -> list[AbsenceRecord]:
        """Create pending `other` absences for every potential absence. Idempotent.

        Returns only the records this run created.
        """
        ids = require_population(user_ids)
        require_valid_range(start, end)
        today = self._today(today)

        clocked = self._clocked_dates(ids, start, end)
        declared = self._absence_dates(ids, start, end)

        created: list[AbsenceRecord] = []
        for uid in ids:
            for day in detect_potential_absences(
                start=start, end=end, today=today, clocked_dates=clocked[uid], absence_dates=declared[uid]
            ):
                record, was_created = self._absences.create_if_missing(
                    user_id=uid, day=day, type=AbsenceType.OTHER, reason=None
                )
                if was_created:
                    created.append(record)

        logger.info(
            "Auto-marked absences: users=%d range=%s..%s created=%d",
            len(ids),
            start.isoformat(),
            end.isoformat(),
            len(created),
        )
        return created

    def auto_mark_team(
        self, *, manager_id: int, start: date, end: date, today: Optional[date] = None
    ) -> list[AbsenceRecord]:
        members = [u for u in self._team_members(manager_id) if u.role == Role.EMPLOYEE]
        if not members:
            return []
        return self.auto_mark_absences([u.user_id for u in members], start=start, end=end, today=today)
