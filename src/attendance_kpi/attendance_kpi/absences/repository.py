from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import AbsenceStatus, AbsenceType
from .model import AbsenceRecord


class AbsenceRepository(Protocol):
    def upsert(self, *, user_id: int, day: date, type: AbsenceType, reason: Optional[str]) -> AbsenceRecord:
        """Insert a pending record, or refresh type/reason of the existing one (status kept)."""

        raise NotImplementedError

    def create_if_missing(
        self, *, user_id: int, day: date, type: AbsenceType, reason: Optional[str]
    ) -> tuple[AbsenceRecord, bool]:
        """Insert a pending record unless (user_id, day) exists; existing rows stay untouched.

        Returns the stored record and whether this call created it.
        """

        raise NotImplementedError

    def get_by_id(self, absence_id: int) -> Optional[AbsenceRecord]:
        raise NotImplementedError

    def find_by_user_ids(
        self,
        user_ids: Sequence[int],
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        status: Optional[AbsenceStatus] = None,
    ) -> Sequence[AbsenceRecord]:
        """Records with start <= date <= end, newest date first."""

        raise NotImplementedError

    def update_details(self, *, absence_id: int, type: AbsenceType, reason: Optional[str]) -> bool:
        raise NotImplementedError

    def decide(self, *, absence_id: int, status: AbsenceStatus, decided_by: int) -> bool:
        """Move a pending record to approved/rejected. False when it was not pending."""

        raise NotImplementedError

    def delete(self, absence_id: int) -> bool:
        raise NotImplementedError
