from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AbsenceStatus, AbsenceType


@dataclass(frozen=True)
class AbsenceRecord:
    """A declared or detected absence; one per (user, date)."""

    absence_id: int
    user_id: int
    date: date
    type: AbsenceType
    status: AbsenceStatus
    reason: Optional[str] = None
    approved_by: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_decided(self) -> bool:
        return self.status != AbsenceStatus.PENDING

    def to_dict(self) -> dict:
        return {
            "id": self.absence_id,
            "user_id": self.user_id,
            "date": self.date.isoformat(),
            "type": self.type.value,
            "reason": self.reason,
            "status": self.status.value,
            "approved": self.status == AbsenceStatus.APPROVED,
            "approved_by": self.approved_by,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
