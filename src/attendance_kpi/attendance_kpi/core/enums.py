from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for report scoping and absence decisions."""

    EMPLOYEE = "employee"
    MANAGER = "manager"


class ClockStatus(str, Enum):
    """Punch kinds as stored in the clocks table."""

    CHECK_IN = "check-in"
    CHECK_OUT = "check-out"
    ABSENT = "absent"


class AbsenceType(str, Enum):
    SICK = "sick"
    VACATION = "vacation"
    PERSONAL = "personal"
    OTHER = "other"


class AbsenceStatus(str, Enum):
    """Approval workflow state of an absence."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ReportType(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    TEAM = "team"


class AnomalyKind(str, Enum):
    """Data problems reported next to results instead of failing a report."""

    NEGATIVE_DURATION = "negative_duration"
    ATTENDANCE_RATE_OVERFLOW = "attendance_rate_overflow"
