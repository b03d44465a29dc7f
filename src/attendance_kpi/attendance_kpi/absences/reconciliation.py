"""Cross-checks between punches and declared absences."""

from __future__ import annotations

from collections import Counter
from datetime import date
from typing import Iterable

from ..clocks.model import DaySummary
from ..common.datetime_utils import is_workday, iter_dates
from ..core.enums import AbsenceStatus, AbsenceType
from .model import AbsenceRecord


def detect_potential_absences(
    *,
    start: date,
    end: date,
    today: date,
    clocked_dates: Iterable[date],
    absence_dates: Iterable[date],
) -> list[date]:
    """Workdays in [start, end] strictly before today with no punch and no absence record.

    Newest first.
    """
    covered = set(clocked_dates) | set(absence_dates)
    found = [d for d in iter_dates(start, end) if d < today and is_workday(d) and d not in covered]
    found.reverse()
    return found


def detect_missing_checkouts(summaries: Iterable[DaySummary]) -> list[DaySummary]:
    return sorted((s for s in summaries if s.missing_checkout), key=lambda s: s.date, reverse=True)


def absence_stats(records: Iterable[AbsenceRecord]) -> dict:
    records = list(records)
    by_type = Counter(r.type.value for r in records)
    by_status = Counter(r.status for r in records)
    return {
        "total": len(records),
        "by_type": {t.value: by_type.get(t.value, 0) for t in AbsenceType},
        "approved": by_status.get(AbsenceStatus.APPROVED, 0),
        "pending": by_status.get(AbsenceStatus.PENDING, 0),
        "rejected": by_status.get(AbsenceStatus.REJECTED, 0),
    }
