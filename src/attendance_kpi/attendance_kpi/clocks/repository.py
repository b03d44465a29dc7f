from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import ClockStatus
from .model import ClockEvent


class ClockRepository(Protocol):
    """Raw punch storage. Returns rows only, never aggregates."""

    def find_by_user_ids(self, user_ids: Sequence[int], *, start: datetime, end: datetime) -> Sequence[ClockEvent]:
        """Punches with start <= clock_time < end, ordered by user then time."""

        raise NotImplementedError

    def get_last_for_user(self, user_id: int) -> Optional[ClockEvent]:
        raise NotImplementedError

    def create(self, *, user_id: int, clock_time: datetime, status: ClockStatus) -> ClockEvent:
        raise NotImplementedError
