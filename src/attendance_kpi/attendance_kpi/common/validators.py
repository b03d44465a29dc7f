from __future__ import annotations

from datetime import date
from typing import Iterable

from ..core.exceptions import EmptyPopulationError, InvalidRangeError


def require_valid_range(start: date, end: date) -> None:
    if start > end:
        raise InvalidRangeError("Start date must be before end date")


def require_population(user_ids: Iterable[int]) -> list[int]:
    ids = sorted({int(u) for u in user_ids})
    if not ids:
        raise EmptyPopulationError("At least one user id is required")
    return ids
