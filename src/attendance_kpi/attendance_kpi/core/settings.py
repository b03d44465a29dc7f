from __future__ import annotations

from dataclasses import dataclass, field
from datetime import time
from zoneinfo import ZoneInfo

from ..common.datetime_utils import get_zone, parse_hhmm
from .constants import (
    DEFAULT_PUNCTUALITY_CUTOFF,
    DEFAULT_REPORT_DAYS,
    DEFAULT_STANDARD_WORKDAY_HOURS,
    DEFAULT_TIMEZONE,
)


@dataclass(frozen=True)
class EngineSettings:
    """Organization-wide knobs of the aggregation engine."""

    timezone: str = DEFAULT_TIMEZONE
    punctuality_cutoff: time = DEFAULT_PUNCTUALITY_CUTOFF
    standard_workday_hours: float = DEFAULT_STANDARD_WORKDAY_HOURS
    default_report_days: int = DEFAULT_REPORT_DAYS
    tz: ZoneInfo = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "tz", get_zone(self.timezone))

    @classmethod
    def from_settings(cls, settings) -> "EngineSettings":
        cutoff = getattr(settings, "PUNCTUALITY_CUTOFF", None)
        return cls(
            timezone=str(getattr(settings, "TIMEZONE", DEFAULT_TIMEZONE)),
            punctuality_cutoff=parse_hhmm(cutoff) if cutoff else DEFAULT_PUNCTUALITY_CUTOFF,
            standard_workday_hours=float(getattr(settings, "STANDARD_WORKDAY_HOURS", DEFAULT_STANDARD_WORKDAY_HOURS)),
            default_report_days=int(getattr(settings, "DEFAULT_REPORT_DAYS", DEFAULT_REPORT_DAYS)),
        )
