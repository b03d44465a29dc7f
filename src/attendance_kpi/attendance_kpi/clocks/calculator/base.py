from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, Optional

from ..model import Anomaly, DayObservation, DaySummary


@dataclass(frozen=True)
class DayResult:
    summary: Optional[DaySummary]
    anomaly: Optional[Anomaly] = None


class WorkingHoursCalculator(ABC):
    """Calculator interface (Strategy Pattern for working hours)."""

    @abstractmethod
    def summarize(self, day: DayObservation) -> DayResult:
        raise NotImplementedError

    def summarize_all(self, days: Iterable[DayObservation]) -> tuple[list[DaySummary], list[Anomaly]]:
        summaries: list[DaySummary] = []
        anomalies: list[Anomaly] = []
        for day in days:
            result = self.summarize(day)
            if result.summary is not None:
                summaries.append(result.summary)
            if result.anomaly is not None:
                anomalies.append(result.anomaly)
        return summaries, anomalies
