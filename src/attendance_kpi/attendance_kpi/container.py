from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .absences.mysql_absence_repository import MySQLAbsenceRepository
from .absences.repository import AbsenceRepository
from .absences.service import AbsenceService
from .clocks.calculator.base import WorkingHoursCalculator
from .clocks.calculator.standard_calculator import StandardWorkingHoursCalculator
from .clocks.mysql_clock_repository import MySQLClockRepository
from .clocks.repository import ClockRepository
from .clocks.service import ClockService
from .core.settings import EngineSettings
from .database.connection import DBConfig, DatabaseConnection
from .reports.service import ReportService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]
    settings: EngineSettings

    users_repo: UserRepository
    clocks_repo: ClockRepository
    absences_repo: AbsenceRepository

    clock_service: ClockService
    absence_service: AbsenceService
    report_service: ReportService


def wire(
    *,
    settings: EngineSettings,
    users_repo: UserRepository,
    clocks_repo: ClockRepository,
    absences_repo: AbsenceRepository,
    conn: Optional[DatabaseConnection] = None,
    calculator: Optional[WorkingHoursCalculator] = None,
) -> Container:
    calculator = calculator or StandardWorkingHoursCalculator()
    return Container(
        conn=conn,
        settings=settings,
        users_repo=users_repo,
        clocks_repo=clocks_repo,
        absences_repo=absences_repo,
        clock_service=ClockService(clocks_repo, settings, calculator=calculator),
        absence_service=AbsenceService(absences_repo, clocks_repo, users_repo, settings, calculator=calculator),
        report_service=ReportService(clocks_repo, users_repo, settings, calculator=calculator),
    )


def build_container(*, db_config: dict, settings: EngineSettings) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))
    return wire(
        settings=settings,
        users_repo=MySQLUserRepository(conn),
        clocks_repo=MySQLClockRepository(conn, tz=settings.tz),
        absences_repo=MySQLAbsenceRepository(conn),
        conn=conn,
    )
