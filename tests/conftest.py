from __future__ import annotations

from datetime import datetime

import pytest

from src.attendance_kpi.attendance_kpi.core.enums import Role
from src.attendance_kpi.attendance_kpi.core.settings import EngineSettings
from src.attendance_kpi.attendance_kpi.users.model import Team

from tests.fakes import (
    ALICE_ID,
    BOB_ID,
    MANAGER_ID,
    OTHER_MANAGER_ID,
    OTHER_TEAM_ID,
    OUTSIDER_ID,
    TEAM_ID,
    UTC,
    InMemoryAbsenceRepository,
    InMemoryClockRepository,
    InMemoryUserRepository,
    make_user,
)


@pytest.fixture
def fixed_now() -> datetime:
    # Wednesday
    return datetime(2024, 1, 10, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def settings() -> EngineSettings:
    return EngineSettings(timezone="UTC")


@pytest.fixture
def users_repo() -> InMemoryUserRepository:
    return InMemoryUserRepository(
        users=[
            make_user(MANAGER_ID, "Moss", role=Role.MANAGER, team_id=TEAM_ID),
            make_user(ALICE_ID, "Adams", team_id=TEAM_ID),
            make_user(BOB_ID, "Baker", team_id=TEAM_ID),
            make_user(OUTSIDER_ID, "Stone", team_id=OTHER_TEAM_ID),
            make_user(OTHER_MANAGER_ID, "Reyes", role=Role.MANAGER, team_id=OTHER_TEAM_ID),
        ],
        teams=[
            Team(team_id=TEAM_ID, team_name="Platform", description="Core team", manager_id=MANAGER_ID),
            Team(team_id=OTHER_TEAM_ID, team_name="Sales", manager_id=OTHER_MANAGER_ID),
        ],
    )


@pytest.fixture
def clocks_repo() -> InMemoryClockRepository:
    return InMemoryClockRepository()


@pytest.fixture
def absences_repo() -> InMemoryAbsenceRepository:
    return InMemoryAbsenceRepository()
