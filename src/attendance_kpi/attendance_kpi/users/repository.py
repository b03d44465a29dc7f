from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Team, User


class UserRepository(Protocol):
    """Read-only access to users and the manager -> team -> members mapping."""

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def find_by_ids(self, user_ids: Sequence[int]) -> Sequence[User]:
        raise NotImplementedError

    def get_team(self, team_id: int) -> Optional[Team]:
        raise NotImplementedError

    def find_teams_by_manager(self, manager_id: int) -> Sequence[Team]:
        raise NotImplementedError

    def find_members(self, team_ids: Sequence[int]) -> Sequence[User]:
        raise NotImplementedError
