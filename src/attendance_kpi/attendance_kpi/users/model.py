from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: an employee or manager.

    Plain data object; identity/credentials live in the external auth layer.
    """

    user_id: int
    email: str
    first_name: str
    last_name: str
    role: Role
    team_id: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "id": self.user_id,
            "email": self.email,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "role": self.role.value,
        }


@dataclass(frozen=True)
class Team:
    team_id: int
    team_name: str
    description: Optional[str] = None
    manager_id: Optional[int] = None
