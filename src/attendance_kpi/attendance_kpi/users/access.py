from __future__ import annotations

from ..core.enums import Role
from .model import User
from .repository import UserRepository


def leads(users: UserRepository, manager: User, employee: User) -> bool:
    """True when manager is the manager of a team the employee is on."""
    if manager.role != Role.MANAGER or employee.team_id is None:
        return False
    return employee.team_id in {t.team_id for t in users.find_teams_by_manager(manager.user_id)}


def manages(users: UserRepository, manager: User, employee: User) -> bool:
    """True when manager leads (or belongs to) the team the employee is on."""
    if manager.role != Role.MANAGER or employee.team_id is None:
        return False
    return employee.team_id == manager.team_id or leads(users, manager, employee)


def can_view(users: UserRepository, requester: User, employee: User) -> bool:
    return requester.user_id == employee.user_id or manages(users, requester, employee)
