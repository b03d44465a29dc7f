from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import Team, User
from .repository import UserRepository

_USER_COLUMNS = "user_id, email, first_name, last_name, role, team_id"
_TEAM_COLUMNS = "team_id, team_name, description, manager_id"


def _to_user(r: dict) -> User:
    return User(
        user_id=int(r["user_id"]),
        email=r["email"],
        first_name=r["first_name"],
        last_name=r["last_name"],
        role=Role(r["role"]),
        team_id=int(r["team_id"]) if r.get("team_id") is not None else None,
    )


def _to_team(r: dict) -> Team:
    return Team(
        team_id=int(r["team_id"]),
        team_name=r["team_name"],
        description=r.get("description"),
        manager_id=int(r["manager_id"]) if r.get("manager_id") is not None else None,
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
            r = fetchone(cur)
            return _to_user(r) if r else None

    def find_by_ids(self, user_ids: Sequence[int]) -> Sequence[User]:
        if not user_ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_USER_COLUMNS} FROM users WHERE user_id IN ({in_clause(user_ids)}) ORDER BY last_name ASC",
                tuple(int(u) for u in user_ids),
            )
            return [_to_user(r) for r in fetchall(cur)]

    def get_team(self, team_id: int) -> Optional[Team]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_TEAM_COLUMNS} FROM teams WHERE team_id=%s", (int(team_id),))
            r = fetchone(cur)
            return _to_team(r) if r else None

    def find_teams_by_manager(self, manager_id: int) -> Sequence[Team]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_TEAM_COLUMNS} FROM teams WHERE manager_id=%s ORDER BY team_id ASC",
                (int(manager_id),),
            )
            return [_to_team(r) for r in fetchall(cur)]

    def find_members(self, team_ids: Sequence[int]) -> Sequence[User]:
        if not team_ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_USER_COLUMNS}
                FROM users
                WHERE team_id IN ({in_clause(team_ids)})
                ORDER BY last_name ASC, user_id ASC
                """,
                tuple(int(t) for t in team_ids),
            )
            return [_to_user(r) for r in fetchall(cur)]
