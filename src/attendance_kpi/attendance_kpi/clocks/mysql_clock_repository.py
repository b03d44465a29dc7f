from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Optional, Sequence

from ..core.enums import ClockStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import ClockEvent
from .repository import ClockRepository


def _to_event(r: dict) -> ClockEvent:
    return ClockEvent(
        clock_id=int(r["clock_id"]),
        user_id=int(r["user_id"]),
        clock_time=r["clock_time"],
        status=ClockStatus(r["status"]),
        created_at=r.get("created_at"),
    )


class MySQLClockRepository(ClockRepository):
    """Punches live in a naive DATETIME column holding organization-local time."""

    def __init__(self, conn_factory: DatabaseConnection, *, tz: tzinfo):
        self._conn_factory = conn_factory
        self._tz = tz

    def _naive(self, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value
        return value.astimezone(self._tz).replace(tzinfo=None)

    def find_by_user_ids(self, user_ids: Sequence[int], *, start: datetime, end: datetime) -> Sequence[ClockEvent]:
        if not user_ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT clock_id, user_id, clock_time, status, created_at
                FROM clocks
                WHERE user_id IN ({in_clause(user_ids)})
                  AND clock_time >= %s AND clock_time < %s
                ORDER BY user_id ASC, clock_time ASC
                """,
                tuple(int(u) for u in user_ids) + (self._naive(start), self._naive(end)),
            )
            return [_to_event(r) for r in fetchall(cur)]

    def get_last_for_user(self, user_id: int) -> Optional[ClockEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT clock_id, user_id, clock_time, status, created_at
                FROM clocks
                WHERE user_id=%s
                ORDER BY clock_time DESC, clock_id DESC
                LIMIT 1
                """,
                (int(user_id),),
            )
            r = fetchone(cur)
            return _to_event(r) if r else None

    def create(self, *, user_id: int, clock_time: datetime, status: ClockStatus) -> ClockEvent:
        naive_time = self._naive(clock_time)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO clocks(user_id, clock_time, status) VALUES(%s,%s,%s)",
                (int(user_id), naive_time, status.value),
            )
            clock_id = int(cur.lastrowid)
        return ClockEvent(clock_id=clock_id, user_id=int(user_id), clock_time=naive_time, status=status)
