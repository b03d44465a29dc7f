from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import AbsenceStatus, AbsenceType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import AbsenceRecord
from .repository import AbsenceRepository

_COLUMNS = "absence_id, user_id, date, type, reason, status, approved_by, created_at, updated_at"


def _to_record(r: dict) -> AbsenceRecord:
    return AbsenceRecord(
        absence_id=int(r["absence_id"]),
        user_id=int(r["user_id"]),
        date=r["date"],
        type=AbsenceType(r["type"]),
        status=AbsenceStatus(r["status"]),
        reason=r.get("reason"),
        approved_by=int(r["approved_by"]) if r.get("approved_by") is not None else None,
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLAbsenceRepository(AbsenceRepository):
    """Absences keyed by the UNIQUE (user_id, date) index; writes rely on it instead of locks."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_for_day(self, cur, user_id: int, day: date) -> Optional[AbsenceRecord]:
        cur.execute(f"SELECT {_COLUMNS} FROM absences WHERE user_id=%s AND date=%s", (int(user_id), day))
        r = fetchone(cur)
        return _to_record(r) if r else None

    def upsert(self, *, user_id: int, day: date, type: AbsenceType, reason: Optional[str]) -> AbsenceRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO absences(user_id, date, type, reason, status)
                VALUES(%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE type=VALUES(type), reason=VALUES(reason), updated_at=CURRENT_TIMESTAMP
                """,
                (int(user_id), day, type.value, reason, AbsenceStatus.PENDING.value),
            )
            return self._get_for_day(cur, user_id, day)

    def create_if_missing(
        self, *, user_id: int, day: date, type: AbsenceType, reason: Optional[str]
    ) -> tuple[AbsenceRecord, bool]:
        with db_cursor(self._conn_factory) as (_, cur):
            # rowcount is 0 when the unique (user_id, date) key already exists.
            cur.execute(
                """
                INSERT IGNORE INTO absences(user_id, date, type, reason, status)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(user_id), day, type.value, reason, AbsenceStatus.PENDING.value),
            )
            created = cur.rowcount > 0
            return self._get_for_day(cur, user_id, day), created

    def get_by_id(self, absence_id: int) -> Optional[AbsenceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM absences WHERE absence_id=%s", (int(absence_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def find_by_user_ids(
        self,
        user_ids: Sequence[int],
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        status: Optional[AbsenceStatus] = None,
    ) -> Sequence[AbsenceRecord]:
        if not user_ids:
            return []

        clauses = [f"user_id IN ({in_clause(user_ids)})"]
        params: list[object] = [int(u) for u in user_ids]
        if start is not None:
            clauses.append("date >= %s")
            params.append(start)
        if end is not None:
            clauses.append("date <= %s")
            params.append(end)
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM absences WHERE {where} ORDER BY date DESC, user_id ASC",
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def update_details(self, *, absence_id: int, type: AbsenceType, reason: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE absences SET type=%s, reason=%s, updated_at=CURRENT_TIMESTAMP WHERE absence_id=%s",
                (type.value, reason, int(absence_id)),
            )
            return cur.rowcount > 0

    def decide(self, *, absence_id: int, status: AbsenceStatus, decided_by: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE absences
                SET status=%s, approved_by=%s, updated_at=CURRENT_TIMESTAMP
                WHERE absence_id=%s AND status=%s
                """,
                (status.value, int(decided_by), int(absence_id), AbsenceStatus.PENDING.value),
            )
            return cur.rowcount > 0

    def delete(self, absence_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM absences WHERE absence_id=%s", (int(absence_id),))
            return cur.rowcount > 0
