from __future__ import annotations

from datetime import date
from typing import Any, Mapping, Optional, Sequence

from ..attendance.model import AttendanceEntry
from ..attendance.mysql_attendance_repository import record_attendance
from ..core.enums import Level
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_where, db_cursor, fetchall, fetchone
from .model import SESSION_FIELDS, KbmSession
from .repository import KbmRepository

_COLUMNS = """
    session_id, session_date, sambung_group, teacher_id, teacher_name, level, material, notes,
    created_at, updated_at
"""


def _to_session(r: dict) -> KbmSession:
    return KbmSession(
        session_id=int(r["session_id"]),
        session_date=r["session_date"],
        sambung_group=r["sambung_group"],
        teacher_id=int(r["teacher_id"]),
        teacher_name=r["teacher_name"],
        level=Level(r["level"]),
        material=r["material"],
        notes=r.get("notes"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


def _filters(
    *,
    teacher_id: Optional[int] = None,
    sambung_group: Optional[str] = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> tuple[str, tuple]:
    clauses: list[str] = []
    params: list[object] = []
    if teacher_id is not None:
        clauses.append("teacher_id=%s")
        params.append(int(teacher_id))
    if sambung_group is not None:
        clauses.append("sambung_group=%s")
        params.append(sambung_group)
    if start is not None:
        clauses.append("session_date >= %s")
        params.append(start)
    if end is not None:
        clauses.append("session_date <= %s")
        params.append(end)
    return build_where(clauses), tuple(params)


class MySQLKbmRepository(KbmRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_with_attendance(self, *, fields: Mapping[str, Any], attendance: Sequence[AttendanceEntry]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO kbm_sessions(session_date, sambung_group, teacher_id, teacher_name, level, material, notes)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    fields["session_date"],
                    fields["sambung_group"],
                    int(fields["teacher_id"]),
                    fields["teacher_name"],
                    fields["level"].value,
                    fields["material"],
                    fields.get("notes"),
                ),
            )
            session_id = int(cur.lastrowid)

            for entry in attendance:
                record_attendance(
                    cur,
                    session_id=session_id,
                    member_id=entry.member_id,
                    member_name=entry.member_name,
                    status=entry.status,
                )
            return session_id

    def get_by_id(self, session_id: int) -> Optional[KbmSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM kbm_sessions WHERE session_id=%s", (int(session_id),))
            r = fetchone(cur)
            return _to_session(r) if r else None

    def update_fields(self, session_id: int, fields: Mapping[str, Any]) -> bool:
        cols = [c for c in SESSION_FIELDS if c in fields]
        if not cols:
            return self.get_by_id(session_id) is not None
        values = [getattr(fields[c], "value", fields[c]) for c in cols]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE kbm_sessions SET {', '.join(f'{c}=%s' for c in cols)} WHERE session_id=%s",
                (*values, int(session_id)),
            )
            return cur.rowcount > 0

    def delete_with_attendance(self, session_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_marks WHERE session_id=%s", (int(session_id),))
            cur.execute("DELETE FROM kbm_sessions WHERE session_id=%s", (int(session_id),))
            return cur.rowcount > 0

    def list_sessions(
        self,
        *,
        teacher_id: Optional[int] = None,
        sambung_group: Optional[str] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[KbmSession]:
        where, params = _filters(teacher_id=teacher_id, sambung_group=sambung_group, start=start, end=end)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM kbm_sessions {where} ORDER BY session_date DESC, session_id DESC",
                params,
            )
            return [_to_session(r) for r in fetchall(cur)]

    def count(
        self,
        *,
        teacher_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> int:
        where, params = _filters(teacher_id=teacher_id, start=start, end=end)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS n FROM kbm_sessions {where}", params)
            return int(fetchone(cur)["n"])

    def groups_for_teacher(self, teacher_id: int) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT DISTINCT sambung_group FROM kbm_sessions WHERE teacher_id=%s ORDER BY sambung_group",
                (int(teacher_id),),
            )
            return [r["sambung_group"] for r in fetchall(cur)]

    def teacher_ids_between(self, *, start: date, end: date) -> set[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT DISTINCT teacher_id FROM kbm_sessions WHERE session_date BETWEEN %s AND %s",
                (start, end),
            )
            return {int(r["teacher_id"]) for r in fetchall(cur)}

    def recent(self, limit: int) -> Sequence[KbmSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM kbm_sessions ORDER BY created_at DESC, session_id DESC LIMIT %s",
                (int(limit),),
            )
            return [_to_session(r) for r in fetchall(cur)]
