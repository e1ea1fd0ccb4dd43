from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_where, db_cursor, fetchall, fetchone
from .model import AttendanceMark, StatusCounts
from .repository import AttendanceRepository

_SELECT = """
    SELECT am.attendance_id, am.session_id, am.member_id, am.member_name, am.status, am.created_at,
           ks.session_date
    FROM attendance_marks am
    JOIN kbm_sessions ks ON ks.session_id = am.session_id
"""


def _to_mark(r: dict) -> AttendanceMark:
    return AttendanceMark(
        attendance_id=int(r["attendance_id"]),
        session_id=int(r["session_id"]),
        member_id=int(r["member_id"]),
        member_name=r["member_name"],
        status=AttendanceStatus(r["status"]),
        created_at=r.get("created_at"),
        session_date=r.get("session_date"),
    )


def record_attendance(cur, *, session_id: int, member_id: int, member_name: str, status: AttendanceStatus) -> int:
    """Insert one mark on the caller's cursor, inside the session-create transaction."""

    cur.execute(
        """
        INSERT INTO attendance_marks(session_id, member_id, member_name, status)
        VALUES(%s,%s,%s,%s)
        """,
        (int(session_id), int(member_id), member_name, status.value),
    )
    return int(cur.lastrowid)


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceMark]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE am.attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _to_mark(r) if r else None

    def update_status(self, attendance_id: int, status: AttendanceStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance_marks SET status=%s WHERE attendance_id=%s",
                (status.value, int(attendance_id)),
            )
            return cur.rowcount > 0

    def list_by_session(self, session_id: int) -> Sequence[AttendanceMark]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE am.session_id=%s ORDER BY am.member_name", (int(session_id),))
            return [_to_mark(r) for r in fetchall(cur)]

    def list_by_member(self, member_id: int) -> Sequence[AttendanceMark]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE am.member_id=%s ORDER BY ks.session_date DESC", (int(member_id),))
            return [_to_mark(r) for r in fetchall(cur)]

    def list_by_date_range(self, *, start: date, end: date) -> Sequence[AttendanceMark]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_SELECT} WHERE ks.session_date BETWEEN %s AND %s ORDER BY ks.session_date DESC",
                (start, end),
            )
            return [_to_mark(r) for r in fetchall(cur)]

    def count_by_status(
        self,
        *,
        member_id: Optional[int] = None,
        teacher_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> StatusCounts:
        clauses: list[str] = []
        params: list[object] = []
        if member_id is not None:
            clauses.append("am.member_id=%s")
            params.append(int(member_id))
        if teacher_id is not None:
            clauses.append("ks.teacher_id=%s")
            params.append(int(teacher_id))
        if start is not None:
            clauses.append("ks.session_date >= %s")
            params.append(start)
        if end is not None:
            clauses.append("ks.session_date <= %s")
            params.append(end)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT am.status, COUNT(*) AS n
                FROM attendance_marks am
                JOIN kbm_sessions ks ON ks.session_id = am.session_id
                {build_where(clauses)}
                GROUP BY am.status
                """,
                tuple(params),
            )
            by_status = {AttendanceStatus(r["status"]): int(r["n"]) for r in fetchall(cur)}

        return StatusCounts(
            present=by_status.get(AttendanceStatus.PRESENT, 0),
            sick=by_status.get(AttendanceStatus.SICK, 0),
            permitted=by_status.get(AttendanceStatus.PERMITTED, 0),
            absent=by_status.get(AttendanceStatus.ABSENT, 0),
        )
