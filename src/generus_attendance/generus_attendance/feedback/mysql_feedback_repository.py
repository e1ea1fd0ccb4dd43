from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import FeedbackUserType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_where, db_cursor, fetchall, fetchone
from .model import Feedback
from .repository import FeedbackRepository

_COLUMNS = "feedback_id, user_type, user_id, user_name, message, created_at, is_read"


def _to_feedback(r: dict) -> Feedback:
    return Feedback(
        feedback_id=int(r["feedback_id"]),
        user_type=FeedbackUserType(r["user_type"]),
        user_id=int(r["user_id"]),
        user_name=r["user_name"],
        message=r["message"],
        created_at=r.get("created_at"),
        is_read=bool(r.get("is_read")),
    )


class MySQLFeedbackRepository(FeedbackRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, user_type: FeedbackUserType, user_id: int, user_name: str, message: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO feedback(user_type, user_id, user_name, message) VALUES(%s,%s,%s,%s)",
                (user_type.value, int(user_id), user_name, message),
            )
            return int(cur.lastrowid)

    def get_by_id(self, feedback_id: int) -> Optional[Feedback]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM feedback WHERE feedback_id=%s", (int(feedback_id),))
            r = fetchone(cur)
            return _to_feedback(r) if r else None

    def mark_read(self, feedback_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE feedback SET is_read=1 WHERE feedback_id=%s", (int(feedback_id),))
            return cur.rowcount > 0

    def count_unread(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM feedback WHERE is_read=0")
            return int(fetchone(cur)["n"])

    def delete(self, feedback_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM feedback WHERE feedback_id=%s", (int(feedback_id),))
            return cur.rowcount > 0

    def list_feedback(
        self,
        *,
        user_type: Optional[FeedbackUserType] = None,
        user_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[Feedback]:
        clauses: list[str] = []
        params: list[object] = []
        if user_type is not None:
            clauses.append("user_type=%s")
            params.append(user_type.value)
        if user_id is not None:
            clauses.append("user_id=%s")
            params.append(int(user_id))
        if start is not None:
            clauses.append("DATE(created_at) >= %s")
            params.append(start)
        if end is not None:
            clauses.append("DATE(created_at) <= %s")
            params.append(end)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM feedback {build_where(clauses)} ORDER BY created_at DESC, feedback_id DESC",
                tuple(params),
            )
            return [_to_feedback(r) for r in fetchall(cur)]
