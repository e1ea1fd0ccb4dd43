from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..core.exceptions import DuplicateCheckInTodayError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_where, db_cursor, fetchall, fetchone, is_duplicate_key
from .model import OnlineCheckIn
from .repository import CheckInRepository

logger = logging.getLogger(__name__)

_SELECT = """
    SELECT oc.checkin_id, oc.member_id, oc.barcode, oc.teacher_id, oc.sambung_group,
           oc.scanned_at, oc.checkin_date, m.full_name AS member_name
    FROM online_checkins oc
    LEFT JOIN members m ON m.member_id = oc.member_id
"""


def _to_checkin(r: dict) -> OnlineCheckIn:
    return OnlineCheckIn(
        checkin_id=int(r["checkin_id"]),
        member_id=int(r["member_id"]),
        barcode=r["barcode"],
        teacher_id=int(r["teacher_id"]) if r.get("teacher_id") is not None else None,
        sambung_group=r["sambung_group"],
        scanned_at=r["scanned_at"],
        checkin_date=r["checkin_date"],
        member_name=r.get("member_name"),
    )


class MySQLCheckInRepository(CheckInRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def exists_for_member_on(self, member_id: int, day: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT 1 AS hit FROM online_checkins WHERE member_id=%s AND checkin_date=%s LIMIT 1",
                (int(member_id), day),
            )
            return fetchone(cur) is not None

    def create(
        self,
        *,
        member_id: int,
        barcode: str,
        teacher_id: Optional[int],
        sambung_group: str,
        scanned_at: datetime,
    ) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO online_checkins(member_id, barcode, teacher_id, sambung_group, scanned_at, checkin_date)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(member_id),
                        barcode,
                        int(teacher_id) if teacher_id is not None else None,
                        sambung_group,
                        scanned_at,
                        scanned_at.date(),
                    ),
                )
                return int(cur.lastrowid)
        except IntegrityError as e:
            if is_duplicate_key(e):
                logger.info("concurrent duplicate check-in for member %s blocked by unique key", member_id)
                raise DuplicateCheckInTodayError("Member has already checked in today") from e
            raise

    def list_checkins(
        self,
        *,
        sambung_group: Optional[str] = None,
        member_id: Optional[int] = None,
    ) -> Sequence[OnlineCheckIn]:
        clauses: list[str] = []
        params: list[object] = []
        if sambung_group is not None:
            clauses.append("oc.sambung_group=%s")
            params.append(sambung_group)
        if member_id is not None:
            clauses.append("oc.member_id=%s")
            params.append(int(member_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_SELECT} {build_where(clauses)} ORDER BY oc.scanned_at DESC, oc.checkin_id DESC",
                tuple(params),
            )
            return [_to_checkin(r) for r in fetchall(cur)]

    def count(
        self,
        *,
        member_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> int:
        clauses: list[str] = []
        params: list[object] = []
        if member_id is not None:
            clauses.append("member_id=%s")
            params.append(int(member_id))
        if start is not None:
            clauses.append("checkin_date >= %s")
            params.append(start)
        if end is not None:
            clauses.append("checkin_date <= %s")
            params.append(end)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS n FROM online_checkins {build_where(clauses)}", tuple(params))
            return int(fetchone(cur)["n"])

    def recent(self, limit: int) -> Sequence[OnlineCheckIn]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} ORDER BY oc.scanned_at DESC, oc.checkin_id DESC LIMIT %s", (int(limit),))
            return [_to_checkin(r) for r in fetchall(cur)]
