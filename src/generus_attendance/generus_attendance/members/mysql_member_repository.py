from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..core.enums import Gender, Level
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_where, db_cursor, fetchall, fetchone, in_clause
from .model import PROFILE_FIELDS, Member
from .repository import MemberRepository

_COLUMNS = """
    member_id, full_name, sambung_group, level, gender, birth_place, birth_date,
    profession, skill, status, notes, photo_url, barcode, is_active, created_at, updated_at
"""


def _to_member(r: dict) -> Member:
    return Member(
        member_id=int(r["member_id"]),
        full_name=r["full_name"],
        sambung_group=r["sambung_group"],
        level=Level(r["level"]),
        gender=Gender(r["gender"]) if r.get("gender") else None,
        birth_place=r.get("birth_place"),
        birth_date=r.get("birth_date"),
        profession=r.get("profession"),
        skill=r.get("skill"),
        status=r.get("status"),
        notes=r.get("notes"),
        photo_url=r.get("photo_url"),
        barcode=r.get("barcode"),
        is_active=bool(r.get("is_active", True)),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


def _db_value(value: Any) -> Any:
    return getattr(value, "value", value)


class MySQLMemberRepository(MemberRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _select_one(self, where: str, params: tuple) -> Optional[Member]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM members WHERE {where} LIMIT 1", params)
            r = fetchone(cur)
            return _to_member(r) if r else None

    def get_by_id(self, member_id: int) -> Optional[Member]:
        return self._select_one("member_id=%s", (int(member_id),))

    def get_by_barcode(self, barcode: str) -> Optional[Member]:
        return self._select_one("barcode=%s", (barcode,))

    def get_many(self, member_ids: Sequence[int]) -> Sequence[Member]:
        if not member_ids:
            return []
        ids = [int(i) for i in member_ids]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM members WHERE member_id IN ({in_clause(ids)})", tuple(ids))
            return [_to_member(r) for r in fetchall(cur)]

    def find_active_by_name_and_group(self, *, full_name: str, sambung_group: str) -> Optional[Member]:
        return self._select_one(
            "full_name=%s AND sambung_group=%s AND is_active=1 ORDER BY member_id",
            (full_name, sambung_group),
        )

    def find_active_for_login(self, *, full_name: str, level: Level, sambung_group: str) -> Optional[Member]:
        return self._select_one(
            "full_name=%s AND level=%s AND sambung_group=%s AND is_active=1 ORDER BY member_id",
            (full_name, level.value, sambung_group),
        )

    def create(self, fields: Mapping[str, Any]) -> int:
        cols = [c for c in PROFILE_FIELDS if c in fields]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO members({', '.join(cols)}, is_active) VALUES({in_clause(cols)}, 1)",
                tuple(_db_value(fields[c]) for c in cols),
            )
            return int(cur.lastrowid)

    def update_fields(self, member_id: int, fields: Mapping[str, Any]) -> bool:
        cols = [c for c in PROFILE_FIELDS if c in fields]
        if not cols:
            return self.get_by_id(member_id) is not None
        assignments = ", ".join(f"{c}=%s" for c in cols)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE members SET {assignments} WHERE member_id=%s",
                (*[_db_value(fields[c]) for c in cols], int(member_id)),
            )
            return cur.rowcount > 0

    def set_barcode(self, member_id: int, barcode: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE members SET barcode=%s WHERE member_id=%s", (barcode, int(member_id)))
            return cur.rowcount > 0

    def set_active(self, member_id: int, *, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE members SET is_active=%s WHERE member_id=%s", (int(is_active), int(member_id)))
            return cur.rowcount > 0

    def list_members(self, *, sambung_group: Optional[str] = None, include_inactive: bool = False) -> Sequence[Member]:
        clauses: list[str] = []
        params: list[object] = []
        if sambung_group is not None:
            clauses.append("sambung_group=%s")
            params.append(sambung_group)
        if not include_inactive:
            clauses.append("is_active=1")

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM members {build_where(clauses)} ORDER BY full_name ASC",
                tuple(params),
            )
            return [_to_member(r) for r in fetchall(cur)]

    def count(self, *, active_only: bool = False) -> int:
        where = "WHERE is_active=1" if active_only else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS n FROM members {where}")
            return int(fetchone(cur)["n"])

    def count_active_in_groups(self, groups: Sequence[str]) -> int:
        if not groups:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT COUNT(*) AS n FROM members WHERE is_active=1 AND sambung_group IN ({in_clause(groups)})",
                tuple(groups),
            )
            return int(fetchone(cur)["n"])
