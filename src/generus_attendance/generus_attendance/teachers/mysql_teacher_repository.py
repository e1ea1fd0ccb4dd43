from __future__ import annotations

from typing import AbstractSet, Any, Mapping, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import PROFILE_FIELDS, Coordinator, Teacher
from .repository import CoordinatorRepository, TeacherRepository


def _to_teacher(r: dict) -> Teacher:
    return Teacher(
        teacher_id=int(r["teacher_id"]),
        full_name=r["full_name"],
        email=r["email"],
        username=r["username"],
        password_hash=r["password_hash"],
        is_active=bool(r.get("is_active", True)),
        created_at=r.get("created_at"),
    )


def _to_coordinator(r: dict) -> Coordinator:
    return Coordinator(
        coordinator_id=int(r["coordinator_id"]),
        name=r["name"],
        access_code_hash=r["access_code_hash"],
        is_active=bool(r.get("is_active", True)),
        created_at=r.get("created_at"),
    )


class MySQLTeacherRepository(TeacherRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_where(self, column: str, value: object) -> Optional[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT teacher_id, full_name, email, username, password_hash, is_active, created_at
                FROM teachers
                WHERE {column}=%s
                """,
                (value,),
            )
            r = fetchone(cur)
            return _to_teacher(r) if r else None

    def get_by_id(self, teacher_id: int) -> Optional[Teacher]:
        return self._get_where("teacher_id", int(teacher_id))

    def get_by_email(self, email: str) -> Optional[Teacher]:
        return self._get_where("email", email)

    def get_by_username(self, username: str) -> Optional[Teacher]:
        return self._get_where("username", username)

    def create(self, *, full_name: str, email: str, username: str, password_hash: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO teachers(full_name, email, username, password_hash, is_active)
                VALUES(%s,%s,%s,%s,1)
                """,
                (full_name, email, username, password_hash),
            )
            return int(cur.lastrowid)

    def update_fields(self, teacher_id: int, fields: Mapping[str, Any]) -> bool:
        cols = [c for c in PROFILE_FIELDS if c in fields]
        if not cols:
            return self.get_by_id(teacher_id) is not None
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE teachers SET {', '.join(f'{c}=%s' for c in cols)} WHERE teacher_id=%s",
                (*(fields[c] for c in cols), int(teacher_id)),
            )
            return cur.rowcount > 0

    def set_password_hash(self, teacher_id: int, password_hash: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE teachers SET password_hash=%s WHERE teacher_id=%s", (password_hash, int(teacher_id)))
            return cur.rowcount > 0

    def set_active(self, teacher_id: int, *, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE teachers SET is_active=%s WHERE teacher_id=%s", (int(is_active), int(teacher_id)))
            return cur.rowcount > 0

    def list_active(self) -> Sequence[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT teacher_id, full_name, email, username, password_hash, is_active, created_at
                FROM teachers
                WHERE is_active=1
                ORDER BY full_name
                """
            )
            return [_to_teacher(r) for r in fetchall(cur)]

    def count_active(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM teachers WHERE is_active=1")
            return int(fetchone(cur)["n"])

    def active_ids(self) -> AbstractSet[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT teacher_id FROM teachers WHERE is_active=1")
            return {int(r["teacher_id"]) for r in fetchall(cur)}


class MySQLCoordinatorRepository(CoordinatorRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, coordinator_id: int) -> Optional[Coordinator]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT coordinator_id, name, access_code_hash, is_active, created_at FROM coordinators WHERE coordinator_id=%s",
                (int(coordinator_id),),
            )
            r = fetchone(cur)
            return _to_coordinator(r) if r else None

    def get_by_name(self, name: str) -> Optional[Coordinator]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT coordinator_id, name, access_code_hash, is_active, created_at FROM coordinators WHERE name=%s",
                (name,),
            )
            r = fetchone(cur)
            return _to_coordinator(r) if r else None
