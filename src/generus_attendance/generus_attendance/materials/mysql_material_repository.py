from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import MATERIAL_FIELDS, Material
from .repository import MaterialRepository

_SELECT = """
    SELECT mt.material_id, mt.title, mt.description, mt.content, mt.link_url, mt.file_url,
           mt.coordinator_id, mt.created_at, mt.updated_at, c.name AS coordinator_name
    FROM materials mt
    LEFT JOIN coordinators c ON c.coordinator_id = mt.coordinator_id
"""


def _to_material(r: dict) -> Material:
    return Material(
        material_id=int(r["material_id"]),
        title=r["title"],
        coordinator_id=int(r["coordinator_id"]),
        description=r.get("description"),
        content=r.get("content"),
        link_url=r.get("link_url"),
        file_url=r.get("file_url"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
        coordinator_name=r.get("coordinator_name"),
    )


class MySQLMaterialRepository(MaterialRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, coordinator_id: int, fields: Mapping[str, Any]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO materials(title, description, content, link_url, file_url, coordinator_id)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (*(fields.get(c) for c in MATERIAL_FIELDS), int(coordinator_id)),
            )
            return int(cur.lastrowid)

    def get_by_id(self, material_id: int) -> Optional[Material]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE mt.material_id=%s", (int(material_id),))
            r = fetchone(cur)
            return _to_material(r) if r else None

    def update_fields(self, material_id: int, fields: Mapping[str, Any]) -> bool:
        cols = [c for c in MATERIAL_FIELDS if c in fields]
        if not cols:
            return self.get_by_id(material_id) is not None
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE materials SET {', '.join(f'{c}=%s' for c in cols)} WHERE material_id=%s",
                (*(fields[c] for c in cols), int(material_id)),
            )
            return cur.rowcount > 0

    def delete(self, material_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM materials WHERE material_id=%s", (int(material_id),))
            return cur.rowcount > 0

    def list_all(self) -> Sequence[Material]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} ORDER BY mt.created_at DESC, mt.material_id DESC")
            return [_to_material(r) for r in fetchall(cur)]

    def list_by_coordinator(self, coordinator_id: int) -> Sequence[Material]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_SELECT} WHERE mt.coordinator_id=%s ORDER BY mt.created_at DESC, mt.material_id DESC",
                (int(coordinator_id),),
            )
            return [_to_material(r) for r in fetchall(cur)]
