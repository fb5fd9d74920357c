from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, translate_duplicate
from .model import Group
from .repository import GroupRepository


class MySQLGroupRepository(GroupRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Group]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name, created_at FROM `groups` ORDER BY name")
            rows = fetchall(cur)
            return [Group(id=str(r["id"]), name=r["name"], created_at=r.get("created_at")) for r in rows]

    def get_by_id(self, group_id: str) -> Optional[Group]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name, created_at FROM `groups` WHERE id=%s", (group_id,))
            r = fetchone(cur)
            if not r:
                return None
            return Group(id=str(r["id"]), name=r["name"], created_at=r.get("created_at"))

    def create(self, *, group_id: str, name: str) -> Group:
        with translate_duplicate(f"Group {name!r} already exists"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute("INSERT INTO `groups`(id, name) VALUES(%s,%s)", (group_id, name))
        return Group(id=group_id, name=name)

    def delete_cascade(self, group_id: str) -> bool:
        # Explicit deletes keep the cascade intact even on tables created without FKs.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM attendance WHERE group_id=%s OR student_id IN (SELECT id FROM students WHERE group_id=%s)",
                (group_id, group_id),
            )
            cur.execute("DELETE FROM students WHERE group_id=%s", (group_id,))
            cur.execute("UPDATE profiles SET group_id=NULL WHERE group_id=%s", (group_id,))
            cur.execute("DELETE FROM `groups` WHERE id=%s", (group_id,))
            return cur.rowcount > 0
