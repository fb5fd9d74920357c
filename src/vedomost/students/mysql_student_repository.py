from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Student
from .repository import StudentRepository


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list(self, *, group_id: Optional[str] = None) -> Sequence[Student]:
        sql = "SELECT id, full_name, group_id FROM students"
        params: tuple = ()
        if group_id is not None:
            sql += " WHERE group_id=%s"
            params = (group_id,)
        sql += " ORDER BY full_name"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            rows = fetchall(cur)
            return [Student(id=str(r["id"]), full_name=r["full_name"], group_id=str(r["group_id"])) for r in rows]

    def get_by_id(self, student_id: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, full_name, group_id FROM students WHERE id=%s", (student_id,))
            r = fetchone(cur)
            if not r:
                return None
            return Student(id=str(r["id"]), full_name=r["full_name"], group_id=str(r["group_id"]))

    def create(self, *, student_id: str, full_name: str, group_id: str) -> Student:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO students(id, full_name, group_id) VALUES(%s,%s,%s)",
                (student_id, full_name, group_id),
            )
        return Student(id=student_id, full_name=full_name, group_id=group_id)

    def delete(self, student_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance WHERE student_id=%s", (student_id,))
            cur.execute("DELETE FROM students WHERE id=%s", (student_id,))
            return cur.rowcount > 0
