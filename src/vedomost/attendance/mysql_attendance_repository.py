from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord, AttendanceReportRow
from .repository import AttendanceRepository


def _row_to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        id=int(r["id"]),
        student_id=str(r["student_id"]),
        group_id=str(r["group_id"]),
        date=r["date"],
        status=AttendanceStatus(r["status"]),
        comment=r.get("comment"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list(self, *, day: Optional[date] = None, group_id: Optional[str] = None) -> Sequence[AttendanceRecord]:
        clauses = ["1=1"]
        params: list[object] = []
        if day is not None:
            clauses.append("date=%s")
            params.append(day)
        if group_id is not None:
            clauses.append("group_id=%s")
            params.append(group_id)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT id, student_id, group_id, date, status, comment
                FROM attendance
                WHERE {where}
                ORDER BY date, id
                """,
                tuple(params),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def upsert(
        self,
        *,
        student_id: str,
        group_id: str,
        day: date,
        status: AttendanceStatus,
        comment: Optional[str] = None,
    ) -> AttendanceRecord:
        # UNIQUE(student_id, date) turns the insert into an update of the existing row.
        # A NULL comment keeps whatever comment is already stored.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance(student_id, group_id, date, status, comment)
                VALUES(%s,%s,%s,%s,%s) AS new
                ON DUPLICATE KEY UPDATE
                    group_id=new.group_id,
                    status=new.status,
                    comment=COALESCE(new.comment, attendance.comment)
                """,
                (student_id, group_id, day, status.value, comment),
            )
            cur.execute(
                """
                SELECT id, student_id, group_id, date, status, comment
                FROM attendance
                WHERE student_id=%s AND date=%s
                """,
                (student_id, day),
            )
            return _row_to_record(fetchone(cur))

    def get_report_rows(
        self,
        *,
        start_date: date,
        end_date: date,
        group_id: Optional[str] = None,
    ) -> Sequence[AttendanceReportRow]:
        clauses = ["a.date BETWEEN %s AND %s"]
        params: list[object] = [start_date, end_date]
        if group_id is not None:
            clauses.append("a.group_id=%s")
            params.append(group_id)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT a.date, g.name AS group_name, s.full_name AS student_name, a.status, a.comment
                FROM attendance a
                JOIN students s ON s.id = a.student_id
                JOIN `groups` g ON g.id = a.group_id
                WHERE {where}
                ORDER BY a.date ASC, g.name ASC, s.full_name ASC
                """,
                tuple(params),
            )
            return [
                AttendanceReportRow(
                    date=r["date"],
                    group_name=r["group_name"],
                    student_name=r["student_name"],
                    status=AttendanceStatus(r["status"]),
                    comment=r.get("comment"),
                )
                for r in fetchall(cur)
            ]
