from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, AttendanceReportRow


class AttendanceRepository(Protocol):
    def list(self, *, day: Optional[date] = None, group_id: Optional[str] = None) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def upsert(
        self,
        *,
        student_id: str,
        group_id: str,
        day: date,
        status: AttendanceStatus,
        comment: Optional[str] = None,
    ) -> AttendanceRecord:
        """Insert, or update status (and comment when given) of the existing (student_id, day) row."""
        raise NotImplementedError

    def get_report_rows(
        self,
        *,
        start_date: date,
        end_date: date,
        group_id: Optional[str] = None,
    ) -> Sequence[AttendanceReportRow]:
        raise NotImplementedError
