from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Optional, Sequence

from ..common.datetime_utils import parse_iso_date
from ..common.validators import require_enum, require_non_empty
from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..students.repository import StudentRepository
from ..users.model import Profile
from .model import AttendanceRecord, AttendanceReportRow
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

# Statuses that count as "was in class" when an export collapses them.
COLLAPSIBLE_STATUSES = frozenset({AttendanceStatus.LATE, AttendanceStatus.LEFT_EARLY})


@dataclass(frozen=True)
class AttendanceReport:
    start: date
    end: date
    rows: list[dict]


class AttendanceService:
    def __init__(self, attendance: AttendanceRepository, students: StudentRepository):
        self._attendance = attendance
        self._students = students

    @staticmethod
    def _sees_nothing(viewer: Profile) -> bool:
        return viewer.role == Role.STAROSTA and not viewer.group_id

    @staticmethod
    def _scope_group(viewer: Profile, group_id: Optional[str]) -> Optional[str]:
        # A starosta is pinned to their own group whatever they ask for.
        if viewer.role == Role.STAROSTA:
            return viewer.group_id
        return group_id or None

    def list_for(
        self,
        viewer: Profile,
        *,
        day: Optional[str] = None,
        group_id: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        parsed_day = parse_iso_date(day) if day else None
        if self._sees_nothing(viewer):
            return []
        return self._attendance.list(day=parsed_day, group_id=self._scope_group(viewer, group_id))

    def mark(
        self,
        viewer: Profile,
        *,
        student_id: Optional[str],
        day: Optional[str],
        status: Any,
        comment: Optional[str] = None,
        group_id: Optional[str] = None,
    ) -> AttendanceRecord:
        """Upsert the (student, day) record.

        Calling this again with the same arguments leaves exactly the same single row.
        """
        student_id = require_non_empty(student_id, "student_id")
        require_non_empty(day, "date")
        if status is None or status == "":
            raise ValidationError("status is required")

        parsed_day = parse_iso_date(day)
        status = require_enum(status, AttendanceStatus, "status")

        student = self._students.get_by_id(student_id)
        if not student:
            raise NotFoundError("Student not found")
        if group_id and group_id != student.group_id:
            raise ValidationError("group_id does not match the student's group")
        if viewer.role == Role.STAROSTA and viewer.group_id != student.group_id:
            raise AuthorizationError("You can only mark attendance for your own group")

        record = self._attendance.upsert(
            student_id=student.id,
            group_id=student.group_id,
            day=parsed_day,
            status=status,
            comment=comment,
        )
        logger.debug("Attendance %s %s -> %s", student.id, parsed_day, status.value)
        return record

    def build_report(
        self,
        viewer: Profile,
        *,
        start: Optional[str],
        end: Optional[str],
        group_id: Optional[str] = None,
        collapse_late: bool = False,
    ) -> AttendanceReport:
        start_date = parse_iso_date(require_non_empty(start, "from"))
        end_date = parse_iso_date(end) if end else start_date
        if end_date < start_date:
            raise ValidationError("'to' must not be before 'from'")

        rows: Sequence[AttendanceReportRow] = []
        if not self._sees_nothing(viewer):
            rows = self._attendance.get_report_rows(
                start_date=start_date,
                end_date=end_date,
                group_id=self._scope_group(viewer, group_id),
            )
        return AttendanceReport(
            start=start_date,
            end=end_date,
            rows=[self._to_export_row(r, collapse_late=collapse_late) for r in rows],
        )

    @staticmethod
    def _to_export_row(r: AttendanceReportRow, *, collapse_late: bool) -> dict:
        status = r.status
        if collapse_late and status in COLLAPSIBLE_STATUSES:
            status = AttendanceStatus.PRESENT
        return {
            "date": r.date.isoformat(),
            "group_name": r.group_name,
            "student_name": r.student_name,
            "status": status.value,
            "comment": r.comment or "",
        }
