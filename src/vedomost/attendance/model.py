from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance mark for one student on one day."""

    id: int
    student_id: str
    group_id: str
    date: date
    status: AttendanceStatus
    comment: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "student_id": self.student_id,
            "group_id": self.group_id,
            "date": self.date.isoformat(),
            "status": self.status.value,
            "comment": self.comment,
        }


@dataclass(frozen=True)
class AttendanceReportRow:
    """Read-model for exports (joined with student and group names)."""

    date: date
    group_name: str
    student_name: str
    status: AttendanceStatus
    comment: Optional[str] = None
