from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Profile role used for permission checks."""

    ADMIN = "admin"
    TUTOR = "tutor"
    STAROSTA = "starosta"


class AttendanceStatus(str, Enum):
    """Attendance mark stored per student per day."""

    PRESENT = "present"
    ABSENT = "absent"
    EXCUSED = "excused"
    LATE = "late"
    LEFT_EARLY = "left_early"


class Tab(str, Enum):
    JOURNAL = "journal"
    GROUPS = "groups"
    SETTINGS = "settings"
