from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..common.datetime_utils import today_iso
from ..core.enums import Role, Tab


@dataclass
class ClientState:
    """Everything the journal screen is rendered from.

    Mutated only by AttendanceStore actions.
    """

    profile: Optional[dict] = None
    groups: list[dict] = field(default_factory=list)
    selected_group_id: Optional[str] = None
    current_date: str = field(default_factory=today_iso)
    students: list[dict] = field(default_factory=list)
    attendance: list[dict] = field(default_factory=list)
    users: list[dict] = field(default_factory=list)

    active_tab: Tab = Tab.JOURNAL
    loading: bool = False
    loading_step: str = ""
    updating: set[str] = field(default_factory=set)
    error: Optional[str] = None

    @property
    def logged_in(self) -> bool:
        return self.profile is not None

    @property
    def role(self) -> Optional[Role]:
        if not self.profile:
            return None
        return Role(self.profile["role"])

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def sees_all_groups(self) -> bool:
        return self.role in (Role.ADMIN, Role.TUTOR)

    def attendance_for(self, student_id: str) -> Optional[dict]:
        return next((a for a in self.attendance if a.get("student_id") == student_id), None)

    def student(self, student_id: str) -> Optional[dict]:
        return next((s for s in self.students if s.get("id") == student_id), None)
