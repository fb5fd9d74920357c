from __future__ import annotations

import logging
import uuid
from typing import Optional, Sequence

from ..common.validators import require_non_empty
from ..core.enums import Role
from ..core.exceptions import NotFoundError
from ..groups.repository import GroupRepository
from ..users.model import Profile
from .model import Student
from .repository import StudentRepository

logger = logging.getLogger(__name__)


class StudentService:
    def __init__(self, students: StudentRepository, groups: GroupRepository):
        self._students = students
        self._groups = groups

    def list_for(self, viewer: Profile, *, group_id: Optional[str] = None) -> Sequence[Student]:
        """Students visible to ``viewer``; a starosta only ever sees their own group."""
        if viewer.role == Role.STAROSTA:
            if not viewer.group_id:
                return []
            group_id = viewer.group_id
        return self._students.list(group_id=group_id)

    def create_student(self, *, full_name: str, group_id: str) -> Student:
        full_name = require_non_empty(full_name, "Full name")
        group_id = require_non_empty(group_id, "group_id")
        if not self._groups.get_by_id(group_id):
            raise NotFoundError("Group not found")

        student = self._students.create(student_id=str(uuid.uuid4()), full_name=full_name, group_id=group_id)
        logger.info("Student created: %s in group %s", student.id, group_id)
        return student

    def delete_student(self, student_id: str) -> None:
        if not self._students.delete(student_id):
            raise NotFoundError("Student not found")
        logger.info("Student deleted: %s", student_id)
