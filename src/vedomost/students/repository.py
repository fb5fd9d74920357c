from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Student


class StudentRepository(Protocol):
    def list(self, *, group_id: Optional[str] = None) -> Sequence[Student]:
        raise NotImplementedError

    def get_by_id(self, student_id: str) -> Optional[Student]:
        raise NotImplementedError

    def create(self, *, student_id: str, full_name: str, group_id: str) -> Student:
        raise NotImplementedError

    def delete(self, student_id: str) -> bool:
        """Delete the student and the student's attendance records."""
        raise NotImplementedError
