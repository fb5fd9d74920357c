from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Group


class GroupRepository(Protocol):
    def list_all(self) -> Sequence[Group]:
        raise NotImplementedError

    def get_by_id(self, group_id: str) -> Optional[Group]:
        raise NotImplementedError

    def create(self, *, group_id: str, name: str) -> Group:
        raise NotImplementedError

    def delete_cascade(self, group_id: str) -> bool:
        """Delete the group together with its students and their attendance.

        Profiles attached to the group are detached (group_id set to NULL).
        """
        raise NotImplementedError
