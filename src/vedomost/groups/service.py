from __future__ import annotations

import logging
import uuid
from typing import Sequence

from ..common.validators import require_non_empty
from ..core.exceptions import ConflictError, NotFoundError
from .model import Group
from .repository import GroupRepository

logger = logging.getLogger(__name__)


class GroupService:
    """Use case: manage student groups (admin)."""

    def __init__(self, groups: GroupRepository):
        self._groups = groups

    def list_groups(self) -> Sequence[Group]:
        return self._groups.list_all()

    def create_group(self, name: str) -> Group:
        name = require_non_empty(name, "Group name")
        if any(g.name.lower() == name.lower() for g in self._groups.list_all()):
            raise ConflictError(f"Group {name!r} already exists")

        group = self._groups.create(group_id=str(uuid.uuid4()), name=name)
        logger.info("Group created: %s (%s)", group.name, group.id)
        return group

    def delete_group(self, group_id: str) -> None:
        if not self._groups.delete_cascade(group_id):
            raise NotFoundError("Group not found")
        logger.info("Group deleted with its students and attendance: %s", group_id)
