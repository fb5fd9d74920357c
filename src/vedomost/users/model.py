from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Profile:
    """Domain entity: application-level user record.

    Note: Credentials live separately in ``UserCredentials`` (same id).
    """

    id: str
    full_name: str
    role: Role
    group_id: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "full_name": self.full_name,
            "role": self.role.value,
            "group_id": self.group_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class UserCredentials:
    id: str
    username: str
    password_hash: str


@dataclass(frozen=True)
class UserAdminRow:
    """Read-model for the admin users list (profile + login + group name)."""

    profile: Profile
    username: Optional[str]
    group_name: Optional[str]

    def to_dict(self) -> dict:
        data = self.profile.to_dict()
        data["username"] = self.username
        data["group_name"] = self.group_name
        return data
