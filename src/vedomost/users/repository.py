from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import Profile, UserAdminRow, UserCredentials


class UserRepository(Protocol):
    """Repository interface for profiles and their credentials.

    Note: the service layer depends on this interface, not on a concrete DB.
    """

    def get_profile(self, profile_id: str) -> Optional[Profile]:
        raise NotImplementedError

    def get_credentials_by_username(self, username: str) -> Optional[UserCredentials]:
        """Case-insensitive lookup."""
        raise NotImplementedError

    def create_user(
        self,
        *,
        profile_id: str,
        username: str,
        password_hash: str,
        full_name: str,
        role: Role,
        group_id: Optional[str],
    ) -> Profile:
        """Insert profile and credentials in one transaction."""
        raise NotImplementedError

    def update_user(
        self,
        *,
        profile_id: str,
        full_name: str,
        role: Role,
        group_id: Optional[str],
        username: Optional[str] = None,
        password_hash: Optional[str] = None,
    ) -> bool:
        raise NotImplementedError

    def delete_user(self, profile_id: str) -> bool:
        raise NotImplementedError

    def list_admin_view(self) -> Sequence[UserAdminRow]:
        raise NotImplementedError
