from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import optional_str, require_enum, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ConflictError, NotFoundError, ValidationError
from ..groups.repository import GroupRepository
from .model import Profile, UserAdminRow
from .repository import UserRepository
from .tokens import TokenService

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid username or password"


@dataclass(frozen=True)
class LoginResult:
    token: str
    profile: Profile

    def to_dict(self) -> dict:
        return {"token": self.token, "profile": self.profile.to_dict()}


class AuthService:
    """Use case: authenticate user (login) and resolve bearer tokens."""

    def __init__(self, users: UserRepository, tokens: TokenService):
        self._users = users
        self._tokens = tokens

    def login(self, username: Any, password: Any) -> LoginResult:
        if not isinstance(username, str) or not isinstance(password, str):
            raise AuthenticationError(INVALID_CREDENTIALS)
        if not username.strip() or not password:
            raise AuthenticationError(INVALID_CREDENTIALS)

        creds = self._users.get_credentials_by_username(username.strip())
        if not creds:
            logger.warning("Login failed for unknown username %r", username)
            raise AuthenticationError(INVALID_CREDENTIALS)

        try:
            ok = check_password_hash(creds.password_hash, password)
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            logger.warning("Login failed for %r: wrong password", username)
            raise AuthenticationError(INVALID_CREDENTIALS)

        profile = self._users.get_profile(creds.id)
        if not profile:
            raise AuthenticationError(INVALID_CREDENTIALS)

        logger.info("Login successful: %s (%s)", creds.username, profile.role.value)
        return LoginResult(token=self._tokens.issue(profile.id), profile=profile)

    def resolve_token(self, token: str) -> Profile:
        profile_id = self._tokens.verify(token)
        profile = self._users.get_profile(profile_id)
        if not profile:
            raise AuthenticationError("Profile no longer exists")
        return profile


class UserService:
    """Use case: manage logins and profiles (admin)."""

    def __init__(self, users: UserRepository, groups: GroupRepository):
        self._users = users
        self._groups = groups

    def list_admin_view(self) -> Sequence[UserAdminRow]:
        return self._users.list_admin_view()

    def _check_group(self, role: Role, group_id: Optional[str]) -> Optional[str]:
        if group_id and not self._groups.get_by_id(group_id):
            raise ValidationError("Group does not exist")
        if role == Role.STAROSTA and not group_id:
            raise ValidationError("A starosta must be assigned to a group")
        return group_id

    def _check_username_free(self, username: str, *, owner_id: Optional[str] = None) -> None:
        existing = self._users.get_credentials_by_username(username)
        if existing and existing.id != owner_id:
            raise ConflictError("Username is already taken")

    def create_user(
        self,
        *,
        username: Optional[str],
        password: Optional[str],
        full_name: Optional[str],
        role: Any = Role.STAROSTA.value,
        group_id: Optional[str] = None,
    ) -> Profile:
        username = require_non_empty(username, "Username")
        full_name = require_non_empty(full_name, "Full name")
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
        role = require_enum(role or Role.STAROSTA.value, Role, "role")
        group_id = self._check_group(role, group_id or None)
        self._check_username_free(username)

        profile = self._users.create_user(
            profile_id=str(uuid.uuid4()),
            username=username,
            password_hash=generate_password_hash(password),
            full_name=full_name,
            role=role,
            group_id=group_id,
        )
        logger.info("User created: %s (%s)", username, role.value)
        return profile

    def update_user(self, profile_id: str, changes: Mapping[str, Any]) -> Profile:
        """Partial update: absent fields keep their stored value."""
        current = self._users.get_profile(profile_id)
        if not current:
            raise NotFoundError("User not found")

        full_name = current.full_name
        if "full_name" in changes:
            full_name = require_non_empty(changes.get("full_name"), "Full name")
        role = require_enum(changes["role"], Role, "role") if "role" in changes else current.role
        group_id = (changes.get("group_id") or None) if "group_id" in changes else current.group_id
        group_id = self._check_group(role, group_id)

        username = optional_str(changes, "username")
        if username:
            self._check_username_free(username, owner_id=profile_id)

        password = changes.get("password") or None
        password_hash = None
        if password:
            require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
            password_hash = generate_password_hash(password)

        if not self._users.update_user(
            profile_id=profile_id,
            full_name=full_name,
            role=role,
            group_id=group_id,
            username=username,
            password_hash=password_hash,
        ):
            raise NotFoundError("User not found")

        logger.info("User updated: %s", profile_id)
        return Profile(id=profile_id, full_name=full_name, role=role, group_id=group_id, created_at=current.created_at)

    def delete_user(self, *, current: Profile, profile_id: str) -> None:
        if current.id == profile_id:
            raise ValidationError("You cannot delete your own account")
        if not self._users.delete_user(profile_id):
            raise NotFoundError("User not found")
        logger.info("User deleted: %s", profile_id)
