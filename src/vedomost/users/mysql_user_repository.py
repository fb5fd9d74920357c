from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, translate_duplicate
from .model import Profile, UserAdminRow, UserCredentials
from .repository import UserRepository

USERNAME_TAKEN = "Username is already taken"


def _row_to_profile(r: dict) -> Profile:
    return Profile(
        id=str(r["id"]),
        full_name=r["full_name"],
        role=Role(r["role"]),
        group_id=r.get("group_id"),
        created_at=r.get("created_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_profile(self, profile_id: str) -> Optional[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, full_name, role, group_id, created_at FROM profiles WHERE id=%s",
                (profile_id,),
            )
            row = fetchone(cur)
            return _row_to_profile(row) if row else None

    def get_credentials_by_username(self, username: str) -> Optional[UserCredentials]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, username, password_hash FROM users WHERE LOWER(username)=LOWER(%s)",
                (username,),
            )
            row = fetchone(cur)
            if not row:
                return None
            return UserCredentials(id=str(row["id"]), username=row["username"], password_hash=row["password_hash"])

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
        with translate_duplicate(USERNAME_TAKEN), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO profiles(id, full_name, role, group_id) VALUES(%s,%s,%s,%s)",
                (profile_id, full_name, role.value, group_id),
            )
            cur.execute(
                "INSERT INTO users(id, username, password_hash) VALUES(%s,%s,%s)",
                (profile_id, username, password_hash),
            )
        return Profile(id=profile_id, full_name=full_name, role=role, group_id=group_id)

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
        with translate_duplicate(USERNAME_TAKEN), db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id FROM profiles WHERE id=%s", (profile_id,))
            if not fetchone(cur):
                return False
            cur.execute(
                "UPDATE profiles SET full_name=%s, role=%s, group_id=%s WHERE id=%s",
                (full_name, role.value, group_id, profile_id),
            )
            if username:
                cur.execute("UPDATE users SET username=%s WHERE id=%s", (username, profile_id))
            if password_hash:
                cur.execute("UPDATE users SET password_hash=%s WHERE id=%s", (password_hash, profile_id))
            return True

    def delete_user(self, profile_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE id=%s", (profile_id,))
            cur.execute("DELETE FROM profiles WHERE id=%s", (profile_id,))
            return cur.rowcount > 0

    def list_admin_view(self) -> Sequence[UserAdminRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT p.id, p.full_name, p.role, p.group_id, p.created_at,
                       u.username,
                       g.name AS group_name
                FROM profiles p
                LEFT JOIN users u ON u.id = p.id
                LEFT JOIN `groups` g ON g.id = p.group_id
                ORDER BY p.full_name
                """
            )
            rows = fetchall(cur)
            return [
                UserAdminRow(profile=_row_to_profile(r), username=r.get("username"), group_name=r.get("group_name"))
                for r in rows
            ]
