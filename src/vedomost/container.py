from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_TOKEN_DAYS
from .database.connection import DBConfig, DatabaseConnection
from .groups.mysql_group_repository import MySQLGroupRepository
from .groups.repository import GroupRepository
from .groups.service import GroupService
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .students.service import StudentService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService
from .users.tokens import TokenService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    groups_repo: GroupRepository
    students_repo: StudentRepository
    attendance_repo: AttendanceRepository

    auth_service: AuthService
    user_service: UserService
    group_service: GroupService
    student_service: StudentService
    attendance_service: AttendanceService

    conn: Optional[DatabaseConnection] = None


def build_services(
    *,
    users_repo: UserRepository,
    groups_repo: GroupRepository,
    students_repo: StudentRepository,
    attendance_repo: AttendanceRepository,
    secret_key: str,
    token_days: int = DEFAULT_TOKEN_DAYS,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services over any set of repositories (MySQL in the app, in-memory in tests)."""
    tokens = TokenService(secret_key, token_days=token_days)
    return Container(
        users_repo=users_repo,
        groups_repo=groups_repo,
        students_repo=students_repo,
        attendance_repo=attendance_repo,
        auth_service=AuthService(users_repo, tokens),
        user_service=UserService(users_repo, groups_repo),
        group_service=GroupService(groups_repo),
        student_service=StudentService(students_repo, groups_repo),
        attendance_service=AttendanceService(attendance_repo, students_repo),
        conn=conn,
    )


def build_container(*, db_config: dict, secret_key: str, token_days: int = DEFAULT_TOKEN_DAYS) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))
    return build_services(
        users_repo=MySQLUserRepository(conn),
        groups_repo=MySQLGroupRepository(conn),
        students_repo=MySQLStudentRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        secret_key=secret_key,
        token_days=token_days,
        conn=conn,
    )
