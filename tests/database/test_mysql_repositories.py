from __future__ import annotations

from datetime import date

import mysql.connector
import pytest

from vedomost.attendance.mysql_attendance_repository import MySQLAttendanceRepository
from vedomost.container import build_container
from vedomost.core.enums import AttendanceStatus, Role
from vedomost.core.exceptions import ConflictError
from vedomost.database.bootstrap import _iter_sql_statements, _strip_create_db_and_use
from vedomost.groups.mysql_group_repository import MySQLGroupRepository
from vedomost.users.mysql_user_repository import MySQLUserRepository


class RecordingCursor:
    def __init__(self, conn):
        self._conn = conn
        self.rowcount = 1
        self.lastrowid = 1

    def execute(self, sql, params=()):
        self._conn.executed.append((" ".join(sql.split()), tuple(params)))
        if self._conn.raise_on_execute:
            raise self._conn.raise_on_execute

    def fetchone(self):
        return self._conn.rows.pop(0) if self._conn.rows else None

    def fetchall(self):
        rows, self._conn.rows = self._conn.rows, []
        return rows

    def close(self):
        pass


class RecordingConnection:
    def __init__(self, rows=None, raise_on_execute=None):
        self.rows = list(rows or [])
        self.raise_on_execute = raise_on_execute
        self.executed: list[tuple[str, tuple]] = []
        self.committed = False
        self.rolled_back = False
        self.connects = 0

    def cursor(self, dictionary=True):
        return RecordingCursor(self)

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        pass


class FakeConnFactory:
    def __init__(self, conn: RecordingConnection):
        self.conn = conn

    def connect(self):
        self.conn.connects += 1
        return self.conn


def test_upsert_uses_on_duplicate_key_in_one_transaction():
    stored = {
        "id": 7,
        "student_id": "s1",
        "group_id": "g1",
        "date": date(2024, 1, 10),
        "status": "absent",
        "comment": None,
    }
    conn = RecordingConnection(rows=[stored])
    repo = MySQLAttendanceRepository(FakeConnFactory(conn))

    record = repo.upsert(student_id="s1", group_id="g1", day=date(2024, 1, 10), status=AttendanceStatus.ABSENT)

    insert_sql, insert_params = conn.executed[0]
    assert "ON DUPLICATE KEY UPDATE" in insert_sql
    assert "AS new" in insert_sql
    assert "comment=COALESCE(new.comment, attendance.comment)" in insert_sql
    assert insert_params == ("s1", "g1", date(2024, 1, 10), "absent", None)
    assert conn.connects == 1 and conn.committed
    assert record.id == 7 and record.status == AttendanceStatus.ABSENT


def test_attendance_list_builds_filters():
    conn = RecordingConnection(rows=[])
    repo = MySQLAttendanceRepository(FakeConnFactory(conn))

    repo.list(day=date(2024, 1, 10), group_id="g1")

    sql, params = conn.executed[0]
    assert "WHERE 1=1 AND date=%s AND group_id=%s" in sql
    assert params == (date(2024, 1, 10), "g1")


def test_group_delete_cascade_runs_in_one_transaction():
    conn = RecordingConnection()
    repo = MySQLGroupRepository(FakeConnFactory(conn))

    assert repo.delete_cascade("g1")

    statements = [sql.split(" WHERE")[0] for sql, _ in conn.executed]
    assert statements == [
        "DELETE FROM attendance",
        "DELETE FROM students",
        "UPDATE profiles SET group_id=NULL",
        "DELETE FROM `groups`",
    ]
    assert conn.connects == 1 and conn.committed


def test_duplicate_username_becomes_conflict_and_rolls_back():
    dup = mysql.connector.IntegrityError(msg="Duplicate entry", errno=1062)
    conn = RecordingConnection(raise_on_execute=dup)
    repo = MySQLUserRepository(FakeConnFactory(conn))

    with pytest.raises(ConflictError):
        repo.create_user(
            profile_id="p1",
            username="admin",
            password_hash="x",
            full_name="A",
            role=Role.ADMIN,
            group_id=None,
        )

    assert conn.rolled_back
    assert not conn.committed


def test_username_lookup_is_case_insensitive_sql():
    conn = RecordingConnection(rows=[{"id": "p1", "username": "Admin", "password_hash": "h"}])
    repo = MySQLUserRepository(FakeConnFactory(conn))

    creds = repo.get_credentials_by_username("ADMIN")

    assert "LOWER(username)=LOWER(%s)" in conn.executed[0][0]
    assert creds.id == "p1"


def test_schema_splitter_skips_comments_and_use():
    sql = _strip_create_db_and_use(
        "CREATE DATABASE IF NOT EXISTS x;\nUSE x;\n-- note; with semicolon\nCREATE TABLE a (v VARCHAR(3) DEFAULT ';');\nCREATE TABLE b (id INT);\n"
    )

    statements = list(_iter_sql_statements(sql))

    assert statements == ["CREATE TABLE a (v VARCHAR(3) DEFAULT ';')", "CREATE TABLE b (id INT)"]


def test_build_container_shares_one_connection_factory(monkeypatch):
    monkeypatch.setattr(mysql.connector, "connect", lambda **kw: pytest.fail("no connection expected"))

    container = build_container(
        db_config={"host": "db", "port": "3307", "user": "app", "password": "pw", "database": "journal"},
        secret_key="k" * 32,
    )

    assert container.conn.config.host == "db"
    assert container.conn.config.port == 3307
    assert container.conn.config.database == "journal"
    assert container.attendance_repo._conn_factory is container.conn
    assert container.users_repo._conn_factory is container.conn
