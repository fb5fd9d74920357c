from __future__ import annotations

from datetime import date
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from vedomost.attendance.model import AttendanceRecord, AttendanceReportRow
from vedomost.container import build_services
from vedomost.core.enums import Role
from vedomost.core.exceptions import ConflictError
from vedomost.groups.model import Group
from vedomost.main import create_app
from vedomost.students.model import Student
from vedomost.users.model import Profile, UserAdminRow, UserCredentials

# pbkdf2 keeps hashing fast in tests
FAST_HASH = "pbkdf2:sha256:1000"
TEST_SECRET = "test-secret-key-0123456789abcdef0123"


class FakeDatabase:
    """Shared tables so cascades behave like the MySQL schema."""

    def __init__(self):
        self.groups: dict[str, Group] = {}
        self.profiles: dict[str, Profile] = {}
        self.credentials: dict[str, UserCredentials] = {}
        self.students: dict[str, Student] = {}
        self.attendance: dict[tuple[str, date], AttendanceRecord] = {}
        self.next_attendance_id = 0


class InMemoryUsers:
    def __init__(self, db: FakeDatabase):
        self._db = db

    def get_profile(self, profile_id):
        return self._db.profiles.get(profile_id)

    def get_credentials_by_username(self, username):
        return next(
            (c for c in self._db.credentials.values() if c.username.lower() == username.lower()),
            None,
        )

    def create_user(self, *, profile_id, username, password_hash, full_name, role, group_id):
        if self.get_credentials_by_username(username):
            raise ConflictError("Username is already taken")
        profile = Profile(id=profile_id, full_name=full_name, role=role, group_id=group_id)
        self._db.profiles[profile_id] = profile
        self._db.credentials[profile_id] = UserCredentials(id=profile_id, username=username, password_hash=password_hash)
        return profile

    def update_user(self, *, profile_id, full_name, role, group_id, username=None, password_hash=None):
        if profile_id not in self._db.profiles:
            return False
        old = self._db.profiles[profile_id]
        self._db.profiles[profile_id] = Profile(
            id=profile_id, full_name=full_name, role=role, group_id=group_id, created_at=old.created_at
        )
        creds = self._db.credentials[profile_id]
        self._db.credentials[profile_id] = UserCredentials(
            id=profile_id,
            username=username or creds.username,
            password_hash=password_hash or creds.password_hash,
        )
        return True

    def delete_user(self, profile_id):
        self._db.credentials.pop(profile_id, None)
        return self._db.profiles.pop(profile_id, None) is not None

    def list_admin_view(self):
        rows = []
        for p in sorted(self._db.profiles.values(), key=lambda p: p.full_name):
            creds = self._db.credentials.get(p.id)
            group = self._db.groups.get(p.group_id) if p.group_id else None
            rows.append(
                UserAdminRow(profile=p, username=creds.username if creds else None, group_name=group.name if group else None)
            )
        return rows


class InMemoryGroups:
    def __init__(self, db: FakeDatabase):
        self._db = db

    def list_all(self):
        return sorted(self._db.groups.values(), key=lambda g: g.name)

    def get_by_id(self, group_id):
        return self._db.groups.get(group_id)

    def create(self, *, group_id, name):
        group = Group(id=group_id, name=name)
        self._db.groups[group_id] = group
        return group

    def delete_cascade(self, group_id):
        if group_id not in self._db.groups:
            return False
        student_ids = {s.id for s in self._db.students.values() if s.group_id == group_id}
        for key, rec in list(self._db.attendance.items()):
            if rec.group_id == group_id or rec.student_id in student_ids:
                del self._db.attendance[key]
        for sid in student_ids:
            del self._db.students[sid]
        for pid, p in list(self._db.profiles.items()):
            if p.group_id == group_id:
                self._db.profiles[pid] = Profile(id=p.id, full_name=p.full_name, role=p.role, group_id=None)
        del self._db.groups[group_id]
        return True


class InMemoryStudents:
    def __init__(self, db: FakeDatabase):
        self._db = db

    def list(self, *, group_id=None):
        items = [s for s in self._db.students.values() if group_id is None or s.group_id == group_id]
        return sorted(items, key=lambda s: s.full_name)

    def get_by_id(self, student_id):
        return self._db.students.get(student_id)

    def create(self, *, student_id, full_name, group_id):
        student = Student(id=student_id, full_name=full_name, group_id=group_id)
        self._db.students[student_id] = student
        return student

    def delete(self, student_id):
        for key in [k for k in self._db.attendance if k[0] == student_id]:
            del self._db.attendance[key]
        return self._db.students.pop(student_id, None) is not None


class InMemoryAttendance:
    def __init__(self, db: FakeDatabase):
        self._db = db

    def list(self, *, day=None, group_id=None):
        return [
            r
            for r in sorted(self._db.attendance.values(), key=lambda r: (r.date, r.id))
            if (day is None or r.date == day) and (group_id is None or r.group_id == group_id)
        ]

    def upsert(self, *, student_id, group_id, day, status, comment=None):
        existing = self._db.attendance.get((student_id, day))
        if existing:
            rec = AttendanceRecord(
                id=existing.id,
                student_id=student_id,
                group_id=group_id,
                date=day,
                status=status,
                comment=existing.comment if comment is None else comment,
            )
        else:
            self._db.next_attendance_id += 1
            rec = AttendanceRecord(
                id=self._db.next_attendance_id,
                student_id=student_id,
                group_id=group_id,
                date=day,
                status=status,
                comment=comment,
            )
        self._db.attendance[(student_id, day)] = rec
        return rec

    def get_report_rows(self, *, start_date, end_date, group_id=None):
        rows = []
        for r in self.list(group_id=group_id):
            if not start_date <= r.date <= end_date:
                continue
            rows.append(
                AttendanceReportRow(
                    date=r.date,
                    group_name=self._db.groups[r.group_id].name,
                    student_name=self._db.students[r.student_id].full_name,
                    status=r.status,
                    comment=r.comment,
                )
            )
        rows.sort(key=lambda r: (r.date, r.group_name, r.student_name))
        return rows


def add_user(db: FakeDatabase, *, profile_id: str, username: str, password: str, role: Role, group_id: Optional[str] = None):
    db.profiles[profile_id] = Profile(id=profile_id, full_name=username.title(), role=role, group_id=group_id)
    db.credentials[profile_id] = UserCredentials(
        id=profile_id, username=username, password_hash=generate_password_hash(password, method=FAST_HASH)
    )


@pytest.fixture
def fake_db() -> FakeDatabase:
    """Two groups, three students, and one account per role."""
    db = FakeDatabase()
    db.groups["g1"] = Group(id="g1", name="IT-21")
    db.groups["g2"] = Group(id="g2", name="EC-22")
    db.students["s1"] = Student(id="s1", full_name="Anna Petrova", group_id="g1")
    db.students["s2"] = Student(id="s2", full_name="Boris Ivanov", group_id="g1")
    db.students["s3"] = Student(id="s3", full_name="Clara Smirnova", group_id="g2")
    add_user(db, profile_id="u-admin", username="admin", password="admin123", role=Role.ADMIN)
    add_user(db, profile_id="u-tutor", username="tutor", password="tutor123", role=Role.TUTOR)
    add_user(db, profile_id="u-star", username="starosta", password="star123", role=Role.STAROSTA, group_id="g1")
    return db


@pytest.fixture
def container(fake_db):
    return build_services(
        users_repo=InMemoryUsers(fake_db),
        groups_repo=InMemoryGroups(fake_db),
        students_repo=InMemoryStudents(fake_db),
        attendance_repo=InMemoryAttendance(fake_db),
        secret_key=TEST_SECRET,
    )


@pytest.fixture
def app(container):
    app = create_app(container=container, settings_module="config.testing")
    return app


@pytest.fixture
def client(app):
    return app.test_client()


def _login(client, username: str, password: str) -> dict:
    resp = client.post("/api/login", json={"username": username, "password": password})
    assert resp.status_code == 200, resp.get_json()
    return {"Authorization": f"Bearer {resp.get_json()['token']}"}


@pytest.fixture
def admin_headers(client):
    return _login(client, "admin", "admin123")


@pytest.fixture
def tutor_headers(client):
    return _login(client, "tutor", "tutor123")


@pytest.fixture
def starosta_headers(client):
    return _login(client, "starosta", "star123")


@pytest.fixture
def admin(fake_db):
    return fake_db.profiles["u-admin"]


@pytest.fixture
def starosta(fake_db):
    return fake_db.profiles["u-star"]


@pytest.fixture
def tutor(fake_db):
    return fake_db.profiles["u-tutor"]
