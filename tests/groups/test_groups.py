from __future__ import annotations

import pytest

from vedomost.core.exceptions import ConflictError, NotFoundError, ValidationError


def test_list_groups_sorted_by_name(client, starosta_headers):
    resp = client.get("/api/groups", headers=starosta_headers)

    assert [g["name"] for g in resp.get_json()] == ["EC-22", "IT-21"]


def test_create_group(client, admin_headers):
    resp = client.post("/api/groups", json={"name": "  ME-23 "}, headers=admin_headers)

    assert resp.status_code == 201
    assert resp.get_json()["name"] == "ME-23"
    assert resp.get_json()["id"]


def test_duplicate_group_name_is_409(client, admin_headers):
    assert client.post("/api/groups", json={"name": "it-21"}, headers=admin_headers).status_code == 409


def test_empty_group_name_is_400(container):
    with pytest.raises(ValidationError):
        container.group_service.create_group("   ")


def test_service_conflict_on_duplicate(container):
    with pytest.raises(ConflictError):
        container.group_service.create_group("EC-22")


def test_delete_group_cascades_to_students_and_attendance(client, admin_headers, container, fake_db, admin):
    container.attendance_service.mark(admin, student_id="s1", day="2024-01-10", status="present")
    container.attendance_service.mark(admin, student_id="s2", day="2024-01-11", status="absent")
    container.attendance_service.mark(admin, student_id="s3", day="2024-01-10", status="present")

    resp = client.delete("/api/groups/g1", headers=admin_headers)

    assert resp.status_code == 200
    assert "g1" not in fake_db.groups
    assert [s.id for s in fake_db.students.values()] == ["s3"]
    assert [r.student_id for r in fake_db.attendance.values()] == ["s3"]
    assert fake_db.profiles["u-star"].group_id is None


def test_delete_unknown_group_is_404(container):
    with pytest.raises(NotFoundError):
        container.group_service.delete_group("missing")
