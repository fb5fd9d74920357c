from __future__ import annotations

import pytest


def test_admin_lists_users_with_group_name(client, admin_headers):
    resp = client.get("/api/admin/users", headers=admin_headers)

    rows = {r["username"]: r for r in resp.get_json()}
    assert resp.status_code == 200
    assert rows["starosta"]["group_name"] == "IT-21"
    assert rows["admin"]["group_name"] is None


def test_create_starosta_then_login(client, admin_headers):
    resp = client.post(
        "/api/admin/users",
        json={"username": "newbie", "password": "secret1", "full_name": "New Starosta", "role": "starosta", "group_id": "g2"},
        headers=admin_headers,
    )

    assert resp.status_code == 201
    assert resp.get_json()["group_id"] == "g2"
    assert client.post("/api/login", json={"username": "NEWBIE", "password": "secret1"}).status_code == 200


def test_duplicate_username_is_409_case_insensitive(client, admin_headers):
    resp = client.post(
        "/api/admin/users",
        json={"username": "Tutor", "password": "secret1", "full_name": "Dup", "role": "tutor"},
        headers=admin_headers,
    )

    assert resp.status_code == 409


@pytest.mark.parametrize(
    "payload",
    [
        {"password": "secret1", "full_name": "No Username", "role": "tutor"},
        {"username": "x1", "password": "123", "full_name": "Short", "role": "tutor"},
        {"username": "x2", "password": "secret1", "full_name": "Bad role", "role": "dean"},
        {"username": "x3", "password": "secret1", "full_name": "No group", "role": "starosta"},
        {"username": "x4", "password": "secret1", "full_name": "Ghost group", "role": "starosta", "group_id": "zzz"},
    ],
)
def test_invalid_user_payload_is_400(client, admin_headers, payload):
    assert client.post("/api/admin/users", json=payload, headers=admin_headers).status_code == 400


def test_patch_updates_only_given_fields(client, admin_headers, fake_db):
    resp = client.patch("/api/admin/users/u-tutor", json={"full_name": "Dr. Tutor"}, headers=admin_headers)

    assert resp.status_code == 200
    assert fake_db.profiles["u-tutor"].full_name == "Dr. Tutor"
    assert fake_db.profiles["u-tutor"].role.value == "tutor"


def test_patch_password_and_username(client, admin_headers):
    resp = client.patch(
        "/api/admin/users/u-star",
        json={"username": "headman", "password": "brandnew"},
        headers=admin_headers,
    )

    assert resp.status_code == 200
    assert client.post("/api/login", json={"username": "headman", "password": "brandnew"}).status_code == 200
    assert client.post("/api/login", json={"username": "starosta", "password": "star123"}).status_code == 401


def test_patch_unknown_user_is_404(client, admin_headers):
    assert client.patch("/api/admin/users/ghost", json={"full_name": "X"}, headers=admin_headers).status_code == 404


def test_delete_user_and_not_self(client, admin_headers, fake_db):
    assert client.delete("/api/admin/users/u-tutor", headers=admin_headers).status_code == 200
    assert "u-tutor" not in fake_db.profiles
    assert "u-tutor" not in fake_db.credentials

    assert client.delete("/api/admin/users/u-admin", headers=admin_headers).status_code == 400


@pytest.mark.parametrize(
    "method,path,payload",
    [
        ("get", "/api/admin/users", None),
        ("post", "/api/admin/users", {"username": "x", "password": "secret1", "full_name": "X", "role": "tutor"}),
        ("patch", "/api/admin/users/u-admin", {"role": "starosta"}),
        ("delete", "/api/admin/users/u-admin", None),
        ("post", "/api/groups", {"name": "Hackers"}),
        ("delete", "/api/groups/g1", None),
        ("post", "/api/students", {"full_name": "Eve", "group_id": "g1"}),
        ("delete", "/api/students/s1", None),
    ],
)
@pytest.mark.parametrize("headers_fixture", ["tutor_headers", "starosta_headers"])
def test_non_admin_mutations_are_403(request, client, method, path, payload, headers_fixture):
    headers = request.getfixturevalue(headers_fixture)

    resp = getattr(client, method)(path, json=payload, headers=headers)

    assert resp.status_code == 403
