"""End-to-end tests for the admin-only /api/users endpoints."""

from __future__ import annotations

import pytest

from tests.factories.user import AdminFactory, UserFactory
from tests.helpers.http import bearer, login


@pytest.fixture()
def admin_headers(client):
    admin = AdminFactory()
    return bearer(login(client, admin.username)["token"])


def test_member_is_forbidden(client):
    member = UserFactory()
    headers = bearer(login(client, member.username)["token"])

    resp = client.get("/api/users", headers=headers)

    assert resp.status_code == 403
    assert resp.get_json() == {"error": "Access denied", "success": "false"}


def test_anonymous_is_unauthorized(client):
    assert client.get("/api/users").status_code == 401


def test_list_users(client, admin_headers):
    UserFactory.create_batch(3)

    resp = client.get("/api/users?page=1&limit=2", headers=admin_headers)

    assert resp.status_code == 200
    body = resp.get_json()
    assert len(body["data"]) == 2
    assert body["meta"] == {"total": 4, "page": 1, "limit": 2}


def test_block_and_unblock(client, admin_headers):
    member = UserFactory()
    member_session = login(client, member.username)

    blocked = client.put(f"/api/users/{member.id}/block", headers=admin_headers)
    assert blocked.status_code == 200
    assert blocked.get_json()["status"] == "BLOCKED"

    me = client.get("/api/auth/me", headers=bearer(member_session["token"]))
    assert me.status_code == 401
    refreshed = client.post(
        "/api/auth/refresh", json={"refreshToken": member_session["refreshToken"]}
    )
    assert refreshed.status_code == 401

    unblocked = client.put(f"/api/users/{member.id}/unblock", headers=admin_headers)
    assert unblocked.get_json()["status"] == "ACTIVE"
    login(client, member.username)


def test_update_role(client, admin_headers):
    member = UserFactory()

    resp = client.put(
        f"/api/users/{member.id}/role", headers=admin_headers, json={"role": "ROLE_LIBRARIAN"}
    )

    assert resp.status_code == 200
    assert resp.get_json()["role"] == "LIBRARIAN"


def test_update_role_invalid(client, admin_headers):
    member = UserFactory()
    resp = client.put(f"/api/users/{member.id}/role", headers=admin_headers, json={"role": "KING"})
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Invalid role: KING"


def test_delete_user(client, admin_headers):
    member = UserFactory()

    resp = client.delete(f"/api/users/{member.id}", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.get_json()["message"] == "User deleted successfully"

    again = client.delete(f"/api/users/{member.id}", headers=admin_headers)
    assert again.status_code == 404


def test_token_of_deleted_user_does_not_carry_over_to_new_account(client, admin_headers):
    member = UserFactory(username="bobby")
    stale = login(client, member.username)["token"]

    assert client.delete(f"/api/users/{member.id}", headers=admin_headers).status_code == 200
    registered = client.post(
        "/api/auth/register",
        json={"username": "bobby", "email": "bobby.two@example.com", "password": "s3cret!"},
    )
    assert registered.status_code == 200

    assert client.get("/api/auth/me", headers=bearer(stale)).status_code == 401
    assert client.post("/api/auth/logout", headers=bearer(stale)).status_code == 401
    fresh = registered.get_json()["token"]
    assert client.get("/api/auth/me", headers=bearer(fresh)).status_code == 200
