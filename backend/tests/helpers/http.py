"""Helpers for driving the API through the Flask test client."""

from __future__ import annotations

from typing import Any

from tests.factories.user import DEFAULT_PASSWORD


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def login(client, username: str, password: str = DEFAULT_PASSWORD) -> dict[str, Any]:
    """Log in through the API and return the JSON body (asserting 200)."""
    resp = client.post("/api/auth/login", json={"username": username, "password": password})
    assert resp.status_code == 200, resp.get_json()
    return resp.get_json()
