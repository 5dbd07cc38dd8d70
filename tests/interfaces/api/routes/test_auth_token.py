"""Tests for sign-up, sign-in and sign-out."""

from __future__ import annotations

import pytest

pytest.importorskip("fastapi")

from conftest import PASSWORD, auth_headers  # noqa: E402


def _sign_in(client, email: str, password: str = PASSWORD):
    return client.post(
        "/auth/token",
        data={"username": email, "password": password},
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )


def test_sign_up_returns_token_for_normal_user(client) -> None:
    response = client.post(
        "/auth/sign-up",
        json={"email": "new@example.com", "password": "Secret123", "name": "New"},
    )

    assert response.status_code == 201
    payload = response.json()
    assert payload["role"] == "normal"
    assert payload["token_type"] == "bearer"

    me = client.get("/users/me", headers={"Authorization": f"Bearer {payload['access_token']}"})
    assert me.status_code == 200
    assert me.json()["email"] == "new@example.com"
    assert me.json()["id"] == payload["user_id"]


def test_sign_up_rejects_duplicate_email(client, make_user) -> None:
    make_user("alice")

    response = client.post(
        "/auth/sign-up", json={"email": "alice@example.com", "password": "Secret123"}
    )

    assert response.status_code == 400


def test_sign_in_and_last_login(client, make_user, session) -> None:
    make_user("alice")

    response = _sign_in(client, "alice@example.com")

    assert response.status_code == 200
    assert response.json()["user_id"] == "alice"
    me = client.get(
        "/users/me", headers={"Authorization": f"Bearer {response.json()['access_token']}"}
    )
    assert me.json()["last_login"] is not None


def test_wrong_password_is_unauthorized(client, make_user) -> None:
    make_user("alice")

    assert _sign_in(client, "alice@example.com", "nope").status_code == 401


def test_blocked_user_cannot_sign_in(client, make_user) -> None:
    make_user("mallory", is_blocked=True)

    response = _sign_in(client, "mallory@example.com")

    assert response.status_code == 403


def test_blocking_revokes_existing_token(client, make_user) -> None:
    admin = make_user("boss", role="admin")
    alice = make_user("alice")
    alice_headers = auth_headers(alice)

    assert client.get("/users/me", headers=alice_headers).status_code == 200

    blocked = client.patch(
        "/users/alice/block", json={"is_blocked": True}, headers=auth_headers(admin)
    )
    assert blocked.status_code == 200

    response = client.get("/users/me", headers=alice_headers)
    assert response.status_code == 401


def test_sign_out(client, make_user) -> None:
    alice = make_user("alice")

    assert client.post("/auth/sign-out", headers=auth_headers(alice)).status_code == 204
    assert client.post("/auth/sign-out").status_code == 401
