# tests/test_auth.py

from __future__ import annotations

from datetime import timedelta

import pytest

from utils.jwt import create_jwt


@pytest.mark.parametrize(
    "headers",
    [
        {},
        {"Authorization": ""},
        {"Authorization": "Bearer"},
        {"Authorization": "Token abc"},
    ],
)
def test_missing_token_is_unauthorized(client, headers) -> None:
    res = client.get("/api/tasks", headers=headers)

    assert res.status_code == 401
    assert res.json() == {"error": "Access token missing."}


def test_garbage_token_is_forbidden(client) -> None:
    res = client.get("/api/tasks", headers={"Authorization": "Bearer not.a.jwt"})

    assert res.status_code == 403
    assert res.json() == {"error": "Invalid or expired token."}


def test_token_signed_with_other_key_is_forbidden(client) -> None:
    import jwt

    token = jwt.encode({"id": 1, "exp": 9999999999}, "some-other-key", algorithm="HS256")

    res = client.get("/api/tasks", headers={"Authorization": f"Bearer {token}"})

    assert res.status_code == 403


def test_expired_token_is_forbidden(client, sign_up) -> None:
    sign_up()
    token = create_jwt(1, expires_in=timedelta(seconds=-30))

    res = client.get("/api/tasks", headers={"Authorization": f"Bearer {token}"})

    assert res.status_code == 403
    assert res.json() == {"error": "Invalid or expired token."}


def test_token_for_missing_user_is_unauthorized(client) -> None:
    token = create_jwt(4242)

    res = client.get("/api/tasks", headers={"Authorization": f"Bearer {token}"})

    assert res.status_code == 401
    assert res.json() == {"error": "Invalid user token."}


def test_valid_token_reaches_handler(client, auth_headers) -> None:
    res = client.get("/api/tasks", headers=auth_headers)

    assert res.status_code == 200
    assert res.json() == []
