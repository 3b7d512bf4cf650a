# tests/test_users.py

from __future__ import annotations

import pytest
from sqlmodel import select

from models import User
from utils.jwt import get_user_id_from_token

SIGN_UP_BODY = {
    "display_name": "Ahmed Ali",
    "email": "Ahmed@Example.com",
    "password": "password123",
    "username": "Ahmed_123",
}


def test_sign_up_returns_token(client, session) -> None:
    res = client.post("/api/users/sign-up", json=SIGN_UP_BODY)

    assert res.status_code == 201
    body = res.json()
    assert body["message"] == "User created successfully."

    user = session.exec(select(User)).one()
    assert get_user_id_from_token(body["token"]) == user.id


def test_sign_up_stores_lowercase_identifiers_and_hashed_password(client, session) -> None:
    client.post("/api/users/sign-up", json=SIGN_UP_BODY)

    user = session.exec(select(User)).one()
    assert user.email == "ahmed@example.com"
    assert user.username == "ahmed_123"
    assert user.password != SIGN_UP_BODY["password"]
    assert user.password.startswith("$2")


@pytest.mark.parametrize(
    ("field", "message"),
    [
        ("display_name", "Display name is required."),
        ("email", "Email is required."),
        ("password", "Password is required."),
        ("username", "Username is required."),
    ],
)
def test_sign_up_missing_field(client, field: str, message: str) -> None:
    body = {k: v for k, v in SIGN_UP_BODY.items() if k != field}

    res = client.post("/api/users/sign-up", json=body)

    assert res.status_code == 400
    assert res.json()["errors"] == [{"field": field, "msg": message}]


@pytest.mark.parametrize(
    ("field", "value", "message"),
    [
        ("display_name", "Ahmed 2", "Display name must contain only letters and whitespaces."),
        ("username", "ahmed-123", "Username must only contain alphanumerical, dot or underscore."),
        ("email", "not-an-email", "Invalid email address."),
    ],
)
def test_sign_up_rejects_bad_format(client, field: str, value: str, message: str) -> None:
    res = client.post("/api/users/sign-up", json={**SIGN_UP_BODY, field: value})

    assert res.status_code == 400
    assert res.json()["errors"][0] == {"field": field, "msg": message}


def test_sign_up_duplicate_email_is_conflict(client) -> None:
    client.post("/api/users/sign-up", json=SIGN_UP_BODY)

    res = client.post(
        "/api/users/sign-up",
        json={**SIGN_UP_BODY, "email": "AHMED@example.COM", "username": "other"},
    )

    assert res.status_code == 409
    assert res.json() == {"error": "Email already used."}


def test_sign_up_duplicate_username_is_conflict(client) -> None:
    client.post("/api/users/sign-up", json=SIGN_UP_BODY)

    res = client.post(
        "/api/users/sign-up",
        json={**SIGN_UP_BODY, "email": "someone@example.com", "username": "AHMED_123"},
    )

    assert res.status_code == 409
    assert res.json() == {"error": "Username already used."}


@pytest.mark.parametrize("identifier", ["ahmed@example.com", "AHMED_123", "ahmed_123"])
def test_login_with_email_or_username(client, identifier: str) -> None:
    client.post("/api/users/sign-up", json=SIGN_UP_BODY)

    res = client.post(
        "/api/users/login",
        json={"identifier": identifier, "password": "password123"},
    )

    assert res.status_code == 201
    body = res.json()
    assert body["msg"] == "User authentication is successful."
    assert get_user_id_from_token(body["token"]) is not None


def test_login_failures_do_not_reveal_which_part_was_wrong(client) -> None:
    """Unknown user and wrong password must be indistinguishable."""
    client.post("/api/users/sign-up", json=SIGN_UP_BODY)

    wrong_password = client.post(
        "/api/users/login",
        json={"identifier": "ahmed_123", "password": "wrong"},
    )
    unknown_user = client.post(
        "/api/users/login",
        json={"identifier": "nobody@example.com", "password": "password123"},
    )

    assert wrong_password.status_code == unknown_user.status_code == 401
    assert wrong_password.json() == unknown_user.json() == {"error": "Invalid credentials."}


def test_login_requires_identifier_and_password(client) -> None:
    res = client.post("/api/users/login", json={"identifier": "ahmed_123"})

    assert res.status_code == 400
    assert res.json()["errors"] == [
        {"field": "password", "msg": "Email/Username and password are required."}
    ]
