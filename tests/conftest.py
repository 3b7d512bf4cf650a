# tests/conftest.py

from __future__ import annotations

import os

# Configuration is read at import time; these must be set before the app loads.
os.environ.setdefault("JWT_KEY", "test-secret-key-with-enough-bytes-for-hs256")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from collections.abc import Callable, Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel

import models  # noqa: F401
from database import build_engine, get_session
from main import app


@pytest.fixture()
def engine():
    """
    Fresh in-memory SQLite database per test.

    StaticPool keeps a single connection so every session sees the same data.
    """
    engine = build_engine("sqlite://", poolclass=StaticPool)
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session(engine) -> Iterator[Session]:
    with Session(engine) as session:
        yield session


@pytest.fixture()
def client(engine) -> Iterator[TestClient]:
    def _get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _get_session
    # Not used as a context manager: startup hooks (log files, real DB) stay off.
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def sign_up(client: TestClient) -> Callable[..., str]:
    """Register a user through the API and return its bearer token."""

    def _sign_up(
        username: str = "alice",
        email: str | None = None,
        password: str = "password123",
        display_name: str = "Alice Liddell",
    ) -> str:
        res = client.post(
            "/api/users/sign-up",
            json={
                "display_name": display_name,
                "email": email or f"{username}@example.com",
                "password": password,
                "username": username,
            },
        )
        assert res.status_code == 201, res.text
        return res.json()["token"]

    return _sign_up


@pytest.fixture()
def auth_headers(sign_up) -> dict[str, str]:
    return {"Authorization": f"Bearer {sign_up()}"}


@pytest.fixture()
def other_headers(sign_up) -> dict[str, str]:
    return {"Authorization": f"Bearer {sign_up(username='bob')}"}
