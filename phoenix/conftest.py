"""
Shared fixtures: an app wired to an in-memory mongomock store.

Run: pytest phoenix -v
"""

from __future__ import annotations

import itertools
from datetime import datetime, timedelta

import mongomock
import pytest
from fastapi.testclient import TestClient

from phoenix.config import Settings
from phoenix.db import AppContext
from phoenix.main import create_app

TEST_ORIGIN = "https://cloudphoenix.example.com"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        mongo_uri="mongodb://localhost:27017/cloudphoenix_test",
        mongo_db_name="cloudphoenix_test",
        jwt_secret="test-signing-secret-for-the-phoenix-suite",
        cors_origin=TEST_ORIGIN,
        bcrypt_rounds=4,  # minimum cost keeps the suite fast
    )


@pytest.fixture
def context(settings) -> AppContext:
    return AppContext.from_client(settings, mongomock.MongoClient())


@pytest.fixture
def client(context):
    with TestClient(create_app(context=context)) as c:
        yield c


@pytest.fixture
def register_user(client):
    """Register a user through the API and return its token."""
    def _register(name="Ada Admin", email="ada@example.com", password="s3cret-pass") -> str:
        resp = client.post(
            "/api/auth/register",
            json={"name": name, "email": email, "password": password},
        )
        assert resp.status_code == 200, f"Register failed: {resp.text}"
        return resp.json()["token"]

    return _register


@pytest.fixture
def auth_headers(register_user):
    """Headers carrying a token for a freshly registered user."""
    return {"x-auth-token": register_user()}


@pytest.fixture
def fake_clock(monkeypatch):
    """Replace the store clock with one that advances one second per call."""
    start = datetime(2024, 1, 1, 12, 0, 0)
    ticks = itertools.count()
    monkeypatch.setattr("phoenix.db.now_utc", lambda: start + timedelta(seconds=next(ticks)))
    return start
