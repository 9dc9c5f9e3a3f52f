"""
Shared fixtures.

The environment is configured before anything from causeconnect is
imported: settings and the engine are built at import time.
"""
import asyncio
import os
import tempfile
from types import SimpleNamespace

_tmp_dir = tempfile.mkdtemp(prefix="causeconnect-tests-")

os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_tmp_dir}/test.db"
os.environ["DB_DISABLE_POOLING"] = "true"
os.environ["REDIS_ENABLED"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["UPLOAD_DIR"] = os.path.join(_tmp_dir, "uploads")
os.environ["STORAGE_BACKEND"] = "local"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["DEBUG"] = "false"

import pytest
from fastapi.testclient import TestClient

import causeconnect.models  # noqa: F401
from causeconnect.db.database import Base, engine
from causeconnect.main import app

API_BASE_URL = "http://testserver/api/v1"


async def _reset_schema():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)


@pytest.fixture(autouse=True)
def reset_db():
    asyncio.run(_reset_schema())
    yield


@pytest.fixture
def client():
    """TestClient rooted at the API prefix; use absolute URLs for / and /health."""
    with TestClient(app, base_url=API_BASE_URL) as test_client:
        yield test_client


def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def register(client):
    """Register a user and return its id, token, refresh token and headers."""
    def _register(username, first_name="Test", last_name="User", password="password123"):
        resp = client.post("/auth-register", json={
            "firstName": first_name,
            "lastName": last_name,
            "email": f"{username}@example.com",
            "username": username,
            "password": password,
            "confirmPassword": password,
        })
        assert resp.status_code == 201, resp.text
        body = resp.json()
        return SimpleNamespace(
            id=body["user"]["id"],
            username=username,
            email=f"{username}@example.com",
            password=password,
            name=body["user"]["name"],
            token=body["token"],
            refresh_token=body["refreshToken"],
            headers=auth_headers(body["token"]),
        )
    return _register


@pytest.fixture
def alice(register):
    return register("alice", "Alice", "Anders")


@pytest.fixture
def bob(register):
    return register("bob", "Bob", "Brown")


@pytest.fixture
def carol(register):
    return register("carol", "Carol", "Chen")


@pytest.fixture
def create_event(client):
    def _create_event(user, title="Clean water", description="Two new boreholes", **fields):
        resp = client.post(
            "/event-create",
            json={"title": title, "description": description, **fields},
            headers=user.headers,
        )
        assert resp.status_code == 201, resp.text
        return resp.json()
    return _create_event


@pytest.fixture
def create_post(client):
    def _create_post(user, content="Volunteering this weekend", **fields):
        resp = client.post("/post-create", json={"content": content, **fields}, headers=user.headers)
        assert resp.status_code == 201, resp.text
        return resp.json()
    return _create_post


@pytest.fixture
def notifications_for(client):
    def _notifications_for(user, **params):
        resp = client.get("/notification-list", params=params, headers=user.headers)
        assert resp.status_code == 200, resp.text
        return resp.json()["data"]
    return _notifications_for
