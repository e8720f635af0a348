"""Shared fixtures. Settings are read at import time, so the environment is set first."""
import asyncio
import os
import tempfile

_TMP_DIR = tempfile.mkdtemp(prefix="talencor-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_TMP_DIR, 'test.db')}"
os.environ["SESSION_SECRET"] = "test-session-secret-that-is-long-enough-123"
os.environ["ENVIRONMENT"] = "test"
os.environ["LINK_UPDATER_ENABLED"] = "false"
os.environ["RATE_LIMIT_AUTH_REQUESTS"] = "1000"
os.environ["RATE_LIMIT_SUBMIT_REQUESTS"] = "1000"
os.environ["SITE_BASE_URL"] = "https://www.talencor.com"
for _key in ("OPENAI_API_KEY", "MS_TENANT_ID", "MS_CLIENT_ID", "MS_CLIENT_SECRET"):
    os.environ.pop(_key, None)

import pytest
from fastapi.testclient import TestClient

from talencor.api.middleware.rate_limit import reset_rate_limits
from talencor.database.connection import drop_db, init_db, transaction
from talencor.main import app
from talencor.models import Client, User
from talencor.utils.security import hash_password

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "AdminPass123!"


def run(coro):
    """Run a coroutine to completion from synchronous test code."""
    return asyncio.run(coro)


@pytest.fixture(autouse=True)
def fresh_db():
    async def _reset():
        await drop_db()
        await init_db()

    run(_reset())
    reset_rate_limits()
    yield


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


def create_user(username: str = ADMIN_USERNAME, password: str = ADMIN_PASSWORD, is_admin: bool = True) -> int:
    async def _create():
        async with transaction() as db:
            user = User(username=username, password_hash=hash_password(password), is_admin=is_admin)
            db.add(user)
            await db.flush()
            return user.id

    return run(_create())


def create_client_row(
    company_name: str = "Acme Corporation",
    access_code: str = "ACME2025",
    is_active: bool = True,
    code_expires_at=None,
    email: str = "john.smith@acme.com",
) -> int:
    async def _create():
        async with transaction() as db:
            row = Client(
                company_name=company_name,
                contact_name="John Smith",
                email=email,
                phone="416-555-0001",
                access_code=access_code,
                is_active=is_active,
                code_expires_at=code_expires_at,
            )
            db.add(row)
            await db.flush()
            return row.id

    return run(_create())


@pytest.fixture
def admin_client(client):
    """TestClient with an authenticated admin session."""
    create_user()
    resp = client.post(
        "/api/admin/login",
        json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD},
    )
    assert resp.status_code == 200
    return client


@pytest.fixture
def portal_client(client):
    """TestClient signed in to the client portal as Acme Corporation."""
    create_client_row()
    resp = client.post("/api/client/login", json={"access_code": "ACME2025"})
    assert resp.status_code == 200
    return client
