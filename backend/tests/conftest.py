import asyncio
import os
import tempfile
import uuid
from typing import Dict, Optional

import pytest
from fastapi import Request
from fastapi.testclient import TestClient

_DB_DIR = tempfile.mkdtemp(prefix="scrounch-tests-")
os.environ.setdefault("DATABASE_URL", f"sqlite+aiosqlite:///{os.path.join(_DB_DIR, 'test.db')}")
os.environ.setdefault("CACHE_URL", "")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from core.auth import get_oidc_claims  # noqa: E402
from db.database import async_session_maker, create_db_and_tables, drop_db_and_tables  # noqa: E402
from db.users import User  # noqa: E402
from main import app  # noqa: E402

ADMIN_ID = uuid.UUID("00000000-0000-4000-8000-000000000001")
USER_ID = uuid.UUID("00000000-0000-4000-8000-000000000002")
BANNED_ID = uuid.UUID("00000000-0000-4000-8000-000000000003")

TEST_USER_HEADER = "X-Test-User"


def fake_oidc_claims(request: Request) -> Optional[dict]:
    """Identity taken from a test header instead of a signed ID token."""
    subject = request.headers.get(TEST_USER_HEADER)
    if not subject:
        return None
    return {
        "sub": subject,
        "preferred_username": request.headers.get("X-Test-Username"),
        "name": request.headers.get("X-Test-Name"),
        "email": request.headers.get("X-Test-Email"),
    }


class _Identity:
    def __init__(self, subject):
        self.subject = str(subject)

    def headers(self) -> Dict[str, str]:
        return {TEST_USER_HEADER: self.subject}


async def _reset_database():
    await drop_db_and_tables()
    await create_db_and_tables()
    async with async_session_maker() as session:
        session.add_all([
            User(id=ADMIN_ID, name="Admin", is_admin=True, is_banned=False),
            User(id=USER_ID, name="Customer", is_admin=False, is_banned=False),
            User(id=BANNED_ID, name="Banned", is_admin=False, is_banned=True),
        ])
        await session.commit()


@pytest.fixture()
def client():
    asyncio.run(_reset_database())
    app.dependency_overrides[get_oidc_claims] = fake_oidc_claims
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def admin_auth() -> _Identity:
    return _Identity(ADMIN_ID)


@pytest.fixture()
def user_auth() -> _Identity:
    return _Identity(USER_ID)


@pytest.fixture()
def banned_auth() -> _Identity:
    return _Identity(BANNED_ID)


@pytest.fixture()
def create_product(client, admin_auth):
    """Create a product through the API and return its id."""

    def _create(name="Product", price=1.5, **fields):
        body = {"name": name, "price": price, **fields}
        r = client.post("/product", json=body, headers=admin_auth.headers())
        assert r.status_code == 201, r.text
        return r.json()

    return _create
