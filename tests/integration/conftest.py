"""Integration-test fixtures.

All integration tests share a single event-loop so that the module-level
SQLAlchemy async engine pool and Redis pool (both created at import time)
remain valid across the entire test session.

Pre-condition: a migrated PostgreSQL (alembic upgrade head). When the
database cannot be reached the whole directory is skipped.
"""

import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from src.main import app
from src.sa_common.database import engine


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        if "tests/integration" in str(item.path):
            item.add_marker(pytest.mark.integration)


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client() -> AsyncClient:  # type: ignore[override]
    """Session-scoped async HTTP client — keeps the engine pool alive."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (OSError, SQLAlchemyError) as exc:
        pytest.skip(f"PostgreSQL not reachable: {exc}")
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


def unique_user(prefix: str = "it") -> dict[str, str]:
    """Unique credentials so reruns never collide."""
    uid = uuid.uuid4().hex[:8]
    return {
        "username": f"{prefix}_{uid}",
        "email": f"{prefix}_{uid}@example.com",
        "password": "TestPass1",
    }


async def register_and_login(client: AsyncClient, prefix: str = "it") -> tuple[str, dict[str, str]]:
    """Register a fresh user; return (user_id, auth headers)."""
    user = unique_user(prefix)
    reg = await client.post("/api/auth/register", json=user)
    assert reg.status_code == 201, reg.text
    login = await client.post(
        "/api/auth/login",
        json={"username": user["username"], "password": user["password"]},
    )
    token = login.json()["data"]["access_token"]
    return reg.json()["data"]["user_id"], {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_user(client: AsyncClient):
    """Factory fixture: `user_id, headers = await make_user()`."""

    async def _make(prefix: str = "it") -> tuple[str, dict[str, str]]:
        return await register_and_login(client, prefix)

    return _make
