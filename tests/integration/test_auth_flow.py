"""Integration tests for register/login/refresh (requires running PG + Redis).

Pre-condition: alembic upgrade head
"""

import uuid

import pytest
from httpx import AsyncClient

from config.settings import settings

pytestmark = pytest.mark.asyncio(loop_scope="session")


class TestRegister:
    async def test_register_grants_starting_coins(
        self, client: AsyncClient, make_user
    ) -> None:
        user_id, headers = await make_user("reg")

        resp = await client.get("/api/wallet", headers=headers)

        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["user_id"] == user_id
        assert data["coins"] == settings.STARTING_COINS

    async def test_duplicate_username(self, client: AsyncClient) -> None:
        uid = uuid.uuid4().hex[:8]
        user = {
            "username": f"dup_{uid}",
            "email": f"dup_{uid}@example.com",
            "password": "TestPass1",
        }
        await client.post("/api/auth/register", json=user)
        resp = await client.post(
            "/api/auth/register", json={**user, "email": "other_" + user["email"]}
        )

        assert resp.status_code == 409
        assert resp.json()["code"] == 1001

    async def test_weak_password_is_400(self, client: AsyncClient) -> None:
        resp = await client.post(
            "/api/auth/register",
            json={"username": "weakling", "email": "weak@example.com", "password": "weak"},
        )
        assert resp.status_code == 400


class TestLogin:
    async def test_unknown_user(self, client: AsyncClient) -> None:
        resp = await client.post(
            "/api/auth/login", json={"username": "nobody_here", "password": "Nope12345"}
        )
        assert resp.status_code == 401
        assert resp.json()["code"] == 1003

    async def test_me(self, client: AsyncClient, make_user) -> None:
        user_id, headers = await make_user("me")

        resp = await client.get("/api/auth/me", headers=headers)

        assert resp.status_code == 200
        assert resp.json()["data"]["user_id"] == user_id
