"""Unit tests for the Redis fixed-window rate limiter (fake Redis)."""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from redis.exceptions import ConnectionError as RedisConnectionError

from config.settings import settings
from src.sa_gateway.middleware.rate_limit import RateLimitMiddleware, classify
from src.sa_gateway.middleware.request_log import RequestLogMiddleware


class FakeRedis:
    def __init__(self) -> None:
        self.counts: dict[str, int] = {}
        self.expiries: dict[str, int] = {}

    async def incr(self, key: str) -> int:
        self.counts[key] = self.counts.get(key, 0) + 1
        return self.counts[key]

    async def expire(self, key: str, seconds: int) -> bool:
        self.expiries[key] = seconds
        return True


def _app(redis_factory, with_request_log: bool = False) -> FastAPI:
    app = FastAPI()
    app.add_middleware(RateLimitMiddleware, redis_factory=redis_factory, enabled=True)
    if with_request_log:
        app.add_middleware(RequestLogMiddleware)

    @app.post("/api/auth/login")
    async def login() -> dict:
        return {"ok": True}

    @app.get("/api/posts")
    async def posts() -> dict:
        return {"ok": True}

    @app.get("/health")
    async def health() -> dict:
        return {"ok": True}

    return app


class TestClassify:
    @pytest.mark.parametrize(
        ("method", "path", "group"),
        [
            ("POST", "/api/auth/login", "auth"),
            ("POST", "/api/auth/register", "auth"),
            ("GET", "/api/auth/me", "read"),
            ("POST", "/api/gifts", "write"),
            ("DELETE", "/api/users/u-1/follow", "write"),
            ("PUT", "/api/tournaments/t-1/score", "write"),
            ("GET", "/api/posts", "read"),
        ],
    )
    def test_groups(self, method: str, path: str, group: str) -> None:
        assert classify(method, path) == group


class TestMiddleware:
    async def test_auth_limit_returns_429_envelope(self) -> None:
        fake = FakeRedis()

        async def factory() -> FakeRedis:
            return fake

        transport = ASGITransport(app=_app(factory))
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            for _ in range(settings.RATE_LIMIT_AUTH_PER_MINUTE):
                assert (await ac.post("/api/auth/login")).status_code == 200
            resp = await ac.post("/api/auth/login")

        assert resp.status_code == 429
        assert "Retry-After" in resp.headers
        body = resp.json()
        assert body["code"] == 9001
        assert body["error"] == body["message"]
        # window key expires with the window
        assert set(fake.expiries.values()) == {60}

    async def test_tokens_are_counted_separately(self) -> None:
        fake = FakeRedis()

        async def factory() -> FakeRedis:
            return fake

        transport = ASGITransport(app=_app(factory))
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            await ac.get("/api/posts", headers={"Authorization": "Bearer aaa"})
            await ac.get("/api/posts", headers={"Authorization": "Bearer bbb"})

        assert len(fake.counts) == 2
        assert all(key.startswith("ratelimit:tok:") for key in fake.counts)

    async def test_non_api_paths_not_counted(self) -> None:
        fake = FakeRedis()

        async def factory() -> FakeRedis:
            return fake

        transport = ASGITransport(app=_app(factory))
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            resp = await ac.get("/health")

        assert resp.status_code == 200
        assert fake.counts == {}

    async def test_redis_outage_fails_open(self) -> None:
        async def factory() -> FakeRedis:
            raise RedisConnectionError("redis down")

        transport = ASGITransport(app=_app(factory))
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            resp = await ac.post("/api/auth/login")

        assert resp.status_code == 200

    async def test_rotating_forwarded_for_does_not_reset_auth_bucket(self) -> None:
        fake = FakeRedis()

        async def factory() -> FakeRedis:
            return fake

        limit = settings.RATE_LIMIT_AUTH_PER_MINUTE
        transport = ASGITransport(app=_app(factory))
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            statuses = []
            for i in range(limit + 3):
                headers = {"X-Forwarded-For": f"10.0.0.{i}"}
                statuses.append((await ac.post("/api/auth/login", headers=headers)).status_code)

        assert statuses.count(200) == limit
        assert statuses.count(429) == 3
        assert len(fake.counts) == 1

    async def test_trusted_proxy_uses_last_forwarded_hop(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(settings, "RATE_LIMIT_TRUST_FORWARDED", True)
        fake = FakeRedis()

        async def factory() -> FakeRedis:
            return fake

        transport = ASGITransport(app=_app(factory))
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            await ac.post("/api/auth/login", headers={"X-Forwarded-For": "1.1.1.1, 203.0.113.7"})
            await ac.post("/api/auth/login", headers={"X-Forwarded-For": "2.2.2.2, 203.0.113.7"})

        assert list(fake.counts.values()) == [2]
        assert next(iter(fake.counts)).startswith("ratelimit:ip:203.0.113.7:auth:")

    async def test_429_carries_request_id_from_header(self) -> None:
        fake = FakeRedis()

        async def factory() -> FakeRedis:
            return fake

        transport = ASGITransport(app=_app(factory, with_request_log=True))
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            for _ in range(settings.RATE_LIMIT_AUTH_PER_MINUTE):
                await ac.post("/api/auth/login")
            resp = await ac.post("/api/auth/login")

        assert resp.status_code == 429
        assert resp.json()["request_id"] == resp.headers["X-Request-ID"]
