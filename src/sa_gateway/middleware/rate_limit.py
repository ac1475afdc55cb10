"""Fixed-window rate limiting backed by Redis.

Rules (per minute, configurable in settings):
  - auth  group: POST /api/auth/*          keyed by client IP (anti brute-force)
  - write group: other POST/PUT/DELETE     keyed by bearer token or IP
  - read  group: everything else           keyed by bearer token or IP

Key pattern: "ratelimit:{principal}:{group}:{window}" with INCR + EXPIRE.
Client IP is the socket peer. With RATE_LIMIT_TRUST_FORWARDED on, the last
X-Forwarded-For hop (the one the proxy appended) is used instead.
If Redis is unavailable the request is let through and a warning logged.
"""

import hashlib
import logging
import time
from collections.abc import Awaitable, Callable

from redis.exceptions import RedisError
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from config.settings import settings
from src.sa_common.errors import RateLimitError
from src.sa_common.redis_client import get_redis
from src.sa_common.response import error_response

logger = logging.getLogger("sa.ratelimit")

_WINDOW_SECONDS = 60
_WRITE_METHODS = {"POST", "PUT", "PATCH", "DELETE"}


def classify(method: str, path: str) -> str:
    """Return the endpoint group a request is counted against."""
    if path.startswith("/api/auth/") and method == "POST":
        return "auth"
    if method in _WRITE_METHODS:
        return "write"
    return "read"


def client_ip(request: Request) -> str:
    if settings.RATE_LIMIT_TRUST_FORWARDED:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            # the trusted proxy appends the peer it saw as the last hop
            return forwarded.split(",")[-1].strip()
    return request.client.host if request.client else "unknown"


def principal(request: Request, group: str) -> str:
    """Token fingerprint for authenticated calls, client IP otherwise."""
    auth = request.headers.get("authorization", "")
    if group != "auth" and auth.lower().startswith("bearer "):
        return "tok:" + hashlib.sha256(auth[7:].encode()).hexdigest()[:16]
    return "ip:" + client_ip(request)


def limit_for(group: str) -> int:
    return {
        "auth": settings.RATE_LIMIT_AUTH_PER_MINUTE,
        "write": settings.RATE_LIMIT_WRITE_PER_MINUTE,
        "read": settings.RATE_LIMIT_READ_PER_MINUTE,
    }[group]


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app: ASGIApp,
        redis_factory: Callable[[], Awaitable[object]] = get_redis,
        enabled: bool | None = None,
    ) -> None:
        super().__init__(app)
        self._redis_factory = redis_factory
        self._enabled = settings.RATE_LIMIT_ENABLED if enabled is None else enabled

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not self._enabled or not request.url.path.startswith("/api/"):
            return await call_next(request)

        group = classify(request.method, request.url.path)
        window = int(time.time()) // _WINDOW_SECONDS
        key = f"ratelimit:{principal(request, group)}:{group}:{window}"

        try:
            redis = await self._redis_factory()
            count = await redis.incr(key)  # type: ignore[attr-defined]
            if count == 1:
                await redis.expire(key, _WINDOW_SECONDS)  # type: ignore[attr-defined]
        except RedisError as exc:
            logger.warning("Rate limiter unavailable, allowing request: %s", exc)
            return await call_next(request)

        if count > limit_for(group):
            err = RateLimitError()
            retry_after = _WINDOW_SECONDS - int(time.time()) % _WINDOW_SECONDS
            logger.info("Rate limit hit: %s %s group=%s", request.method, request.url.path, group)
            resp = error_response(err.code, err.message)
            resp.request_id = getattr(request.state, "request_id", resp.request_id)
            return JSONResponse(
                status_code=err.http_status,
                content=resp.model_dump(),
                headers={"Retry-After": str(retry_after)},
            )
        return await call_next(request)
