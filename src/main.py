"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy import text

from config.settings import settings
from src.sa_assistant.api.router import router as assistant_router
from src.sa_common.database import engine
from src.sa_common.errors import AppError, InternalError, RequestValidationFailedError
from src.sa_common.redis_client import close_redis, get_redis
from src.sa_common.response import error_response
from src.sa_feed.api.router import router as feed_router
from src.sa_gaming.api.router import router as gaming_router
from src.sa_gateway.api.router import router as auth_router
from src.sa_gateway.api.users_router import router as users_router
from src.sa_gateway.middleware.rate_limit import RateLimitMiddleware
from src.sa_gateway.middleware.request_log import RequestLogMiddleware
from src.sa_invest.api.router import router as invest_router
from src.sa_marketplace.api.router import router as marketplace_router
from src.sa_messaging.api.router import router as messaging_router
from src.sa_social.api.notifications_router import router as notifications_router
from src.sa_social.api.router import router as social_router
from src.sa_wallet.api.router import router as wallet_router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger("sa.app")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify DB + Redis connections. Shutdown: dispose."""
    # Startup
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    await get_redis()
    logger.info("%s started", settings.APP_NAME)
    yield
    # Shutdown
    await engine.dispose()
    await close_redis()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


# Starlette runs the last-added middleware first: request IDs are assigned
# before the rate limiter can short-circuit.
app.add_middleware(RateLimitMiddleware)
app.add_middleware(RequestLogMiddleware)


def _error_json(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(exc.code, exc.message)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return JSONResponse(status_code=exc.http_status, content=resp.model_dump())


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg', 'invalid')}" if loc else err.get("msg", "invalid"))
    return "; ".join(parts) or "Invalid request"


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return _error_json(request, exc)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return _error_json(request, RequestValidationFailedError(_validation_message(exc)))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error_json(request, InternalError())


for _router in (
    auth_router,
    users_router,
    social_router,
    notifications_router,
    feed_router,
    wallet_router,
    messaging_router,
    invest_router,
    gaming_router,
    marketplace_router,
    assistant_router,
):
    app.include_router(_router, prefix="/api")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0"}
