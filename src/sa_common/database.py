"""Async engine, session factory and the per-request session dependency.

Repositories never commit. The application service that owns a use case
commits once at the end (or rolls back on any exception), so every
multi-step ledger mutation is all-or-nothing.
"""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from config.settings import settings


class Base(DeclarativeBase):
    """Declarative base for the one ORM mapping (users). Everything else is raw SQL."""

    pass


engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_size=settings.DB_POOL_SIZE,
    max_overflow=settings.DB_MAX_OVERFLOW,
    pool_pre_ping=True,
)

# expire_on_commit=False: services build response schemas from rows after commit
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one AsyncSession per request, closed afterwards.

    Services commit or roll back themselves; anything left open when the
    request ends is rolled back by the session close.
    """
    async with async_session_factory() as session:
        yield session
