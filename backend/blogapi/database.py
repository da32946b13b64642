"""
Blog API - Database Session Management
======================================

What:  Async SQLAlchemy engines, session factories and FastAPI dependencies
       for the two stores.
How:   One engine per store. Each request gets its own session per store;
       the dependency commits on success and rolls back on error.
Who:   Repositories receive the sessions; routes obtain them via Depends().

Stores:
    Credential store (`database_url`):        users, user_roles
    Content store    (`content_database_url`): posts, comments

    The stores never share a transaction. Writes to one store are committed
    independently of writes to the other.
"""

import logging
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from blogapi.config import settings

logger = logging.getLogger(__name__)

# Range of the BIGINT columns holding user ids and author ids
BIGINT_MIN = -(2**63)
BIGINT_MAX = 2**63 - 1


def fits_bigint(value: int) -> bool:
    return BIGINT_MIN <= value <= BIGINT_MAX


def _build_engine(url: str) -> AsyncEngine:
    return create_async_engine(
        url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=settings.db_pool_pre_ping,
        pool_recycle=3600,
        echo=settings.log_level == "DEBUG",
    )


# ── Engines ───────────────────────────────────────────────────────────────
engine = _build_engine(settings.database_url)
content_engine = _build_engine(settings.content_database_url)

# ── Session Factories ─────────────────────────────────────────────────────
# expire_on_commit=False: mapped objects stay readable after the commit in
# the dependency teardown
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)
content_session_factory = async_sessionmaker(
    content_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Models ───────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """Declarative base for credential store tables (tracked by Alembic)."""
    pass


class ContentBase(DeclarativeBase):
    """Declarative base for content store collections."""
    pass


# ── Session Dependencies ──────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency providing a credential store session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the route handler and its services
        3. On success: commits the transaction
        4. On error: rolls back and re-raises

    Example usage in a route:
        @router.get("/users/{user_id}")
        async def get_user(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def get_content_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency providing a content store session per request."""
    async with content_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def ping(target: AsyncEngine) -> None:
    """Runs SELECT 1 against the engine; raises on connection failure."""
    async with target.connect() as conn:
        await conn.execute(text("SELECT 1"))


async def create_schema() -> None:
    """
    What:  Creates any missing tables in both stores.
    When:  Startup with CREATE_SCHEMA_ON_STARTUP=true, and in tests.
    """
    # Import models so they register with their metadata
    from blogapi.models import comment, post, user  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async with content_engine.begin() as conn:
        await conn.run_sync(ContentBase.metadata.create_all)
    logger.info("Schema ensured for credential and content stores")


async def dispose_engine() -> None:
    """Closes every pooled connection of both stores."""
    await engine.dispose()
    await content_engine.dispose()
