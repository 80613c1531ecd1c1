"""
Products API — Database Engine & Session Management
=====================================================

What:  Async SQLAlchemy engine (the connection pool), session factory,
       FastAPI session dependency and lifecycle helpers.
How:   One engine per process, created at import time from `settings` and
       disposed during application shutdown. Each request gets its own
       AsyncSession that borrows a pooled connection and returns it when the
       request finishes.

Connection Pooling:
    PostgreSQL (asyncpg):  AsyncAdaptedQueuePool sized by db_pool_size and
                           db_max_overflow; callers queue when it is exhausted.
    SQLite (aiosqlite):    NullPool, every session opens its own connection.
                           Only used by the test suite.
"""

import logging
from typing import Any, AsyncGenerator, Dict

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

from products_api.config import settings

logger = logging.getLogger(__name__)


def _engine_options() -> Dict[str, Any]:
    options: Dict[str, Any] = {"echo": settings.log_level == "DEBUG"}
    if settings.is_sqlite:
        options["poolclass"] = NullPool
    else:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return options


# ── Engine Configuration ──────────────────────────────────────────────────
engine = create_async_engine(settings.sqlalchemy_url, **_engine_options())

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: rows returned by the repository stay readable after
# the commit, when the route serializes them
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models."""
    pass


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the route handler
        3. On error: rolls back the open transaction and re-raises
        4. Always: closes the session (returns the connection to the pool)

    Commits are issued by the repository right after each mutation, so the
    response never reports a write that has not been persisted.

    Example usage in a route:
        @router.get("/products")
        async def list_products(db: AsyncSession = Depends(get_db_session)):
            return await product_repository.list_all(db)
    """
    async with async_session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def ping() -> None:
    """
    Run a trivial query against the pool.

    Raises whatever the driver raises when no connection can be obtained or
    the query fails; the health route turns that into "disconnected".
    """
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))


async def create_tables() -> None:
    """
    What:  CREATE TABLE IF NOT EXISTS for every registered model.
    When:  Application startup, when settings.db_create_tables is on.
    Note:  Existing tables are left untouched; there is no migration step.
    """
    # Register models with Base.metadata before create_all
    from products_api.models import product  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured")


async def dispose_engine() -> None:
    """
    What:  Gracefully closes all connections in the pool.
    When:  Called during application shutdown (lifespan handler).
    """
    await engine.dispose()
