"""
Products API — Test Configuration (conftest.py)
=================================================

What:  Shared pytest fixtures for the test suite.
How:   The application is pointed at an aiosqlite file database before any
       products_api module is imported; the products table is recreated for
       every test that asks for `database`.

Fixture Overview:
    ├── mock_db_session: AsyncMock session (no database at all)
    ├── database:        fresh, empty products table
    ├── seeded_products: `database` + the two canonical rows (ids 1 and 2)
    ├── db_session:      real AsyncSession on the test database
    ├── test_client:     HTTPX AsyncClient talking to the ASGI app
    └── lenient_client:  same, but returns 500 responses for unhandled errors
                         instead of re-raising them into the test
"""

import os
import tempfile
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Must run before products_api.config is imported anywhere
_db_dir = tempfile.mkdtemp(prefix="products_api_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_db_dir, 'test.db')}"
os.environ["DB_CREATE_TABLES"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

from products_api.database import Base, async_session_factory, engine  # noqa: E402
from products_api.models.product import Product  # noqa: E402

SEED_PRODUCTS = [
    {"name": "Wireless Mouse", "price": 29.99, "stock": 50},
    {"name": "Mechanical Keyboard", "price": 89.99, "stock": 25},
]


# ══════════════════════════════════════════════════════════════════════════
# Mocked Session
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        mock_db_session.execute.return_value.scalar_one_or_none.return_value = product
        result = await repository.get_by_id(mock_db_session, 1)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


# ══════════════════════════════════════════════════════════════════════════
# Real Database
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def database():
    """Drop and recreate the products table; ids restart at 1."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def seeded_products(database):
    """The two canonical rows: Wireless Mouse (id 1), Mechanical Keyboard (id 2)."""
    async with async_session_factory() as session:
        for row in SEED_PRODUCTS:
            session.add(Product(**row))
            await session.flush()
        await session.commit()
    return SEED_PRODUCTS


@pytest_asyncio.fixture
async def db_session(database):
    async with async_session_factory() as session:
        yield session


# ══════════════════════════════════════════════════════════════════════════
# HTTP Clients
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client():
    """
    HTTPX AsyncClient routed straight into the ASGI app (no server).

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from products_api.main import app
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def lenient_client():
    """Like test_client, but unhandled exceptions come back as the app's 500 response."""
    from products_api.main import app
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
