"""
Products API — Application Lifecycle Tests
============================================

What we test:
    ✅ Startup ensures tables when configured; shutdown disposes the engine
    ✅ A database outage at startup does not stop the app from starting
    ✅ Pydantic error entries flatten into {field, message} violations
"""

from unittest.mock import AsyncMock, patch

import pytest

from products_api.main import _violations_from_request_errors, app, lifespan


@pytest.mark.asyncio
async def test_lifespan_creates_tables_and_disposes_engine():
    with patch("products_api.main.settings.db_create_tables", True), \
         patch("products_api.main.create_tables", new=AsyncMock()) as mock_create, \
         patch("products_api.main.dispose_engine", new=AsyncMock()) as mock_dispose, \
         patch("products_api.main.setup_logging"):
        async with lifespan(app):
            mock_create.assert_awaited_once()
            mock_dispose.assert_not_awaited()

        mock_dispose.assert_awaited_once()


@pytest.mark.asyncio
async def test_lifespan_survives_unreachable_database():
    with patch("products_api.main.settings.db_create_tables", True), \
         patch(
             "products_api.main.create_tables",
             new=AsyncMock(side_effect=ConnectionRefusedError("connection refused")),
         ), \
         patch("products_api.main.dispose_engine", new=AsyncMock()) as mock_dispose, \
         patch("products_api.main.setup_logging"):
        async with lifespan(app):
            pass

        mock_dispose.assert_awaited_once()


@pytest.mark.asyncio
async def test_lifespan_skips_table_creation_when_disabled():
    with patch("products_api.main.settings.db_create_tables", False), \
         patch("products_api.main.create_tables", new=AsyncMock()) as mock_create, \
         patch("products_api.main.dispose_engine", new=AsyncMock()), \
         patch("products_api.main.setup_logging"):
        async with lifespan(app):
            pass

        mock_create.assert_not_awaited()


def test_request_errors_flatten_to_violations():
    errors = [
        {"loc": ("body", "price"), "msg": "Input should be a valid number"},
        {"loc": ("body",), "msg": "Field required"},
    ]
    assert _violations_from_request_errors(errors) == [
        {"field": "price", "message": "Input should be a valid number"},
        {"field": "body", "message": "Field required"},
    ]
