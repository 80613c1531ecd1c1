"""
Products API — FastAPI Application Factory
============================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() registers middleware, exception handlers and routers and
       attaches the lifespan; a module-level `app` is exported for uvicorn.
Who:   uvicorn (`uvicorn products_api.main:app`), the `products-api` console
       script and the test suite.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────────┐                   │
    │  │ Req ID   │→│  Logging        │                   │
    │  └──────────┘ └─────────────────┘                   │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────┐ ┌──────────────┐ ┌─────────────────┐  │
    │  │ GET /    │ │ GET /health  │ │ /products CRUD  │  │
    │  └──────────┘ └──────────────┘ └─────────────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Validation/InvalidId→400 │ NotFound→404      │   │
    │  │ DatabaseError→500        │ Exception→500     │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, ensure the products table exists
    Shutdown: dispose the engine (drain and close pooled connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, List

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from products_api import __version__
from products_api.config import settings
from products_api.database import create_tables, dispose_engine
from products_api.exceptions import (
    INTERNAL_ERROR_BODY,
    DatabaseError,
    InvalidProductIdError,
    ProductNotFoundError,
    ProductsApiError,
    ValidationError,
)
from products_api.middleware.logging import RequestLoggingMiddleware
from products_api.middleware.request_id import RequestIDMiddleware, request_id_var
from products_api.routes import health, products

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the whole process.

    Format: 2024-01-15T12:00:00 [INFO] products_api.access: GET /products 200 ...
    Output: stdout (collected by the container runtime).
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup:
        1. Setup logging
        2. Create the products table if missing (db_create_tables)
    Shutdown:
        1. Dispose the engine so PostgreSQL sees clean disconnects
    """
    setup_logging()
    logger.info("Products API %s starting up...", __version__)

    if settings.db_create_tables:
        try:
            await create_tables()
        except Exception:
            # Keep serving: /health reports the database as disconnected
            logger.error("Could not ensure database tables at startup", exc_info=True)

    logger.info("Server ready at http://%s:%d", settings.host, settings.port)

    yield

    logger.info("Products API shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _violations_from_request_errors(errors: List[Dict[str, Any]]) -> List[Dict[str, str]]:
    """Flatten FastAPI/Pydantic error entries into {field, message} pairs."""
    violations = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        violations.append({
            "field": ".".join(loc) or "body",
            "message": str(err.get("msg", "Invalid value")),
        })
    return violations


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP responses.

    Handler hierarchy:
        ValidationError         → 400 {"error": "Validation failed", "details": [...]}
        RequestValidationError  → 400 (same shape; wrong types, malformed JSON)
        InvalidProductIdError   → 400 {"error": "Invalid product ID"}
        ProductNotFoundError    → 404 {"error": "Product not found"}
        DatabaseError           → 500 {"error": "Internal server error"}
        ProductsApiError (base) → 500
        Exception (fallback)    → 500

    Responses never include stack traces, SQL, or driver messages; those
    are logged server-side with the request id.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error: %s", rid, exc.violations)
        return JSONResponse(
            status_code=400,
            content={"error": exc.message, "details": exc.violations},
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        violations = _violations_from_request_errors(exc.errors())
        logger.warning("[%s] Request validation error: %s", rid, violations)
        return JSONResponse(
            status_code=400,
            content={"error": "Validation failed", "details": violations},
        )

    @app.exception_handler(InvalidProductIdError)
    async def handle_invalid_id(request: Request, exc: InvalidProductIdError):
        logger.info("[%s] Invalid product id: %r", request_id_var.get(""), exc.raw_id)
        return JSONResponse(status_code=400, content={"error": exc.message})

    @app.exception_handler(ProductNotFoundError)
    async def handle_not_found(request: Request, exc: ProductNotFoundError):
        return JSONResponse(status_code=404, content={"error": exc.message})

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(status_code=500, content=INTERNAL_ERROR_BODY)

    @app.exception_handler(ProductsApiError)
    async def handle_app_error(request: Request, exc: ProductsApiError):
        rid = request_id_var.get("")
        logger.error("[%s] Application error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(status_code=500, content=INTERNAL_ERROR_BODY)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=exc)
        return JSONResponse(status_code=500, content=INTERNAL_ERROR_BODY)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    app = FastAPI(
        title="Products API",
        description="CRUD service for products backed by PostgreSQL.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Middleware executes in REVERSE order of addition:
    # RequestID runs first, then Logging
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(products.router)

    return app


app = create_app()


def run() -> None:
    """Entry point for the `products-api` console script."""
    uvicorn.run(
        "products_api.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
