"""
Products API — Health Check & Home Routes
===========================================

What:  GET /health for probes and GET / as a static welcome payload.
How:   The health check borrows a connection from the pool and runs
       SELECT 1. Success → 200 connected; any failure → 500 disconnected.
Who:   Docker health checks, load balancers, humans poking the service.
"""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from products_api.database import ping
from products_api.schemas.product import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

WELCOME = {"Products API - Home Page": "Welcome to the Products API!"}


@router.get("/", summary="Welcome message")
async def home() -> dict:
    return WELCOME


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={500: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
    description=(
        "Runs a trivial query against the connection pool and reports whether "
        "the database is reachable."
    ),
)
async def health_check():
    """
    Check database connectivity.

    Returns:
        200 {"status": "ok", "database": "connected"}
        500 {"status": "error", "database": "disconnected"}
    """
    try:
        await ping()
    except Exception as e:
        logger.warning("Health check: database unreachable: %s", str(e))
        return JSONResponse(
            status_code=500,
            content=HealthResponse(status="error", database="disconnected").model_dump(),
        )
    return HealthResponse(status="ok", database="connected")
