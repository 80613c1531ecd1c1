"""
Products API — Request Logging Middleware
===========================================

What:  One access-log line per request: method, path, status, duration,
       request id and client address.
How:   Times the downstream call and logs at a level chosen by status class
       (5xx ERROR, 4xx WARNING, otherwise INFO). Request bodies are never
       logged.
When:  Runs inside RequestIDMiddleware, so the request id is already set.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from products_api.middleware.request_id import request_id_var

logger = logging.getLogger("products_api.access")

# Probed every few seconds by orchestrators; not worth a log line each time
QUIET_PATHS = {"/health"}


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status and duration of every non-health request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        logger.log(
            level_for_status(status),
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            request.url.path,
            status,
            duration_ms,
            request_id_var.get(""),
            client_ip,
        )
        return response
