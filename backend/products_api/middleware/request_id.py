"""
Products API — Request ID Middleware
======================================

What:  Tags each request with a short correlation id.
How:   Reuses the client's X-Request-ID header when present, otherwise
       generates one. The id is stored in a ContextVar (read by exception
       handlers and the access log) and echoed back in the response header.

Unhandled exceptions are turned into the generic 500 here rather than by
Starlette's outermost ServerErrorMiddleware, so error responses carry the
header too.
"""

import logging
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from products_api.exceptions import INTERNAL_ERROR_BODY

logger = logging.getLogger(__name__)

# Coroutine-local: concurrent requests on the same loop each see their own id
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Assigns a request id and returns it in the X-Request-ID header."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        request_id_var.set(rid)
        request.state.request_id = rid

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error("[%s] Unexpected error: %s", rid, str(e), exc_info=e)
            response = JSONResponse(status_code=500, content=INTERNAL_ERROR_BODY)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
