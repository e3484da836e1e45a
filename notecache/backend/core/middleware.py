"""
Request Context Middleware.

Gives every request an id, taken from the caller's X-Request-ID header
or generated, echoes it on the response and binds it to the structlog
context. Anything that needs the id later (log records, response
metadata, exception handlers) reads it with ``current_request_id()``.
"""

import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from notecache.backend.core.logging import get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def current_request_id() -> str | None:
    """Id of the request being handled, or None outside a request."""
    return structlog.contextvars.get_contextvars().get("request_id")


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())

        # Each request runs in its own task context; start it clean.
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        logger.debug("Request completed", extra={"status_code": response.status_code})
        return response
