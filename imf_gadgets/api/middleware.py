"""Per-request correlation ids and access logging."""

import time
from uuid import uuid4

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

CORRELATION_HEADER = "X-Correlation-Id"
MAX_CORRELATION_ID_LENGTH = 128

logger = structlog.get_logger(__name__)


def _inbound_correlation_id(request: Request) -> str:
    """Reuse the caller's id when it is short printable ASCII, else mint one."""
    value = request.headers.get(CORRELATION_HEADER, "").strip()
    if value and len(value) <= MAX_CORRELATION_ID_LENGTH and value.isascii() and value.isprintable():
        return value
    return str(uuid4())


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Tags every request with a correlation id and logs its outcome.

    The id is stored on ``request.state.correlation_id``, bound into the
    structlog context for the request, and echoed in the response header.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        correlation_id = _inbound_correlation_id(request)
        request.state.correlation_id = correlation_id

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            correlation_id=correlation_id,
            method=request.method,
            path=request.url.path,
        )

        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = round((time.perf_counter() - started) * 1000, 2)

        logger.info(
            "request_completed",
            status_code=response.status_code,
            duration_ms=duration_ms,
        )
        response.headers[CORRELATION_HEADER] = correlation_id
        return response
