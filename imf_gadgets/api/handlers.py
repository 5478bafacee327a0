"""Exception handlers mapping domain errors onto JSON responses."""

from uuid import uuid4

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from imf_gadgets.errors import GadgetApiError

logger = structlog.get_logger(__name__)


def _correlation_id(request: Request) -> str:
    return getattr(request.state, "correlation_id", None) or str(uuid4())


async def gadget_api_error_handler(request: Request, exc: GadgetApiError) -> JSONResponse:
    """Render a domain error as ``{"error": message}`` with its status code."""
    correlation_id = _correlation_id(request)

    log = logger.error if exc.status_code >= 500 else logger.info
    log(
        "request_failed",
        error_type=type(exc).__name__,
        status_code=exc.status_code,
        detail=exc.message,
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message},
        headers={"X-Correlation-Id": correlation_id},
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle Pydantic validation errors as 400 Bad Request."""
    correlation_id = _correlation_id(request)

    errors = exc.errors()
    if errors:
        first_error = errors[0]
        field = ".".join(str(loc) for loc in first_error.get("loc", ["unknown"]))
        message = first_error.get("msg", "Validation failed")
        detail = f"Field '{field}': {message}"
    else:
        detail = "Request validation failed"

    logger.warning("validation_error", detail=detail)

    return JSONResponse(
        status_code=400,
        content={"error": "Validation error", "detail": detail},
        headers={"X-Correlation-Id": correlation_id},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected errors and report a bare 500."""
    correlation_id = _correlation_id(request)

    logger.exception("unhandled_exception", error_type=type(exc).__name__)

    return JSONResponse(
        status_code=500,
        content={"error": "Internal Server Error"},
        headers={"X-Correlation-Id": correlation_id},
    )


def install_exception_handlers(app: FastAPI) -> None:
    """Register all error handlers on ``app``."""
    app.add_exception_handler(GadgetApiError, gadget_api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
