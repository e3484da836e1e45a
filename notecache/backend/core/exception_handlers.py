"""
Exception Handlers.

Turn exceptions into ErrorResponse bodies:

    ApplicationError        status from STATUS_BY_ERROR, code and message kept
    RequestValidationError  422 VAL_REQUEST_INVALID with one entry per field
    anything else           500 SYS_INTERNAL_ERROR, cause only in the log

5xx responses are logged at error level, 4xx at warning.
"""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from notecache.backend.core.exceptions import (
    ApplicationError,
    CacheCorruptionError,
    CacheError,
    ConflictError,
    DatabaseError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from notecache.backend.core.logging import get_logger
from notecache.backend.schemas.base import ErrorDetail, ErrorResponse

logger = get_logger(__name__)

# Subclasses take the status of their nearest listed ancestor.
STATUS_BY_ERROR: dict[type[ApplicationError], int] = {
    ValidationError: 400,
    NotFoundError: 404,
    ConflictError: 409,
    InternalError: 500,
    CacheCorruptionError: 500,
    DatabaseError: 503,
    CacheError: 503,
}


def status_for(exc: ApplicationError) -> int:
    for cls in type(exc).__mro__:
        if cls in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[cls]
    return 500


def error_response(
    status_code: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    body = ErrorResponse(error=ErrorDetail(code=code, message=message, details=details))
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


async def application_error_handler(request: Request, exc: ApplicationError) -> JSONResponse:
    status_code = status_for(exc)
    log = logger.error if status_code >= 500 else logger.warning
    log(
        "Request failed",
        extra={"code": exc.code, "status": status_code, "error": exc.message},
    )
    details = exc.details if isinstance(exc, ValidationError) else None
    return error_response(status_code, exc.code, exc.message, details)


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [
        {
            "field": ".".join(str(part) for part in err["loc"]),
            "message": err["msg"],
            "type": err["type"],
        }
        for err in exc.errors()
    ]
    logger.warning("Request validation failed", extra={"fields": [e["field"] for e in errors]})
    return error_response(
        422,
        "VAL_REQUEST_INVALID",
        "Request validation failed",
        {"validation_errors": errors},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception", extra={"error_type": type(exc).__name__})
    return error_response(500, "SYS_INTERNAL_ERROR", "An unexpected error occurred")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApplicationError, application_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
