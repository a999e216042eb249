"""Global exception handlers for consistent error responses.

Design:
- AppError subclasses → status code of their kind (400, 401, 403, 404, 409,
  429, 500)
- Request body/query validation failures → 400 ``validation_error``
- Unexpected Exception → generic 500 (safety net)
- All responses include request_id for distributed tracing
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from bind8.core.config import settings
from bind8.core.errors import (
    AppError,
    AuthenticationAppError,
    AuthorizationAppError,
    ConfigurationAppError,
    ConflictAppError,
    ErrorDetails,
    NotFoundAppError,
    RateLimitAppError,
    ValidationAppError,
)
from bind8.core.logging import get_request_id

logger = logging.getLogger(__name__)


STATUS_BY_ERROR: dict[type[AppError], int] = {
    ValidationAppError: 400,
    AuthenticationAppError: 401,
    AuthorizationAppError: 403,
    NotFoundAppError: 404,
    ConflictAppError: 409,
    RateLimitAppError: 429,
    ConfigurationAppError: 500,
}


def status_for(exc: AppError) -> int:
    """Resolve the HTTP status of an AppError, honouring subclassing."""
    for cls in type(exc).__mro__:
        if cls in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[cls]
    return 400


def rate_limit_headers(details: ErrorDetails) -> dict[str, str]:
    """Retry metadata advertised on a throttled response."""
    return {
        "Retry-After": str(details.get("retry_after", 0)),
        "X-RateLimit-Limit": str(details.get("limit", 0)),
        "X-RateLimit-Remaining": "0",
        "X-RateLimit-Reset": str(details.get("reset_at", "")),
    }


def _rate_limit_response(exc: RateLimitAppError) -> JSONResponse:
    details = exc.details or {}
    headers = rate_limit_headers(details) if settings.app.rate_limit_include_headers else None
    return JSONResponse(
        status_code=429,
        content={
            "error": {
                "code": exc.code,
                "message": exc.message,
                "retry_after": details.get("retry_after", 0),
                "request_id": get_request_id(),
            }
        },
        headers=headers,
    )


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Render a domain error as ``{"error": {code, message, request_id, details?}}``.

    Args:
        request: FastAPI request object.
        exc: AppError instance (or subclass).

    Returns:
        JSONResponse with the status code of the error's kind.
    """
    if isinstance(exc, RateLimitAppError):
        # Already logged by the limiter with the (hashed) client key.
        return _rate_limit_response(exc)

    status_code = status_for(exc)
    log = logger.error if status_code >= 500 else logger.warning
    log(
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "error_message": exc.message,
            "status_code": status_code,
            "has_details": bool(exc.details),
            "request_path": request.url.path,
        },
    )

    error_content = {
        "code": exc.code,
        "message": exc.message,
        "request_id": get_request_id(),
    }
    if exc.details:
        error_content["details"] = exc.details

    return JSONResponse(
        status_code=status_code,
        content={"error": error_content},
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request input as a 400 validation error."""
    fields = [".".join(str(part) for part in err.get("loc", ()) if part != "body") for err in exc.errors()]
    fields = [f for f in fields if f]

    logger.warning(
        "request_validation_failed",
        extra={
            "fields": fields,
            "request_path": request.url.path,
        },
    )

    return JSONResponse(
        status_code=400,
        content={
            "error": {
                "code": "validation_error",
                "message": ("Invalid request: " + ", ".join(fields)) if fields else "Invalid request",
                "request_id": get_request_id(),
                "details": {"fields": fields},
            }
        },
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback for unexpected errors; never leaks internals to the client."""
    logger.error(
        "unhandled_exception",
        extra={
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
            "request_path": request.url.path,
            "request_method": request.method,
        },
    )

    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "internal_server_error",
                "message": "An unexpected error occurred. Please try again later.",
                "request_id": get_request_id(),
            }
        },
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app."""
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(RequestValidationError)(request_validation_handler)
    app.exception_handler(Exception)(general_exception_handler)
