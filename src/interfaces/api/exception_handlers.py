"""
Exception handlers for the API layer.

Every error leaves the API in one shape:
``{"error": {"code", "message", "request_id", "details"}}``.
"""

import math
import uuid
from typing import Any

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.shared.exceptions import (
    FetchError,
    QueryValidationError,
    RateLimitExceededError,
    UniScoutException,
)

logger = structlog.get_logger(__name__)

# Most specific class first
_STATUS_BY_EXCEPTION: list[tuple[type[UniScoutException], int]] = [
    (QueryValidationError, status.HTTP_400_BAD_REQUEST),
    (FetchError, status.HTTP_502_BAD_GATEWAY),
    (RateLimitExceededError, status.HTTP_429_TOO_MANY_REQUESTS),
]


def create_error_response(
    error_code: str,
    message: str,
    status_code: int,
    details: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """
    Create a standardized error response.

    Args:
        error_code: Machine-readable error code
        message: User-friendly error message
        status_code: HTTP status code
        details: Optional additional error details
        headers: Optional response headers

    Returns:
        JSONResponse: Error envelope with a fresh request id
    """
    error: dict[str, Any] = {
        "code": error_code,
        "message": message,
        "request_id": str(uuid.uuid4()),
    }
    if details:
        error["details"] = details

    return JSONResponse(
        status_code=status_code, content={"error": error}, headers=headers
    )


def status_for(exc: UniScoutException) -> int:
    for exc_type, status_code in _STATUS_BY_EXCEPTION:
        if isinstance(exc, exc_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render a malformed request body as 400 VALIDATION_ERROR."""
    validation_errors = [
        {
            "field": " -> ".join(str(part) for part in error.get("loc", [])),
            "message": error.get("msg", "Invalid value"),
            "type": error.get("type", "validation_error"),
        }
        for error in exc.errors()
    ]
    return create_error_response(
        error_code="VALIDATION_ERROR",
        message="Request validation failed",
        status_code=status.HTTP_400_BAD_REQUEST,
        details={"validation_errors": validation_errors},
    )


async def uniscout_exception_handler(
    request: Request, exc: UniScoutException
) -> JSONResponse:
    """
    Handle all custom UniScout exceptions.

    Args:
        request: The incoming request
        exc: The raised application exception

    Returns:
        JSONResponse: 400, 429, 502 or 500 depending on the exception type
    """
    status_code = status_for(exc)
    headers = None

    if isinstance(exc, RateLimitExceededError):
        headers = {"Retry-After": str(max(1, math.ceil(exc.retry_after_seconds)))}
        logger.warning(
            "rate_limit_exceeded",
            path=request.url.path,
            retry_after_seconds=round(exc.retry_after_seconds, 1),
        )
    elif status_code >= 500:
        logger.error(
            "request_failed",
            path=request.url.path,
            error_code=exc.error_code,
            error=exc.message,
        )

    return create_error_response(
        error_code=exc.error_code,
        message=exc.message,
        status_code=status_code,
        details=exc.details,
        headers=headers,
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    # Details stay in the log
    logger.exception("unhandled_exception", path=request.url.path)
    return create_error_response(
        error_code="INTERNAL_SERVER_ERROR",
        message="An unexpected error occurred",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app."""
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(UniScoutException, uniscout_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
