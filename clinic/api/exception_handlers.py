"""
Exception handlers for FastAPI application.

Maps domain exceptions to HTTP responses in one place. Every error body
has the same shape: {"error", "code", "message", "details", "status_code",
"correlation_id"}.
"""

import logging
import math
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from clinic.core.domain import (
    DependencyUnavailableException,
    DomainException,
    DuplicateEntityException,
    EntityNotFoundException,
    PatientLookupTimeoutException,
    PatientNotFoundException,
    ValidationException,
)

logger = logging.getLogger(__name__)

# Most specific classes first
DOMAIN_STATUS_CODES: tuple[tuple[type[DomainException], int], ...] = (
    (ValidationException, status.HTTP_400_BAD_REQUEST),
    (EntityNotFoundException, status.HTTP_404_NOT_FOUND),
    (PatientNotFoundException, status.HTTP_404_NOT_FOUND),
    (DuplicateEntityException, status.HTTP_409_CONFLICT),
    (PatientLookupTimeoutException, status.HTTP_504_GATEWAY_TIMEOUT),
    (DependencyUnavailableException, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def _correlation_id(request: Request) -> str | None:
    return getattr(request.state, "correlation_id", None)


def _error_response(
    request: Request,
    status_code: int,
    code: str,
    message: Any,
    details: Any = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    # Read by the request logging middleware for the response log line
    request.state.error_code = code
    return JSONResponse(
        status_code=status_code,
        content={
            "error": True,
            "code": code,
            "message": message,
            "details": details if details is not None else {},
            "status_code": status_code,
            "correlation_id": _correlation_id(request),
        },
        headers=headers,
    )


def status_code_for(exc: DomainException) -> int:
    """Resolve the HTTP status for a domain exception."""
    for exc_type, status_code in DOMAIN_STATUS_CODES:
        if isinstance(exc, exc_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def domain_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle DomainException subclasses."""
    if not isinstance(exc, DomainException):
        return await global_exception_handler(request, exc)

    status_code = status_code_for(exc)
    headers = None
    if isinstance(exc, DependencyUnavailableException) and exc.retry_after is not None:
        headers = {"Retry-After": str(max(1, math.ceil(exc.retry_after)))}

    log_level = logging.WARNING if status_code >= 500 else logging.INFO
    logger.log(
        log_level,
        f"{request.method} {request.url.path} -> {status_code} {exc.code}: {exc.message}",
        extra={"error_code": exc.code, "details": exc.details},
    )

    return _error_response(request, status_code, exc.code, exc.message, exc.details, headers)


async def http_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle HTTPException with consistent response format."""
    http_exc = exc if isinstance(exc, HTTPException) else HTTPException(status_code=500, detail=str(exc))
    return _error_response(
        request,
        http_exc.status_code,
        f"HTTP_{http_exc.status_code}",
        http_exc.detail,
        headers=http_exc.headers,
    )


async def validation_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle request validation errors with detailed error messages."""
    if not isinstance(exc, RequestValidationError):
        return await global_exception_handler(request, exc)

    errors = []
    for error in exc.errors():
        errors.append(
            {
                "field": ".".join(str(loc) for loc in error["loc"]),
                "message": error["msg"],
                "type": error["type"],
            }
        )

    logger.warning(f"Validation error on {request.url.path}: {errors}")

    return _error_response(
        request,
        status.HTTP_400_BAD_REQUEST,
        "VALIDATION_ERROR",
        "Validation error",
        {"errors": errors},
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle all unhandled exceptions.

    Logs the full exception with traceback and returns a safe error response.
    """
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}: {exc!s}",
        exc_info=exc,
        extra={"correlation_id": _correlation_id(request) or "-"},
    )

    return _error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_ERROR",
        "Internal server error",
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register all exception handlers with the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(DomainException, domain_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    logger.info("Exception handlers registered")
