"""
Request logging middleware for the clinic services.

Every request gets a correlation id: the caller's ``X-Correlation-ID`` when
it is well formed, a fresh one otherwise. The id is bound to the logging
context for the whole request, so the patients lookup, the exception
handlers and the outgoing call to the patients service all carry it.
"""

import logging
import re
import time
import uuid
from collections.abc import Callable
from typing import Any

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from clinic.core.shared.logger import reset_correlation_id, set_correlation_id

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"

# Accepted shape for a caller-supplied correlation id
_VALID_CORRELATION_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    One log line per request and one per response.

    The response line carries the error code set by the exception handlers
    and, for 503 answers, the ``Retry-After`` the client was given.
    """

    # Health checks and browser noise
    EXCLUDE_PATHS: tuple[str, ...] = (
        "/health",
        "/favicon.ico",
    )

    def _should_log(self, path: str) -> bool:
        return not any(path.startswith(exclude) for exclude in self.EXCLUDE_PATHS)

    def _resolve_correlation_id(self, request: Request) -> str:
        inbound = request.headers.get(CORRELATION_HEADER)
        if inbound and _VALID_CORRELATION_ID.match(inbound):
            return inbound
        return uuid.uuid4().hex[:12]

    async def dispatch(self, request: Request, call_next: Callable[[Request], Any]) -> Response:
        """
        Bind the correlation id, time the request and log its outcome.

        Args:
            request: Incoming HTTP request
            call_next: Next middleware/handler in chain

        Returns:
            Response from next handler, with the correlation id header
        """
        # Generate and attach correlation ID
        correlation_id = self._resolve_correlation_id(request)
        request.state.correlation_id = correlation_id
        token = set_correlation_id(correlation_id)

        try:
            # Skip detailed logging for excluded paths
            if not self._should_log(request.url.path):
                response = await call_next(request)
                response.headers[CORRELATION_HEADER] = correlation_id
                return response

            start_time = time.perf_counter()
            request_line = f"{request.method} {request.url.path}"

            # Log request
            logger.info(f"--> {request_line} from {self._get_client_ip(request)}")

            # Process request
            try:
                response = await call_next(request)
            except Exception as e:
                # Log exception and re-raise
                duration_ms = (time.perf_counter() - start_time) * 1000
                logger.error(
                    f"<-- {request_line} failed in {duration_ms:.2f}ms: {e!r}",
                    extra={"method": request.method, "path": request.url.path, "duration_ms": round(duration_ms, 2)},
                )
                raise

            duration_ms = (time.perf_counter() - start_time) * 1000

            # Log response
            error_code = getattr(request.state, "error_code", None)
            retry_after = response.headers.get("Retry-After")
            outcome = f"{response.status_code}"
            if error_code:
                outcome += f" {error_code}"
            if retry_after:
                outcome += f" (Retry-After {retry_after}s)"

            logger.log(
                self._level_for(response.status_code),
                f"<-- {request_line} {outcome} in {duration_ms:.2f}ms",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "error_code": error_code,
                    "retry_after": retry_after,
                    "duration_ms": round(duration_ms, 2),
                },
            )

            # Add correlation ID to response headers
            response.headers[CORRELATION_HEADER] = correlation_id
            response.headers["X-Response-Time-Ms"] = f"{duration_ms:.2f}"
            return response
        finally:
            reset_correlation_id(token)

    @staticmethod
    def _level_for(status_code: int) -> int:
        if status_code >= 500:
            return logging.WARNING
        return logging.INFO

    def _get_client_ip(self, request: Request) -> str:
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            # Take first IP in chain (original client)
            return forwarded.split(",")[0].strip()
        return request.client.host if request.client else "unknown"
