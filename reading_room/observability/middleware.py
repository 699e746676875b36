"""
FastAPI middleware for observability.

CorrelationMiddleware binds a correlation ID to the request context and
echoes it back; RequestLoggingMiddleware logs one line per request with
status and latency.

Dependencies: fastapi, starlette, reading_room.observability.correlation
System role: Request/response observability injection
"""

import logging
import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from reading_room.observability.correlation import clear_correlation_id, set_correlation_id

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"

# Polled by load balancers; logged at DEBUG only
QUIET_PATHS = ("/api/v1/health",)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status and latency of every request."""

    async def dispatch(self, request: Request, call_next) -> Response:
        started = time.perf_counter()
        path = request.url.path
        level = logging.DEBUG if path.startswith(QUIET_PATHS) else logging.INFO

        try:
            response: Response = await call_next(request)
        except Exception as e:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.exception(
                f"{__name__}:dispatch - {request.method} {path} failed after {elapsed_ms:.1f}ms",
                extra={"error_type": type(e).__name__},
            )
            raise

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.log(
            level,
            f"{__name__}:dispatch - {request.method} {path} -> {response.status_code} ({elapsed_ms:.1f}ms)",
        )
        return response


class CorrelationMiddleware(BaseHTTPMiddleware):
    """
    Bind a correlation ID for the lifetime of a request.

    An incoming X-Correlation-ID header is reused; otherwise a UUID is
    generated. The ID is returned in the same response header.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        correlation_id = set_correlation_id(request.headers.get(CORRELATION_HEADER))
        try:
            response: Response = await call_next(request)
        finally:
            clear_correlation_id()
        response.headers[CORRELATION_HEADER] = correlation_id
        return response
