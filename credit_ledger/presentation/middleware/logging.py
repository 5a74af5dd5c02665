"""Access logging and HTTP metrics middleware."""

import time
from typing import Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from credit_ledger.core.metrics import record_http_request

from .request_context import get_request_id

logger = structlog.get_logger(__name__)

# Probe endpoints are timed but not logged.
QUIET_PATHS = frozenset({"/health", "/health/ready", "/metrics"})


def _route_template(request: Request) -> str:
    """Matched route path with placeholders, e.g. ``/v1/credits/{credit_id}``."""
    route = request.scope.get("route")
    return getattr(route, "path", request.url.path)


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs one event per request with its outcome and duration.

    Client errors (refused payments, void conflicts) are logged as
    warnings and server errors as errors; every request is counted in
    the HTTP metrics under its route template.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()
        path = request.url.path
        quiet = path in QUIET_PATHS

        log = logger.bind(
            request_id=get_request_id(),
            method=request.method,
            path=path,
        )

        if not quiet:
            log.info(
                "request_started",
                query=str(request.query_params) if request.query_params else None,
            )

        try:
            response = await call_next(request)
        except Exception as e:
            log.error(
                "request_failed",
                error=str(e),
                error_type=type(e).__name__,
                duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
            )
            raise

        duration = time.perf_counter() - start_time
        record_http_request(request.method, _route_template(request), response.status_code, duration)

        if not quiet:
            if response.status_code >= 500:
                emit = log.error
            elif response.status_code >= 400:
                emit = log.warning
            else:
                emit = log.info
            emit(
                "request_completed",
                status_code=response.status_code,
                duration_ms=round(duration * 1000, 2),
            )

        return response
