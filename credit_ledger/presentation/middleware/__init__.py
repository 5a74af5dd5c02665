"""Middleware for request processing."""

from .error_handler import error_handler_middleware
from .request_context import RequestContextMiddleware, get_acting_user, get_request_id
from .logging import LoggingMiddleware

__all__ = [
    "error_handler_middleware",
    "RequestContextMiddleware",
    "LoggingMiddleware",
    "get_acting_user",
    "get_request_id",
]
