"""Request context middleware: request id and acting user."""

import uuid
from contextvars import ContextVar
from typing import Optional

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
acting_user_var: ContextVar[Optional[str]] = ContextVar("acting_user", default=None)


def get_request_id() -> Optional[str]:
    """Get the current request ID from context."""
    return request_id_var.get()


def get_acting_user() -> Optional[str]:
    """Get the user named by the X-User header of the current request."""
    return acting_user_var.get()


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Middleware that sets up request context.

    Generates or extracts a request ID and reads the acting user, binds
    both to every structlog event emitted while the request runs, and
    echoes the request ID in the response headers.
    """

    HEADER_NAME = "X-Request-ID"
    USER_HEADER_NAME = "X-User"

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(self.HEADER_NAME) or str(uuid.uuid4())
        acting_user = request.headers.get(self.USER_HEADER_NAME) or None

        request_token = request_id_var.set(request_id)
        user_token = acting_user_var.set(acting_user)
        structlog.contextvars.bind_contextvars(acting_user=acting_user)

        try:
            response = await call_next(request)
            response.headers[self.HEADER_NAME] = request_id
            return response
        finally:
            structlog.contextvars.unbind_contextvars("acting_user")
            acting_user_var.reset(user_token)
            request_id_var.reset(request_token)
