"""Per-request correlation for the contact relay.

A contact form post produces several log lines: the rejection or the
render, then the delivery outcome from the sender.  ``RequestIdMiddleware``
binds one ``request_id`` (the caller's ``X-Request-ID`` or a fresh UUID4) and
the configured ``SERVICE_NAME`` into structlog contextvars so those lines can
be joined, and returns the ID to the browser in the response header.
"""

from __future__ import annotations

import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Attach a unique request ID to every HTTP request/response cycle.

    Args:
        app: The wrapped ASGI application.
        service: Service name bound alongside the request ID.
    """

    def __init__(self, app: ASGIApp, service: str = "portfolio-contact-api") -> None:
        super().__init__(app)
        self._service = service

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        """Process the request, binding a request ID to structlog contextvars.

        Args:
            request: The incoming HTTP request.
            call_next: The next middleware or route handler.

        Returns:
            The HTTP response with ``X-Request-ID`` header set.
        """
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id, service=self._service)
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response
