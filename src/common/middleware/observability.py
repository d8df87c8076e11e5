"""Observability middleware for context enrichment."""

import time
import typing as t
import uuid

import structlog
from django.http import HttpRequest, HttpResponse

from common.utils import get_client_ip

logger = structlog.get_logger(__name__)


class StructlogContextMiddleware:
    """Enriches structlog context with request metadata.

    Binds request-level context (request_id, method, path, IP) to all log events during
    the request lifecycle and emits one ``request_finished`` event per request.
    """

    def __init__(self, get_response: t.Callable[[HttpRequest], HttpResponse]) -> None:
        """Initialize middleware.

        Args:
            get_response: Django middleware get_response callable
        """
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        """Process request and bind context.

        Args:
            request: Django HttpRequest

        Returns:
            HttpResponse
        """
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.path,
            ip_address=get_client_ip(request),
        )

        started = time.perf_counter()
        response = self.get_response(request)
        duration_ms = round((time.perf_counter() - started) * 1000, 2)

        # The bearer auth classes set request.user during view dispatch.
        user = getattr(request, "user", None)
        if user is not None and user.is_authenticated:
            structlog.contextvars.bind_contextvars(user_id=user.pk)

        logger.info("request_finished", status_code=response.status_code, duration_ms=duration_ms)
        response["X-Request-ID"] = request_id

        structlog.contextvars.clear_contextvars()

        return response
