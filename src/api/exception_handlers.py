"""Exception handlers for the API.

Every failure is answered with the error envelope
``{"success": false, "error": <kind>, "message": <text>, "data": null}``.
"""

import typing as t

import structlog
from django.core.exceptions import ValidationError as DjangoValidationError
from django.http import Http404, HttpRequest
from ninja.errors import AuthenticationError, HttpError
from ninja.errors import ValidationError as NinjaValidationError
from ninja.responses import Response
from ninja_extra.exceptions import APIException, Throttled

from common.exceptions import SurveyHubError

logger = structlog.get_logger(__name__)


def error_response(status: int, kind: str, message: str) -> Response:
    return Response(status=status, data={"success": False, "error": kind, "message": message, "data": None})


def handle_surveyhub_error(request: HttpRequest, exc: SurveyHubError | t.Type[SurveyHubError]) -> Response:
    """Handle an expected domain error."""
    assert isinstance(exc, SurveyHubError)
    log = logger.error if exc.status_code >= 500 else logger.info
    log("request_failed", error=exc.kind, status_code=exc.status_code, detail=exc.message)
    return error_response(exc.status_code, exc.kind, exc.message)


def handle_authentication_error(
    request: HttpRequest, exc: AuthenticationError | t.Type[AuthenticationError]
) -> Response:
    """Handle a missing, malformed or rejected bearer credential."""
    return error_response(401, "unauthenticated", "Authentication required.")


def handle_ninja_validation_error(
    request: HttpRequest, exc: NinjaValidationError | t.Type[NinjaValidationError]
) -> Response:
    """Handle a request payload or query string that does not match the schema."""
    assert isinstance(exc, NinjaValidationError)
    messages = []
    for error in exc.errors:
        location = ".".join(str(part) for part in error.get("loc", ()) if part not in ("body", "payload", "query"))
        messages.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return error_response(400, "validation_error", "; ".join(messages) or "Invalid input.")


def handle_django_validation_error(
    request: HttpRequest, exc: DjangoValidationError | t.Type[DjangoValidationError]
) -> Response:
    """Handle a model validation error raised by full_clean."""
    assert isinstance(exc, DjangoValidationError)
    if hasattr(exc, "error_dict"):
        message = "; ".join(f"{field}: {' '.join(errors)}" for field, errors in exc.message_dict.items())
    else:
        message = " ".join(exc.messages)
    logger.info("request_failed", error="validation_error", detail=message)
    return error_response(400, "validation_error", message)


def handle_api_exception(request: HttpRequest, exc: APIException | t.Type[APIException]) -> Response:
    """Handle ninja-extra exceptions such as throttling and permission denials."""
    assert isinstance(exc, APIException)
    kind = {401: "unauthenticated", 403: "forbidden", 404: "not_found", 429: "throttled"}.get(
        exc.status_code, "error"
    )
    message = str(exc.detail)
    if isinstance(exc, Throttled) and exc.wait:
        message = f"Too many requests. Retry in {int(exc.wait)} seconds."
    return error_response(exc.status_code, kind, message)


def handle_http_error(request: HttpRequest, exc: HttpError | t.Type[HttpError]) -> Response:
    assert isinstance(exc, HttpError)
    kind = {401: "unauthenticated", 403: "forbidden", 404: "not_found"}.get(exc.status_code, "error")
    return error_response(exc.status_code, kind, str(exc))


def handle_http404(request: HttpRequest, exc: Http404 | t.Type[Http404]) -> Response:
    return error_response(404, "not_found", "Not found.")


def handle_general_exception(request: HttpRequest, exc: Exception | t.Type[Exception]) -> Response:
    """Handle an unexpected exception without leaking internals to the caller."""
    logger.exception("INTERNAL_SERVER_ERROR", exc_info=True)
    return error_response(500, "internal_error", "Internal server error.")
