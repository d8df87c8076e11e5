import typing as t

from django.conf import settings
from django.core.exceptions import ValidationError
from django.http import Http404, HttpRequest
from ninja.errors import AuthenticationError, HttpError
from ninja.errors import ValidationError as NinjaValidationError
from ninja_extra import NinjaExtraAPI
from ninja_extra.exceptions import APIException

from accounts.controllers.admin import AdminUserController
from accounts.controllers.auth import UserController
from common.exceptions import SurveyHubError
from common.schema import Envelope, HealthSchema, ok
from common.throttling import AnonDefaultThrottle, UserDefaultThrottle
from questionnaires.controllers import QuestionnaireAdminController, QuestionnaireController

from .exception_handlers import (
    handle_api_exception,
    handle_authentication_error,
    handle_django_validation_error,
    handle_general_exception,
    handle_http404,
    handle_http_error,
    handle_ninja_validation_error,
    handle_surveyhub_error,
)

api = NinjaExtraAPI(
    title="SurveyHub API",
    docs_url="/docs",
    version=settings.VERSION,
    description=f"SurveyHub API {settings.VERSION}",
    app_name=f"surveyhub-api-{settings.VERSION}",
    urls_namespace="api",
    servers=[
        {"url": settings.SERVICE_URL, "description": settings.SERVICE_DESCRIPTION},
    ],
    throttle=[AnonDefaultThrottle(), UserDefaultThrottle()],
)


@api.get("/health", tags=["Healthcheck"], response={200: Envelope[HealthSchema]}, url_name="health")
def health(request: HttpRequest) -> dict[str, t.Any]:
    """Check the health of the API.

    Args:
        request: The incoming HTTP request.

    Returns:
        The service status and version.
    """
    return ok(HealthSchema(version=settings.VERSION))


api.register_controllers(
    # Account controllers
    UserController,
    AdminUserController,
    # Questionnaire controllers
    QuestionnaireController,
    QuestionnaireAdminController,
)

EXCEPTION_HANDLERS = {
    Exception: handle_general_exception,
    SurveyHubError: handle_surveyhub_error,
    AuthenticationError: handle_authentication_error,
    NinjaValidationError: handle_ninja_validation_error,
    ValidationError: handle_django_validation_error,
    APIException: handle_api_exception,
    HttpError: handle_http_error,
    Http404: handle_http404,
}

for exc, handler in EXCEPTION_HANDLERS.items():
    api.add_exception_handler(exc, handler)  # type: ignore[arg-type]
