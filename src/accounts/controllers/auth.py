"""This module contains the controllers for registration and login."""

from ninja_extra import ControllerBase, api_controller, route

from accounts import schema
from accounts.service import account as account_service
from accounts.service import auth as auth_service
from common.schema import Envelope, ErrorEnvelope, ok
from common.throttling import AuthThrottle, UserRegistrationThrottle

@api_controller("/user", tags=["User"], throttle=AuthThrottle())
class UserController(ControllerBase):
    @route.post(
        "/register",
        response={201: Envelope[schema.SurveyUserSchema], 400: ErrorEnvelope},
        url_name="user-register",
        throttle=UserRegistrationThrottle(),
    )
    def register(self, payload: schema.RegisterUserSchema) -> tuple[int, dict[str, object]]:
        """Register a new account with username and password.

        Username and email must be unique. Returns the created user; log in afterwards
        to obtain a token.
        """
        user = account_service.register_user(payload)
        return 201, ok(schema.SurveyUserSchema.from_orm(user), "Registration successful.")

    @route.post(
        "/login",
        response={200: Envelope[schema.LoginResponseSchema], 401: ErrorEnvelope},
        url_name="user-login",
    )
    def login(self, payload: schema.LoginSchema) -> dict[str, object]:
        """Exchange username and password for a JWT access/refresh pair.

        Send the access token as `Authorization: Bearer <token>` on protected routes.
        """
        user, token = auth_service.login(payload.username, payload.password)
        return ok(
            schema.LoginResponseSchema(token=token, user=schema.SurveyUserSchema.from_orm(user)),
            "Login successful.",
        )
