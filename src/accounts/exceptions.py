"""Custom exceptions for the accounts app."""

from common.exceptions import ForbiddenError, NotFoundError, UnauthenticatedError, ValidationFailedError


class InvalidCredentialError(Exception):
    """Raised by a credential verifier when a bearer credential cannot be verified."""


class InvalidLoginError(UnauthenticatedError):
    default_message = "Invalid username or password."


class UsernameTakenError(ValidationFailedError):
    default_message = "Username already exists."


class EmailTakenError(ValidationFailedError):
    default_message = "Email already in use."


class UserNotFoundError(NotFoundError):
    default_message = "User not found."


class AdminDeletionError(ForbiddenError):
    """Raised when user management tries to delete an administrator."""

    default_message = "Administrator accounts cannot be deleted."
