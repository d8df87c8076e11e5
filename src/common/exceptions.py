"""Error taxonomy shared by every SurveyHub service.

Each error carries a stable machine-checkable ``kind`` and the HTTP status it maps to.
The API layer turns them into ``{"success": false, "error": kind, "message": ...}``.
"""

import typing as t


class SurveyHubError(Exception):
    """Base class for all expected, user-visible failures."""

    kind: t.ClassVar[str] = "error"
    status_code: t.ClassVar[int] = 400
    default_message: t.ClassVar[str] = "Request failed."

    def __init__(self, message: str | None = None) -> None:
        """Store the human-readable message."""
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationFailedError(SurveyHubError):
    """Malformed or missing input. The caller can fix it and resubmit."""

    kind = "validation_error"
    status_code = 400
    default_message = "Invalid input."


class InvalidStateError(SurveyHubError):
    """The target entity is in a state that does not allow the operation."""

    kind = "invalid_state"
    status_code = 400
    default_message = "Operation not allowed in the current state."


class UnauthenticatedError(SurveyHubError):
    kind = "unauthenticated"
    status_code = 401
    default_message = "Authentication required."


class ForbiddenError(SurveyHubError):
    kind = "forbidden"
    status_code = 403
    default_message = "Permission denied."


class NotFoundError(SurveyHubError):
    kind = "not_found"
    status_code = 404
    default_message = "Not found."


class ConflictError(SurveyHubError):
    kind = "conflict"
    status_code = 409
    default_message = "Conflict."


class TransactionError(SurveyHubError):
    """A multi-row write failed in the store and was fully rolled back."""

    kind = "transaction_error"
    status_code = 500
    default_message = "The operation could not be completed and was rolled back."

    def __init__(self, message: str | None = None, *, reason: BaseException | None = None) -> None:
        """Name the kind of store failure in the message; the raw error text stays in the logs."""
        text = message or self.default_message
        if reason is not None:
            text = f"{text} ({type(reason).__name__})"
        super().__init__(text)
        self.reason = reason
