"""Custom exceptions for the questionnaires app."""

from common.exceptions import ConflictError, InvalidStateError, NotFoundError, ValidationFailedError


class QuestionnaireNotFoundError(NotFoundError):
    default_message = "Questionnaire not found."


class EmptyQuestionSetError(ValidationFailedError):
    default_message = "At least one question is required."


class UnknownOwnerError(ValidationFailedError):
    default_message = "The questionnaire owner does not exist."


class QuestionnairePublishedError(InvalidStateError):
    """Raised when editing a questionnaire that is already published."""

    default_message = "Published questionnaires cannot be modified. Unpublish it first."


class DuplicateSubmissionError(ConflictError):
    default_message = "You have already submitted this questionnaire."


class CrossQuestionnaireSubmissionError(ValidationFailedError):
    """Raised when a submission contains answers for questions of a different questionnaire."""

    default_message = "Submitted answers refer to questions outside this questionnaire."
