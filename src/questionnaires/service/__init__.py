"""Questionnaire service layer."""

from .lifecycle import QuestionnaireLifecycle
from .reports import ReportAggregator
from .submission import SubmissionRecorder

__all__ = [
    "QuestionnaireLifecycle",
    "ReportAggregator",
    "SubmissionRecorder",
]
