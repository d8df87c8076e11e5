"""Common middleware for SurveyHub."""

from .observability import StructlogContextMiddleware

__all__ = ["StructlogContextMiddleware"]
