"""Forgiving page/page_size handling for listing endpoints.

Out-of-range or unparsable values are silently corrected instead of rejected.
"""

import typing as t
from dataclasses import dataclass

from django.db.models import Model, QuerySet

from .conf import CoreConfig, get_core_config

M = t.TypeVar("M", bound=Model)


@dataclass(frozen=True)
class PageRequest:
    page: int
    page_size: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def limit(self) -> int:
        return self.offset + self.page_size


def _as_int(value: t.Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def clamp_page(page: t.Any = None, page_size: t.Any = None, config: CoreConfig | None = None) -> PageRequest:
    """Normalize raw pagination input.

    Args:
        page: Requested page; anything below 1 or unparsable becomes 1.
        page_size: Requested page size; anything outside [1, max_page_size] or unparsable
            becomes the configured default.
        config: Engine config, defaults to the process-wide one.

    Returns:
        The corrected page request.
    """
    config = config or get_core_config()
    parsed_page = _as_int(page)
    parsed_size = _as_int(page_size)
    if parsed_page is None or parsed_page < 1:
        parsed_page = 1
    if parsed_size is None or parsed_size < 1 or parsed_size > config.max_page_size:
        parsed_size = config.default_page_size
    return PageRequest(page=parsed_page, page_size=parsed_size)


def paginate(queryset: QuerySet[M], page_request: PageRequest) -> tuple[list[M], int]:
    """Slice an ordered queryset and return the page items with the total row count."""
    total = queryset.count()
    return list(queryset[page_request.offset : page_request.limit]), total
