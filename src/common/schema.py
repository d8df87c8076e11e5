"""Common schemas for the API."""

import typing as t

from ninja import Schema
from pydantic import StringConstraints

DataT = t.TypeVar("DataT")

StrippedString = t.Annotated[str, StringConstraints(strip_whitespace=True)]
OneToTwoFiftyFiveString = t.Annotated[str, StringConstraints(min_length=1, max_length=255, strip_whitespace=True)]


class Envelope(Schema, t.Generic[DataT]):
    """Every API response is wrapped in this envelope."""

    success: bool = True
    message: str = ""
    data: DataT | None = None


class ErrorEnvelope(Schema):
    success: t.Literal[False] = False
    error: str
    message: str
    data: None = None


class PageSchema(Schema):
    total: int
    page: int
    page_size: int


class HealthSchema(Schema):
    status: t.Literal["ok"] = "ok"
    version: str


def ok(data: t.Any = None, message: str = "") -> dict[str, t.Any]:
    """Build a success envelope payload."""
    return {"success": True, "message": message, "data": data}
