import re

from django.core.exceptions import ValidationError
from django.utils.translation import gettext_lazy as _

PHONE_REGEX = re.compile(r"^\+?\d{5,15}$")
_PHONE_SEPARATORS = re.compile(r"[ \-().]")


def normalize_phone_number(value: str) -> str:
    """Strip spaces, dashes, dots and parentheses from a phone number."""
    return _PHONE_SEPARATORS.sub("", value)


def validate_phone_number(value: str | None) -> None:
    """Validate an optional phone number.

    Blank values are allowed; anything else must be digits with an optional leading ``+``.
    """
    if not value:
        return None
    if not PHONE_REGEX.fullmatch(normalize_phone_number(value)):
        raise ValidationError(_("Phone number format is incorrect."))
    return None
