from __future__ import annotations

import re
from datetime import date

from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def require_iso_date(value: str, field_name: str = "date") -> date:
    if not value or not _ISO_DATE.match(value):
        raise ValidationError(f"Invalid {field_name}")
    try:
        return parse_iso_date(value)
    except ValueError as exc:
        raise ValidationError(f"Invalid {field_name}") from exc


def require_int_in_range(value: str, field_name: str, *, minimum: int, maximum: int) -> int:
    """Parse a decimal integer and check minimum <= n <= maximum."""
    if value is None or not (value.isascii() and value.isdigit()):
        raise ValidationError(f"Invalid {field_name}")
    number = int(value)
    if number < minimum or number > maximum:
        raise ValidationError(f"Invalid {field_name}")
    return number
