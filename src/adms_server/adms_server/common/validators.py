from __future__ import annotations

import re
from datetime import date

from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date

_DAY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def require_non_empty(value: str | None, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"empty {field_name}")
    return value


def require_iso_day(value: str | None) -> date:
    if not value or not _DAY_RE.match(value):
        raise ValidationError("bad date format, use YYYY-MM-DD")
    try:
        return parse_iso_date(value)
    except ValueError as exc:
        raise ValidationError("bad date format, use YYYY-MM-DD") from exc
