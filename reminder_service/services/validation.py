"""Shape checks for identifiers, dates and query values.

Each helper returns the normalized value or raises a client
:class:`~reminder_service.core.errors.ValidationError` carrying a single
detail entry.
"""
from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import date, datetime
from typing import Any, overload

from reminder_service.core.config import MAX_ID
from reminder_service.core.errors import ErrorDetail, ValidationError

MIN_YEAR = 1000
MAX_YEAR = 9999

# Zero-padded calendar dates, optionally followed by a store time of day.
_DATE_LAYOUTS = (
    (re.compile(r"^\d{4}-\d{2}-\d{2}$"), "%Y-%m-%d"),
    (re.compile(r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}$"), "%Y-%m-%d %H:%M:%S"),
)


def _fail(message: str, path: str | None) -> ValidationError:
    return ValidationError(message, details=[ErrorDetail(message, path)])


def _coerce_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        cleaned = value.strip()
        if cleaned.isdigit():
            return int(cleaned)
        if cleaned.startswith("-") and cleaned[1:].isdigit():
            return int(cleaned)
    return None


@overload
def validate_id(value: Iterable[Any], *, max_id: int = ..., path: str = ...) -> list[int]: ...


@overload
def validate_id(value: Any, *, max_id: int = ..., path: str = ...) -> int: ...


def validate_id(value: Any, *, max_id: int = MAX_ID, path: str = "id") -> int | list[int]:
    """Ensure ``value`` (or every element of a list of values) is a valid id."""
    if isinstance(value, (list, tuple)):
        validated: list[int] = []
        details: list[ErrorDetail] = []
        for index, item in enumerate(value):
            try:
                validated.append(validate_id(item, max_id=max_id, path=f"{path}.{index}"))
            except ValidationError as exc:
                details.extend(exc.details)
        if details:
            raise ValidationError("Invalid identifier", details=details)
        return validated

    number = _coerce_int(value)
    if number is None:
        raise _fail("must be a positive integer", path)
    if number < 1 or number > max_id:
        raise _fail(f"must be between 1 and {max_id}", path)
    return number


def validate_enum(value: Any, allowed: Iterable[str], *, path: str = "type") -> str:
    """Ensure ``value`` is one of ``allowed``."""
    options = list(allowed)
    if value not in options:
        raise _fail(f"must be one of {', '.join(options)}", path)
    return value


def validate_date(value: Any, *, path: str = "date") -> date:
    """Parse a calendar date from ``YYYY-MM-DD`` or a store datetime."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        cleaned = value.strip()
        for pattern, layout in _DATE_LAYOUTS:
            if pattern.match(cleaned):
                try:
                    return datetime.strptime(cleaned, layout).date()
                except ValueError:
                    break
    raise _fail("must be a valid date formatted as YYYY-MM-DD", path)


def validate_month(value: Any, *, path: str = "month") -> int:
    """Ensure ``value`` is a month number between 1 and 12."""
    number = _coerce_int(value)
    if number is None or not 1 <= number <= 12:
        raise _fail("must be a month between 1 and 12", path)
    return number


def validate_year(value: Any, *, path: str = "year") -> int:
    number = _coerce_int(value)
    if number is None or not MIN_YEAR <= number <= MAX_YEAR:
        raise _fail("must be a four digit year", path)
    return number
