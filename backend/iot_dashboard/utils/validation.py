"""
Input Validation Utilities
===========================

Common validation and parsing helpers for ids, numbers, dates and the
derived house size.
"""

import math
import re
from datetime import datetime, timezone
from typing import Any, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from iot_dashboard.exceptions import InvalidIdError, ValidationError


_datetime_adapter = TypeAdapter(datetime)

# YYYY-MM-DD up front; bare numbers would otherwise parse as Unix timestamps
_ISO_DATE_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}")


def validate_object_id(value: Any) -> bool:
    """
    Validate a store identifier.

    Args:
        value: Candidate id (string or ObjectId)

    Returns:
        True if it is a 24-hex-character ObjectId, False otherwise
    """
    if isinstance(value, ObjectId):
        return True
    return isinstance(value, str) and ObjectId.is_valid(value)


def to_object_id(value: Any, resource: str = "document") -> ObjectId:
    """
    Turn an id coming from a URL or a payload into an ObjectId.

    Raises:
        InvalidIdError: If the value is not a well-formed identifier
    """
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise InvalidIdError(f"Invalid {resource} id: {value!r}")


def parse_number(value: Any, field: str) -> float:
    """
    Parse a numeric filter value.

    ``float("nan")`` and ``float("inf")`` parse fine in Python but make every
    range comparison meaningless, so they are rejected too.

    Raises:
        ValidationError: If the value is not a finite number
    """
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a number, got {value!r}")
    if not math.isfinite(number):
        raise ValidationError(f"{field} must be a finite number, got {value!r}")
    return number


def parse_datetime(value: Any, field: str) -> datetime:
    """
    Parse an ISO-8601 date or datetime and return it as naive UTC.

    The store keeps naive UTC datetimes, so everything that gets written or
    compared is normalized the same way.

    Only ISO-8601 text (or a datetime) is accepted; "20240301" is an error,
    not a timestamp from 1970.

    Raises:
        ValidationError: If the value is not a date the parser understands
    """
    if isinstance(value, datetime):
        return to_naive_utc(value)
    if not is_iso_date_text(value):
        raise ValidationError(f"{field} must be an ISO-8601 date, got {value!r}")
    try:
        parsed = _datetime_adapter.validate_python(value.strip())
    except PydanticValidationError:
        raise ValidationError(f"{field} must be an ISO-8601 date, got {value!r}")
    return to_naive_utc(parsed)


def is_iso_date_text(value: Any) -> bool:
    """True for strings starting with an ISO-8601 date (YYYY-MM-DD)."""
    return isinstance(value, str) and _ISO_DATE_PREFIX.match(value.strip()) is not None


def to_naive_utc(value: datetime) -> datetime:
    """Drop the timezone (after converting to UTC) and anything below milliseconds."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    # The store keeps millisecond precision only
    return value.replace(microsecond=(value.microsecond // 1000) * 1000)


def house_size_for(persons_in_house: Optional[int]) -> str:
    """
    Derive the house size from the number of people living in it.

    1-2 persons = small, 3-4 = medium, 5+ = big.
    """
    persons = persons_in_house or 0
    if persons <= 2:
        return "small"
    if persons <= 4:
        return "medium"
    return "big"


def is_blank(value: Any) -> bool:
    """True for None and empty/whitespace strings (query params sent empty)."""
    return value is None or (isinstance(value, str) and not value.strip())
