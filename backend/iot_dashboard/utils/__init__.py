"""
Utility modules for the IoT dashboard backend.
"""

from iot_dashboard.utils.validation import (
    validate_object_id,
    to_object_id,
    parse_number,
    parse_datetime,
    to_naive_utc,
    is_iso_date_text,
    house_size_for,
    is_blank,
)
from iot_dashboard.utils.documents import (
    LEGACY_FIELD_NAMES,
    normalize_legacy_fields,
    serialize_document,
)

__all__ = [
    "validate_object_id",
    "to_object_id",
    "parse_number",
    "parse_datetime",
    "to_naive_utc",
    "is_iso_date_text",
    "house_size_for",
    "is_blank",
    "LEGACY_FIELD_NAMES",
    "normalize_legacy_fields",
    "serialize_document",
]
