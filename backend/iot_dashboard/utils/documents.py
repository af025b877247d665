"""
Document Helpers
================

Turn raw store documents into JSON-friendly dicts, and fold the legacy
foreign-key spellings into the canonical ones.

CANONICAL FIELD NAMES:
    Sensor.userId       (legacy: userID)
    Measure.sensorID    (legacy: sensorId)

Older documents and older clients used both spellings. This module is the only
place that knows about the legacy ones.
"""

from datetime import datetime, timezone
from typing import Any, Mapping

from bson import ObjectId


LEGACY_FIELD_NAMES = {
    "userID": "userId",
    "sensorId": "sensorID",
}


def normalize_legacy_fields(document: Mapping[str, Any]) -> dict:
    """
    Return a copy of ``document`` using canonical foreign-key names.

    If both spellings are present the canonical one wins and the legacy key is
    dropped.
    """
    normalized = dict(document)
    for legacy, canonical in LEGACY_FIELD_NAMES.items():
        if legacy in normalized:
            value = normalized.pop(legacy)
            normalized.setdefault(canonical, value)
    return normalized


def _serialize_value(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        # pymongo hands back naive datetimes that are UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
    if isinstance(value, Mapping):
        return {k: _serialize_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_serialize_value(v) for v in value]
    return value


def serialize_document(document: Mapping[str, Any]) -> dict:
    """Make a store document safe to hand to the response layer."""
    return _serialize_value(normalize_legacy_fields(document))
