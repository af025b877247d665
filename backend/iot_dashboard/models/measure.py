"""
Measure Models
==============

One reading taken by one sensor.

    type          humidity | temperature | airPollution
    creationDate  When the reading was taken (required, client supplied)
    sensorID      The sensor that produced it (legacy spelling: sensorId)
    value         The reading itself, a finite number

Measures are append-mostly history; update and delete exist for admin fixes.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from iot_dashboard.utils.documents import normalize_legacy_fields
from iot_dashboard.utils.validation import is_iso_date_text, validate_object_id


class MeasureType(str, Enum):
    HUMIDITY = "humidity"
    TEMPERATURE = "temperature"
    AIR_POLLUTION = "airPollution"


MEASURE_UNITS = {
    MeasureType.TEMPERATURE: "°C",
    MeasureType.HUMIDITY: "%",
    MeasureType.AIR_POLLUTION: "AQI",
}


def _check_sensor_id(value: Optional[str]) -> Optional[str]:
    if value is not None and not validate_object_id(value):
        raise ValueError("sensorID must be a valid sensor identifier")
    return value


def _check_creation_date(value: Any) -> Any:
    # Numbers (and numeric strings) would otherwise be read as Unix timestamps
    if value is None or isinstance(value, datetime) or is_iso_date_text(value):
        return value
    raise ValueError("creationDate must be an ISO-8601 date")


class MeasureCreate(BaseModel):
    """
    Request body for POST /measures.

    Example Request:
        POST /measures
        {
            "type": "temperature",
            "creationDate": "2024-03-01T08:30:00Z",
            "sensorID": "65f1c2a9e4b0a1b2c3d4e5f6",
            "value": 21.5
        }
    """
    model_config = ConfigDict(use_enum_values=True)

    type: MeasureType
    creationDate: datetime
    sensorID: str = Field(..., description="Sensor that took the reading")
    value: float = Field(..., strict=True, allow_inf_nan=False)

    @model_validator(mode="before")
    @classmethod
    def _canonical_keys(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return normalize_legacy_fields(data)
        return data

    @field_validator("sensorID")
    @classmethod
    def _valid_sensor_id(cls, value: str) -> str:
        return _check_sensor_id(value)

    @field_validator("creationDate", mode="before")
    @classmethod
    def _iso_creation_date(cls, value: Any) -> Any:
        return _check_creation_date(value)


class MeasureUpdate(BaseModel):
    """All fields are optional - only provided fields will be updated."""
    model_config = ConfigDict(use_enum_values=True)

    type: Optional[MeasureType] = None
    creationDate: Optional[datetime] = None
    sensorID: Optional[str] = None
    value: Optional[float] = Field(None, strict=True, allow_inf_nan=False)

    @model_validator(mode="before")
    @classmethod
    def _canonical_keys(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return normalize_legacy_fields(data)
        return data

    @field_validator("sensorID")
    @classmethod
    def _valid_sensor_id(cls, value: Optional[str]) -> Optional[str]:
        return _check_sensor_id(value)

    @field_validator("creationDate", mode="before")
    @classmethod
    def _iso_creation_date(cls, value: Any) -> Any:
        return _check_creation_date(value)


class MeasureResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    type: MeasureType
    creationDate: datetime
    sensorID: str
    value: float
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None
