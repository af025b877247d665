"""
Sensor Models
=============
Pydantic models for sensor validation and serialization.

A sensor belongs to a user (``userId``) and sits in a room of that user's
house (``location``). The room is NOT the user's country: the joined views in
``iot_dashboard.client`` expose the owner's place as ``userLocation`` so the two
never get mixed up.

SENSOR TYPES SEEN IN THE FIELD:
1. temperature
2. humidity
3. airPollution

The type is a free string at this layer; only measures enforce the enum.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from iot_dashboard.utils.documents import normalize_legacy_fields
from iot_dashboard.utils.validation import validate_object_id


def _check_user_id(value: Optional[str]) -> Optional[str]:
    if value is not None and not validate_object_id(value):
        raise ValueError("userId must be a valid user identifier")
    return value


# =============================================================================
# REQUEST MODELS
# =============================================================================

class SensorCreate(BaseModel):
    """
    Request body for POST /sensors.

    ``userID`` is still accepted and folded into ``userId``.

    Example Request:
        POST /sensors
        {
            "type": "temperature",
            "model": "DHT22",
            "location": "bedroom",
            "userId": "65f1c2a9e4b0a1b2c3d4e5f6"
        }
    """
    type: str = Field(
        ...,
        min_length=1,
        description="What the sensor measures",
        examples=["temperature", "humidity", "airPollution"]
    )
    model: str = Field(..., min_length=1, description="Hardware model")
    location: str = Field(
        ...,
        min_length=1,
        description="Room the sensor is installed in",
        examples=["bedroom", "livingroom", "bathroom", "entrance"]
    )
    userId: str = Field(..., description="Owning user id")

    @model_validator(mode="before")
    @classmethod
    def _canonical_keys(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return normalize_legacy_fields(data)
        return data

    @field_validator("userId")
    @classmethod
    def _valid_user_id(cls, value: str) -> str:
        return _check_user_id(value)


class SensorUpdate(BaseModel):
    """
    Request body for PUT /sensors/{id}.

    All fields are optional - only provided fields will be updated.
    """
    type: Optional[str] = Field(None, min_length=1)
    model: Optional[str] = Field(None, min_length=1)
    location: Optional[str] = Field(None, min_length=1)
    userId: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _canonical_keys(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return normalize_legacy_fields(data)
        return data

    @field_validator("userId")
    @classmethod
    def _valid_user_id(cls, value: Optional[str]) -> Optional[str]:
        return _check_user_id(value)


# =============================================================================
# RESPONSE MODELS
# =============================================================================

class SensorResponse(BaseModel):
    """
    Standard sensor response returned by the sensor endpoints.

    Fields:
        id: Store-assigned identifier (serialized as ``_id``)
        type: What it measures
        model: Hardware model
        location: Room name
        userId: Owning user id (may point at a deleted user)
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    type: str
    model: str
    location: str
    userId: str
