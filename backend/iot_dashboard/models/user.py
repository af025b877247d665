"""
User Models
===========

A user is a household being monitored: where it is and how many people live
there.

    location        Free-text place name. Also the join key against the
                    country coordinate table used for map markers.
    personsInHouse  Integer >= 1.
    houseSize       small | medium | big. DERIVED from personsInHouse on the
                    server (1-2 small, 3-4 medium, 5+ big). Anything a client
                    sends for it is ignored.
    createdAt       Set by the service on insert.
    updatedAt       Set by the service on every write.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class HouseSize(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"
    BIG = "big"


# =============================================================================
# REQUEST MODELS
# =============================================================================

class UserCreate(BaseModel):
    """
    Request body for POST /users.

    Example Request:
        POST /users
        {
            "location": "italy",
            "personsInHouse": 2
        }
    """
    location: str = Field(
        ...,
        description="Place name (country for map display)",
        min_length=1,
        max_length=200,
        examples=["italy", "japan"]
    )
    personsInHouse: int = Field(
        ...,
        ge=1,
        strict=True,
        description="Number of people living in the house"
    )


class UserUpdate(BaseModel):
    """
    Request body for PUT /users/{id}.

    All fields are optional - only provided fields will be updated.
    """
    location: Optional[str] = Field(None, min_length=1, max_length=200)
    personsInHouse: Optional[int] = Field(None, ge=1, strict=True)


# =============================================================================
# RESPONSE MODELS
# =============================================================================

class UserResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id", description="Store-assigned identifier")
    location: str
    personsInHouse: int
    houseSize: HouseSize
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None
