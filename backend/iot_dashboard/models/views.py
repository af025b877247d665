"""
View Models
===========

Shapes produced by the Client Data Layer (``iot_dashboard.client``) after it
has joined and aggregated the raw resources. Nothing here is stored.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field


class SensorStats(BaseModel):
    """
    Summary of one sensor's measures.

    average/minimum/maximum/latest are None when there are no measures, never
    0 or NaN, so callers have to decide what to show.
    """
    count: int = 0
    average: Optional[float] = None
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    latest: Optional[dict] = Field(None, description="Most recent measure by creationDate")


class DashboardStats(BaseModel):
    total_users: int
    total_sensors: int
    today: date


class LocationMarker(BaseModel):
    """One map marker per country, aggregated over all users living there."""
    location: str
    longitude: float
    latitude: float
    persons_in_house: int = 0
    user_count: int = 0
    house_size: Optional[str] = None


class StatSection(BaseModel):
    total: Optional[int] = None
    breakdown: dict[str, int] = Field(default_factory=dict)
    error: Optional[str] = None


class AdminStats(BaseModel):
    """
    Counts for the admin overview. Each section loads on its own, so one
    failing resource leaves an ``error`` in its section and the others intact.
    """
    users: StatSection
    sensors: StatSection
    measures: StatSection
