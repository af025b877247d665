"""
Models Package
==============

This is where all our data models live.
Import from here instead of the individual files.

Example:
    from iot_dashboard.models import UserCreate, SensorResponse
"""

from .user import (
    HouseSize,
    UserCreate,
    UserUpdate,
    UserResponse,
)
from .sensor import (
    SensorCreate,
    SensorUpdate,
    SensorResponse,
)
from .measure import (
    MeasureType,
    MEASURE_UNITS,
    MeasureCreate,
    MeasureUpdate,
    MeasureResponse,
)
from .views import (
    SensorStats,
    DashboardStats,
    LocationMarker,
    StatSection,
    AdminStats,
)

__all__ = [
    "HouseSize",
    "UserCreate",
    "UserUpdate",
    "UserResponse",
    "SensorCreate",
    "SensorUpdate",
    "SensorResponse",
    "MeasureType",
    "MEASURE_UNITS",
    "MeasureCreate",
    "MeasureUpdate",
    "MeasureResponse",
    "SensorStats",
    "DashboardStats",
    "LocationMarker",
    "StatSection",
    "AdminStats",
]
