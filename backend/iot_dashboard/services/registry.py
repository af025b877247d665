"""
Service Registry
================

Builds the three resource services on top of one database and keeps them
together so the routers can be handed a single object at startup.
"""

from dataclasses import dataclass

from pymongo.database import Database

from iot_dashboard.services.measure_service import MeasureService
from iot_dashboard.services.sensor_service import SensorService
from iot_dashboard.services.user_service import UserService


@dataclass
class ServiceRegistry:
    users: UserService
    sensors: SensorService
    measures: MeasureService


def build_services(database: Database, strict_references: bool = False) -> ServiceRegistry:
    """
    Wire up the services.

    Args:
        database: MongoDB database (real or mongomock)
        strict_references: Check that referenced users/sensors exist on write
    """
    users = UserService(database)
    sensors = SensorService(database, users=users if strict_references else None)
    measures = MeasureService(database, sensors=sensors if strict_references else None)
    return ServiceRegistry(users=users, sensors=sensors, measures=measures)
