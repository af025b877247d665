"""
Services Package
================

These are the "workers" that talk to the database.

- MongoStore: Owns the MongoDB connection
- UserService / SensorService / MeasureService: CRUD for each resource
- ServiceRegistry: The three services wired together
"""

from .database import MongoStore, store_errors
from .base_service import CrudService
from .user_service import UserService
from .sensor_service import SensorService
from .measure_service import MeasureService, build_measure_query
from .registry import ServiceRegistry, build_services

__all__ = [
    "MongoStore",
    "store_errors",
    "CrudService",
    "UserService",
    "SensorService",
    "MeasureService",
    "build_measure_query",
    "ServiceRegistry",
    "build_services",
]
