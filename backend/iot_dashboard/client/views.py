"""
Dashboard Views
===============

Each function here loads what one dashboard screen needs and returns it
already joined.

FETCH ORDER:
-----------
Independent resources are fetched at the same time (``asyncio.gather``), so a
screen waits for the slowest call, not the sum of them:

    fetch_sensor_locations   users + sensors together, then join
    fetch_user_detail        user + sensors together, then join
    fetch_dashboard_stats    users + sensors together
    fetch_admin_stats        users + sensors + measures together

Dependent calls run one after the other:

    fetch_sensor_detail      sensor first (404 stops here), then its measures

No isolation between the calls: if someone writes in between, the joined
view can mix data from slightly different moments. Fine for a dashboard.

ENRICHMENT NEVER SINKS THE LIST:
-------------------------------
If the main collection loads but an enrichment source fails (say /users while
building the sensor map), the view still comes back with the joined fields
set to None. Failures of the main collection do propagate.
"""

import asyncio
import logging
from datetime import date
from typing import Optional

from iot_dashboard.client.api_client import ApiClient, ClientError
from iot_dashboard.client.joins import (
    count_by,
    dashboard_stats,
    location_markers,
    sensor_locations,
    sensor_stats,
)
from iot_dashboard.models.views import (
    AdminStats,
    DashboardStats,
    LocationMarker,
    StatSection,
)

logger = logging.getLogger(__name__)


async def fetch_sensor_locations(api: ApiClient) -> list[dict]:
    """Every sensor with its owner's location, persons and house size."""
    sensors, users = await asyncio.gather(
        api.list_sensors(),
        api.list_users(),
        return_exceptions=True,
    )
    if isinstance(sensors, BaseException):
        raise sensors
    if isinstance(users, BaseException):
        logger.warning(f"Could not load users for sensor locations: {users}")
        users = []
    return sensor_locations(sensors, users)


async def fetch_user_detail(api: ApiClient, user_id: str) -> dict:
    """
    One user plus the sensors it owns.

    A failure loading the sensor list leaves ``sensors`` empty rather than
    hiding the user.
    """
    user, sensors = await asyncio.gather(
        api.get_user(user_id),
        api.list_sensors(),
        return_exceptions=True,
    )
    if isinstance(user, BaseException):
        raise user
    if isinstance(sensors, BaseException):
        logger.warning(f"Could not load sensors for user {user_id}: {sensors}")
        sensors = []
    owned = [s for s in sensors if str(s.get("userId")) == str(user_id)]
    return {**user, "sensors": owned}


async def fetch_sensor_detail(api: ApiClient, sensor_id: str) -> dict:
    """
    One sensor, its measures (newest first) and their stats.

    The sensor is loaded first: an unknown sensor raises before any measure
    is requested.
    """
    sensor = await api.get_sensor(sensor_id)
    try:
        measures = await api.filter_measures(sensorID=sensor_id)
    except ClientError as e:
        logger.warning(f"Could not load measures for sensor {sensor_id}: {e.message}")
        measures = []

    stats = sensor_stats(measures)
    measures = sorted(measures, key=lambda m: str(m.get("creationDate") or ""), reverse=True)
    return {**sensor, "measures": measures, "stats": stats}


async def fetch_dashboard_stats(api: ApiClient, today: Optional[date] = None) -> DashboardStats:
    users, sensors = await asyncio.gather(api.list_users(), api.list_sensors())
    return dashboard_stats(users, sensors, today=today)


async def fetch_location_markers(api: ApiClient) -> list[LocationMarker]:
    return location_markers(await api.list_users())


async def _stat_section(load, field: str) -> StatSection:
    try:
        documents = await load()
    except ClientError as e:
        return StatSection(error=e.message)
    return StatSection(total=len(documents), breakdown=count_by(documents, field))


async def fetch_admin_stats(api: ApiClient) -> AdminStats:
    """
    Counts for the admin overview.

    Users and sensors are broken down by location, measures by type. Each
    section carries its own error, so one failing resource doesn't blank the
    others.
    """
    users, sensors, measures = await asyncio.gather(
        _stat_section(api.list_users, "location"),
        _stat_section(api.list_sensors, "location"),
        _stat_section(api.list_measures, "type"),
    )
    return AdminStats(users=users, sensors=sensors, measures=measures)
