"""
Dashboard client - HTTP client, client-side joins and composed views.
"""

from iot_dashboard.client.api_client import (
    ApiClient,
    ClientError,
    NoResponseError,
    ServerResponseError,
)
from iot_dashboard.client.geo import COUNTRY_COORDINATES, coordinates_for
from iot_dashboard.client.joins import (
    count_by,
    dashboard_stats,
    location_markers,
    sensor_locations,
    sensor_stats,
    sensor_with_measures,
    user_with_sensors,
)
from iot_dashboard.client.loader import ViewLoader
from iot_dashboard.client.views import (
    fetch_admin_stats,
    fetch_dashboard_stats,
    fetch_location_markers,
    fetch_sensor_detail,
    fetch_sensor_locations,
    fetch_user_detail,
)

__all__ = [
    "ApiClient",
    "ClientError",
    "NoResponseError",
    "ServerResponseError",
    "COUNTRY_COORDINATES",
    "coordinates_for",
    "count_by",
    "dashboard_stats",
    "location_markers",
    "sensor_locations",
    "sensor_stats",
    "sensor_with_measures",
    "user_with_sensors",
    "ViewLoader",
    "fetch_admin_stats",
    "fetch_dashboard_stats",
    "fetch_location_markers",
    "fetch_sensor_detail",
    "fetch_sensor_locations",
    "fetch_user_detail",
]
