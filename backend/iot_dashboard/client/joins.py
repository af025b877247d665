"""
Client-Side Joins
=================

The store does no joins, so the dashboard stitches resources together itself.
Everything here is a pure function: collections in, joined views out.

THE PATTERN:
-----------
Build an id -> document map ONCE, then look each foreign key up in O(1).
Never re-scan a whole collection per item.

    users   ---(_id == sensor.userId)--->  sensor_locations
    sensors ---(_id == measure.sensorID)--> sensor_with_measures

A foreign key pointing at a deleted document is not an error: the joined
fields just come out as None.

Every input document goes through ``normalize_legacy_fields`` on the way in,
so old ``userID`` / ``sensorId`` spellings join like the canonical ones.
"""

from datetime import date, datetime, timezone
from typing import Any, Iterable, Optional

from iot_dashboard.client.geo import coordinates_for
from iot_dashboard.models.views import DashboardStats, LocationMarker, SensorStats
from iot_dashboard.utils.documents import normalize_legacy_fields


def _index_by_id(documents: Iterable[dict]) -> dict[str, dict]:
    return {str(d["_id"]): d for d in documents if d.get("_id") is not None}


def _normalized(documents: Iterable[dict]) -> list[dict]:
    return [normalize_legacy_fields(d) for d in documents]


def sensor_locations(sensors: Iterable[dict], users: Iterable[dict]) -> list[dict]:
    """
    Attach each sensor's owner details to the sensor.

    Adds ``userLocation``, ``personsInHouse`` and ``houseSize`` taken from the
    owning user, or None for all three when the owner can't be found. The
    sensor's own ``location`` (its room) is left untouched.
    """
    users_by_id = _index_by_id(_normalized(users))
    joined = []
    for sensor in _normalized(sensors):
        owner = users_by_id.get(str(sensor.get("userId")))
        joined.append({
            **sensor,
            "userLocation": owner.get("location") if owner else None,
            "personsInHouse": owner.get("personsInHouse") if owner else None,
            "houseSize": owner.get("houseSize") if owner else None,
        })
    return joined


def user_with_sensors(user_id: str, users: Iterable[dict], sensors: Iterable[dict]) -> Optional[dict]:
    """
    Return the user with a ``sensors`` list of everything it owns.

    None if there is no such user.
    """
    user = _index_by_id(_normalized(users)).get(str(user_id))
    if user is None:
        return None
    owned = [s for s in _normalized(sensors) if str(s.get("userId")) == str(user_id)]
    return {**user, "sensors": owned}


def sensor_with_measures(sensor_id: str, sensors: Iterable[dict], measures: Iterable[dict]) -> Optional[dict]:
    """
    Return the sensor with a ``measures`` list of everything it recorded.

    None if there is no such sensor.
    """
    sensor = _index_by_id(_normalized(sensors)).get(str(sensor_id))
    if sensor is None:
        return None
    recorded = [m for m in _normalized(measures) if str(m.get("sensorID")) == str(sensor_id)]
    return {**sensor, "measures": recorded}


def _as_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    return None


def sensor_stats(measures: Iterable[dict]) -> SensorStats:
    """
    Count, mean, min and max of the measure values, plus the latest measure.

    With no measures, count is 0 and everything else is None. Values that
    are not numbers are counted but left out of the average/min/max.
    ``latest`` is the measure with the greatest creationDate; between equal
    dates whichever comes first in the input wins. Measures without a usable
    creationDate are counted but can't be "latest".
    """
    values = []
    count = 0
    latest = None
    latest_date = None
    for measure in measures:
        count += 1
        value = measure.get("value")
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            values.append(float(value))
        created = _as_datetime(measure.get("creationDate"))
        if created is not None and (latest_date is None or created > latest_date):
            latest, latest_date = measure, created

    if not values:
        return SensorStats(count=count, latest=latest)

    return SensorStats(
        count=count,
        average=sum(values) / len(values),
        minimum=min(values),
        maximum=max(values),
        latest=latest,
    )


def dashboard_stats(users: Iterable[dict], sensors: Iterable[dict], today: Optional[date] = None) -> DashboardStats:
    """Totals shown on the dashboard header."""
    return DashboardStats(
        total_users=len(list(users)),
        total_sensors=len(list(sensors)),
        today=today or date.today(),
    )


def location_markers(users: Iterable[dict]) -> list[LocationMarker]:
    """
    One marker per known country, adding up the persons of every user there.

    Locations match the coordinate table case-insensitively; users whose
    location is unknown are dropped. Markers come out in first-seen order.
    """
    markers: dict[str, LocationMarker] = {}
    for user in users:
        location = user.get("location")
        coordinates = coordinates_for(location)
        if coordinates is None:
            continue
        key = location.strip().lower()
        marker = markers.get(key)
        if marker is None:
            marker = markers[key] = LocationMarker(
                location=key,
                longitude=coordinates[0],
                latitude=coordinates[1],
                house_size=user.get("houseSize"),
            )
        marker.persons_in_house += int(user.get("personsInHouse") or 0)
        marker.user_count += 1
    return list(markers.values())


def count_by(documents: Iterable[dict], field: str, missing: str = "undefined") -> dict[str, int]:
    """Count documents per value of ``field``, most common first."""
    counts: dict[str, int] = {}
    for document in documents:
        key = str(document.get(field) or missing)
        counts[key] = counts.get(key, 0) + 1
    return dict(sorted(counts.items(), key=lambda item: item[1], reverse=True))
