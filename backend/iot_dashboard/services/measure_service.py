"""
Measure Service
===============

CRUD for the ``measures`` collection, plus the filtered listing behind
``GET /measures/filter``.

THE FILTER:
----------
Every filter is optional. The query is the AND of whichever ones were given:

    type       -> type == <type>
    sensorID   -> sensorID == <id>
    startDate  -> creationDate >= <startDate>
    endDate    -> creationDate <= <endDate>
    minValue   -> value >= <minValue>
    maxValue   -> value <= <maxValue>

A missing (or empty) filter means "no constraint on that field", never
"must be empty". Values arrive as query-string text, so they are parsed here
and a bad one (``minValue=abc``) is a ValidationError, not a silent NaN
comparison that matches nothing.
"""

import logging
from typing import Any, Optional

from pymongo.database import Database

from iot_dashboard.exceptions import ValidationError
from iot_dashboard.models import MeasureCreate, MeasureType, MeasureUpdate
from iot_dashboard.services.base_service import CrudService
from iot_dashboard.services.sensor_service import SensorService
from iot_dashboard.utils.validation import (
    is_blank,
    parse_datetime,
    parse_number,
    to_naive_utc,
    to_object_id,
    validate_object_id,
)

logger = logging.getLogger(__name__)


def build_measure_query(
    type: Optional[str] = None,
    sensorID: Optional[str] = None,
    startDate: Optional[Any] = None,
    endDate: Optional[Any] = None,
    minValue: Optional[Any] = None,
    maxValue: Optional[Any] = None,
) -> dict:
    """
    Build the MongoDB query for a measures filter.

    Args:
        type: Measure type (humidity, temperature, airPollution)
        sensorID: Sensor id the measures must belong to
        startDate: Earliest creationDate (inclusive), ISO-8601
        endDate: Latest creationDate (inclusive), ISO-8601
        minValue: Smallest value (inclusive)
        maxValue: Largest value (inclusive)

    Returns:
        A query dict; ``{}`` when no filter was given

    Raises:
        ValidationError: If any given value can't be parsed
    """
    query: dict = {}

    if not is_blank(type):
        try:
            query["type"] = MeasureType(type).value
        except ValueError:
            allowed = ", ".join(t.value for t in MeasureType)
            raise ValidationError(f"type must be one of: {allowed}")

    if not is_blank(sensorID):
        if not validate_object_id(sensorID):
            raise ValidationError(f"sensorID must be a valid sensor identifier, got {sensorID!r}")
        query["sensorID"] = to_object_id(sensorID, "sensor")

    date_range = {}
    if not is_blank(startDate):
        date_range["$gte"] = parse_datetime(startDate, "startDate")
    if not is_blank(endDate):
        date_range["$lte"] = parse_datetime(endDate, "endDate")
    if date_range:
        query["creationDate"] = date_range

    value_range = {}
    if not is_blank(minValue):
        value_range["$gte"] = parse_number(minValue, "minValue")
    if not is_blank(maxValue):
        value_range["$lte"] = parse_number(maxValue, "maxValue")
    if value_range:
        query["value"] = value_range

    return query


class MeasureService(CrudService):
    collection_name = "measures"
    resource_name = "measure"
    create_model = MeasureCreate
    update_model = MeasureUpdate

    def __init__(self, database: Database, sensors: Optional[SensorService] = None):
        """
        Args:
            database: The MongoDB database holding the collections
            sensors: When given, sensor references are checked on write
        """
        super().__init__(database)
        self.sensors = sensors

    def _check_sensor(self, sensor_id: str):
        if self.sensors is not None and not self.sensors.exists(sensor_id):
            logger.warning(f"Rejected measure write: sensor {sensor_id} does not exist")
            raise ValidationError(f"sensorID {sensor_id} does not reference an existing sensor")

    def prepare_create(self, data: dict) -> dict:
        self._check_sensor(data["sensorID"])
        data["sensorID"] = to_object_id(data["sensorID"], "sensor")
        data["creationDate"] = to_naive_utc(data["creationDate"])
        return data

    def prepare_update(self, changes: dict) -> dict:
        if "sensorID" in changes:
            self._check_sensor(changes["sensorID"])
            changes["sensorID"] = to_object_id(changes["sensorID"], "sensor")
        if "creationDate" in changes:
            changes["creationDate"] = to_naive_utc(changes["creationDate"])
        return changes

    def filter(self, **filters) -> list[dict]:
        """List measures matching the filters accepted by ``build_measure_query``."""
        query = build_measure_query(**filters)
        logger.debug(f"Measure filter query: {query}")
        return self.list(query)
