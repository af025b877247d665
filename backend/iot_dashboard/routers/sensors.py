"""
Sensors API Router
==================

HOW IT WORKS:
------------
1. Frontend sends an HTTP request (GET, POST, PUT, DELETE)
2. FastAPI validates the body against the pydantic model
3. We call the SensorService to do the work
4. We send back the sensor as JSON (``_id`` and ``userId`` as strings)

ALL ENDPOINTS:
-------------
GET    /sensors          - List all sensors
GET    /sensors/{id}     - Get one sensor
POST   /sensors          - Register a sensor for a user
PUT    /sensors/{id}     - Update some fields of a sensor
DELETE /sensors/{id}     - Delete a sensor (its measures are left alone)

``userID`` in a request body is accepted and stored as ``userId``.
"""

from fastapi import APIRouter, Depends

from iot_dashboard.models import SensorCreate, SensorResponse, SensorUpdate
from iot_dashboard.routers.dependencies import get_sensor_service, verify_write_token


router = APIRouter(prefix="/sensors", tags=["sensors"])


@router.get("", response_model=list[SensorResponse])
def list_sensors(service=Depends(get_sensor_service)):
    """Get all sensors."""
    return service.list()


@router.get("/{sensor_id}", response_model=SensorResponse)
def get_sensor(sensor_id: str, service=Depends(get_sensor_service)):
    """
    Get a specific sensor by its ID.

    Unknown and malformed ids both answer 404.
    """
    return service.get_by_id(sensor_id)


@router.post(
    "",
    response_model=SensorResponse,
    status_code=201,
    dependencies=[Depends(verify_write_token)],
)
def create_sensor(request: SensorCreate, service=Depends(get_sensor_service)):
    """
    Register a sensor.

    Send us:
    - type: What it measures (like "temperature")
    - model: Hardware model
    - location: Room it's in (like "bedroom")
    - userId: The user who owns it
    """
    return service.create(request)


@router.put(
    "/{sensor_id}",
    response_model=SensorResponse,
    dependencies=[Depends(verify_write_token)],
)
def update_sensor(sensor_id: str, request: SensorUpdate, service=Depends(get_sensor_service)):
    return service.update(sensor_id, request)


@router.delete(
    "/{sensor_id}",
    response_model=SensorResponse,
    dependencies=[Depends(verify_write_token)],
)
def delete_sensor(sensor_id: str, service=Depends(get_sensor_service)):
    """
    Delete a sensor.

    There's no undo! Measures recorded by this sensor stay in the database.
    """
    return service.delete(sensor_id)
