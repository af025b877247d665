"""
Measures API Router
===================

ALL ENDPOINTS:
-------------
GET    /measures          - List all measures
GET    /measures/filter   - List measures matching query filters
GET    /measures/{id}     - Get one measure
POST   /measures          - Record a measure
PUT    /measures/{id}     - Update some fields of a measure
DELETE /measures/{id}     - Delete a measure

FILTER PARAMETERS (all optional, combined with AND):
    type, sensorID, startDate, endDate, minValue, maxValue

Example:
    GET /measures/filter?type=temperature&minValue=15&startDate=2024-03-01
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from iot_dashboard.models import MeasureCreate, MeasureResponse, MeasureUpdate
from iot_dashboard.routers.dependencies import get_measure_service, verify_write_token


router = APIRouter(prefix="/measures", tags=["measures"])


@router.get("", response_model=list[MeasureResponse])
def list_measures(service=Depends(get_measure_service)):
    """Get all measures."""
    return service.list()


# =============================================================================
# FILTER (Must come before parameterized routes)
# =============================================================================

@router.get("/filter", response_model=list[MeasureResponse])
def filter_measures(
    type: Optional[str] = Query(None, description="humidity, temperature or airPollution"),
    sensor_id: Optional[str] = Query(None, alias="sensorID"),
    start_date: Optional[str] = Query(None, alias="startDate", description="ISO-8601, inclusive"),
    end_date: Optional[str] = Query(None, alias="endDate", description="ISO-8601, inclusive"),
    min_value: Optional[str] = Query(None, alias="minValue"),
    max_value: Optional[str] = Query(None, alias="maxValue"),
    service=Depends(get_measure_service),
):
    """
    Get measures matching the filters.

    Leave a filter out to not constrain that field. Values that can't be
    parsed (minValue=abc, startDate=yesterday) answer 400.
    """
    return service.filter(
        type=type,
        sensorID=sensor_id,
        startDate=start_date,
        endDate=end_date,
        minValue=min_value,
        maxValue=max_value,
    )


# =============================================================================
# SINGLE MEASURE ENDPOINTS
# =============================================================================

@router.get("/{measure_id}", response_model=MeasureResponse)
def get_measure(measure_id: str, service=Depends(get_measure_service)):
    return service.get_by_id(measure_id)


@router.post(
    "",
    response_model=MeasureResponse,
    status_code=201,
    dependencies=[Depends(verify_write_token)],
)
def create_measure(request: MeasureCreate, service=Depends(get_measure_service)):
    """
    Record a measure.

    Send us:
    - type: humidity, temperature or airPollution
    - creationDate: When it was measured (ISO-8601)
    - sensorID: The sensor that measured it
    - value: The number
    """
    return service.create(request)


@router.put(
    "/{measure_id}",
    response_model=MeasureResponse,
    dependencies=[Depends(verify_write_token)],
)
def update_measure(measure_id: str, request: MeasureUpdate, service=Depends(get_measure_service)):
    return service.update(measure_id, request)


@router.delete(
    "/{measure_id}",
    response_model=MeasureResponse,
    dependencies=[Depends(verify_write_token)],
)
def delete_measure(measure_id: str, service=Depends(get_measure_service)):
    return service.delete(measure_id)
