"""
Users API Router
================

ALL ENDPOINTS:
-------------
GET    /users          - List all users
GET    /users/{id}     - Get one user
POST   /users          - Create a user (houseSize is derived, not accepted)
PUT    /users/{id}     - Update some fields of a user
DELETE /users/{id}     - Delete a user (its sensors are left alone)

Errors come back as {"error": "..."}: 400 bad payload, 404 unknown or
malformed id, 500 database trouble.
"""

from fastapi import APIRouter, Depends

from iot_dashboard.models import UserCreate, UserResponse, UserUpdate
from iot_dashboard.routers.dependencies import get_user_service, verify_write_token


router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=list[UserResponse])
def list_users(service=Depends(get_user_service)):
    """Get all users."""
    return service.list()


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: str, service=Depends(get_user_service)):
    return service.get_by_id(user_id)


@router.post(
    "",
    response_model=UserResponse,
    status_code=201,
    dependencies=[Depends(verify_write_token)],
)
def create_user(request: UserCreate, service=Depends(get_user_service)):
    """
    Create a user.

    Send us:
    - location: Country/place name (like "italy")
    - personsInHouse: How many people live there (1 or more)

    houseSize is worked out from personsInHouse: 1-2 small, 3-4 medium, 5+ big.
    """
    return service.create(request)


@router.put(
    "/{user_id}",
    response_model=UserResponse,
    dependencies=[Depends(verify_write_token)],
)
def update_user(user_id: str, request: UserUpdate, service=Depends(get_user_service)):
    """Update a user. Only the fields you send are changed."""
    return service.update(user_id, request)


@router.delete(
    "/{user_id}",
    response_model=UserResponse,
    dependencies=[Depends(verify_write_token)],
)
def delete_user(user_id: str, service=Depends(get_user_service)):
    """
    Delete a user and get back what was deleted.

    Sensors that belonged to this user are NOT deleted.
    """
    return service.delete(user_id)
