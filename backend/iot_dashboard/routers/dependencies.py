"""
Router Dependencies
===================

DEPENDENCY INJECTION
-------------------
The services are built when the app starts (see ``main.lifespan``) and handed
to the routers through ``set_services``. Endpoints ask for them with
``Depends(get_user_service)`` and friends.

WRITE TOKEN
----------
If an API token is configured, POST/PUT/DELETE need:

    Authorization: Bearer <token>

Reads stay open. With no token configured every endpoint is open.
"""

from typing import Optional

from fastapi import Header, HTTPException

from iot_dashboard.services import (
    MeasureService,
    SensorService,
    ServiceRegistry,
    UserService,
)


_services: Optional[ServiceRegistry] = None  # This gets set when the app starts
_api_token: Optional[str] = None


def set_services(services: Optional[ServiceRegistry], api_token: Optional[str] = None):
    """
    Called when the app starts to give the routers their services.
    """
    global _services, _api_token
    _services = services
    _api_token = api_token or None


def get_services() -> ServiceRegistry:
    if _services is None:
        raise HTTPException(status_code=500, detail="Server not fully started yet")
    return _services


def get_user_service() -> UserService:
    return get_services().users


def get_sensor_service() -> SensorService:
    return get_services().sensors


def get_measure_service() -> MeasureService:
    return get_services().measures


def verify_write_token(authorization: Optional[str] = Header(None)) -> None:
    """
    Verify the bearer token on write endpoints.

    Expected format: "Bearer <token>"

    Raises:
        HTTPException: 401 if missing/malformed, 403 if wrong
    """
    if _api_token is None:
        return

    if not authorization:
        raise HTTPException(
            status_code=401,
            detail="Missing Authorization header. Expected: Bearer <token>"
        )

    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(
            status_code=401,
            detail="Invalid Authorization format. Expected: Bearer <token>"
        )

    if parts[1] != _api_token:
        raise HTTPException(status_code=403, detail="Invalid API token")
