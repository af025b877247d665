"""
Routers Package
===============

Routers are like the reception desk - they direct incoming requests
to the right place.
"""

from .users import router as users_router
from .sensors import router as sensors_router
from .measures import router as measures_router
from .dependencies import set_services, get_services, verify_write_token

__all__ = [
    "users_router",
    "sensors_router",
    "measures_router",
    "set_services",
    "get_services",
    "verify_write_token",
]
