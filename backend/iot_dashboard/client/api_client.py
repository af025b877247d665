"""
Dashboard API Client
====================

Async HTTP client the dashboard uses to talk to the backend.

WHAT THIS DOES:
--------------
1. Calls the REST API for users, sensors and measures
2. Normalizes every document it receives (legacy foreign-key spellings)
3. Turns transport trouble into ONE of two user-facing errors:

    NoResponseError      - the server never answered (down, timeout, DNS...)
    ServerResponseError  - the server answered with a non-2xx status

HOW TO USE:
----------
    async with ApiClient("http://localhost:31356") as api:
        users = await api.list_users()
        measures = await api.filter_measures(type="temperature", minValue=15)
"""

import logging
from typing import Any, Optional

import httpx

from iot_dashboard.utils.documents import normalize_legacy_fields

logger = logging.getLogger(__name__)


# =============================================================================
# ERRORS
# =============================================================================

class ClientError(Exception):
    """Base class for errors raised by the API client."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NoResponseError(ClientError):
    """The request never got an answer."""


class ServerResponseError(ClientError):
    """The server answered with an error status."""

    def __init__(self, status_code: int, detail: str):
        super().__init__(f"Server returned an error ({status_code}): {detail}")
        self.status_code = status_code
        self.detail = detail


# =============================================================================
# THE CLIENT
# =============================================================================

class ApiClient:
    """
    One instance wraps one ``httpx.AsyncClient`` so connections get reused.

    Args:
        base_url: Where the backend lives (like "http://localhost:31356")
        token: Bearer token sent with write requests, if the backend wants one
        timeout: Seconds to wait for each response
        transport: Custom httpx transport (tests use ASGITransport/MockTransport)
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self.http_client = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info):
        await self.close()

    async def close(self):
        await self.http_client.aclose()

    # =========================================================================
    # LOW LEVEL
    # =========================================================================

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        try:
            response = await self.http_client.request(method, path, **kwargs)
        except httpx.TransportError as e:
            logger.error(f"{method} {path}: no response from server ({e})")
            raise NoResponseError(f"No response from server: {e}") from e

        if response.is_error:
            detail = self._error_detail(response)
            logger.error(f"{method} {path}: HTTP {response.status_code} {detail}")
            raise ServerResponseError(response.status_code, detail)

        payload = response.json()
        if isinstance(payload, list):
            return [normalize_legacy_fields(d) if isinstance(d, dict) else d for d in payload]
        if isinstance(payload, dict):
            return normalize_legacy_fields(payload)
        return payload

    @staticmethod
    def _error_detail(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text[:200] or response.reason_phrase
        if isinstance(body, dict) and "error" in body:
            return str(body["error"])
        return str(body)[:200]

    # =========================================================================
    # GENERIC RESOURCE CALLS
    # =========================================================================

    async def list_entities(self, resource: str) -> list[dict]:
        return await self._request("GET", f"/{resource}")

    async def get_entity(self, resource: str, entity_id: str) -> dict:
        return await self._request("GET", f"/{resource}/{entity_id}")

    async def create_entity(self, resource: str, data: dict) -> dict:
        return await self._request("POST", f"/{resource}", json=data)

    async def update_entity(self, resource: str, entity_id: str, data: dict) -> dict:
        return await self._request("PUT", f"/{resource}/{entity_id}", json=data)

    async def delete_entity(self, resource: str, entity_id: str) -> dict:
        return await self._request("DELETE", f"/{resource}/{entity_id}")

    # =========================================================================
    # PER-RESOURCE SHORTCUTS
    # =========================================================================

    async def list_users(self) -> list[dict]:
        return await self.list_entities("users")

    async def get_user(self, user_id: str) -> dict:
        return await self.get_entity("users", user_id)

    async def list_sensors(self) -> list[dict]:
        return await self.list_entities("sensors")

    async def get_sensor(self, sensor_id: str) -> dict:
        return await self.get_entity("sensors", sensor_id)

    async def list_measures(self) -> list[dict]:
        return await self.list_entities("measures")

    async def get_measure(self, measure_id: str) -> dict:
        return await self.get_entity("measures", measure_id)

    async def filter_measures(self, **filters) -> list[dict]:
        """
        Get measures through /measures/filter.

        Accepts type, sensorID, startDate, endDate, minValue, maxValue. Only
        filters that are not None are sent, so ``minValue=0`` is a real
        constraint. With no filters at all this is the plain listing.
        """
        params = {key: str(value) for key, value in filters.items() if value is not None}
        if not params:
            return await self.list_measures()
        return await self._request("GET", "/measures/filter", params=params)
