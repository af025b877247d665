import asyncio

import httpx
import pytest

from iot_dashboard.client import (
    ApiClient,
    NoResponseError,
    ServerResponseError,
    ViewLoader,
    fetch_admin_stats,
    fetch_dashboard_stats,
    fetch_location_markers,
    fetch_sensor_detail,
    fetch_sensor_locations,
    fetch_user_detail,
)
from iot_dashboard.main import app


def _api():
    return ApiClient("http://testserver", transport=httpx.ASGITransport(app=app))


def _mock_api(handler):
    return ApiClient("http://testserver", transport=httpx.MockTransport(handler))


def run(coro_fn):
    """Open a client, run the view with it, close the client."""
    async def main(api):
        async with api:
            return await coro_fn(api)
    return main


@pytest.fixture
def measured(services, sensor):
    for day, value in ((1, 10), (2, 30), (3, 20)):
        services.measures.create({
            "type": "temperature",
            "creationDate": f"2024-03-0{day}T08:00:00Z",
            "sensorID": sensor["_id"],
            "value": value,
        })
    return sensor


def test_sensor_locations_over_http(client, user, sensor):
    joined = asyncio.run(run(fetch_sensor_locations)(_api()))

    assert len(joined) == 1
    assert joined[0]["_id"] == sensor["_id"]
    assert joined[0]["userLocation"] == "italy"
    assert joined[0]["houseSize"] == "medium"


def test_user_detail_over_http(client, user, sensor):
    detail = asyncio.run(run(lambda api: fetch_user_detail(api, user["_id"]))(_api()))

    assert detail["location"] == "italy"
    assert [s["_id"] for s in detail["sensors"]] == [sensor["_id"]]


def test_sensor_detail_over_http(client, measured):
    detail = asyncio.run(run(lambda api: fetch_sensor_detail(api, measured["_id"]))(_api()))

    assert [m["value"] for m in detail["measures"]] == [20, 30, 10]
    stats = detail["stats"]
    assert stats.count == 3
    assert stats.average == 20
    assert stats.latest["value"] == 20


def test_unknown_sensor_detail_raises_404(client):
    with pytest.raises(ServerResponseError) as excinfo:
        asyncio.run(run(lambda api: fetch_sensor_detail(api, "65f1c2a9e4b0a1b2c3d4e5f6"))(_api()))

    assert excinfo.value.status_code == 404
    assert excinfo.value.detail == "Sensor not found"


def test_dashboard_stats_over_http(client, user, sensor):
    stats = asyncio.run(run(fetch_dashboard_stats)(_api()))

    assert stats.total_users == 1
    assert stats.total_sensors == 1


def test_location_markers_over_http(client, services):
    services.users.create({"location": "japan", "personsInHouse": 2})
    services.users.create({"location": "Japan", "personsInHouse": 4})

    markers = asyncio.run(run(fetch_location_markers)(_api()))

    assert len(markers) == 1
    assert markers[0].persons_in_house == 6


def test_admin_stats_over_http(client, measured):
    stats = asyncio.run(run(fetch_admin_stats)(_api()))

    assert stats.users.total == 1
    assert stats.users.breakdown == {"italy": 1}
    assert stats.sensors.breakdown == {"bedroom": 1}
    assert stats.measures.breakdown == {"temperature": 3}


def test_filter_measures_sends_zero(client, measured):
    async def view(api):
        return await api.filter_measures(minValue=0, maxValue=None)

    measures = asyncio.run(run(view)(_api()))

    assert len(measures) == 3


def test_no_response_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(NoResponseError):
        asyncio.run(run(lambda api: api.list_users())(_mock_api(handler)))


def test_server_error_carries_status_and_detail():
    def handler(request):
        return httpx.Response(500, json={"error": "Database error during list users"})

    with pytest.raises(ServerResponseError) as excinfo:
        asyncio.run(run(lambda api: api.list_users())(_mock_api(handler)))

    assert excinfo.value.status_code == 500
    assert "(500)" in excinfo.value.message
    assert excinfo.value.detail == "Database error during list users"


def test_sensor_locations_survive_users_failure():
    def handler(request):
        if request.url.path == "/users":
            return httpx.Response(500, json={"error": "boom"})
        return httpx.Response(200, json=[{"_id": "s1", "userID": "u1", "location": "kitchen"}])

    joined = asyncio.run(run(fetch_sensor_locations)(_mock_api(handler)))

    assert joined == [{
        "_id": "s1",
        "userId": "u1",
        "location": "kitchen",
        "userLocation": None,
        "personsInHouse": None,
        "houseSize": None,
    }]


def test_sensor_locations_fail_when_sensors_fail():
    def handler(request):
        if request.url.path == "/sensors":
            return httpx.Response(503, json={"error": "down"})
        return httpx.Response(200, json=[])

    with pytest.raises(ServerResponseError):
        asyncio.run(run(fetch_sensor_locations)(_mock_api(handler)))


def test_admin_stats_sections_fail_independently():
    def handler(request):
        if request.url.path == "/measures":
            return httpx.Response(500, json={"error": "boom"})
        return httpx.Response(200, json=[{"_id": "x", "location": "italy"}])

    stats = asyncio.run(run(fetch_admin_stats)(_mock_api(handler)))

    assert stats.users.total == 1
    assert stats.sensors.breakdown == {"italy": 1}
    assert stats.measures.total is None
    assert "boom" in stats.measures.error


def test_loader_publishes_result():
    async def main():
        async def fetch():
            return [1, 2, 3]

        loader = ViewLoader(fetch)
        loader.start()
        await loader.wait()
        return loader

    loader = asyncio.run(main())

    assert loader.data == [1, 2, 3]
    assert loader.error is None
    assert not loader.loading


def test_loader_publishes_client_error():
    async def main():
        async def fetch():
            raise NoResponseError("No response from server")

        loader = ViewLoader(fetch)
        loader.start()
        await loader.wait()
        return loader

    loader = asyncio.run(main())

    assert loader.data is None
    assert loader.error == "No response from server"


def test_loader_close_cancels_and_drops_result():
    async def main():
        release = asyncio.Event()

        async def fetch():
            await release.wait()
            return "late"

        loader = ViewLoader(fetch)
        task = loader.start()
        await asyncio.sleep(0)
        await loader.close()
        release.set()
        return loader, task

    loader, task = asyncio.run(main())

    assert task.cancelled()
    assert loader.data is None
    assert not loader.loading
    with pytest.raises(RuntimeError):
        loader.start()


def test_loader_restart_cancels_previous_fetch():
    async def main():
        calls = []

        async def fetch():
            calls.append(len(calls))
            if len(calls) == 1:
                await asyncio.Event().wait()
            return len(calls)

        loader = ViewLoader(fetch)
        first = loader.start()
        await asyncio.sleep(0)
        loader.start()
        await loader.wait()
        return loader, first

    loader, first = asyncio.run(main())

    assert first.cancelled()
    assert loader.data == 2


def test_loader_publishes_unexpected_error():
    async def main():
        async def fetch():
            raise KeyError("userLocation")

        loader = ViewLoader(fetch, name="sensor map")
        loader.start()
        await loader.wait()
        return loader

    loader = asyncio.run(main())

    assert loader.data is None
    assert loader.error == "Could not load sensor map"
    assert not loader.loading
