import mongomock
import pytest
from fastapi.testclient import TestClient

from iot_dashboard.main import app
from iot_dashboard.routers import set_services
from iot_dashboard.services import build_services


@pytest.fixture
def database():
    return mongomock.MongoClient().iot_dashboard_test


@pytest.fixture
def services(database):
    return build_services(database)


@pytest.fixture
def strict_services(database):
    return build_services(database, strict_references=True)


@pytest.fixture
def client(services):
    # No "with": the lifespan would connect to a real MongoDB
    set_services(services)
    yield TestClient(app)
    set_services(None)


@pytest.fixture
def strict_client(strict_services):
    set_services(strict_services)
    yield TestClient(app)
    set_services(None)


@pytest.fixture
def token_client(services):
    set_services(services, api_token="s3cret")
    yield TestClient(app)
    set_services(None)


@pytest.fixture
def user(services):
    return services.users.create({"location": "italy", "personsInHouse": 3})


@pytest.fixture
def sensor(services, user):
    return services.sensors.create({
        "type": "temperature",
        "model": "DHT22",
        "location": "bedroom",
        "userId": user["_id"],
    })
