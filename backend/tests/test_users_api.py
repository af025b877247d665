from bson import ObjectId
from pymongo.errors import ServerSelectionTimeoutError


def test_create_user_derives_house_size(client):
    resp = client.post("/users", json={"location": "italy", "personsInHouse": 2})

    assert resp.status_code == 201
    body = resp.json()
    assert ObjectId.is_valid(body["_id"])
    assert body["location"] == "italy"
    assert body["houseSize"] == "small"


def test_client_house_size_is_ignored(client):
    resp = client.post(
        "/users",
        json={"location": "japan", "personsInHouse": 5, "houseSize": "small"},
    )

    assert resp.status_code == 201
    assert resp.json()["houseSize"] == "big"


def test_get_user_matches_create(client):
    created = client.post("/users", json={"location": "peru", "personsInHouse": 3}).json()

    resp = client.get(f"/users/{created['_id']}")

    assert resp.status_code == 200
    assert resp.json() == created


def test_list_users(client, services):
    services.users.create({"location": "italy", "personsInHouse": 1})
    services.users.create({"location": "japan", "personsInHouse": 4})

    resp = client.get("/users")

    assert resp.status_code == 200
    assert sorted(u["location"] for u in resp.json()) == ["italy", "japan"]


def test_list_users_empty(client):
    resp = client.get("/users")

    assert resp.status_code == 200
    assert resp.json() == []


def test_get_missing_user_is_404(client):
    resp = client.get(f"/users/{ObjectId()}")

    assert resp.status_code == 404
    assert resp.json() == {"error": "User not found"}


def test_get_malformed_id_is_404(client):
    resp = client.get("/users/not-an-id")

    assert resp.status_code == 404
    assert "error" in resp.json()


def test_missing_field_is_400(client):
    resp = client.post("/users", json={"location": "italy"})

    assert resp.status_code == 400
    assert "personsInHouse" in resp.json()["error"]


def test_persons_must_be_positive(client):
    resp = client.post("/users", json={"location": "italy", "personsInHouse": 0})

    assert resp.status_code == 400


def test_partial_update_keeps_other_fields(client, user):
    resp = client.put(f"/users/{user['_id']}", json={"location": "greece"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["location"] == "greece"
    assert body["personsInHouse"] == 3
    assert body["houseSize"] == "medium"


def test_update_persons_rederives_house_size(client, user):
    resp = client.put(f"/users/{user['_id']}", json={"personsInHouse": 6})

    assert resp.json()["houseSize"] == "big"


def test_update_ignores_explicit_null(client, user):
    resp = client.put(f"/users/{user['_id']}", json={"location": None})

    assert resp.status_code == 200
    assert resp.json()["location"] == "italy"


def test_update_missing_user_is_404(client):
    resp = client.put(f"/users/{ObjectId()}", json={"location": "greece"})

    assert resp.status_code == 404


def test_delete_returns_document_then_404(client, user):
    resp = client.delete(f"/users/{user['_id']}")

    assert resp.status_code == 200
    assert resp.json()["_id"] == user["_id"]
    assert client.get(f"/users/{user['_id']}").status_code == 404
    assert client.delete(f"/users/{user['_id']}").status_code == 404


def test_delete_user_leaves_sensors(client, sensor, user):
    client.delete(f"/users/{user['_id']}")

    resp = client.get(f"/sensors/{sensor['_id']}")

    assert resp.status_code == 200
    assert resp.json()["userId"] == user["_id"]


class BrokenCollection:
    def find(self, *args, **kwargs):
        raise ServerSelectionTimeoutError("connection refused")


def test_store_failure_is_500(client, services, monkeypatch):
    monkeypatch.setattr(services.users, "collection", BrokenCollection())

    resp = client.get("/users")

    assert resp.status_code == 500
    assert resp.json() == {"error": "Database error during list users"}


def test_write_token_missing_is_401(token_client):
    resp = token_client.post("/users", json={"location": "italy", "personsInHouse": 1})

    assert resp.status_code == 401
    assert "error" in resp.json()


def test_write_token_malformed_is_401(token_client):
    resp = token_client.post(
        "/users",
        json={"location": "italy", "personsInHouse": 1},
        headers={"Authorization": "Token s3cret"},
    )

    assert resp.status_code == 401


def test_write_token_wrong_is_403(token_client):
    resp = token_client.post(
        "/users",
        json={"location": "italy", "personsInHouse": 1},
        headers={"Authorization": "Bearer nope"},
    )

    assert resp.status_code == 403


def test_write_token_accepted(token_client):
    resp = token_client.post(
        "/users",
        json={"location": "italy", "personsInHouse": 1},
        headers={"Authorization": "Bearer s3cret"},
    )

    assert resp.status_code == 201


def test_reads_stay_open_with_token(token_client):
    assert token_client.get("/users").status_code == 200


def test_boolean_persons_is_400(client):
    resp = client.post("/users", json={"location": "italy", "personsInHouse": True})

    assert resp.status_code == 400
    assert "personsInHouse" in resp.json()["error"]


def test_update_boolean_persons_is_400(client, user):
    resp = client.put(f"/users/{user['_id']}", json={"personsInHouse": True})

    assert resp.status_code == 400
    assert client.get(f"/users/{user['_id']}").json()["personsInHouse"] == 3
