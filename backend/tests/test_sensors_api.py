from bson import ObjectId


def _sensor_payload(user_id, **overrides):
    payload = {
        "type": "humidity",
        "model": "SHT31",
        "location": "kitchen",
        "userId": user_id,
    }
    payload.update(overrides)
    return payload


def test_create_sensor(client, user):
    resp = client.post("/sensors", json=_sensor_payload(user["_id"]))

    assert resp.status_code == 201
    body = resp.json()
    assert body["userId"] == user["_id"]
    assert body["location"] == "kitchen"
    assert ObjectId.is_valid(body["_id"])


def test_legacy_user_id_spelling_is_accepted(client, user):
    payload = _sensor_payload(user["_id"])
    payload["userID"] = payload.pop("userId")

    resp = client.post("/sensors", json=payload)

    assert resp.status_code == 201
    body = resp.json()
    assert body["userId"] == user["_id"]
    assert "userID" not in body


def test_user_id_is_stored_as_object_id(client, user, database):
    sensor_id = client.post("/sensors", json=_sensor_payload(user["_id"])).json()["_id"]

    stored = database.sensors.find_one({"_id": ObjectId(sensor_id)})

    assert stored["userId"] == ObjectId(user["_id"])


def test_legacy_documents_read_back_canonical(client, database, user):
    inserted = database.sensors.insert_one({
        "type": "temperature",
        "model": "DHT22",
        "location": "garage",
        "userID": ObjectId(user["_id"]),
    })

    resp = client.get(f"/sensors/{inserted.inserted_id}")

    assert resp.status_code == 200
    assert resp.json()["userId"] == user["_id"]


def test_malformed_user_id_is_400(client):
    resp = client.post("/sensors", json=_sensor_payload("abc"))

    assert resp.status_code == 400
    assert "userId" in resp.json()["error"]


def test_missing_model_is_400(client, user):
    payload = _sensor_payload(user["_id"])
    del payload["model"]

    resp = client.post("/sensors", json=payload)

    assert resp.status_code == 400


def test_dangling_user_allowed_by_default(client):
    resp = client.post("/sensors", json=_sensor_payload(str(ObjectId())))

    assert resp.status_code == 201


def test_strict_references_reject_unknown_user(strict_client):
    resp = strict_client.post("/sensors", json=_sensor_payload(str(ObjectId())))

    assert resp.status_code == 400
    assert "existing user" in resp.json()["error"]


def test_strict_references_accept_known_user(strict_client, user):
    resp = strict_client.post("/sensors", json=_sensor_payload(user["_id"]))

    assert resp.status_code == 201


def test_update_sensor_location(client, sensor):
    resp = client.put(f"/sensors/{sensor['_id']}", json={"location": "attic"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["location"] == "attic"
    assert body["model"] == "DHT22"
    assert body["userId"] == sensor["userId"]


def test_empty_update_returns_sensor_unchanged(client, sensor):
    resp = client.put(f"/sensors/{sensor['_id']}", json={})

    assert resp.status_code == 200
    assert resp.json() == sensor


def test_empty_update_missing_sensor_is_404(client):
    resp = client.put(f"/sensors/{ObjectId()}", json={})

    assert resp.status_code == 404


def test_update_malformed_id_is_404(client):
    resp = client.put("/sensors/xyz", json={"location": "attic"})

    assert resp.status_code == 404


def test_delete_sensor(client, sensor):
    resp = client.delete(f"/sensors/{sensor['_id']}")

    assert resp.status_code == 200
    assert resp.json() == sensor
    assert client.get("/sensors").json() == []
