from bson import ObjectId


def _measure_payload(sensor_id, **overrides):
    payload = {
        "type": "temperature",
        "creationDate": "2024-03-01T08:30:00Z",
        "sensorID": sensor_id,
        "value": 21.5,
    }
    payload.update(overrides)
    return payload


def test_create_measure(client, sensor):
    resp = client.post("/measures", json=_measure_payload(sensor["_id"]))

    assert resp.status_code == 201
    body = resp.json()
    assert body["sensorID"] == sensor["_id"]
    assert body["type"] == "temperature"
    assert body["value"] == 21.5
    assert body["creationDate"].startswith("2024-03-01T08:30:00")


def test_creation_date_offset_is_normalized_to_utc(client, sensor, database):
    resp = client.post(
        "/measures",
        json=_measure_payload(sensor["_id"], creationDate="2024-03-01T10:30:00+02:00"),
    )

    stored = database.measures.find_one({"_id": ObjectId(resp.json()["_id"])})

    assert stored["creationDate"].hour == 8


def test_legacy_sensor_id_spelling_is_accepted(client, sensor):
    payload = _measure_payload(sensor["_id"])
    payload["sensorId"] = payload.pop("sensorID")

    resp = client.post("/measures", json=payload)

    assert resp.status_code == 201
    assert resp.json()["sensorID"] == sensor["_id"]


def test_unknown_type_is_400(client, sensor):
    resp = client.post("/measures", json=_measure_payload(sensor["_id"], type="pressure"))

    assert resp.status_code == 400


def test_non_numeric_value_is_400(client, sensor):
    resp = client.post("/measures", json=_measure_payload(sensor["_id"], value="warm"))

    assert resp.status_code == 400


def test_missing_creation_date_is_400(client, sensor):
    payload = _measure_payload(sensor["_id"])
    del payload["creationDate"]

    resp = client.post("/measures", json=payload)

    assert resp.status_code == 400
    assert "creationDate" in resp.json()["error"]


def test_strict_references_reject_unknown_sensor(strict_client):
    resp = strict_client.post("/measures", json=_measure_payload(str(ObjectId())))

    assert resp.status_code == 400


def test_get_measure(client, sensor):
    created = client.post("/measures", json=_measure_payload(sensor["_id"])).json()

    resp = client.get(f"/measures/{created['_id']}")

    assert resp.status_code == 200
    assert resp.json() == created


def test_get_missing_measure_is_404(client):
    assert client.get(f"/measures/{ObjectId()}").status_code == 404


def test_update_measure_value(client, sensor):
    created = client.post("/measures", json=_measure_payload(sensor["_id"])).json()

    resp = client.put(f"/measures/{created['_id']}", json={"value": 23})

    assert resp.status_code == 200
    body = resp.json()
    assert body["value"] == 23
    assert body["type"] == "temperature"
    assert body["createdAt"] == created["createdAt"]


def test_delete_measure_twice(client, sensor):
    created = client.post("/measures", json=_measure_payload(sensor["_id"])).json()

    assert client.delete(f"/measures/{created['_id']}").status_code == 200
    assert client.delete(f"/measures/{created['_id']}").status_code == 404


def test_sub_millisecond_creation_date_reads_back_identical(client, sensor):
    created = client.post(
        "/measures",
        json=_measure_payload(sensor["_id"], creationDate="2024-03-01T08:30:00.123456Z"),
    ).json()

    got = client.get(f"/measures/{created['_id']}").json()

    assert got == created
    assert got["creationDate"].startswith("2024-03-01T08:30:00.123")
    assert "123456" not in got["creationDate"]


def test_boolean_value_is_400(client, sensor):
    resp = client.post("/measures", json=_measure_payload(sensor["_id"], value=True))

    assert resp.status_code == 400
    assert "value" in resp.json()["error"]


def test_integer_value_is_accepted(client, sensor):
    resp = client.post("/measures", json=_measure_payload(sensor["_id"], value=21))

    assert resp.status_code == 201
    assert resp.json()["value"] == 21


def test_numeric_string_value_is_400(client, sensor):
    resp = client.post("/measures", json=_measure_payload(sensor["_id"], value="21.5"))

    assert resp.status_code == 400


def test_update_boolean_value_is_400(client, sensor):
    created = client.post("/measures", json=_measure_payload(sensor["_id"])).json()

    resp = client.put(f"/measures/{created['_id']}", json={"value": False})

    assert resp.status_code == 400
    assert client.get(f"/measures/{created['_id']}").json()["value"] == 21.5


def test_timestamp_creation_date_is_400(client, sensor):
    resp = client.post("/measures", json=_measure_payload(sensor["_id"], creationDate=1709281800))

    assert resp.status_code == 400
    assert "creationDate" in resp.json()["error"]
