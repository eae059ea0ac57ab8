def test_house_crud_and_active_filter(client, catalog):
    res = client.post("/houses", json={"name": "Harbor House"})
    assert res.status_code == 201
    house_id = res.json()["id"]

    client.patch(f"/houses/{house_id}", json={"is_active": False})

    active = [h["name"] for h in client.get("/houses").json()]
    everything = [h["name"] for h in client.get("/houses", params={"include_inactive": True}).json()]
    assert "Harbor House" not in active
    assert "Harbor House" in everything
    assert client.get("/houses/999").status_code == 404


def test_duplicate_service_code_conflicts(client, catalog):
    res = client.post("/service-codes", json={"code": "group"})

    assert res.status_code == 409


def test_staff_list_includes_inactive_by_default(client, catalog):
    names = [s["name"] for s in client.get("/staff").json()]

    assert "Dev" in names


def test_patient_with_unknown_house_rejected(client, catalog):
    res = client.post("/patients", json={"name": "Jordan", "house_id": 999})

    assert res.status_code == 400


def test_patient_search(client, catalog):
    client.post("/patients", json={"name": "Jordan Lee", "house_id": catalog.lighthouse})
    client.post("/patients", json={"name": "Sam Ortiz", "house_id": catalog.greater_faith})

    found = client.get("/patients", params={"search": "jordan"}).json()

    assert [p["name"] for p in found] == ["Jordan Lee"]


def test_mutations_are_audited(client, catalog):
    client.post("/houses", json={"name": "Harbor House"})

    logs = client.get("/audit-logs", params={"entity_type": "house"}).json()

    assert logs[0]["action"] == "created"
    assert logs[0]["risk_level"] == "low"
