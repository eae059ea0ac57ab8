def _check(client, number="CHK-100", amount="500.00"):
    res = client.post(
        "/check-tracking",
        json={
            "service_provider": "State Medicaid",
            "check_number": number,
            "check_amount": amount,
            "check_date": "2026-04-10",
        },
    )
    assert res.status_code == 201
    return res.json()


def _entry(client, catalog, amount, number="CHK-100"):
    res = client.post(
        "/revenue-entries",
        json={
            "date": "2026-04-01",
            "check_date": "2026-04-10",
            "check_number": number,
            "amount": amount,
            "house_id": catalog.lighthouse,
            "service_code_id": catalog.peer,
        },
    )
    assert res.status_code == 201


def test_balanced_check_audit(client, catalog):
    check = _check(client)
    for amount in ("200.00", "150.00", "150.00"):
        _entry(client, catalog, amount)

    res = client.get(f"/check-tracking/{check['id']}/audit")

    assert res.status_code == 200
    report = res.json()
    assert report["revenue_total"] == "500.00"
    assert report["difference"] == "0.00"
    assert report["balanced"] is True
    assert report["matching_count"] == 3
    assert report["entries"][0]["house_name"] == "Story Lighthouse"
    assert report["entries"][0]["service_code"] == "peer support"


def test_short_check_audit(client, catalog):
    check = _check(client)
    for amount in ("200.00", "150.00", "100.00"):
        _entry(client, catalog, amount)

    report = client.get(f"/check-tracking/{check['id']}/audit").json()

    assert report["difference"] == "50.00"
    assert report["balanced"] is False
    assert report["status"] == "check_exceeds_revenue"


def test_unmatched_check_is_reported_not_an_error(client, catalog):
    check = _check(client, number="NOPE")

    res = client.get(f"/check-tracking/{check['id']}/audit")

    assert res.status_code == 200
    assert res.json()["matching_count"] == 0
    assert res.json()["difference"] == "500.00"


def test_audit_all_can_filter_unbalanced(client, catalog):
    _check(client, number="A", amount="100.00")
    _check(client, number="B", amount="100.00")
    _entry(client, catalog, "100.00", number="A")

    everything = client.get("/check-tracking/audit").json()
    unbalanced = client.get("/check-tracking/audit", params={"unbalanced_only": "true"}).json()

    assert len(everything) == 2
    assert [r["check_number"] for r in unbalanced] == ["B"]


def test_audit_does_not_modify_anything(client, catalog):
    check = _check(client)
    _entry(client, catalog, "10.00")

    client.get(f"/check-tracking/{check['id']}/audit")

    assert client.get(f"/check-tracking/{check['id']}").json()["check_amount"] == "500.00"
    assert len(client.get("/revenue-entries").json()) == 1


def test_check_crud(client, catalog):
    check = _check(client)

    res = client.patch(f"/check-tracking/{check['id']}", json={"check_amount": "510.00"})
    assert res.status_code == 200
    assert res.json()["check_amount"] == "510.00"

    assert client.delete(f"/check-tracking/{check['id']}").json() == {"ok": True}
    assert client.get(f"/check-tracking/{check['id']}").status_code == 404
    assert client.get(f"/check-tracking/{check['id']}/audit").status_code == 404


def test_blank_check_number_rejected(client, catalog):
    res = client.post(
        "/check-tracking",
        json={
            "service_provider": "State Medicaid",
            "check_number": "  ",
            "check_amount": "1.00",
            "check_date": "2026-04-10",
        },
    )

    assert res.status_code == 422


def test_check_amount_with_more_than_two_decimals_is_rejected(client, catalog):
    res = client.post(
        "/check-tracking",
        json={
            "service_provider": "State Medicaid",
            "check_number": "CHK-9",
            "check_amount": "1.005",
            "check_date": "2026-04-10",
        },
    )

    assert res.status_code == 422
    assert client.get("/check-tracking").json() == []
