from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError

from app.models.audit_log import AuditLog
from app.models.payout import Payout


def _entry_payload(catalog, **overrides):
    payload = {
        "date": "2026-01-05",
        "check_date": "2026-01-20",
        "check_number": "CHK-1",
        "amount": "1000.00",
        "house_id": catalog.greater_faith,
        "service_code_id": catalog.peer,
    }
    payload.update(overrides)
    return payload


def _payouts(client, entry_id):
    res = client.get(f"/revenue-entries/{entry_id}/payouts")
    assert res.status_code == 200
    return {p["staff_id"]: p["amount"] for p in res.json()}


def test_create_entry_persists_payouts_for_nonzero_rates(client, catalog):
    res = client.post("/revenue-entries", json=_entry_payload(catalog))

    assert res.status_code == 201
    body = res.json()
    assert body["amount"] == "1000.00"
    assert body["payouts_status"] == "ok"
    assert body["payouts_error"] is None

    assert _payouts(client, body["id"]) == {
        catalog.ann: "150.00",
        catalog.ben: "60.00",
        catalog.cara: "395.00",
        catalog.dev: "395.00",
    }


def test_partial_rate_table_rounds_and_skips_zero_rows(client, catalog):
    res = client.post(
        "/revenue-entries",
        json=_entry_payload(catalog, amount="100.00", service_code_id=catalog.group),
    )

    assert res.status_code == 201
    assert _payouts(client, res.json()["id"]) == {catalog.ann: "33.33"}


def test_entry_without_rates_has_no_payouts(client, catalog):
    res = client.post("/revenue-entries", json=_entry_payload(catalog, house_id=catalog.lighthouse))

    assert res.status_code == 201
    assert res.json()["payouts_status"] == "ok"
    assert _payouts(client, res.json()["id"]) == {}


def test_blank_check_number_is_stored_as_null(client, catalog):
    res = client.post("/revenue-entries", json=_entry_payload(catalog, check_number="   "))

    assert res.status_code == 201
    assert res.json()["check_number"] is None


def test_unknown_house_is_rejected(client, catalog):
    res = client.post("/revenue-entries", json=_entry_payload(catalog, house_id=999))

    assert res.status_code == 400
    assert client.get("/revenue-entries").json() == []


def test_negative_amount_is_rejected(client, catalog):
    res = client.post("/revenue-entries", json=_entry_payload(catalog, amount="-5.00"))

    assert res.status_code == 422


def test_update_amount_recomputes_payouts(client, catalog):
    entry_id = client.post("/revenue-entries", json=_entry_payload(catalog)).json()["id"]

    res = client.patch(f"/revenue-entries/{entry_id}", json={"amount": "200.00"})

    assert res.status_code == 200
    assert res.json()["amount"] == "200.00"
    assert _payouts(client, entry_id) == {
        catalog.ann: "30.00",
        catalog.ben: "12.00",
        catalog.cara: "79.00",
        catalog.dev: "79.00",
    }


def test_update_moves_entry_to_a_different_rate_pair(client, catalog):
    entry_id = client.post("/revenue-entries", json=_entry_payload(catalog, amount="100.00")).json()["id"]

    client.patch(f"/revenue-entries/{entry_id}", json={"service_code_id": catalog.group})

    assert _payouts(client, entry_id) == {catalog.ann: "33.33"}


def test_any_save_picks_up_the_current_rate_table(client, catalog):
    entry_id = client.post(
        "/revenue-entries",
        json=_entry_payload(catalog, amount="100.00", service_code_id=catalog.group),
    ).json()["id"]
    rate_id = client.get(
        "/payout-rates",
        params={"house_id": catalog.greater_faith, "service_code_id": catalog.group, "staff_id": catalog.ann},
    ).json()[0]["id"]
    client.patch(f"/payout-rates/{rate_id}", json={"percentage": "50.00"})

    # existing payouts are not touched by a rate change
    assert _payouts(client, entry_id) == {catalog.ann: "33.33"}

    client.patch(f"/revenue-entries/{entry_id}", json={"notes": "re-saved"})

    assert _payouts(client, entry_id) == {catalog.ann: "50.00"}


def test_patch_cannot_clear_required_fields(client, catalog):
    entry_id = client.post("/revenue-entries", json=_entry_payload(catalog)).json()["id"]

    res = client.patch(f"/revenue-entries/{entry_id}", json={"amount": None})

    assert res.status_code == 422


def test_delete_removes_entry_and_payouts(client, catalog, db):
    entry_id = client.post("/revenue-entries", json=_entry_payload(catalog)).json()["id"]

    res = client.delete(f"/revenue-entries/{entry_id}")

    assert res.status_code == 200
    assert res.json() == {"ok": True}
    assert client.get(f"/revenue-entries/{entry_id}").status_code == 404
    assert db.query(Payout).filter(Payout.revenue_entry_id == entry_id).count() == 0


def test_missing_entry_returns_404(client, catalog):
    assert client.get("/revenue-entries/999").status_code == 404
    assert client.patch("/revenue-entries/999", json={"notes": "x"}).status_code == 404
    assert client.delete("/revenue-entries/999").status_code == 404
    assert client.post("/revenue-entries/999/payouts/recompute").status_code == 404


def test_list_filters_by_check_number_and_date_range(client, catalog):
    client.post("/revenue-entries", json=_entry_payload(catalog, date="2026-01-05", check_number="A"))
    client.post("/revenue-entries", json=_entry_payload(catalog, date="2026-01-10", check_number="B"))
    client.post("/revenue-entries", json=_entry_payload(catalog, date="2026-02-01", check_number="A"))

    by_check = client.get("/revenue-entries", params={"check_number": "A"}).json()
    in_january = client.get(
        "/revenue-entries", params={"start_date": "2026-01-01", "end_date": "2026-01-31"}
    ).json()

    assert [e["date"] for e in by_check] == ["2026-02-01", "2026-01-05"]
    assert sorted(e["check_number"] for e in in_january) == ["A", "B"]


def test_payout_failure_keeps_entry_and_can_be_retried(client, catalog, db, monkeypatch):
    def broken_replace(*args, **kwargs):
        raise SQLAlchemyError("payouts table unavailable")

    monkeypatch.setattr("app.services.revenue_entries._replace_payouts", broken_replace)

    res = client.post("/revenue-entries", json=_entry_payload(catalog))

    assert res.status_code == 201
    body = res.json()
    assert body["payouts_status"] == "failed"
    assert "payouts table unavailable" in body["payouts_error"]
    entry_id = body["id"]
    assert client.get(f"/revenue-entries/{entry_id}").status_code == 200
    assert _payouts(client, entry_id) == {}

    failure = db.query(AuditLog).filter(AuditLog.action == "payouts_failed").one()
    assert failure.entity_id == str(entry_id)
    assert failure.risk_level == "high"

    # retry while still broken surfaces as a server error
    assert client.post(f"/revenue-entries/{entry_id}/payouts/recompute").status_code == 500

    monkeypatch.undo()
    res = client.post(f"/revenue-entries/{entry_id}/payouts/recompute")

    assert res.status_code == 200
    assert len(res.json()) == 4
    assert _payouts(client, entry_id)[catalog.cara] == "395.00"


def test_recompute_is_idempotent(client, catalog):
    entry_id = client.post("/revenue-entries", json=_entry_payload(catalog)).json()["id"]
    before = _payouts(client, entry_id)

    client.post(f"/revenue-entries/{entry_id}/payouts/recompute")
    client.post(f"/revenue-entries/{entry_id}/payouts/recompute")

    assert _payouts(client, entry_id) == before


def test_saved_payouts_never_exceed_the_entry_amount(client, catalog):
    rows = [
        {"house_id": catalog.lighthouse, "service_code_id": catalog.peer, "staff_id": staff_id, "percentage": pct}
        for staff_id, pct in ((catalog.ann, "33.33"), (catalog.ben, "33.33"), (catalog.cara, "33.34"))
    ]
    assert client.put("/payout-rates", json={"rates": rows}).status_code == 200

    res = client.post(
        "/revenue-entries",
        json=_entry_payload(catalog, amount="99.99", house_id=catalog.lighthouse),
    )

    assert res.status_code == 201
    payouts = _payouts(client, res.json()["id"])
    assert sum(Decimal(v) for v in payouts.values()) == Decimal("99.99")
    assert payouts[catalog.cara] == "33.33"


def test_amount_with_more_than_two_decimals_is_rejected(client, catalog, db):
    res = client.post("/revenue-entries", json=_entry_payload(catalog, amount="1.005"))

    assert res.status_code == 422
    assert client.get("/revenue-entries").json() == []
    assert db.query(Payout).count() == 0

    entry_id = client.post("/revenue-entries", json=_entry_payload(catalog, amount="10.00")).json()["id"]
    assert client.patch(f"/revenue-entries/{entry_id}", json={"amount": "10.001"}).status_code == 422
    assert client.get(f"/revenue-entries/{entry_id}").json()["amount"] == "10.00"


def test_payout_failure_is_reported_even_if_it_cannot_be_audited(client, catalog, db, monkeypatch):
    def broken(*args, **kwargs):
        raise SQLAlchemyError("connection lost")

    monkeypatch.setattr("app.services.revenue_entries._replace_payouts", broken)
    monkeypatch.setattr("app.services.revenue_entries.log_audit", broken)

    res = client.post("/revenue-entries", json=_entry_payload(catalog))

    assert res.status_code == 201
    assert res.json()["payouts_status"] == "failed"
    assert "connection lost" in res.json()["payouts_error"]
    assert client.get(f"/revenue-entries/{res.json()['id']}").status_code == 200
    assert db.query(AuditLog).filter(AuditLog.action == "payouts_failed").count() == 0
