from __future__ import annotations

from conftest import draft_payload


def test_full_estimate_flow(client):
    # 1. Hydrate the form for the chosen schedule/alliance
    resp = client.get("/api/options", query_string={"fee_schedule": "new", "alliance": "sewakuru"})
    assert resp.status_code == 200
    options = resp.get_json()
    plan_name = options["plans"][0]["name"]
    tag = options["surcharges"][-1]

    booking = draft_payload(
        fee_schedule="new",
        plans=[{"name": plan_name, "count": 1, "surcharges": [tag]}],
        counseling="free",
    )

    # 2. Validate inputs
    resp = client.post("/api/validate", json=booking)
    assert resp.status_code == 200

    # 3. Estimate
    resp = client.post("/api/estimate", json={"booking": booking})
    assert resp.status_code == 200
    data = resp.get_json()
    invoice = data["invoice"]
    assert invoice["taxable_subtotal"] == 6480  # 5400 * 1.2 (season_low)
    assert invoice["tax"] == 648
    assert invoice["non_taxable_total"] == 800
    assert invoice["counseling_fee"] == 1100
    assert data["formatted"]["grand_total"] == "¥9,028"

    # 4. Re-price the returned snapshot unchanged
    resp = client.post("/api/estimate/snapshot", json=data["snapshot"])
    assert resp.status_code == 200
    assert resp.get_json()["invoice"] == invoice
