"""
Tests for the HTTP API (`api/`).

Covers:
- Invoice numbers are generated, parsed (404 on malformed input) and sorted.
- Out-of-width invoice fields are rejected at the boundary (422).
- Pricing, lock, snapshot and plan endpoints return the domain decisions.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from api import __version__, models
from api.main import app
from services.settings import Settings, get_settings


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


def test_health(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "version": __version__, "service": "cheerbase-billing-api"}


def test_generate_invoice_number(client: TestClient) -> None:
    response = client.post(
        "/api/v1/invoice-numbers",
        json={"organizer_name": "Sapphire Productions", "year": 2026, "event_sequence": 2, "club_sequence": 3},
    )

    assert response.status_code == 200
    assert response.json() == {"invoice_number": "SAP-2602-C003-01", "organizer_code": "SAP"}


@pytest.mark.parametrize(
    "overrides",
    [{"event_sequence": 100}, {"club_sequence": 1000}, {"version": 0}, {"year": 1999}],
)
def test_generate_invoice_number_rejects_out_of_width_fields(client: TestClient, overrides: dict) -> None:
    payload = {"organizer_name": "Cheer Elite Events", "year": 2026, "event_sequence": 1, "club_sequence": 1}
    payload.update(overrides)

    assert client.post("/api/v1/invoice-numbers", json=payload).status_code == 422


def test_generate_invoice_number_rejects_short_organizer_code(client: TestClient) -> None:
    response = client.post(
        "/api/v1/invoice-numbers",
        json={"organizer_name": "A1", "year": 2026, "event_sequence": 1, "club_sequence": 1},
    )

    assert response.status_code == 422


def test_parse_invoice_number(client: TestClient) -> None:
    response = client.get("/api/v1/invoice-numbers/CEE-2501-C001-02")

    assert response.status_code == 200
    assert response.json() == {
        "invoice_number": "CEE-2501-C001-02",
        "organizer_code": "CEE",
        "year": 2025,
        "event_sequence": 1,
        "club_sequence": 1,
        "version": 2,
    }


def test_parse_invoice_number_uses_configured_century(client: TestClient) -> None:
    app.dependency_overrides[get_settings] = lambda: Settings(invoice_century=2100)
    try:
        response = client.get("/api/v1/invoice-numbers/CEE-2501-C001-02")
    finally:
        app.dependency_overrides.clear()

    assert response.json()["year"] == 2125


def test_parse_invalid_invoice_number_is_404(client: TestClient) -> None:
    response = client.get("/api/v1/invoice-numbers/AB-2601-C003-01")

    assert response.status_code == 404
    assert "Invalid invoice number" in response.json()["detail"]


def test_sort_invoice_numbers(client: TestClient) -> None:
    response = client.post(
        "/api/v1/invoice-numbers/sort",
        json={"invoice_numbers": ["SAP-2602-C003-01", "CEE-2501-C001-01", "SAP-2601-C004-01"]},
    )

    assert response.json() == {
        "invoice_numbers": ["CEE-2501-C001-01", "SAP-2601-C004-01", "SAP-2602-C003-01"]
    }


@pytest.mark.parametrize(
    "reference_date, expected",
    [
        ("2026-02-15T12:00:00", {"price": "100", "tier": "earlyBird"}),
        ("2026-03-01T23:59:59.999", {"price": "100", "tier": "earlyBird"}),
        ("2026-03-02T00:00:00", {"price": "130", "tier": "regular"}),
    ],
)
def test_resolve_pricing(client: TestClient, reference_date: str, expected: dict) -> None:
    response = client.post(
        "/api/v1/pricing/resolve",
        json={
            "pricing": {"early_bird": {"price": "100", "deadline": "2026-03-01"}, "regular": {"price": "130"}},
            "reference_date": reference_date,
        },
    )

    assert response.status_code == 200
    assert response.json() == expected


def test_resolve_pricing_rejects_negative_price(client: TestClient) -> None:
    response = client.post("/api/v1/pricing/resolve", json={"pricing": {"regular": {"price": "-1"}}})

    assert response.status_code == 422


def test_invoice_totals(client: TestClient) -> None:
    response = client.post(
        "/api/v1/invoices/totals",
        json={
            "entries": [
                {"division": "Senior Elite", "members": [{"first_name": "Alice"}, {"first_name": "Bob"}]},
                {"division": "Mini", "team_size": 3},
            ],
            "division_pricing": [
                {"name": "Senior Elite", "early_bird": {"price": "100", "deadline": "2026-03-01"},
                 "regular": {"price": "130"}},
            ],
            "issued_date": "2026-04-01T10:00:00Z",
            "payments": [{"amount": "60"}],
            "gst_rate": "0.05",
            "qst_rate": "0",
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert [(item["category"], item["qty"], item["tier"]) for item in body["line_items"]] == [
        ("Senior Elite", 2, "regular"),
        ("Mini", 3, None),
    ]
    assert float(body["subtotal"]) == 260
    assert float(body["total"]) == 273
    assert float(body["balance_due"]) == 213


def test_invoice_totals_revision(client: TestClient) -> None:
    response = client.post(
        "/api/v1/invoices/totals",
        json={
            "entries": [
                {"division": "Senior Elite", "team_size": 12, "team_name": "Lightning"},
                {"division": "Open", "team_size": 4, "team_name": "Bolt"},
            ],
            "previous_entries": [
                {"division": "Senior Elite", "team_size": 10, "team_name": "Lightning"},
                {"division": "Mini", "team_size": 5, "team_name": "Tiny"},
            ],
            "division_pricing": [{"name": "Senior Elite", "regular": {"price": "100"}}],
            "invoice_total": "200",
            "gst_rate": "0",
            "qst_rate": "0",
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert [(item["category"], item["change_status"], item["original_qty"]) for item in body["line_items"]] == [
        ("Senior Elite", "modified", 10),
        ("Open", "new", None),
    ]
    assert (body["new_divisions"], body["modified_divisions"], body["removed_divisions"]) == (
        ["Open"], ["Senior Elite"], ["Mini"]
    )
    # Open has no price schedule: 200 spread over its 4 participants.
    assert float(body["subtotal"]) == 1400


def test_lock_status(client: TestClient) -> None:
    paid = client.post(
        "/api/v1/registrations/lock-status",
        json={"paid_at": "2026-01-01", "registration_deadline": "2099-01-01"},
    )
    past_deadline = client.post(
        "/api/v1/registrations/lock-status",
        json={"payment_deadline": "2026-01-01T00:00:00Z", "reference_date": "2026-02-01T00:00:00Z"},
    )
    bad_deadline = client.post(
        "/api/v1/registrations/lock-status",
        json={"registration_deadline": "not-a-date"},
    )

    assert paid.json() == {"locked": True, "reason": "paid"}
    assert past_deadline.json() == {"locked": True, "reason": "deadline"}
    assert bad_deadline.json() == {"locked": False, "reason": None}


def test_snapshot_status(client: TestClient) -> None:
    stale = client.post(
        "/api/v1/registrations/snapshot-status",
        json={"snapshot_taken_at": "2026-01-01", "roster_updated_at": "2026-01-02"},
    )
    missing = client.post("/api/v1/registrations/snapshot-status", json={"snapshot_taken_at": "2026-01-01"})

    assert stale.json() == {"out_of_date": True}
    assert missing.json() == {"out_of_date": False}


def test_snapshot_hash(client: TestClient) -> None:
    forward = client.post(
        "/api/v1/registrations/snapshot-hash",
        json={"roster": {"athletes": [{"first_name": "Alice"}, {"first_name": "Bob"}]}},
    )
    backward = client.post(
        "/api/v1/registrations/snapshot-hash",
        json={"roster": {"athletes": [{"first_name": "Bob"}, {"first_name": "Alice"}]}},
    )
    empty = client.post("/api/v1/registrations/snapshot-hash", json={"roster": {"team_id": "team-1"}})

    assert forward.json()["snapshot_hash"] is not None
    assert forward.json() == backward.json()
    assert empty.json() == {"snapshot_hash": None}


def test_plans(client: TestClient) -> None:
    plans = client.get("/api/v1/plans").json()
    unknown = client.get("/api/v1/plans/enterprise").json()
    limit = client.get("/api/v1/plans/pro/can-activate", params={"active_count": 10}).json()

    assert [plan["id"] for plan in plans] == ["free", "pro"]
    assert plans[1]["display_price"] == "$150/year"
    assert unknown["id"] == "free"
    assert limit["allowed"] is False


def test_platform_fee(client: TestClient) -> None:
    response = client.post("/api/v1/platform-fee", json={"subtotal": "1000"})

    assert response.status_code == 200
    assert float(response.json()["platform_fee"]) == 30


@pytest.mark.parametrize(
    "model",
    [
        models.InvoiceNumberRequest,
        models.ParsedInvoiceNumberResponse,
        models.PricingResolveRequest,
        models.LockStatusRequest,
        models.ErrorResponse,
    ],
)
def test_models_publish_schema_examples(model: type) -> None:
    assert "example" in model.model_json_schema()
