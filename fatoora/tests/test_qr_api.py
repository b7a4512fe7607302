"""Tests for the QR and invoice endpoints."""

from __future__ import annotations

import base64

from fastapi.testclient import TestClient

from fatoora.tests.conftest import parse_tlv

_SUMMARY = {
    "seller_name": "Test Co",
    "seller_vat_number": "123456789012345",
    "invoice_timestamp": "2024-01-15T10:30:00Z",
    "tax_amount": "15.00",
    "total_amount": "115.00",
}


# ── /qr ──────────────────────────────────────────────────────────────────


def test_generate_payload(client: TestClient) -> None:
    resp = client.post("/api/v1/qr", json=_SUMMARY)
    assert resp.status_code == 200
    data = resp.json()

    assert [(r["tag"], r["value"]) for r in data["records"]] == [
        (1, "Test Co"),
        (2, "123456789012345"),
        (3, "2024-01-15T10:30:00.000Z"),
        (4, "15.00"),
        (5, "115.00"),
    ]
    assert [r["name"] for r in data["records"]] == [
        "seller_name", "vat_number", "timestamp", "vat_amount", "total_amount",
    ]
    assert [r["length"] for r in data["records"]] == [7, 15, 24, 5, 6]
    assert len(parse_tlv(data["payload"])) == 5


def test_generate_payload_with_defaults(client: TestClient) -> None:
    resp = client.post("/api/v1/qr", json={})
    assert resp.status_code == 200
    values = {r["tag"]: r["value"] for r in resp.json()["records"]}
    assert values[1] == "Unknown Seller"
    assert values[2] == "000000000000000"
    assert values[4] == "0.00"


def test_total_below_tax_rejected(client: TestClient) -> None:
    resp = client.post(
        "/api/v1/qr", json={**_SUMMARY, "tax_amount": "20", "total_amount": "10"}
    )
    assert resp.status_code == 422


def test_negative_amount_rejected(client: TestClient) -> None:
    resp = client.post("/api/v1/qr", json={**_SUMMARY, "tax_amount": "-1"})
    assert resp.status_code == 422


def test_amount_beyond_default_precision_is_kept(client: TestClient) -> None:
    resp = client.post(
        "/api/v1/qr", json={**_SUMMARY, "tax_amount": "1", "total_amount": "1E+30"}
    )
    assert resp.status_code == 200
    values = {r["tag"]: r["value"] for r in resp.json()["records"]}
    assert values[5] == "1" + "0" * 30 + ".00"


def test_timestamp_outside_utc_range_still_produces_payload(client: TestClient) -> None:
    resp = client.post(
        "/api/v1/qr",
        json={**_SUMMARY, "invoice_timestamp": "0001-01-01T00:00:00+01:00"},
    )
    assert resp.status_code == 200
    stamp = resp.json()["records"][2]["value"]
    assert stamp.endswith("Z")
    assert not stamp.startswith("0001")


def test_oversize_field_is_400(client: TestClient) -> None:
    resp = client.post("/api/v1/qr", json={**_SUMMARY, "seller_name": "x" * 300})
    assert resp.status_code == 400
    assert "seller_name" in resp.json()["detail"]
    assert "300 bytes" in resp.json()["detail"]


def test_oversize_error_in_arabic(client: TestClient) -> None:
    resp = client.post(
        "/api/v1/qr",
        json={**_SUMMARY, "seller_name": "x" * 300},
        headers={"Accept-Language": "ar-SA,ar;q=0.9,en;q=0.8"},
    )
    assert resp.status_code == 400
    assert resp.headers["Content-Language"] == "ar"
    assert "بايت" in resp.json()["detail"]


def test_qr_image(client: TestClient) -> None:
    resp = client.post("/api/v1/qr/image?box_size=4", json=_SUMMARY)
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "image/png"
    assert resp.content[:8] == b"\x89PNG\r\n\x1a\n"


def test_qr_image_box_size_bounds(client: TestClient) -> None:
    resp = client.post("/api/v1/qr/image?box_size=0", json=_SUMMARY)
    assert resp.status_code == 422


# ── /qr/decode ───────────────────────────────────────────────────────────


def test_decode_round_trip(client: TestClient) -> None:
    payload = client.post("/api/v1/qr", json=_SUMMARY).json()["payload"]
    resp = client.post("/api/v1/qr/decode", json={"payload": payload})
    assert resp.status_code == 200
    assert [r["value"] for r in resp.json()["records"]] == [
        "Test Co", "123456789012345", "2024-01-15T10:30:00.000Z", "15.00", "115.00",
    ]


def test_decode_truncated_payload(client: TestClient) -> None:
    payload = base64.b64encode(b"\x01\x09short").decode("ascii")
    resp = client.post("/api/v1/qr/decode", json={"payload": payload})
    assert resp.status_code == 400
    assert "could not be decoded" in resp.json()["detail"]


def test_decode_empty_payload(client: TestClient) -> None:
    resp = client.post("/api/v1/qr/decode", json={"payload": "  "})
    assert resp.status_code == 422


# ── /qr/validate ─────────────────────────────────────────────────────────


def test_validate_reports_errors(client: TestClient) -> None:
    resp = client.post("/api/v1/qr/validate", json=_SUMMARY)
    assert resp.status_code == 200
    assert resp.json() == {
        "valid": False,
        "errors": ["Seller VAT number must start and end with 3"],
    }


def test_validate_ok(client: TestClient) -> None:
    resp = client.post(
        "/api/v1/qr/validate", json={**_SUMMARY, "seller_vat_number": "399999999999993"}
    )
    assert resp.json() == {"valid": True, "errors": []}


# ── /invoices ────────────────────────────────────────────────────────────


_ITEMS = [
    {"description": "Tent", "quantity": "2", "price": "50"},
    {"description": "Stove", "quantity": "1", "price": "100"},
]


def test_invoice_totals(client: TestClient) -> None:
    resp = client.post(
        "/api/v1/invoices/totals",
        json={"items": _ITEMS, "paid": "50", "discount": "10"},
    )
    assert resp.status_code == 200
    assert resp.json() == {
        "line_totals": ["100.00", "100.00"],
        "subtotal": "200.00",
        "tax_amount": "30.00",
        "total": "230.00",
        "paid": "50.00",
        "discount": "10.00",
        "remaining": "170.00",
    }


def test_invoice_totals_accepts_zero_quantity(client: TestClient) -> None:
    resp = client.post(
        "/api/v1/invoices/totals",
        json={"items": [{"description": "Tent", "quantity": "0", "price": "50"}]},
    )
    assert resp.status_code == 200
    assert resp.json()["line_totals"] == ["0.00"]
    assert resp.json()["total"] == "0.00"


def test_invoice_totals_rejects_negative_quantity(client: TestClient) -> None:
    resp = client.post(
        "/api/v1/invoices/totals",
        json={"items": [{"description": "Tent", "quantity": "-1", "price": "50"}]},
    )
    assert resp.status_code == 422


def test_draft_invoice_qr(client: TestClient) -> None:
    resp = client.post(
        "/api/v1/invoices/qr",
        json={
            "seller_name": "Tuwaiq Outdoor",
            "seller_vat_number": "399999999999993",
            "invoice_date": "2026-02-12",
            "items": _ITEMS,
        },
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["totals"]["total"] == "230.00"
    values = {r["tag"]: r["value"] for r in data["qr"]["records"]}
    assert values[3] == "2026-02-12T00:00:00.000Z"
    assert values[4] == "30.00"
    assert values[5] == "230.00"
