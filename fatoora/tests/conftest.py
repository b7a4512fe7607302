"""Shared test fixtures."""

from __future__ import annotations

import base64
from datetime import datetime, timezone
from decimal import Decimal
from typing import Generator

import pytest
from fastapi.testclient import TestClient

from fatoora.app.main import app
from fatoora.app.services.zatca.qr_code import InvoiceSummary


@pytest.fixture()
def client() -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def summary() -> InvoiceSummary:
    return InvoiceSummary(
        seller_name="Test Co",
        seller_tax_id="123456789012345",
        invoice_timestamp=datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc),
        tax_amount=Decimal("15.00"),
        total_amount=Decimal("115.00"),
    )


def parse_tlv(payload: str) -> list[tuple[int, int, bytes]]:
    """Walk a base64 TLV payload by hand: ``(tag, length, value)`` per record."""
    raw = base64.b64decode(payload)
    records: list[tuple[int, int, bytes]] = []
    pos = 0
    while pos < len(raw):
        tag = raw[pos]
        length = raw[pos + 1]
        value = raw[pos + 2 : pos + 2 + length]
        assert len(value) == length, "record runs past end of buffer"
        records.append((tag, length, value))
        pos += 2 + length
    assert pos == len(raw)
    return records
