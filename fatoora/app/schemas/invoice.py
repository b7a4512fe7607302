from __future__ import annotations

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from fatoora.app.schemas.qr import QrPayloadOut


# ─── Request ──────────────────────────────────────────────────────────────────


class InvoiceItemIn(BaseModel):
    description: str
    quantity: Decimal = Decimal("1")
    price: Decimal

    @field_validator("description")
    @classmethod
    def description_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Item description is required")
        return v.strip()

    @field_validator("quantity")
    @classmethod
    def quantity_not_negative(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("Quantity must not be negative")
        return v

    @field_validator("price")
    @classmethod
    def price_not_negative(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("Price must not be negative")
        return v


class InvoiceTotalsIn(BaseModel):
    items: list[InvoiceItemIn] = Field(default_factory=list)
    paid: Decimal = Decimal("0")
    discount: Decimal = Decimal("0")

    @field_validator("paid", "discount")
    @classmethod
    def not_negative(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("Amount must not be negative")
        return v


class InvoiceDraftIn(InvoiceTotalsIn):
    seller_name: str | None = None
    seller_vat_number: str | None = None
    invoice_date: date | str | None = None


# ─── Response ─────────────────────────────────────────────────────────────────


class InvoiceTotalsOut(BaseModel):
    line_totals: list[str]
    subtotal: str
    tax_amount: str
    total: str
    paid: str
    discount: str
    remaining: str


class InvoiceDraftOut(BaseModel):
    totals: InvoiceTotalsOut
    qr: QrPayloadOut
