from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, field_validator, model_validator

from fatoora.app.services.zatca.qr_code import InvoiceSummary


# ─── Request ──────────────────────────────────────────────────────────────────


class InvoiceSummaryIn(BaseModel):
    seller_name: str | None = None
    seller_vat_number: str | None = None
    # Kept as text so an unparseable date still yields a QR (current time)
    invoice_timestamp: datetime | str | None = None
    tax_amount: Decimal | None = None
    total_amount: Decimal | None = None

    @field_validator("tax_amount", "total_amount")
    @classmethod
    def amount_not_negative(cls, v: Decimal | None) -> Decimal | None:
        if v is not None and v < 0:
            raise ValueError("Amount must not be negative")
        return v

    @model_validator(mode="after")
    def total_covers_tax(self) -> InvoiceSummaryIn:
        tax = self.tax_amount or Decimal("0")
        total = self.total_amount or Decimal("0")
        if self.total_amount is not None and total < tax:
            raise ValueError("Total amount must not be less than VAT amount")
        return self

    def to_summary(self) -> InvoiceSummary:
        return InvoiceSummary(
            seller_name=self.seller_name,
            seller_tax_id=self.seller_vat_number,
            invoice_timestamp=self.invoice_timestamp,
            tax_amount=self.tax_amount,
            total_amount=self.total_amount,
        )


class QrDecodeIn(BaseModel):
    payload: str

    @field_validator("payload")
    @classmethod
    def payload_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Payload is required")
        return v.strip()


# ─── Response ─────────────────────────────────────────────────────────────────


class TlvRecordOut(BaseModel):
    tag: int
    name: str
    length: int
    value: str


class QrPayloadOut(BaseModel):
    payload: str
    records: list[TlvRecordOut]


class QrValidationOut(BaseModel):
    valid: bool
    errors: list[str]
