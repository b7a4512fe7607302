from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Sequence

from fatoora.app.core.config import settings
from fatoora.app.services.zatca.qr_code import InvoiceSummary, quantize_amount


@dataclass(frozen=True)
class InvoiceItem:
    description: str
    quantity: Decimal
    price: Decimal


@dataclass(frozen=True)
class InvoiceTotals:
    line_totals: list[Decimal] = field(default_factory=list)
    subtotal: Decimal = Decimal("0.00")
    tax_amount: Decimal = Decimal("0.00")
    total: Decimal = Decimal("0.00")
    paid: Decimal = Decimal("0.00")
    discount: Decimal = Decimal("0.00")
    remaining: Decimal = Decimal("0.00")


def calculate_totals(
    items: Sequence[InvoiceItem],
    *,
    paid: Decimal = Decimal("0"),
    discount: Decimal = Decimal("0"),
    vat_rate: Decimal | None = None,
) -> InvoiceTotals:
    """Compute line totals, subtotal, VAT, grand total and remaining balance.

    VAT is charged on the subtotal; ``remaining = total - paid - discount``.
    """
    rate = settings.VAT_RATE if vat_rate is None else vat_rate
    if rate < 0:
        raise ValueError("VAT rate must not be negative")
    if paid < 0:
        raise ValueError("Paid amount must not be negative")
    if discount < 0:
        raise ValueError("Discount must not be negative")

    line_totals: list[Decimal] = []
    for item in items:
        if item.quantity < 0:
            raise ValueError(f"Quantity for '{item.description}' must not be negative")
        if item.price < 0:
            raise ValueError(f"Price for '{item.description}' must not be negative")
        line_totals.append(quantize_amount(item.quantity * item.price))

    subtotal = sum(line_totals, Decimal("0.00"))
    tax_amount = quantize_amount(subtotal * rate)
    total = subtotal + tax_amount

    return InvoiceTotals(
        line_totals=line_totals,
        subtotal=subtotal,
        tax_amount=tax_amount,
        total=total,
        paid=quantize_amount(paid),
        discount=quantize_amount(discount),
        remaining=quantize_amount(total - paid - discount),
    )


def build_invoice_summary(
    *,
    seller_name: str | None,
    seller_vat_number: str | None,
    invoice_date: datetime | date | str | None,
    totals: InvoiceTotals,
) -> InvoiceSummary:
    """Derive the QR summary from the invoice currently being edited."""
    return InvoiceSummary(
        seller_name=seller_name,
        seller_tax_id=seller_vat_number,
        invoice_timestamp=invoice_date,
        tax_amount=totals.tax_amount,
        total_amount=totals.total,
    )
