"""Business rule checks for the invoice facts embedded in the QR code."""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation

from fatoora.app.services.zatca.qr_code import TAG_NAMES, InvoiceSummary, resolve_fields
from fatoora.app.services.zatca.tlv import MAX_VALUE_LENGTH


def _to_decimal(value: object) -> Decimal | None:
    if value is None or value == "":
        return Decimal("0")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    return amount if amount.is_finite() else None


def validate_summary(summary: InvoiceSummary) -> list[str]:
    """Validate an invoice summary. Returns list of errors (empty = valid)."""
    errors: list[str] = []

    # Seller name
    if not summary.seller_name or not summary.seller_name.strip():
        errors.append("Seller name is required")

    # VAT number: 15 digits, starts & ends with 3
    vat = summary.seller_tax_id or ""
    if not vat:
        errors.append("Seller VAT number is required")
    elif not re.fullmatch(r"\d{15}", vat):
        errors.append("Seller VAT number must be exactly 15 digits")
    elif not (vat.startswith("3") and vat.endswith("3")):
        errors.append("Seller VAT number must start and end with 3")

    # Amounts
    tax = _to_decimal(summary.tax_amount)
    total = _to_decimal(summary.total_amount)
    if tax is None:
        errors.append(f"VAT amount is not a number: {summary.tax_amount!r}")
    elif tax < 0:
        errors.append("VAT amount must not be negative")
    if total is None:
        errors.append(f"Total amount is not a number: {summary.total_amount!r}")
    elif total < 0:
        errors.append("Total amount must not be negative")
    if tax is not None and total is not None and total < tax:
        errors.append(f"Total amount ({total}) must not be less than VAT amount ({tax})")

    # Single-byte TLV length field
    for tag, value in resolve_fields(summary):
        size = len(value.encode("utf-8"))
        if size > MAX_VALUE_LENGTH:
            errors.append(
                f"{TAG_NAMES[tag]} is {size} bytes in UTF-8 (max {MAX_VALUE_LENGTH})"
            )

    return errors
