"""Simplified tax invoice QR code (ZATCA Phase 1, TLV tags 1-5)."""

from __future__ import annotations

import base64
import io
import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Union

import qrcode
from qrcode.constants import ERROR_CORRECT_M

from fatoora.app.core.config import settings
from fatoora.app.services.zatca.tlv import OverflowPolicy, encode_tlv_record

logger = logging.getLogger(__name__)

TAG_SELLER_NAME = 1
TAG_VAT_NUMBER = 2
TAG_TIMESTAMP = 3
TAG_VAT_AMOUNT = 4
TAG_TOTAL_AMOUNT = 5

TAG_NAMES: dict[int, str] = {
    TAG_SELLER_NAME: "seller_name",
    TAG_VAT_NUMBER: "vat_number",
    TAG_TIMESTAMP: "timestamp",
    TAG_VAT_AMOUNT: "vat_amount",
    TAG_TOTAL_AMOUNT: "total_amount",
}

TWO_PLACES = Decimal("0.01")

Amount = Union[Decimal, int, float, str, None]
Timestamp = Union[datetime, date, str, None]


@dataclass(frozen=True)
class InvoiceSummary:
    """The invoice facts carried by the QR code."""

    seller_name: str | None = None
    seller_tax_id: str | None = None
    invoice_timestamp: Timestamp = None
    tax_amount: Amount = None
    total_amount: Amount = None


def quantize_amount(amount: Decimal) -> Decimal:
    """Round a finite amount half-up to two places, whatever its magnitude."""
    with localcontext() as ctx:
        # quantize() needs a digit for every place down to the cents
        ctx.prec = max(ctx.prec, amount.adjusted() + 3)
        return amount.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def format_amount(value: Amount) -> str:
    """Render an amount with exactly two decimals, e.g. ``1234.5`` → ``"1234.50"``.

    Missing or unparseable values become ``"0.00"``.
    """
    if value is None or value == "":
        return "0.00"
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
        if amount.is_finite():
            return f"{quantize_amount(amount):f}"
    except (InvalidOperation, ValueError):
        pass
    logger.warning("Invalid invoice amount %r, using 0.00", value)
    return "0.00"


def _parse_timestamp(value: Timestamp) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    if isinstance(value, str) and value.strip():
        try:
            return datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    return None


def _to_utc(value: Timestamp) -> datetime | None:
    parsed = _parse_timestamp(value)
    if parsed is None:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except (OverflowError, ValueError):
        # e.g. 0001-01-01T00:00:00+01:00 falls before datetime.min in UTC
        return None


def format_timestamp(value: Timestamp) -> str:
    """Render the invoice instant as ``YYYY-MM-DDTHH:MM:SS.sssZ`` (UTC).

    Naive datetimes are taken as UTC. A missing, unparseable or
    unrepresentable value falls back to the current instant.
    """
    utc = _to_utc(value)
    if utc is None:
        if value is not None:
            logger.warning("Invalid invoice date %r, using current time", value)
        utc = datetime.now(timezone.utc)

    return (
        f"{utc.year:04d}-{utc.month:02d}-{utc.day:02d}"
        f"T{utc.hour:02d}:{utc.minute:02d}:{utc.second:02d}"
        f".{utc.microsecond // 1000:03d}Z"
    )


def resolve_fields(summary: InvoiceSummary) -> list[tuple[int, str]]:
    """Return the five ``(tag, value)`` pairs in the mandated order 1→5."""
    return [
        (TAG_SELLER_NAME, summary.seller_name or settings.QR_SELLER_NAME_PLACEHOLDER),
        (TAG_VAT_NUMBER, summary.seller_tax_id or settings.QR_VAT_NUMBER_PLACEHOLDER),
        (TAG_TIMESTAMP, format_timestamp(summary.invoice_timestamp)),
        (TAG_VAT_AMOUNT, format_amount(summary.tax_amount)),
        (TAG_TOTAL_AMOUNT, format_amount(summary.total_amount)),
    ]


def build_qr_payload_bytes(
    summary: InvoiceSummary, *, overflow: OverflowPolicy | None = None
) -> bytes:
    """Concatenate the five TLV records, no separators or checksum."""
    policy = overflow or settings.QR_TLV_OVERFLOW
    return b"".join(
        encode_tlv_record(tag, value, overflow=policy)
        for tag, value in resolve_fields(summary)
    )


def build_qr_payload(
    summary: InvoiceSummary, *, overflow: OverflowPolicy | None = None
) -> str:
    """Build the Base64-encoded TLV payload for a simplified tax invoice.

    The five mandatory tags are:
        1 – Seller's name
        2 – VAT registration number
        3 – Timestamp (ISO 8601, UTC, millisecond precision)
        4 – VAT amount
        5 – Invoice total (including VAT)

    Missing data degrades to documented defaults so a QR code can always be
    produced. A field longer than 255 UTF-8 bytes raises
    ``TlvValueTooLongError`` unless *overflow* (or ``QR_TLV_OVERFLOW``) is
    ``"truncate"``.
    """
    return base64.b64encode(build_qr_payload_bytes(summary, overflow=overflow)).decode("ascii")


def render_qr_png(
    payload: str, *, box_size: int | None = None, border: int | None = None
) -> bytes:
    """Render *payload* as a black-on-white PNG QR image."""
    qr = qrcode.QRCode(
        version=None,
        error_correction=ERROR_CORRECT_M,
        box_size=box_size or settings.QR_BOX_SIZE,
        border=settings.QR_BORDER if border is None else border,
    )
    qr.add_data(payload)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()
