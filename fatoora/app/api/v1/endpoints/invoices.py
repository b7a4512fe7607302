from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from fatoora.app.api.deps import get_language
from fatoora.app.api.v1.endpoints.qr import build_payload_or_400, payload_out
from fatoora.app.core.i18n import translate
from fatoora.app.schemas.invoice import (
    InvoiceDraftIn,
    InvoiceDraftOut,
    InvoiceTotalsIn,
    InvoiceTotalsOut,
)
from fatoora.app.services.invoice import (
    InvoiceItem,
    InvoiceTotals,
    build_invoice_summary,
    calculate_totals,
)

router = APIRouter()


def _totals_or_400(body: InvoiceTotalsIn, lang: str) -> InvoiceTotals:
    try:
        return calculate_totals(
            [
                InvoiceItem(description=i.description, quantity=i.quantity, price=i.price)
                for i in body.items
            ],
            paid=body.paid,
            discount=body.discount,
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=translate(lang, "invoice.invalid_totals", reason=str(e)),
        )


def _totals_to_out(t: InvoiceTotals) -> InvoiceTotalsOut:
    return InvoiceTotalsOut(
        line_totals=[str(v) for v in t.line_totals],
        subtotal=str(t.subtotal),
        tax_amount=str(t.tax_amount),
        total=str(t.total),
        paid=str(t.paid),
        discount=str(t.discount),
        remaining=str(t.remaining),
    )


@router.post("/totals", response_model=InvoiceTotalsOut)
def compute_totals(
    body: InvoiceTotalsIn,
    lang: str = Depends(get_language),
) -> InvoiceTotalsOut:
    return _totals_to_out(_totals_or_400(body, lang))


@router.post("/qr", response_model=InvoiceDraftOut)
def draft_invoice_qr(
    body: InvoiceDraftIn,
    lang: str = Depends(get_language),
) -> InvoiceDraftOut:
    """Compute totals for a draft invoice and the QR payload that goes on it."""
    totals = _totals_or_400(body, lang)
    summary = build_invoice_summary(
        seller_name=body.seller_name,
        seller_vat_number=body.seller_vat_number,
        invoice_date=body.invoice_date,
        totals=totals,
    )
    return InvoiceDraftOut(
        totals=_totals_to_out(totals),
        qr=payload_out(build_payload_or_400(summary, lang)),
    )
