from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import Response

from fatoora.app.api.deps import get_language
from fatoora.app.core.i18n import translate
from fatoora.app.schemas.qr import (
    InvoiceSummaryIn,
    QrDecodeIn,
    QrPayloadOut,
    QrValidationOut,
    TlvRecordOut,
)
from fatoora.app.services.zatca.qr_code import (
    TAG_NAMES,
    InvoiceSummary,
    build_qr_payload,
    render_qr_png,
)
from fatoora.app.services.zatca.tlv import (
    TlvDecodeError,
    TlvRecord,
    TlvValueTooLongError,
    decode_tlv,
)
from fatoora.app.services.zatca.validation import validate_summary

router = APIRouter()


def _records_out(records: list[TlvRecord]) -> list[TlvRecordOut]:
    return [
        TlvRecordOut(
            tag=r.tag,
            name=TAG_NAMES.get(r.tag, f"tag_{r.tag}"),
            length=r.length,
            value=r.value,
        )
        for r in records
    ]


def build_payload_or_400(summary: InvoiceSummary, lang: str) -> str:
    try:
        return build_qr_payload(summary)
    except TlvValueTooLongError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=translate(
                lang,
                "qr.value_too_long",
                field=TAG_NAMES.get(e.tag, str(e.tag)),
                length=str(e.length),
            ),
        )


def payload_out(payload: str) -> QrPayloadOut:
    return QrPayloadOut(payload=payload, records=_records_out(decode_tlv(payload)))


@router.post("", response_model=QrPayloadOut)
def generate_qr_payload(
    body: InvoiceSummaryIn,
    lang: str = Depends(get_language),
) -> QrPayloadOut:
    return payload_out(build_payload_or_400(body.to_summary(), lang))


@router.post("/image")
def generate_qr_image(
    body: InvoiceSummaryIn,
    box_size: int | None = Query(None, ge=1, le=40),
    border: int | None = Query(None, ge=0, le=10),
    lang: str = Depends(get_language),
) -> Response:
    payload = build_payload_or_400(body.to_summary(), lang)
    png = render_qr_png(payload, box_size=box_size, border=border)
    return Response(content=png, media_type="image/png")


@router.post("/decode", response_model=QrPayloadOut)
def decode_qr_payload(
    body: QrDecodeIn,
    lang: str = Depends(get_language),
) -> QrPayloadOut:
    try:
        records = decode_tlv(body.payload)
    except TlvDecodeError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=translate(lang, "qr.invalid_payload", reason=str(e)),
        )
    return QrPayloadOut(payload=body.payload, records=_records_out(records))


@router.post("/validate", response_model=QrValidationOut)
def validate_qr_summary(body: InvoiceSummaryIn) -> QrValidationOut:
    errors = validate_summary(body.to_summary())
    return QrValidationOut(valid=not errors, errors=errors)
