"""TLV (Tag-Length-Value) codec used by the ZATCA invoice QR payload.

Record layout: [tag: 1 byte] [length: 1 byte] [value: n bytes (UTF-8)]

The single length byte caps every value at 255 UTF-8 bytes.
"""

from __future__ import annotations

import base64
import binascii
import struct
from dataclasses import dataclass
from typing import Literal

MAX_VALUE_LENGTH = 255

OverflowPolicy = Literal["reject", "truncate"]


class TlvValueTooLongError(ValueError):
    """Raised when a value does not fit the single-byte length field."""

    def __init__(self, tag: int, length: int) -> None:
        self.tag = tag
        self.length = length
        super().__init__(
            f"TLV value for tag {tag} too long: {length} bytes (max {MAX_VALUE_LENGTH})"
        )


class TlvDecodeError(ValueError):
    """Raised when a payload is not a well-formed TLV stream."""


@dataclass(frozen=True)
class TlvRecord:
    tag: int
    value: str

    @property
    def length(self) -> int:
        return len(self.value.encode("utf-8"))


def _truncate_utf8(encoded: bytes, limit: int) -> bytes:
    """Cut *encoded* to at most *limit* bytes without splitting a character."""
    # Only the trailing partial sequence can be invalid; "ignore" drops it
    return encoded[:limit].decode("utf-8", errors="ignore").encode("utf-8")


def encode_tlv_record(
    tag: int, value: str, *, overflow: OverflowPolicy = "reject"
) -> bytes:
    """Encode a single text field as ``[tag][length][utf-8 value]``."""
    if not 0 <= tag <= 255:
        raise ValueError(f"TLV tag out of range: {tag} (must be 0-255)")

    encoded = value.encode("utf-8")
    if len(encoded) > MAX_VALUE_LENGTH:
        if overflow != "truncate":
            raise TlvValueTooLongError(tag, len(encoded))
        encoded = _truncate_utf8(encoded, MAX_VALUE_LENGTH)

    return struct.pack("BB", tag, len(encoded)) + encoded


def decode_tlv(data: bytes | str) -> list[TlvRecord]:
    """Parse a TLV stream (raw bytes or its base64 text) into records.

    Records are returned in stream order; repeated tags are kept.
    """
    if isinstance(data, str):
        try:
            raw = base64.b64decode(data, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise TlvDecodeError(f"Payload is not valid base64: {exc}") from exc
    else:
        raw = data

    records: list[TlvRecord] = []
    pos = 0
    while pos < len(raw):
        if pos + 2 > len(raw):
            raise TlvDecodeError(f"Truncated TLV header at offset {pos}")
        tag, length = raw[pos], raw[pos + 1]
        start = pos + 2
        end = start + length
        if end > len(raw):
            raise TlvDecodeError(
                f"Tag {tag} declares {length} bytes but only "
                f"{len(raw) - start} remain"
            )
        try:
            value = raw[start:end].decode("utf-8")
        except UnicodeDecodeError as exc:
            raise TlvDecodeError(f"Tag {tag} value is not valid UTF-8") from exc
        records.append(TlvRecord(tag=tag, value=value))
        pos = end

    return records
