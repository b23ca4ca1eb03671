"""Record encoder for ADIF interchange text.

This module renders canonical records as ``<NAME:LEN>value`` fields. The
declared length is always the character count of the emitted value, so
the decoder reads back exactly what was written.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable

from adif.fields import FIELD_ATTRIBUTES
from core.constants import (
    ADIF_VERSION,
    CONFIRMED_FLAG,
    END_OF_HEADER_MARKER,
    END_OF_RECORD_MARKER,
    PROGRAM_ID,
    PROGRAM_VERSION,
)
from core.types import ContactRecord


def encode_field(name: str, value: str) -> str:
    """Render one field with its character length."""
    return f"<{name}:{len(value)}>{value}"


def encode_record(record: ContactRecord) -> str:
    """Render one record terminated by the end-of-record marker.

    Fields with empty or zero values are omitted.

    Args:
        record: Canonical record to encode.

    Returns:
        One line of ADIF text.
    """
    parts: list[str] = []
    for name, attribute in FIELD_ATTRIBUTES:
        value = _field_text(attribute, getattr(record, attribute))
        if value:
            parts.append(encode_field(name, value) + " ")
    return "".join(parts) + END_OF_RECORD_MARKER + "\n"


def encode_header(created_at: datetime | None = None) -> str:
    """Render the export preamble ending with the end-of-header marker.

    Args:
        created_at: Export timestamp; current UTC time when omitted.

    Returns:
        Preamble text.
    """
    timestamp = created_at or datetime.now(timezone.utc)
    fields = [
        encode_field("ADIF_VER", ADIF_VERSION),
        encode_field("PROGRAMID", PROGRAM_ID),
        encode_field("PROGRAMVERSION", PROGRAM_VERSION),
        encode_field("CREATED_TIMESTAMP", timestamp.strftime("%Y%m%d %H%M%S")),
    ]
    banner = (
        f"Generated by {PROGRAM_ID} v{PROGRAM_VERSION} "
        f"on {timestamp.strftime('%Y-%m-%d %H:%M:%S')}\n\n"
    )
    return banner + "\n".join(fields) + "\n" + END_OF_HEADER_MARKER + "\n\n"


def encode_document(
    records: Iterable[ContactRecord],
    created_at: datetime | None = None,
) -> str:
    """Render a complete export: preamble followed by every record."""
    return encode_header(created_at) + "".join(encode_record(record) for record in records)


def format_decimal(value: float) -> str:
    """Render a float in plain decimal notation that parses back exactly."""
    text = repr(float(value))
    if "e" not in text and "E" not in text:
        return text.removesuffix(".0")
    text = format(value, ".15f").rstrip("0")
    return text.rstrip(".")


def _field_text(attribute: str, value: object) -> str:
    """Convert one record attribute to its ADIF text, empty when absent."""
    if attribute == "date":
        return str(value).replace("-", "")
    if attribute in ("time_on", "time_off"):
        return str(value).replace(":", "")
    if attribute == "frequency_mhz":
        return format_decimal(float(value)) if value else ""
    if attribute == "power_watts":
        return str(value) if value else ""
    if attribute == "confirmed":
        return CONFIRMED_FLAG if value else ""
    return str(value)
