"""Record decoder for ADIF interchange text.

This module maps raw field tokens onto canonical contact records. It
applies date/time reformatting, lenient numeric parsing, defaults for
omitted fields, and band inference from frequency.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
import math
from typing import Any, Callable

from adif.band_plan import frequency_to_band
from adif.fields import ATTRIBUTE_BY_FIELD
from adif.tokenizer import iter_raw_records
from core.constants import CONFIRMED_FLAG, DEFAULT_MODE, DEFAULT_RST
from core.errors import LogbookParseError, LogbookValidationError
from core.logging_config import get_logger
from core.types import ContactRecord, RawRecord

_LOGGER = get_logger(__name__)

Clock = Callable[[], datetime]


@dataclass(frozen=True)
class DecodeResult:
    """Records decoded from one text and the per-record failures.

    Attributes:
        records: Canonical records in source order.
        errors: One human-readable entry per skipped record.
    """

    records: tuple[ContactRecord, ...]
    errors: tuple[str, ...]


def decode_records(
    text: str,
    clock: Clock | None = None,
    logger: Any | None = None,
) -> DecodeResult:
    """Decode every record of an ADIF text.

    Records that fail to decode are reported and skipped; they never stop
    the remaining records from being decoded.

    Args:
        text: Complete ADIF text.
        clock: Source of "now" for date/time defaults; UTC when omitted.
        logger: Optional structured logger, defaults to the module logger.

    Returns:
        Decoded records and error entries.
    """
    log = logger or _LOGGER
    records: list[ContactRecord] = []
    errors: list[str] = []
    for raw_record in iter_raw_records(text):
        _log_raw_record_warnings(log, raw_record)
        try:
            records.append(decode_record(raw_record, clock))
        except (LogbookParseError, LogbookValidationError) as error:
            log.warning("adif_record_skipped", record_index=raw_record.index, reason=str(error))
            errors.append(str(error))
    log.info("adif_decoded", record_count=len(records), error_count=len(errors))
    return DecodeResult(records=tuple(records), errors=tuple(errors))


def decode_record(raw_record: RawRecord, clock: Clock | None = None) -> ContactRecord:
    """Decode one raw record into a canonical record.

    Args:
        raw_record: Field tokens of one record.
        clock: Source of "now" for date/time defaults; UTC when omitted.

    Returns:
        Canonical contact record.

    Raises:
        LogbookParseError: If the record carries no fields at all, or the
            input ended before its end-of-record marker.
        LogbookValidationError: If the callsign is missing or blank.
    """
    if not raw_record.tokens:
        raise LogbookParseError(
            f"Record {raw_record.index}: no ADIF fields found before <EOR>"
        )
    if not raw_record.terminated:
        raise LogbookParseError(
            f"Record {raw_record.index}: input ended before <EOR>; record discarded"
        )
    values = _collect_values(raw_record)
    callsign = values.get("callsign", "")
    if not callsign:
        raise LogbookValidationError(
            f"Record {raw_record.index}: missing required field CALL"
        )
    now = (clock or _utc_now)()
    defaulted: set[str] = set()
    date = format_date(values.get("date", ""))
    if not date:
        date = now.strftime("%Y-%m-%d")
        defaulted.add("date")
    time_on = format_time(values.get("time_on", ""))
    if not time_on:
        time_on = now.strftime("%H:%M:%S")
        defaulted.add("time_on")
    time_off = format_time(values.get("time_off", ""))
    if not time_off:
        time_off = time_on
        defaulted.add("time_off")
    frequency_mhz = parse_frequency(values.get("frequency_mhz", ""))
    band = values.get("band", "")
    if not band and frequency_mhz > 0:
        band = frequency_to_band(frequency_mhz)
    return ContactRecord(
        callsign=callsign,
        date=date,
        time_on=time_on,
        time_off=time_off,
        frequency_mhz=frequency_mhz,
        band=band,
        mode=_value_or_default(values, "mode", DEFAULT_MODE, defaulted),
        rst_sent=_value_or_default(values, "rst_sent", DEFAULT_RST, defaulted),
        rst_received=_value_or_default(values, "rst_received", DEFAULT_RST, defaulted),
        operator_name=values.get("operator_name", ""),
        location=values.get("location", ""),
        country=values.get("country", ""),
        grid_square=values.get("grid_square", ""),
        power_watts=parse_power(values.get("power_watts", "")),
        comment=values.get("comment", ""),
        confirmed=values.get("confirmed", "").upper() == CONFIRMED_FLAG,
        defaulted_fields=frozenset(defaulted),
    )


def format_date(value: str) -> str:
    """Reformat an unseparated ``YYYYMMDD`` date as ``YYYY-MM-DD``.

    Values of any other shape are returned unchanged.
    """
    digits = value.replace("-", "")
    if len(digits) == 8 and digits.isdigit():
        return f"{digits[:4]}-{digits[4:6]}-{digits[6:]}"
    return value


def format_time(value: str) -> str:
    """Reformat ``HHMM`` or ``HHMMSS`` as ``HH:MM:SS``.

    Seconds default to ``00``. Values of any other shape are returned
    unchanged.
    """
    digits = value.replace(":", "")
    if not digits.isdigit():
        return value
    if len(digits) == 4:
        return f"{digits[:2]}:{digits[2:]}:00"
    if len(digits) == 6:
        return f"{digits[:2]}:{digits[2:4]}:{digits[4:]}"
    return value


def parse_frequency(value: str) -> float:
    """Parse a frequency in MHz, treating unparseable values as absent."""
    try:
        frequency = float(value)
    except ValueError:
        return 0.0
    if not math.isfinite(frequency):
        return 0.0
    return frequency


def parse_power(value: str) -> int:
    """Parse transmit power in watts, treating unparseable values as absent."""
    try:
        return int(value)
    except ValueError:
        pass
    try:
        power = float(value)
    except ValueError:
        return 0
    return int(power) if math.isfinite(power) else 0


def _collect_values(raw_record: RawRecord) -> dict[str, str]:
    """Map known tokens onto record attributes; the last duplicate wins."""
    values: dict[str, str] = {}
    for token in raw_record.tokens:
        attribute = ATTRIBUTE_BY_FIELD.get(token.name.upper())
        if attribute is not None:
            values[attribute] = token.value.strip()
    return values


def _value_or_default(
    values: dict[str, str],
    attribute: str,
    default: str,
    defaulted: set[str],
) -> str:
    value = values.get(attribute, "")
    if value:
        return value
    defaulted.add(attribute)
    return default


def _log_raw_record_warnings(log: Any, raw_record: RawRecord) -> None:
    """Log fields whose value is shorter than declared."""
    for token in raw_record.tokens:
        if token.truncated:
            log.warning(
                "adif_field_truncated",
                record_index=raw_record.index,
                field=token.name,
                declared_length=token.declared_length,
                available_length=len(token.value),
            )


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)

