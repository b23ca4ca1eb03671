"""Tag tokenizer for ADIF interchange text.

This module walks the text with a small tag state machine: a
bracket-delimited ``<NAME:LEN[:TYPE]>`` header followed by a fixed-length
value read, bounded by the record's end-of-record marker. Markers are
matched case-insensitively on the tag itself, so the input is never
copied in a different case and offsets never drift.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from core.constants import COMMENT_MARKER, END_OF_HEADER_MARKER, END_OF_RECORD_MARKER
from core.types import RawRecord, RawToken

_EOH_NAME = END_OF_HEADER_MARKER.strip("<>")
_EOR_NAME = END_OF_RECORD_MARKER.strip("<>")


@dataclass(frozen=True)
class _Tag:
    """One tag read from the text.

    ``token`` is set for data fields; ``marker`` holds the upper-cased
    name of a tag without a length, such as ``EOR``.
    """

    start: int
    end: int
    token: RawToken | None = None
    marker: str | None = None


def decode_adif_bytes(payload: bytes) -> str:
    """Decode raw bytes into text.

    UTF-8 is tried first; Latin-1 is used when the payload is not valid
    UTF-8, since it maps every byte.
    """
    try:
        return payload.decode("utf-8-sig")
    except UnicodeDecodeError:
        return payload.decode("latin-1")


def find_marker(text: str, marker: str, start: int = 0) -> int:
    """Find a marker case-insensitively without copying the text.

    Args:
        text: Text to scan.
        marker: Marker such as ``<EOH>``.
        start: Offset to begin scanning from.

    Returns:
        Offset of the first match, or -1.
    """
    width = len(marker)
    marker_upper = marker.upper()
    position = text.find(marker[0], start)
    while position != -1:
        if text[position:position + width].upper() == marker_upper:
            return position
        position = text.find(marker[0], position + 1)
    return -1


def contains_marker(text: str, marker: str) -> bool:
    """Return whether the marker occurs anywhere in the text."""
    return find_marker(text, marker) != -1


def iter_raw_records(text: str) -> Iterator[RawRecord]:
    """Yield the records of an ADIF text lazily and in order.

    Leading comment lines are ignored. Fields before ``<EOH>`` belong to
    the header and are dropped. Blank stretches between end-of-record
    markers are skipped. Fields left over when the input ends are yielded
    as one unterminated record.

    Args:
        text: Complete ADIF text.

    Yields:
        Raw records with their field tokens.
    """
    record_start = _skip_comment_lines(text)
    pending: list[RawToken] = []
    index = 0
    for tag in _iter_tags(text, record_start):
        if tag.token is not None:
            pending.append(tag.token)
            continue
        if tag.marker == _EOH_NAME and index == 0:
            pending = []
            record_start = tag.end
            continue
        if tag.marker != _EOR_NAME:
            continue
        has_content = bool(text[record_start:tag.start].strip())
        record_start = tag.end
        if pending or has_content:
            index += 1
            yield RawRecord(index=index, tokens=tuple(pending), has_content=has_content)
        pending = []
    if pending:
        yield RawRecord(index=index + 1, tokens=tuple(pending), terminated=False)


def read_header_fields(text: str) -> dict[str, str]:
    """Return header fields declared before ``<EOH>``.

    Args:
        text: Complete ADIF text.

    Returns:
        Upper-cased field names mapped to values; empty when the text has
        no header.
    """
    fields: dict[str, str] = {}
    for tag in _iter_tags(text, _skip_comment_lines(text)):
        if tag.token is not None:
            fields[tag.token.name.upper()] = tag.token.value
            continue
        if tag.marker == _EOH_NAME:
            return fields
        if tag.marker == _EOR_NAME:
            return {}
    return {}


def _skip_comment_lines(text: str) -> int:
    """Return the offset of the first line that is not a comment or blank."""
    position = 0
    while position < len(text):
        line_end = text.find("\n", position)
        next_position = len(text) if line_end == -1 else line_end + 1
        line = text[position:next_position].strip()
        if line and not line.startswith(COMMENT_MARKER):
            return position
        position = next_position
    return position


def _iter_tags(text: str, start: int) -> Iterator[_Tag]:
    """Yield tags from ``start`` onwards.

    Malformed tags (stray ``<``, missing or non-numeric length) are
    stepped over so text outside tags never aborts the scan. A value
    never extends past the next end-of-record marker; a declared length
    reaching beyond it yields a truncated token.
    """
    position = start
    text_length = len(text)
    record_end = -1
    while True:
        open_at = text.find("<", position)
        if open_at == -1:
            return
        close_at = text.find(">", open_at + 1)
        if close_at == -1:
            return
        tag_body = text[open_at + 1:close_at]
        if "<" in tag_body:
            position = open_at + 1
            continue
        name, colon, rest = tag_body.partition(":")
        name = name.strip()
        if not colon:
            yield _Tag(start=open_at, end=close_at + 1, marker=name.upper())
            position = close_at + 1
            continue
        length_text = rest.partition(":")[0].strip()
        if not name or not (length_text.isascii() and length_text.isdigit()):
            position = close_at + 1
            continue
        declared_length = int(length_text)
        value_start = close_at + 1
        if record_end < value_start:
            record_end = find_marker(text, END_OF_RECORD_MARKER, value_start)
            if record_end == -1:
                record_end = text_length
        value_end = min(value_start + declared_length, record_end)
        token = RawToken(
            name=name,
            declared_length=declared_length,
            value=text[value_start:value_end],
        )
        yield _Tag(start=open_at, end=value_end, token=token)
        position = value_end
