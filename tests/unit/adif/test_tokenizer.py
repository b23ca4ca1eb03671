"""Unit tests for the ADIF tag tokenizer."""

from __future__ import annotations

from adif.tokenizer import (
    contains_marker,
    decode_adif_bytes,
    find_marker,
    iter_raw_records,
    read_header_fields,
)
from tests.fixture_paths import read_fixture_text


def test_iter_raw_records_splits_on_case_insensitive_marker() -> None:
    """End-of-record markers should match in any casing."""
    records = list(iter_raw_records("<call:4>k1ab<eor><CALL:4>N0CA<Eor>"))

    assert [record.tokens[0].value for record in records] == ["k1ab", "N0CA"]


def test_iter_raw_records_preserves_source_casing() -> None:
    """Field names and values should keep their source casing."""
    record = next(iter_raw_records("<Call:4>w1Aw<EOR>"))

    assert (record.tokens[0].name, record.tokens[0].value) == ("Call", "w1Aw")


def test_iter_raw_records_reads_values_by_declared_length() -> None:
    """Angle brackets inside a value should not end the value."""
    record = next(iter_raw_records("<CALL:4>W1AW<COMMENT:7>a <b> c<EOR>"))

    assert record.tokens[1].value == "a <b> c"


def test_iter_raw_records_bounds_values_by_record_marker() -> None:
    """A declared length running past the marker should stop at the marker."""
    records = list(iter_raw_records("<CALL:4>W1AW<COMMENT:60>short<EOR><CALL:4>K1AB<EOR>"))

    assert [token.value for record in records for token in record.tokens] == [
        "W1AW",
        "short",
        "K1AB",
    ]


def test_iter_raw_records_flags_value_cut_at_record_marker() -> None:
    """A value cut at the marker should be flagged as truncated."""
    record = next(iter_raw_records("<CALL:4>W1AW<COMMENT:60>short<EOR>"))

    assert record.tokens[1].truncated and record.terminated


def test_iter_raw_records_truncates_value_at_end_of_input() -> None:
    """A declared length beyond the input should yield the remaining text."""
    record = next(iter_raw_records("<CALL:4>W1AW<COMMENT:20>short"))

    assert record.tokens[1].value == "short" and record.tokens[1].truncated


def test_iter_raw_records_marks_trailing_fields_unterminated() -> None:
    """Fields after the last marker should form an unterminated record."""
    records = list(iter_raw_records("<CALL:4>W1AW<EOR><CALL:4>K1AB"))

    assert [record.terminated for record in records] == [True, False]


def test_iter_raw_records_ignores_type_hint() -> None:
    """An optional type hint should not change the declared length."""
    record = next(iter_raw_records("<FREQ:6:N>14.205<CALL:4>W1AW<EOR>"))

    assert record.tokens[0].declared_length == 6 and record.tokens[0].value == "14.205"


def test_iter_raw_records_skips_leading_comment_lines() -> None:
    """Comment lines before record data should be ignored entirely."""
    text = "# exported <CALL:4>XXXX\n# second line\n<CALL:4>W1AW<EOR>"

    record = next(iter_raw_records(text))

    assert [token.value for token in record.tokens] == ["W1AW"]


def test_iter_raw_records_drops_header_fields() -> None:
    """Fields before the end-of-header marker should not reach records."""
    text = "Header text\n<ADIF_VER:5>3.1.0<eoh>\n<CALL:4>W1AW<EOR>"

    records = list(iter_raw_records(text))

    assert len(records) == 1 and [token.name for token in records[0].tokens] == ["CALL"]


def test_iter_raw_records_skips_blank_records() -> None:
    """Whitespace between two markers should not produce a record."""
    records = list(iter_raw_records("<CALL:4>W1AW<EOR>\n\n<EOR>\n"))

    assert len(records) == 1


def test_iter_raw_records_reports_junk_between_markers() -> None:
    """Text without fields between markers should yield an empty record."""
    records = list(iter_raw_records("<CALL:4>W1AW<EOR> garbage <EOR>"))

    assert records[1].tokens == () and records[1].has_content


def test_iter_raw_records_steps_over_malformed_tags() -> None:
    """A tag with a non-numeric length should be skipped."""
    record = next(iter_raw_records("<CALL:x>ZZ<CALL:4>W1AW<EOR>"))

    assert [token.value for token in record.tokens] == ["W1AW"]


def test_iter_raw_records_is_restartable() -> None:
    """Each call should scan the input from the start again."""
    text = read_fixture_text("adif/sample_log.adi")

    first_pass = list(iter_raw_records(text))
    second_pass = list(iter_raw_records(text))

    assert first_pass == second_pass and len(first_pass) == 3


def test_read_header_fields_returns_upper_case_names() -> None:
    """Header fields should be keyed by upper-cased name."""
    text = read_fixture_text("adif/sample_log.adi")

    header = read_header_fields(text)

    assert header == {"ADIF_VER": "3.1.0", "PROGRAMID": "TestLog"}


def test_read_header_fields_is_empty_without_header() -> None:
    """Text without an end-of-header marker has no header."""
    assert read_header_fields("<CALL:4>W1AW<EOR>") == {}


def test_find_marker_matches_any_casing() -> None:
    """Marker search should ignore case and report the offset in the text."""
    assert find_marker("abc<eOh>def", "<EOH>") == 3


def test_contains_marker_reports_absence() -> None:
    """Marker search should report absence."""
    assert contains_marker("<html>login</html>", "<EOH>") is False


def test_decode_adif_bytes_falls_back_to_latin1() -> None:
    """Bytes that are not UTF-8 should still decode."""
    assert decode_adif_bytes("<NAME:4>Jörg".encode("latin-1")) == "<NAME:4>Jörg"
