"""Unit tests for duplicate contact collapse."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta, timezone
from pathlib import Path

from core.config import LogbookConfig
from core.errors import LogbookStoreError
from core.types import ContactRecord
from store.contact_store import JsonlContactStore
from transforms.duplicate_collapse import collapse_duplicates, count_duplicates, group_by_key


def _stepping_clock():
    ticks = iter(range(1000))
    return lambda: datetime(2025, 1, 1, tzinfo=timezone.utc) + timedelta(seconds=next(ticks))


def _config(tmp_path: Path) -> LogbookConfig:
    return replace(LogbookConfig.from_env(), data_root=tmp_path)


def _record(callsign: str = "W1AW", **overrides: object) -> ContactRecord:
    record = ContactRecord(callsign=callsign, date="2025-09-20", time_on="14:30:00")
    return replace(record, **overrides)


class _FailingDeleteStore(JsonlContactStore):
    def __init__(self, config: LogbookConfig, failing_id: int) -> None:
        super().__init__(config, clock=_stepping_clock())
        self._failing_id = failing_id

    def delete(self, contact_id: int) -> None:
        if contact_id == self._failing_id:
            raise LogbookStoreError("disk full")
        super().delete(contact_id)


class _RecordingLogger:
    def __init__(self) -> None:
        self.events: list[str] = []

    def info(self, event: str, **fields: object) -> None:
        self.events.append(event)

    def error(self, event: str, **fields: object) -> None:
        self.events.append(event)


def test_group_by_key_groups_case_insensitive_callsigns(tmp_path: Path) -> None:
    """Contacts differing only in callsign case should share a group."""
    store = JsonlContactStore(_config(tmp_path), clock=_stepping_clock())
    store.insert(_record("W1AW"))
    store.insert(_record("w1aw"))

    groups = group_by_key(store.list_contacts())

    assert [len(members) for members in groups.values()] == [2]


def test_count_duplicates_counts_rows_to_remove(tmp_path: Path) -> None:
    """Each group should contribute its size minus one."""
    store = JsonlContactStore(_config(tmp_path), clock=_stepping_clock())
    for callsign in ("W1AW", "W1AW", "W1AW", "K1AB", "K1AB", "N0CA"):
        store.insert(_record(callsign))

    assert count_duplicates(store) == 3


def test_collapse_duplicates_keeps_oldest_member(tmp_path: Path) -> None:
    """The earliest created contact should survive the collapse."""
    store = JsonlContactStore(_config(tmp_path), clock=_stepping_clock())
    oldest = store.insert(_record())
    store.insert(_record())
    store.insert(_record())

    result = collapse_duplicates(store)

    assert (result.removed_count, result.group_count) == (2, 1) and [
        contact.contact_id for contact in store.list_contacts()
    ] == [oldest.contact_id]


def test_collapse_duplicates_fills_empty_fields_from_others(tmp_path: Path) -> None:
    """Missing values on the survivor should come from removed members."""
    store = JsonlContactStore(_config(tmp_path), clock=_stepping_clock())
    store.insert(_record(comment="kept"))
    store.insert(_record(comment="dropped", grid_square="FN31"))
    store.insert(_record(operator_name="Hiram"))

    collapse_duplicates(store)
    survivor = store.list_contacts()[0].record

    assert (survivor.comment, survivor.grid_square, survivor.operator_name) == (
        "kept",
        "FN31",
        "Hiram",
    )


def test_collapse_duplicates_leaves_unique_contacts_alone(tmp_path: Path) -> None:
    """A store without duplicates should not change."""
    store = JsonlContactStore(_config(tmp_path), clock=_stepping_clock())
    store.insert(_record("W1AW"))
    store.insert(_record("K1AB"))

    result = collapse_duplicates(store)

    assert (result.removed_count, result.group_count, len(store.list_contacts())) == (0, 0, 2)


def test_collapse_duplicates_reports_failed_group_and_continues(tmp_path: Path) -> None:
    """A failing group should be reported while other groups still collapse."""
    store = _FailingDeleteStore(_config(tmp_path), failing_id=2)
    store.insert(_record("W1AW"))
    store.insert(_record("W1AW"))
    store.insert(_record("K1AB"))
    store.insert(_record("K1AB"))
    logger = _RecordingLogger()

    result = collapse_duplicates(store, logger=logger)

    assert (result.removed_count, len(result.errors), len(store.list_contacts())) == (1, 1, 3)
    assert "duplicate_group_failed" in logger.events


def test_collapse_duplicates_names_failed_contact(tmp_path: Path) -> None:
    """The error entry should identify the contact that could not be removed."""
    store = _FailingDeleteStore(_config(tmp_path), failing_id=2)
    store.insert(_record("W1AW"))
    store.insert(_record("W1AW"))

    result = collapse_duplicates(store)

    assert result.errors == (
        "Error deleting duplicate 2 of W1AW on 2025-09-20 14:30:00: disk full",
    )
