"""Unit tests for import reconciliation."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta, timezone
from pathlib import Path

from core.config import LogbookConfig
from core.errors import LogbookStoreError
from core.types import ContactRecord, DedupKey, ImportPolicy, StoredContact
from ingest.reconciler import aborted_outcome, reconcile_records
from store.contact_store import JsonlContactStore


def _stepping_clock():
    ticks = iter(range(1000))
    return lambda: datetime(2025, 1, 1, tzinfo=timezone.utc) + timedelta(seconds=next(ticks))


def _store(tmp_path: Path) -> JsonlContactStore:
    config = replace(LogbookConfig.from_env(), data_root=tmp_path)
    return JsonlContactStore(config, clock=_stepping_clock())


def _record(callsign: str = "W1AW", **overrides: object) -> ContactRecord:
    record = ContactRecord(callsign=callsign, date="2025-09-20", time_on="14:30:00", mode="SSB")
    return replace(record, **overrides)


class _FailingStore(JsonlContactStore):
    def __init__(self, config: LogbookConfig, failing_callsign: str) -> None:
        super().__init__(config, clock=_stepping_clock())
        self._failing_callsign = failing_callsign

    def insert(self, record: ContactRecord) -> StoredContact:
        if record.callsign == self._failing_callsign:
            raise LogbookStoreError("disk full")
        return super().insert(record)

    def find_by_key(self, key: DedupKey) -> StoredContact | None:
        if key.callsign == self._failing_callsign:
            raise LogbookStoreError("index unavailable")
        return super().find_by_key(key)


class _RecordingLogger:
    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, object]]] = []

    def info(self, event: str, **fields: object) -> None:
        self.events.append((event, fields))


def test_reconcile_records_inserts_duplicates_without_policy(tmp_path: Path) -> None:
    """The default policy should insert every record."""
    store = _store(tmp_path)

    outcome = reconcile_records([_record(), _record()], ImportPolicy(), store, "test")

    assert (outcome.imported, len(store.list_contacts())) == (2, 2)


def test_reconcile_records_skips_existing_when_merging(tmp_path: Path) -> None:
    """Merge policy should leave matching contacts alone."""
    store = _store(tmp_path)
    store.insert(_record(comment="local"))

    outcome = reconcile_records(
        [_record("w1aw", comment="incoming")],
        ImportPolicy(merge_duplicates=True),
        store,
        "test",
    )

    assert (outcome.imported, outcome.skipped, store.list_contacts()[0].record.comment) == (
        0,
        1,
        "local",
    )


def test_reconcile_records_updates_existing_when_requested(tmp_path: Path) -> None:
    """Update policy should overlay incoming values onto the match."""
    store = _store(tmp_path)
    store.insert(_record(comment="local"))

    outcome = reconcile_records(
        [_record(mode="FT8")],
        ImportPolicy(update_existing=True),
        store,
        "test",
    )
    stored = store.list_contacts()

    assert (outcome.imported, len(stored), stored[0].record.mode, stored[0].record.comment) == (
        1,
        1,
        "FT8",
        "local",
    )


def test_reconcile_records_sees_earlier_records_of_same_import(tmp_path: Path) -> None:
    """A second same-key record should update the row the first one inserted."""
    store = _store(tmp_path)
    policy = ImportPolicy(merge_duplicates=True, update_existing=True)

    outcome = reconcile_records([_record(), _record(comment="second")], policy, store, "test")
    stored = store.list_contacts()

    assert (outcome.imported, len(stored), stored[0].record.comment) == (2, 1, "second")


def test_reconcile_records_inserts_when_no_match_exists(tmp_path: Path) -> None:
    """Merge policy should insert records without a stored match."""
    store = _store(tmp_path)
    store.insert(_record("K1AB"))

    outcome = reconcile_records([_record()], ImportPolicy(merge_duplicates=True), store, "test")

    assert (outcome.imported, outcome.skipped, len(store.list_contacts())) == (1, 0, 2)


def test_reconcile_records_records_insert_failures(tmp_path: Path) -> None:
    """A failed insert should be reported while other records persist."""
    store = _FailingStore(replace(LogbookConfig.from_env(), data_root=tmp_path), "K1AB")

    outcome = reconcile_records([_record("K1AB"), _record()], ImportPolicy(), store, "test")

    assert (outcome.success, outcome.imported, outcome.errors) == (
        True,
        1,
        ("Error creating K1AB: disk full",),
    )


def test_reconcile_records_records_lookup_failures(tmp_path: Path) -> None:
    """A failed duplicate lookup should be reported for that record."""
    store = _FailingStore(replace(LogbookConfig.from_env(), data_root=tmp_path), "K1AB")

    outcome = reconcile_records(
        [_record("K1AB")],
        ImportPolicy(merge_duplicates=True),
        store,
        "test",
    )

    assert outcome.errors == ("Error checking for duplicate K1AB: index unavailable",)


def test_reconcile_records_counts_prior_errors(tmp_path: Path) -> None:
    """Decode failures passed in should count toward the error total."""
    outcome = reconcile_records(
        [_record()],
        ImportPolicy(),
        _store(tmp_path),
        "upload.adi",
        prior_errors=["Record 2: missing required field CALL"],
    )

    assert (outcome.errored, outcome.message) == (
        1,
        "Imported 1 contacts with 1 errors from upload.adi",
    )


def test_reconcile_records_mentions_skipped_duplicates(tmp_path: Path) -> None:
    """The summary should mention skipped duplicates."""
    store = _store(tmp_path)
    store.insert(_record())

    outcome = reconcile_records([_record()], ImportPolicy(merge_duplicates=True), store, "log.adi")

    assert outcome.message == "Successfully imported 0 contacts from log.adi (1 duplicates skipped)"


def test_reconcile_records_logs_completion(tmp_path: Path) -> None:
    """A completion event should carry the final counts."""
    logger = _RecordingLogger()

    reconcile_records([_record()], ImportPolicy(), _store(tmp_path), "log.adi", logger=logger)

    assert logger.events[-1] == (
        "import_completed",
        {
            "source": "log.adi",
            "imported": 1,
            "skipped": 0,
            "errored": 0,
            "merge_duplicates": False,
            "update_existing": False,
        },
    )


def test_aborted_outcome_reports_single_error() -> None:
    """An aborted import should report failure with one error."""
    outcome = aborted_outcome("ADIF import failed", "Failed to read ADIF file: missing")

    assert (outcome.success, outcome.imported, outcome.errored) == (False, 0, 1)
