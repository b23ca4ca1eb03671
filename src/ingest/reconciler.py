"""Import reconciliation against the stored logbook.

This module decides, record by record and in source order, whether an
incoming contact is inserted, used to update an existing contact, or
skipped as a duplicate. Storage failures are recorded per record and
never stop the batch.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from core.errors import LogbookStoreError
from core.logging_config import get_logger
from core.types import ContactRecord, ImportOutcome, ImportPolicy
from store.contact_store import ContactStore
from transforms.contact_merge import apply_incoming_fields

_LOGGER = get_logger(__name__)


@dataclass
class ImportTally:
    """Mutable counters accumulated during one import."""

    imported: int = 0
    skipped: int = 0
    errors: list[str] = field(default_factory=list)

    def add_error(self, message: str) -> None:
        """Record one failed record."""
        self.errors.append(message)

    def to_outcome(self, source_label: str) -> ImportOutcome:
        """Freeze counters into an outcome with a summary message."""
        return ImportOutcome(
            success=True,
            imported=self.imported,
            skipped=self.skipped,
            errored=len(self.errors),
            errors=tuple(self.errors),
            message=_build_message(self, source_label),
        )


def reconcile_records(
    records: Iterable[ContactRecord],
    policy: ImportPolicy,
    store: ContactStore,
    source_label: str,
    prior_errors: Iterable[str] = (),
    logger: Any | None = None,
) -> ImportOutcome:
    """Insert, update, or skip each record against the store.

    Records are processed one at a time, so a record sees rows written
    for earlier records of the same import.

    Args:
        records: Canonical records in source order.
        policy: Merge policy for matching contacts.
        store: Storage collaborator.
        source_label: Human-readable source name for the summary.
        prior_errors: Errors already raised for this import, such as
            records that failed to decode.
        logger: Optional structured logger.

    Returns:
        Aggregated import outcome.
    """
    log = logger or _LOGGER
    tally = ImportTally(errors=list(prior_errors))
    for record in records:
        _reconcile_record(record, policy, store, tally)
    outcome = tally.to_outcome(source_label)
    log.info(
        "import_completed",
        source=source_label,
        imported=outcome.imported,
        skipped=outcome.skipped,
        errored=outcome.errored,
        merge_duplicates=policy.merge_duplicates,
        update_existing=policy.update_existing,
    )
    return outcome


def aborted_outcome(message: str, error: str) -> ImportOutcome:
    """Build the outcome of an import that stopped before any record."""
    return ImportOutcome(
        success=False,
        imported=0,
        skipped=0,
        errored=1,
        errors=(error,),
        message=message,
    )


def _reconcile_record(
    record: ContactRecord,
    policy: ImportPolicy,
    store: ContactStore,
    tally: ImportTally,
) -> None:
    if not policy.checks_existing:
        _insert_record(record, store, tally)
        return
    try:
        existing = store.find_by_key(record.dedup_key)
    except LogbookStoreError as error:
        tally.add_error(f"Error checking for duplicate {record.callsign}: {error}")
        return
    if existing is None:
        _insert_record(record, store, tally)
        return
    if not policy.update_existing:
        tally.skipped += 1
        return
    try:
        store.update(existing.contact_id, apply_incoming_fields(existing.record, record))
    except LogbookStoreError as error:
        tally.add_error(f"Error updating {record.callsign}: {error}")
        return
    tally.imported += 1


def _insert_record(record: ContactRecord, store: ContactStore, tally: ImportTally) -> None:
    try:
        store.insert(record)
    except LogbookStoreError as error:
        tally.add_error(f"Error creating {record.callsign}: {error}")
        return
    tally.imported += 1


def _build_message(tally: ImportTally, source_label: str) -> str:
    if tally.errors:
        message = (
            f"Imported {tally.imported} contacts with {len(tally.errors)} errors "
            f"from {source_label}"
        )
    else:
        message = f"Successfully imported {tally.imported} contacts from {source_label}"
    if tally.skipped:
        message += f" ({tally.skipped} duplicates skipped)"
    return message
