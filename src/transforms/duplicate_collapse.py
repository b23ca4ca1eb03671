"""Duplicate contact collapse.

This module groups stored contacts by natural key and reduces every
group to its oldest member, merging missing values from the others.
"""

from __future__ import annotations

from typing import Any, Iterable

from core.errors import LogbookStoreError
from core.logging_config import get_logger
from core.types import CollapseResult, DedupKey, StoredContact
from store.contact_store import ContactStore
from transforms.contact_merge import fill_empty_fields

_LOGGER = get_logger(__name__)


def group_by_key(contacts: Iterable[StoredContact]) -> dict[DedupKey, list[StoredContact]]:
    """Group contacts by natural key in first-seen order.

    Args:
        contacts: Stored contacts to group.

    Returns:
        Mapping from key to its members.
    """
    groups: dict[DedupKey, list[StoredContact]] = {}
    for contact in contacts:
        groups.setdefault(contact.dedup_key, []).append(contact)
    return groups


def count_duplicates(store: ContactStore) -> int:
    """Return how many rows a collapse pass would remove.

    Raises:
        LogbookStoreError: If contacts cannot be listed.
    """
    groups = group_by_key(store.list_contacts())
    return sum(len(members) - 1 for members in groups.values())


def collapse_duplicates(store: ContactStore, logger: Any | None = None) -> CollapseResult:
    """Collapse every duplicate group in the store to one contact.

    The member with the earliest creation time is kept. Its empty fields
    are filled from the other members, then the others are deleted. A
    group that fails is reported and the remaining groups still run.

    Args:
        store: Storage collaborator holding the full dataset.
        logger: Optional structured logger.

    Returns:
        Removed-row count, duplicate-group count, and per-group errors.

    Raises:
        LogbookStoreError: If contacts cannot be listed.
    """
    log = logger or _LOGGER
    duplicate_groups = [
        members for members in group_by_key(store.list_contacts()).values() if len(members) > 1
    ]
    removed_count = 0
    errors: list[str] = []
    for members in duplicate_groups:
        removed, error = _collapse_group(store, members)
        removed_count += removed
        if error is not None:
            errors.append(error)
            log.error("duplicate_group_failed", callsign=members[0].record.callsign, error=error)
    log.info(
        "duplicates_collapsed",
        group_count=len(duplicate_groups),
        removed_count=removed_count,
        error_count=len(errors),
    )
    return CollapseResult(
        removed_count=removed_count,
        group_count=len(duplicate_groups),
        errors=tuple(errors),
    )


def _collapse_group(store: ContactStore, members: list[StoredContact]) -> tuple[int, str | None]:
    """Merge and delete one group; return rows removed and any error."""
    ordered = sorted(members, key=lambda contact: (contact.created_at, contact.contact_id))
    retained, duplicates = ordered[0], ordered[1:]
    merged = retained.record
    for duplicate in duplicates:
        merged = fill_empty_fields(merged, duplicate.record)
    key = retained.dedup_key
    label = f"{key.callsign} on {key.date} {key.time_on}"
    if merged != retained.record:
        try:
            store.update(retained.contact_id, merged)
        except LogbookStoreError as error:
            return 0, f"Error merging duplicates of {label}: {error}"
    removed = 0
    for duplicate in duplicates:
        try:
            store.delete(duplicate.contact_id)
        except LogbookStoreError as error:
            return removed, f"Error deleting duplicate {duplicate.contact_id} of {label}: {error}"
        removed += 1
    return removed, None
