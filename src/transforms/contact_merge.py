"""Field-level merge rules for contact records.

This module decides which values survive when two records describing
the same contact are combined, either during duplicate collapse or
when an import updates an existing contact.
"""

from __future__ import annotations

from dataclasses import fields, replace

from core.types import ContactRecord

_FIELD_NAMES = tuple(item.name for item in fields(ContactRecord) if item.compare)


def is_empty_value(value: object) -> bool:
    """Return whether a record value counts as absent.

    Empty strings, zero numbers, and ``False`` are absent.
    """
    if isinstance(value, str):
        return not value.strip()
    return not value


def fill_empty_fields(retained: ContactRecord, donor: ContactRecord) -> ContactRecord:
    """Copy donor values into fields that are empty on the retained record.

    Non-empty retained values are never overwritten.

    Args:
        retained: Record that survives the merge.
        donor: Record contributing missing values.

    Returns:
        Merged record, or ``retained`` itself when nothing changed.
    """
    changes: dict[str, object] = {}
    for name in _FIELD_NAMES:
        donor_value = getattr(donor, name)
        if is_empty_value(getattr(retained, name)) and not is_empty_value(donor_value):
            changes[name] = donor_value
    if not changes:
        return retained
    return replace(retained, **changes)


def apply_incoming_fields(existing: ContactRecord, incoming: ContactRecord) -> ContactRecord:
    """Overlay values an import actually supplied onto an existing record.

    Empty incoming values and values the decoder filled in by default
    leave the existing value in place, so locally entered data survives
    an update. ``confirmed`` can only move from false to true.

    Args:
        existing: Record currently stored.
        incoming: Freshly decoded record.

    Returns:
        Updated record.
    """
    changes: dict[str, object] = {}
    for name in _FIELD_NAMES:
        if name in incoming.defaulted_fields:
            continue
        value = getattr(incoming, name)
        if not is_empty_value(value):
            changes[name] = value
    return replace(existing, **changes)
