"""ADIF export of stored contacts.

This module selects stored contacts inside an optional inclusive date
window and renders them as a complete ADIF document.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from adif.encoder import encode_document
from core.errors import LogbookStoreError
from core.logging_config import get_logger
from core.types import ContactRecord, StoredContact
from store.contact_store import ContactStore

_LOGGER = get_logger(__name__)


def select_contacts(
    contacts: list[StoredContact],
    start_date: str | None = None,
    end_date: str | None = None,
) -> list[ContactRecord]:
    """Return records inside the window ordered by date and start time.

    Args:
        contacts: Stored contacts.
        start_date: Optional inclusive ``YYYY-MM-DD`` lower bound.
        end_date: Optional inclusive ``YYYY-MM-DD`` upper bound.

    Returns:
        Selected records.
    """
    selected = [
        contact.record
        for contact in contacts
        if (not start_date or contact.record.date >= start_date)
        and (not end_date or contact.record.date <= end_date)
    ]
    return sorted(selected, key=lambda record: (record.date, record.time_on))


def export_adif(
    store: ContactStore,
    start_date: str | None = None,
    end_date: str | None = None,
    created_at: datetime | None = None,
) -> str:
    """Render stored contacts as an ADIF document.

    Args:
        store: Storage collaborator.
        start_date: Optional inclusive lower bound.
        end_date: Optional inclusive upper bound.
        created_at: Optional export timestamp for the preamble.

    Returns:
        ADIF text with preamble and records.

    Raises:
        LogbookStoreError: If contacts cannot be listed.
    """
    records = select_contacts(store.list_contacts(), start_date, end_date)
    _LOGGER.info(
        "adif_exported",
        record_count=len(records),
        start_date=start_date,
        end_date=end_date,
    )
    return encode_document(records, created_at)


def write_adif_export(output_path: Path, document: str) -> None:
    """Write an export document to disk.

    Raises:
        LogbookStoreError: If the file cannot be written.
    """
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(document, encoding="utf-8")
    except OSError as error:
        raise LogbookStoreError(
            f"Failed to write ADIF export to {output_path}: {error.strerror}."
        ) from error
