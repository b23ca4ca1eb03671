"""Contact storage collaborator.

This module defines the lookup/insert/update/delete protocol consumed by
the import reconciler and duplicate collapser, plus a JSONL-backed
store that keeps the whole logbook in one file under the data root.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Protocol

from core.config import LogbookConfig
from core.constants import CONTACTS_FILE_NAME
from core.errors import LogbookStoreError
from core.logging_config import get_logger
from core.types import ContactRecord, DedupKey, StoredContact
from store.contact_payload import read_contacts_jsonl, write_contacts_jsonl

_LOGGER = get_logger(__name__)


class ContactStore(Protocol):
    """Storage operations the import and collapse flows depend on.

    Implementations raise ``LogbookStoreError`` for any storage failure.
    """

    def find_by_key(self, key: DedupKey) -> StoredContact | None: ...

    def insert(self, record: ContactRecord) -> StoredContact: ...

    def update(self, contact_id: int, record: ContactRecord) -> StoredContact: ...

    def delete(self, contact_id: int) -> None: ...

    def list_contacts(self) -> list[StoredContact]: ...


class JsonlContactStore:
    """JSONL-backed contact store.

    Every mutation rewrites the file, so each call observes the effects
    of the previous one.
    """

    def __init__(
        self,
        config: LogbookConfig,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the store under the configured data root.

        Args:
            config: Runtime configuration.
            clock: Optional source of UTC timestamps.
        """
        config.data_root.mkdir(parents=True, exist_ok=True)
        self._contacts_path = config.data_root / CONTACTS_FILE_NAME
        self._clock = clock or _utc_now

    @property
    def path(self) -> Path:
        """Return the backing JSONL file path."""
        return self._contacts_path

    def list_contacts(self) -> list[StoredContact]:
        """Return every stored contact ordered by identifier.

        Raises:
            LogbookStoreError: If the store file cannot be read.
        """
        if not self._contacts_path.exists():
            return []
        try:
            contacts = read_contacts_jsonl(self._contacts_path)
        except (OSError, ValueError) as error:
            raise LogbookStoreError(
                f"Failed to read contacts from {self._contacts_path}: {error}. "
                "Repair or remove the file and retry."
            ) from error
        return sorted(contacts, key=lambda contact: contact.contact_id)

    def find_by_key(self, key: DedupKey) -> StoredContact | None:
        """Return the oldest contact with this natural key, if any."""
        matches = [contact for contact in self.list_contacts() if contact.dedup_key == key]
        if not matches:
            return None
        return min(matches, key=lambda contact: (contact.created_at, contact.contact_id))

    def insert(self, record: ContactRecord) -> StoredContact:
        """Persist a new contact and return it with its identifier."""
        contacts = self.list_contacts()
        next_id = max((contact.contact_id for contact in contacts), default=0) + 1
        timestamp = self._clock()
        contact = StoredContact(
            contact_id=next_id,
            record=_storable(record),
            created_at=timestamp,
            updated_at=timestamp,
        )
        self._write(contacts + [contact])
        _LOGGER.debug("contact_inserted", contact_id=next_id, callsign=record.callsign)
        return contact

    def update(self, contact_id: int, record: ContactRecord) -> StoredContact:
        """Replace the fields of an existing contact.

        Raises:
            LogbookStoreError: If the contact does not exist.
        """
        contacts = self.list_contacts()
        position = _position_of(contacts, contact_id)
        updated = replace(
            contacts[position],
            record=_storable(record),
            updated_at=self._clock(),
        )
        contacts[position] = updated
        self._write(contacts)
        _LOGGER.debug("contact_updated", contact_id=contact_id, callsign=record.callsign)
        return updated

    def delete(self, contact_id: int) -> None:
        """Remove a contact.

        Raises:
            LogbookStoreError: If the contact does not exist.
        """
        contacts = self.list_contacts()
        del contacts[_position_of(contacts, contact_id)]
        self._write(contacts)
        _LOGGER.debug("contact_deleted", contact_id=contact_id)

    def _write(self, contacts: list[StoredContact]) -> None:
        try:
            write_contacts_jsonl(self._contacts_path, contacts)
        except OSError as error:
            raise LogbookStoreError(
                f"Failed to write contacts to {self._contacts_path}: {error}."
            ) from error


def _position_of(contacts: list[StoredContact], contact_id: int) -> int:
    for position, contact in enumerate(contacts):
        if contact.contact_id == contact_id:
            return position
    raise LogbookStoreError(f"Contact {contact_id} not found.")


def _storable(record: ContactRecord) -> ContactRecord:
    """Drop decode-time bookkeeping before persisting."""
    return replace(record, defaulted_fields=frozenset())


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)
