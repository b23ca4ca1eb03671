"""Python SDK for logbook operations.

This module exposes high-level APIs for ADIF and LoTW imports,
export, and duplicate maintenance backed by a contact store.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import httpx

from core.config import LogbookConfig
from core.types import CollapseResult, ImportOutcome, ImportPolicy, LotwCredentials, StoredContact
from ingest.lotw_client import LotwClient
from ingest.pipeline import import_adif_source, import_from_lotw
from store.adif_export import export_adif
from store.contact_store import ContactStore, JsonlContactStore
from transforms.duplicate_collapse import collapse_duplicates, count_duplicates


class LogbookClient:
    """Primary SDK entry point for logbook workflows."""

    def __init__(
        self,
        config: LogbookConfig | None = None,
        store: ContactStore | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        """Create SDK client.

        Args:
            config: Optional runtime configuration.
            store: Optional storage collaborator; JSONL under the data
                root when omitted.
            http_client: Optional httpx client used for LoTW downloads.
        """
        self._config = config or LogbookConfig.from_env()
        self._store = store or JsonlContactStore(self._config)
        self._http_client = http_client

    @property
    def store(self) -> ContactStore:
        """Return the storage collaborator."""
        return self._store

    def import_file(self, source_uri: str, policy: ImportPolicy | None = None) -> ImportOutcome:
        """Import an ADIF file.

        Args:
            source_uri: Local path or ``s3://bucket/key`` URI.
            policy: Merge policy; insert-only when omitted.

        Returns:
            Import outcome.
        """
        return import_adif_source(source_uri, policy or ImportPolicy(), self._store, self._config)

    def import_lotw(
        self,
        credentials: LotwCredentials,
        policy: ImportPolicy | None = None,
    ) -> ImportOutcome:
        """Import confirmed contacts from LoTW.

        Args:
            credentials: LoTW account and optional date window.
            policy: Merge policy; insert-only when omitted.

        Returns:
            Import outcome.
        """
        client = LotwClient(self._config, http_client=self._http_client)
        return import_from_lotw(credentials, policy or ImportPolicy(), self._store, client)

    def export_adif(self, start_date: str | None = None, end_date: str | None = None) -> str:
        """Export stored contacts inside an optional date window."""
        return export_adif(self._store, start_date, end_date)

    def collapse_duplicates(self) -> CollapseResult:
        """Collapse contacts sharing callsign, date, and start time."""
        return collapse_duplicates(self._store)

    def count_duplicates(self) -> int:
        """Return how many rows a collapse pass would remove."""
        return count_duplicates(self._store)

    def contacts(self) -> list[StoredContact]:
        """Return every stored contact."""
        return self._store.list_contacts()

    def with_data_root(self, data_root: str) -> "LogbookClient":
        """Clone the client with a different local data root.

        Args:
            data_root: New data root path.

        Returns:
            New SDK client backed by a JSONL store under that root.
        """
        resolved_root = Path(data_root).expanduser().resolve()
        updated_config = replace(self._config, data_root=resolved_root)
        return LogbookClient(updated_config, http_client=self._http_client)
