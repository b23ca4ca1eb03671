"""Public SDK surface for the logbook.

This module provides a stable import path for library users.
It re-exports the client, typed models, and codec entry points.
"""

from __future__ import annotations

from adif.decoder import DecodeResult, decode_records
from adif.encoder import encode_document, encode_record
from core.config import LogbookConfig
from core.types import (
    CollapseResult,
    ContactRecord,
    DedupKey,
    ImportOutcome,
    ImportPolicy,
    LotwCredentials,
    StoredContact,
)
from store.contact_store import ContactStore, JsonlContactStore
from store.logbook_sdk import LogbookClient

__all__ = [
    "CollapseResult",
    "ContactRecord",
    "ContactStore",
    "DecodeResult",
    "DedupKey",
    "ImportOutcome",
    "ImportPolicy",
    "JsonlContactStore",
    "LogbookClient",
    "LogbookConfig",
    "LotwCredentials",
    "StoredContact",
    "decode_records",
    "encode_document",
    "encode_record",
]
