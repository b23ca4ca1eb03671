"""Import orchestration for ADIF uploads and LoTW reports.

This module converges both sources on the shared decoder and hands the
decoded records to the reconciler. Source-level failures abort the
import before any record is reconciled.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from adif.decoder import Clock, decode_records
from adif.tokenizer import read_header_fields
from core.config import LogbookConfig
from core.constants import LOTW_SOURCE_NAME
from core.errors import LogbookDependencyError, LogbookIngestError, LogbookSourceError
from core.logging_config import get_logger
from core.types import ImportOutcome, ImportPolicy, LotwCredentials
from ingest.input_reader import read_adif_source
from ingest.lotw_client import LotwClient, mark_confirmed
from ingest.reconciler import aborted_outcome, reconcile_records
from store.contact_store import ContactStore

_LOGGER = get_logger(__name__)


def import_adif_text(
    text: str,
    policy: ImportPolicy,
    store: ContactStore,
    source_label: str,
    clock: Clock | None = None,
    logger: Any | None = None,
) -> ImportOutcome:
    """Decode ADIF text and reconcile its records.

    Args:
        text: Complete ADIF text.
        policy: Merge policy.
        store: Storage collaborator.
        source_label: Name used in the summary message.
        clock: Optional source of "now" for decoder defaults.
        logger: Optional structured logger.

    Returns:
        Import outcome; records that fail to decode count as errors.
    """
    log = logger or _LOGGER
    header = read_header_fields(text)
    if header:
        log.info(
            "adif_header_read",
            source=source_label,
            program_id=header.get("PROGRAMID"),
            adif_version=header.get("ADIF_VER"),
        )
    decoded = decode_records(text, clock=clock, logger=log)
    return reconcile_records(
        decoded.records,
        policy,
        store,
        source_label=source_label,
        prior_errors=decoded.errors,
        logger=log,
    )


def import_adif_source(
    source_uri: str,
    policy: ImportPolicy,
    store: ContactStore,
    config: LogbookConfig,
    clock: Clock | None = None,
    logger: Any | None = None,
) -> ImportOutcome:
    """Import an uploaded ADIF file from a local path or S3.

    Args:
        source_uri: Local file path or ``s3://bucket/key`` URI.
        policy: Merge policy.
        store: Storage collaborator.
        config: Runtime configuration.
        clock: Optional source of "now" for decoder defaults.
        logger: Optional structured logger.

    Returns:
        Import outcome; unreadable sources produce a failed outcome.
    """
    log = logger or _LOGGER
    try:
        text = read_adif_source(source_uri, config)
    except (LogbookIngestError, LogbookDependencyError) as error:
        log.error("adif_source_unreadable", source=source_uri, error=str(error))
        return aborted_outcome("ADIF import failed", f"Failed to read ADIF file: {error}")
    source_label = Path(source_uri).name or source_uri
    return import_adif_text(text, policy, store, source_label, clock=clock, logger=log)


def import_from_lotw(
    credentials: LotwCredentials,
    policy: ImportPolicy,
    store: ContactStore,
    client: LotwClient,
    clock: Clock | None = None,
    logger: Any | None = None,
) -> ImportOutcome:
    """Import confirmed contacts from LoTW.

    Every decoded record is marked confirmed before reconciliation.

    Args:
        credentials: LoTW account credentials and date window.
        policy: Merge policy.
        store: Storage collaborator.
        client: LoTW report client.
        clock: Optional source of "now" for decoder defaults.
        logger: Optional structured logger.

    Returns:
        Import outcome; source failures produce a failed outcome with a
        single error naming the failure class.
    """
    log = logger or _LOGGER
    try:
        report_text = client.download_report(credentials)
    except LogbookSourceError as error:
        log.error(
            "lotw_download_failed",
            username=credentials.username,
            failure_kind=error.failure_kind,
            error=str(error),
        )
        return aborted_outcome(
            f"{LOTW_SOURCE_NAME} import failed: {error.failure_kind}",
            f"Failed to retrieve data from {LOTW_SOURCE_NAME}: {error}",
        )
    decoded = decode_records(report_text, clock=clock, logger=log)
    records = [mark_confirmed(record) for record in decoded.records]
    return reconcile_records(
        records,
        policy,
        store,
        source_label=f"{LOTW_SOURCE_NAME} for {credentials.username}",
        prior_errors=decoded.errors,
        logger=log,
    )
