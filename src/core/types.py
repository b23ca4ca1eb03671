"""Shared typed models.

This module defines immutable data models used by the codec, the
import reconciler, the duplicate collapser, and the storage layer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class RawToken:
    """One ``<NAME:LEN>value`` field read from interchange text.

    Attributes:
        name: Field name exactly as written in the source.
        declared_length: Length declared in the tag.
        value: Characters read for the field; shorter than
            ``declared_length`` only when the input ran out.
    """

    name: str
    declared_length: int
    value: str

    @property
    def truncated(self) -> bool:
        """Return whether fewer characters were available than declared."""
        return len(self.value) < self.declared_length


@dataclass(frozen=True)
class RawRecord:
    """Tokens of one record as delimited by the end-of-record marker.

    Attributes:
        index: One-based position of the record in the stream.
        tokens: Ordered field tokens.
        terminated: False when input ended before an end-of-record marker.
        has_content: Whether any non-whitespace text preceded the marker.
    """

    index: int
    tokens: tuple[RawToken, ...]
    terminated: bool = True
    has_content: bool = True


@dataclass(frozen=True)
class ContactRecord:
    """Canonical, source-neutral representation of one contact.

    Dates are ``YYYY-MM-DD`` and times ``HH:MM:SS`` strings. Empty strings
    and zero numbers mean "absent". ``defaulted_fields`` names fields that
    the decoder filled in because the source omitted them; it does not
    take part in equality.
    """

    callsign: str
    date: str
    time_on: str
    time_off: str = ""
    frequency_mhz: float = 0.0
    band: str = ""
    mode: str = ""
    rst_sent: str = ""
    rst_received: str = ""
    operator_name: str = ""
    location: str = ""
    country: str = ""
    grid_square: str = ""
    power_watts: int = 0
    comment: str = ""
    confirmed: bool = False
    defaulted_fields: frozenset[str] = field(default_factory=frozenset, compare=False)

    @property
    def dedup_key(self) -> "DedupKey":
        """Return the natural key identifying this contact."""
        return DedupKey.from_record(self)


@dataclass(frozen=True)
class DedupKey:
    """Natural key ``(callsign, date, time_on)`` for one contact.

    Callsigns compare case-insensitively and without surrounding spaces.
    """

    callsign: str
    date: str
    time_on: str

    @classmethod
    def from_record(cls, record: ContactRecord) -> "DedupKey":
        """Build the key for a canonical record."""
        return cls(
            callsign=record.callsign.strip().upper(),
            date=record.date,
            time_on=record.time_on,
        )


@dataclass(frozen=True)
class StoredContact:
    """Persisted contact owned by the storage collaborator.

    Attributes:
        contact_id: Storage-assigned identifier.
        record: Canonical contact fields.
        created_at: UTC creation timestamp.
        updated_at: UTC timestamp of the last mutation.
    """

    contact_id: int
    record: ContactRecord
    created_at: datetime
    updated_at: datetime

    @property
    def dedup_key(self) -> DedupKey:
        """Return the natural key of the stored record."""
        return self.record.dedup_key


@dataclass(frozen=True)
class ImportPolicy:
    """Merge policy applied by the import reconciler.

    Attributes:
        merge_duplicates: Skip records that match an existing contact.
        update_existing: Update matching contacts from incoming records.
    """

    merge_duplicates: bool = False
    update_existing: bool = False

    @property
    def checks_existing(self) -> bool:
        """Return whether existing contacts must be looked up."""
        return self.merge_duplicates or self.update_existing


@dataclass(frozen=True)
class ImportOutcome:
    """Aggregate result of one import invocation.

    Attributes:
        success: False only when the import aborted before reconciling.
        imported: Contacts inserted or updated.
        skipped: Records matching an existing contact that were left alone.
        errored: Records that failed to decode or persist.
        errors: Ordered human-readable error entries.
        message: One-line summary.
    """

    success: bool
    imported: int
    skipped: int
    errored: int
    errors: tuple[str, ...]
    message: str

    def to_payload(self) -> dict[str, object]:
        """Render the JSON payload consumed by the HTTP layer."""
        return {
            "success": self.success,
            "imported_count": self.imported,
            "skipped_count": self.skipped,
            "error_count": self.errored,
            "errors": list(self.errors),
            "message": self.message,
        }


@dataclass(frozen=True)
class LotwCredentials:
    """Credentials and date window for a LoTW download.

    Attributes:
        username: LoTW account name.
        password: LoTW account password.
        start_date: Optional inclusive ``YYYY-MM-DD`` lower bound.
        end_date: Optional inclusive ``YYYY-MM-DD`` upper bound.
    """

    username: str
    password: str = field(repr=False)
    start_date: str | None = None
    end_date: str | None = None


@dataclass(frozen=True)
class CollapseResult:
    """Result of one duplicate-collapse pass.

    Attributes:
        removed_count: Rows deleted across all groups.
        group_count: Duplicate groups found.
        errors: One entry per group that could not be fully collapsed.
    """

    removed_count: int
    group_count: int
    errors: tuple[str, ...] = ()
