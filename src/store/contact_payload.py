"""Shared JSONL serialization for stored contact payloads.

This module centralizes StoredContact JSON serialization logic.
It is used by the JSONL contact store.
"""

from __future__ import annotations

import json
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import Any

from core.types import ContactRecord, StoredContact


def stored_contact_to_payload(contact: StoredContact) -> dict[str, object]:
    """Serialize StoredContact into JSON-safe payload.

    Args:
        contact: Stored contact instance.

    Returns:
        Dictionary payload for JSON encoding.
    """
    record_payload = asdict(contact.record)
    record_payload.pop("defaulted_fields", None)
    return {
        "contact_id": contact.contact_id,
        "record": record_payload,
        "created_at": contact.created_at.isoformat(),
        "updated_at": contact.updated_at.isoformat(),
    }


def stored_contact_from_payload(payload: dict[str, Any]) -> StoredContact:
    """Deserialize JSON payload into StoredContact.

    Args:
        payload: Serialized contact payload.

    Returns:
        Parsed StoredContact.
    """
    record_payload = payload.get("record")
    record_dict = record_payload if isinstance(record_payload, dict) else {}
    record = ContactRecord(
        callsign=str(record_dict.get("callsign", "")),
        date=str(record_dict.get("date", "")),
        time_on=str(record_dict.get("time_on", "")),
        time_off=str(record_dict.get("time_off", "")),
        frequency_mhz=float(record_dict.get("frequency_mhz", 0.0)),
        band=str(record_dict.get("band", "")),
        mode=str(record_dict.get("mode", "")),
        rst_sent=str(record_dict.get("rst_sent", "")),
        rst_received=str(record_dict.get("rst_received", "")),
        operator_name=str(record_dict.get("operator_name", "")),
        location=str(record_dict.get("location", "")),
        country=str(record_dict.get("country", "")),
        grid_square=str(record_dict.get("grid_square", "")),
        power_watts=int(record_dict.get("power_watts", 0)),
        comment=str(record_dict.get("comment", "")),
        confirmed=bool(record_dict.get("confirmed", False)),
    )
    return StoredContact(
        contact_id=int(payload["contact_id"]),
        record=record,
        created_at=datetime.fromisoformat(str(payload["created_at"])),
        updated_at=datetime.fromisoformat(str(payload["updated_at"])),
    )


def write_contacts_jsonl(contacts_path: Path, contacts: list[StoredContact]) -> None:
    """Write StoredContact list to JSONL file.

    Args:
        contacts_path: Output JSONL file path.
        contacts: Contacts to serialize.
    """
    lines = [json.dumps(stored_contact_to_payload(contact), sort_keys=True) for contact in contacts]
    contacts_path.write_text("".join(line + "\n" for line in lines), encoding="utf-8")


def read_contacts_jsonl(contacts_path: Path) -> list[StoredContact]:
    """Read StoredContact list from JSONL file.

    Args:
        contacts_path: Input JSONL file path.

    Returns:
        Parsed contacts.

    Raises:
        ValueError: If JSONL rows are invalid.
    """
    contacts: list[StoredContact] = []
    for line_number, line in enumerate(contacts_path.read_text(encoding="utf-8").splitlines(), 1):
        if not line.strip():
            continue
        payload = _parse_payload_line(line, line_number)
        try:
            contacts.append(stored_contact_from_payload(payload))
        except (KeyError, TypeError, ValueError) as error:
            raise ValueError(f"Invalid contact at line {line_number}: {error}") from error
    return contacts


def _parse_payload_line(line: str, line_number: int) -> dict[str, Any]:
    """Parse and validate one JSONL payload row.

    Args:
        line: Raw JSONL line.
        line_number: One-based line number.

    Returns:
        Parsed payload dictionary.

    Raises:
        ValueError: If JSON row is invalid.
    """
    try:
        payload = json.loads(line)
    except json.JSONDecodeError as error:
        raise ValueError(
            f"Invalid JSON at line {line_number}: {error.msg}"
        ) from error
    if not isinstance(payload, dict):
        raise ValueError(f"Invalid payload at line {line_number}: expected JSON object")
    return payload
