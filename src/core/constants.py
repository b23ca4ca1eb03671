"""Core constants used across logbook modules.

This module centralizes codec sentinels, source defaults, and paths.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_DATA_ROOT = Path(".logbook")
CONTACTS_FILE_NAME = "contacts.jsonl"

DEFAULT_MODE = "SSB"
DEFAULT_RST = "59"
UNKNOWN_BAND = "unknown"
CONFIRMED_FLAG = "Y"

END_OF_HEADER_MARKER = "<EOH>"
END_OF_RECORD_MARKER = "<EOR>"
COMMENT_MARKER = "#"
ADIF_VERSION = "3.1.0"
PROGRAM_ID = "Logbook"
PROGRAM_VERSION = "1.0.0"

DEFAULT_LOTW_BASE_URL = "https://lotw.arrl.org"
LOTW_REPORT_PATH = "/lotwuser/lotwreport.adi"
LOTW_HISTORICAL_START_DATE = "1945-01-01"
DEFAULT_LOTW_TIMEOUT_SECONDS = 30.0
LOTW_SOURCE_NAME = "LoTW"
LOTW_IMPORT_COMMENT = "Imported from LoTW"
