"""Runtime configuration model for the logbook.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path

from core.constants import DEFAULT_DATA_ROOT, DEFAULT_LOTW_BASE_URL, DEFAULT_LOTW_TIMEOUT_SECONDS
from core.errors import LogbookConfigError


@dataclass(frozen=True)
class LogbookConfig:
    """Validated runtime configuration.

    Attributes:
        data_root: Local root directory for the contact store.
        lotw_base_url: Base URL of the Logbook of the World service.
        lotw_timeout_seconds: Upper bound for one LoTW download.
        s3_region: Optional default AWS region for S3 sources.
        s3_profile: Optional AWS profile for boto3 session initialization.
        lotw_password: Optional LoTW password for unattended imports.
    """

    data_root: Path
    lotw_base_url: str
    lotw_timeout_seconds: float
    s3_region: str | None
    s3_profile: str | None
    lotw_password: str | None = field(default=None, repr=False)

    @classmethod
    def from_env(cls) -> "LogbookConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            LogbookConfigError: If environment values are invalid.
        """
        data_root_value = os.getenv("LOGBOOK_DATA_ROOT", str(DEFAULT_DATA_ROOT))
        base_url = os.getenv("LOGBOOK_LOTW_URL", DEFAULT_LOTW_BASE_URL)
        timeout_value = os.getenv("LOGBOOK_LOTW_TIMEOUT", str(DEFAULT_LOTW_TIMEOUT_SECONDS))
        return cls(
            data_root=Path(data_root_value).expanduser().resolve(),
            lotw_base_url=base_url.rstrip("/"),
            lotw_timeout_seconds=_parse_timeout(timeout_value),
            s3_region=os.getenv("LOGBOOK_S3_REGION"),
            s3_profile=os.getenv("LOGBOOK_S3_PROFILE"),
            lotw_password=os.getenv("LOGBOOK_LOTW_PASSWORD"),
        )


def _parse_timeout(raw_value: str) -> float:
    """Parse the LoTW timeout environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Parsed positive timeout in seconds.

    Raises:
        LogbookConfigError: If value is not a positive number.
    """
    try:
        timeout = float(raw_value)
    except ValueError as error:
        raise LogbookConfigError(
            "Invalid LOGBOOK_LOTW_TIMEOUT value: "
            f"expected number of seconds, got '{raw_value}'. "
            "Set LOGBOOK_LOTW_TIMEOUT to a numeric value."
        ) from error
    if timeout <= 0:
        raise LogbookConfigError(
            f"Invalid LOGBOOK_LOTW_TIMEOUT value: {raw_value}. "
            "The timeout must be greater than zero."
        )
    return timeout
