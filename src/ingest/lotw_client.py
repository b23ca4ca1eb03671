"""Logbook of the World report client.

This module downloads confirmed contacts as ADIF from LoTW and
classifies the response before any record is decoded. LoTW only accepts
credentials as query parameters, so they are never logged.
"""

from __future__ import annotations

from dataclasses import replace
import re
from typing import Any

import httpx

from adif.tokenizer import contains_marker, decode_adif_bytes
from core.config import LogbookConfig
from core.constants import (
    END_OF_HEADER_MARKER,
    LOTW_HISTORICAL_START_DATE,
    LOTW_IMPORT_COMMENT,
    LOTW_REPORT_PATH,
)
from core.errors import (
    LogbookSourceAuthError,
    LogbookSourceMalformedError,
    LogbookSourceNetworkError,
    LogbookSourceServiceError,
)
from core.logging_config import get_logger
from core.types import ContactRecord, LotwCredentials

_LOGGER = get_logger(__name__)

_LOGIN_PROMPT_PATTERN = re.compile(r"login|password", re.IGNORECASE)
_ERROR_PATTERN = re.compile(r"error", re.IGNORECASE)
_EXCERPT_LENGTH = 200
_AUTH_STATUS_CODES = (401, 403)


class LotwClient:
    """HTTP client for the LoTW ADIF report endpoint."""

    def __init__(
        self,
        config: LogbookConfig,
        http_client: httpx.Client | None = None,
        logger: Any | None = None,
    ) -> None:
        """Create a client.

        Args:
            config: Runtime configuration with base URL and timeout.
            http_client: Optional preconfigured httpx client.
            logger: Optional structured logger.
        """
        self._report_url = config.lotw_base_url + LOTW_REPORT_PATH
        self._timeout = config.lotw_timeout_seconds
        self._http_client = http_client
        self._log = logger or _LOGGER

    def download_report(self, credentials: LotwCredentials) -> str:
        """Download the ADIF report for an account.

        Args:
            credentials: Account credentials and optional date window.

        Returns:
            ADIF text that contains an end-of-header marker.

        Raises:
            LogbookSourceNetworkError: On timeout or transport failure.
            LogbookSourceAuthError: If LoTW rejects the credentials.
            LogbookSourceServiceError: If LoTW reports an error.
            LogbookSourceMalformedError: If the payload is not an ADIF report.
        """
        self._log.info(
            "lotw_request_started",
            username=credentials.username,
            start_date=credentials.start_date,
            end_date=credentials.end_date,
        )
        response = self._get(build_report_params(credentials))
        self._log.info(
            "lotw_response_received",
            username=credentials.username,
            status_code=response.status_code,
            payload_length=len(response.content),
        )
        if response.status_code in _AUTH_STATUS_CODES:
            raise LogbookSourceAuthError(
                f"LoTW rejected the credentials for {credentials.username} "
                f"(HTTP {response.status_code}). Check the username and password."
            )
        if not response.is_success:
            raise LogbookSourceServiceError(
                f"LoTW download failed with HTTP status {response.status_code}. Retry later."
            )
        report_text = decode_adif_bytes(response.content)
        classify_report(report_text)
        return report_text

    def _get(self, params: dict[str, str]) -> httpx.Response:
        try:
            if self._http_client is not None:
                return self._http_client.get(self._report_url, params=params, timeout=self._timeout)
            with httpx.Client(timeout=self._timeout, follow_redirects=True) as client:
                return client.get(self._report_url, params=params)
        except httpx.TimeoutException as error:
            raise LogbookSourceNetworkError(
                f"LoTW did not answer within {self._timeout:g} seconds. Retry later."
            ) from error
        except httpx.HTTPError as error:
            raise LogbookSourceNetworkError(
                f"Could not reach LoTW at {self._report_url}: {error}."
            ) from error


def build_report_params(credentials: LotwCredentials) -> dict[str, str]:
    """Build query parameters for the report endpoint.

    A missing start date requests every confirmation since the
    historical floor.
    """
    params = {
        "login": credentials.username,
        "password": credentials.password,
        "qso_query": "1",
        "qso_qsl": "yes",
        "qso_qsldetail": "yes",
        "qso_withown": "yes",
        "qso_qslsince": credentials.start_date or LOTW_HISTORICAL_START_DATE,
    }
    if credentials.end_date:
        params["qso_enddate"] = credentials.end_date
    return params


def classify_report(report_text: str) -> None:
    """Reject payloads that are not ADIF reports.

    Args:
        report_text: Decoded response body.

    Raises:
        LogbookSourceAuthError: If the body looks like a login page.
        LogbookSourceServiceError: If the body reports an error.
        LogbookSourceMalformedError: If the body has no end-of-header marker.
    """
    if contains_marker(report_text, END_OF_HEADER_MARKER):
        return
    excerpt = report_text[:_EXCERPT_LENGTH].strip()
    if _LOGIN_PROMPT_PATTERN.search(report_text):
        raise LogbookSourceAuthError(
            "Authentication failed: LoTW returned a login page instead of ADIF data. "
            "Check the username and password."
        )
    if _ERROR_PATTERN.search(report_text):
        raise LogbookSourceServiceError(f"LoTW returned an error: {excerpt}")
    raise LogbookSourceMalformedError(
        f"Invalid ADIF data received: missing {END_OF_HEADER_MARKER} header. Got: {excerpt}"
    )


def mark_confirmed(record: ContactRecord) -> ContactRecord:
    """Apply LoTW conventions to a decoded record.

    Every LoTW contact is confirmed; LoTW bands are upper-case. A record
    without a comment is tagged with its source. The tag counts as a
    default, so updating an existing contact keeps that contact's comment.
    """
    if record.comment:
        return replace(record, confirmed=True, band=record.band.lower())
    return replace(
        record,
        confirmed=True,
        band=record.band.lower(),
        comment=LOTW_IMPORT_COMMENT,
        defaulted_fields=record.defaulted_fields | {"comment"},
    )
