"""Logbook exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
"""

from __future__ import annotations


class LogbookError(Exception):
    """Base exception for all logbook failures."""


class LogbookConfigError(LogbookError):
    """Raised for invalid runtime configuration."""


class LogbookIngestError(LogbookError):
    """Raised when an upload source cannot be read."""


class LogbookParseError(LogbookError):
    """Raised when a record's text does not form a decodable record."""


class LogbookValidationError(LogbookError):
    """Raised when a decoded record lacks a mandatory field."""


class LogbookSourceError(LogbookError):
    """Base for failures retrieving records from an external source.

    Attributes:
        failure_kind: Stable classification label for callers.
    """

    failure_kind = "source_error"


class LogbookSourceAuthError(LogbookSourceError):
    """Raised when the source answers with a credential prompt."""

    failure_kind = "authentication_failed"


class LogbookSourceDataError(LogbookSourceError):
    """Raised when the source answers with something other than records."""

    failure_kind = "source_data_error"


class LogbookSourceServiceError(LogbookSourceDataError):
    """Raised when the source reports an error of its own."""

    failure_kind = "service_error"


class LogbookSourceMalformedError(LogbookSourceDataError):
    """Raised when the source payload lacks the header terminator."""

    failure_kind = "malformed_response"


class LogbookSourceNetworkError(LogbookSourceError):
    """Raised for timeouts, refused connections, and transport failures."""

    failure_kind = "network_error"


class LogbookStoreError(LogbookError):
    """Raised for contact storage failures."""


class LogbookDependencyError(LogbookError):
    """Raised when an optional runtime dependency is missing."""
