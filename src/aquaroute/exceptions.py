"""Custom exception hierarchy for aquaroute."""

from __future__ import annotations


class AquarouteError(Exception):
    """Base exception for all aquaroute errors."""


class ConfigError(AquarouteError):
    """Invalid or missing configuration."""


class FetchError(AquarouteError):
    """Facility fetch failed at the transport or top-level parse stage.

    Per-record problems never raise; they are reported as
    :class:`aquaroute.ingestion.facilities.RecordRejection` values.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str = "",
    ) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(message)


class OwnershipError(AquarouteError):
    """A store mutation was attempted outside the owning thread."""


class RecordValidationError(AquarouteError, ValueError):
    """A single remote record failed validation.

    Raised by per-record parsing and always caught by the batch parser,
    which turns it into a rejection instead of failing the fetch.
    """
