"""Errors specific to the reporting module."""

from __future__ import annotations


class ReportingError(Exception):
    """Base class for reporting module errors."""


class ReportGenerationError(ReportingError):
    """Raised when a pipeline run cannot produce a report.

    Only failures of the primary event listing end a run; secondary lookups
    degrade their counts instead.
    """

    @classmethod
    def upstream_failure(cls, exc: BaseException) -> ReportGenerationError:
        """Return an error wrapping a failed event listing request."""
        return cls(f"Failed to fetch events: {exc}")


class ReportUnavailableError(ReportingError):
    """Raised when no report has been computed yet."""

    def __init__(self) -> None:
        """Initialise with the message shown to API clients."""
        super().__init__("No cached data available")
