"""Emit structured observability events for report runs and refreshes.

``ReportingService`` and ``ReportRefresher`` call these hooks at each stage
of a run. Every message starts with the event identifier in brackets,
followed by ``key=value`` pairs.

Usage
-----
>>> event_logger = ReportingEventLogger()
>>> event_logger.log_report_started(scope="upcoming", limit=20)

"""

from __future__ import annotations

import enum
import typing as typ

from venuepulse.logging import get_logger, log_error, log_info, log_warning

if typ.TYPE_CHECKING:
    import datetime as dt

logger = get_logger(__name__)


class ReportingEventType(enum.StrEnum):
    """Structured log event types for pipeline runs."""

    REPORT_STARTED = "reporting.report.started"
    REPORT_COMPLETED = "reporting.report.completed"
    REPORT_FAILED = "reporting.report.failed"
    ENRICHMENT_DEGRADED = "reporting.enrichment.degraded"
    CACHE_REFRESHED = "reporting.cache.refreshed"
    DIGEST_SENT = "reporting.digest.sent"
    DIGEST_FAILED = "reporting.digest.failed"


class ReportingEventLogger:
    """Emit structured reporting events via femtologging."""

    def log_report_started(self, *, scope: str, limit: int | None) -> None:
        """Log the start of a pipeline run.

        Parameters
        ----------
        scope
            Report scope (``upcoming``, ``past`` or ``all``).
        limit
            Maximum number of events, ``None`` for no limit.

        """
        log_info(
            logger,
            "[%s] scope=%s limit=%s",
            ReportingEventType.REPORT_STARTED,
            scope,
            limit,
        )

    def log_report_completed(
        self,
        *,
        scope: str,
        event_count: int,
        total_tickets: int,
        duration: dt.timedelta,
    ) -> None:
        """Log a finished run with its size and duration."""
        log_info(
            logger,
            "[%s] scope=%s event_count=%d total_tickets=%d duration_seconds=%.3f",
            ReportingEventType.REPORT_COMPLETED,
            scope,
            event_count,
            total_tickets,
            duration.total_seconds(),
        )

    def log_report_failed(
        self,
        *,
        scope: str,
        error: BaseException,
        duration: dt.timedelta,
    ) -> None:
        """Log a run that ended without a report.

        Parameters
        ----------
        scope
            Report scope of the failed run.
        error
            Exception that ended the run.
        duration
            Elapsed time between start and failure.

        """
        log_error(
            logger,
            "[%s] scope=%s duration_seconds=%.3f error_type=%s error_message=%s",
            ReportingEventType.REPORT_FAILED,
            scope,
            duration.total_seconds(),
            type(error).__name__,
            error,
        )

    def log_enrichment_degraded(self, *, degraded: int, total: int) -> None:
        """Log how many events carry counts that could not be fetched."""
        log_warning(
            logger,
            "[%s] degraded_events=%d total_events=%d",
            ReportingEventType.ENRICHMENT_DEGRADED,
            degraded,
            total,
        )

    def log_cache_refreshed(self, *, event_count: int, updated_at: dt.datetime) -> None:
        """Log replacement of the cached report."""
        log_info(
            logger,
            "[%s] event_count=%d updated_at=%s",
            ReportingEventType.CACHE_REFRESHED,
            event_count,
            updated_at.isoformat(),
        )

    def log_digest_sent(self, *, recipients: int) -> None:
        """Log delivery of the daily digest."""
        log_info(
            logger,
            "[%s] recipients=%d",
            ReportingEventType.DIGEST_SENT,
            recipients,
        )

    def log_digest_failed(self, *, error: BaseException) -> None:
        """Log a digest that could not be delivered."""
        log_error(
            logger,
            "[%s] error_type=%s error_message=%s",
            ReportingEventType.DIGEST_FAILED,
            type(error).__name__,
            error,
        )


__all__ = ["ReportingEventLogger", "ReportingEventType"]
