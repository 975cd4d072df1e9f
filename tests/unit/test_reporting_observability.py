"""Unit tests for structured reporting events."""

from __future__ import annotations

import datetime as dt

import pytest

from tests.helpers.femtologging_capture import capture_femto_logs
from venuepulse.reporting.observability import (
    ReportingEventLogger,
    ReportingEventType,
)

LOGGER_NAME = "venuepulse.reporting.observability"


@pytest.fixture
def event_logger() -> ReportingEventLogger:
    """Return a fresh event logger."""
    return ReportingEventLogger()


class TestReportingEventLogger:
    """Tests for ReportingEventLogger message format and levels."""

    def test_report_started(self, event_logger: ReportingEventLogger) -> None:
        """Start events are INFO with scope and limit."""
        with capture_femto_logs(LOGGER_NAME) as capture:
            event_logger.log_report_started(scope="upcoming", limit=20)
            capture.wait_for_count(1)
            record = capture.records[0]
            assert record.level == "INFO"
            assert record.message == "[reporting.report.started] scope=upcoming limit=20"

    def test_report_completed(self, event_logger: ReportingEventLogger) -> None:
        """Completion events carry counts and the duration in seconds."""
        with capture_femto_logs(LOGGER_NAME) as capture:
            event_logger.log_report_completed(
                scope="past",
                event_count=3,
                total_tickets=42,
                duration=dt.timedelta(milliseconds=1500),
            )
            capture.wait_for_count(1)
            message = capture.records[0].message
            assert ReportingEventType.REPORT_COMPLETED in message
            assert "event_count=3" in message
            assert "total_tickets=42" in message
            assert "duration_seconds=1.500" in message

    def test_report_failed(self, event_logger: ReportingEventLogger) -> None:
        """Failure events are ERROR with the exception type and text."""
        with capture_femto_logs(LOGGER_NAME) as capture:
            event_logger.log_report_failed(
                scope="upcoming",
                error=RuntimeError("boom"),
                duration=dt.timedelta(seconds=2),
            )
            capture.wait_for_count(1)
            record = capture.records[0]
            assert record.level == "ERROR"
            assert "error_type=RuntimeError" in record.message
            assert "error_message=boom" in record.message

    def test_enrichment_degraded(self, event_logger: ReportingEventLogger) -> None:
        """Degraded enrichment is a warning."""
        with capture_femto_logs(LOGGER_NAME) as capture:
            event_logger.log_enrichment_degraded(degraded=1, total=4)
            capture.wait_for_count(1)
            record = capture.records[0]
            assert record.level == "WARN"
            assert "degraded_events=1 total_events=4" in record.message

    def test_cache_refreshed(self, event_logger: ReportingEventLogger) -> None:
        """Cache refreshes include the ISO timestamp."""
        updated = dt.datetime(2024, 7, 8, 12, 0, tzinfo=dt.UTC)
        with capture_femto_logs(LOGGER_NAME) as capture:
            event_logger.log_cache_refreshed(event_count=2, updated_at=updated)
            capture.wait_for_count(1)
            assert capture.records[0].message == (
                "[reporting.cache.refreshed] event_count=2 "
                "updated_at=2024-07-08T12:00:00+00:00"
            )

    def test_digest_events(self, event_logger: ReportingEventLogger) -> None:
        """Digest delivery and failure use INFO and ERROR."""
        with capture_femto_logs(LOGGER_NAME) as capture:
            event_logger.log_digest_sent(recipients=2)
            event_logger.log_digest_failed(error=OSError("refused"))
            capture.wait_for_count(2)
            assert [r.level for r in capture.records] == ["INFO", "ERROR"]
            assert "recipients=2" in capture.records[0].message
            assert "error_type=OSError" in capture.records[1].message
