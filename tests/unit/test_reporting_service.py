"""Unit tests for ReportingService pipeline runs."""

from __future__ import annotations

import typing as typ

import pytest

from tests.helpers.reporting import RecordingEventLogger, make_service
from venuepulse.reporting.errors import ReportGenerationError
from venuepulse.reporting.models import ReportScope

if typ.TYPE_CHECKING:
    from tests.helpers.event_api import FakeEventsApi


class TestGenerate:
    """Tests for ReportingService.generate."""

    @pytest.mark.asyncio
    async def test_upcoming_report_end_to_end(self, venue_api: FakeEventsApi) -> None:
        """The default run reports upcoming events with enriched counts."""
        service = make_service(venue_api)

        report = await service.generate()

        assert report.scope is ReportScope.UPCOMING
        assert [e.title for e in report.events] == [
            "Open Mic Night",
            "Jazz Night",
            "Fundraiser Gala",
        ]
        assert report.summary.total_tickets_sold == 42
        assert report.summary.average_tickets_per_event == pytest.approx(21.0)
        assert report.events[0].rsvp_count == 5
        assert "/events/v1/events/recital/tickets" not in venue_api.paths(), (
            "past events are not enriched for an upcoming report"
        )

    @pytest.mark.asyncio
    async def test_limit_bounds_enrichment(self, venue_api: FakeEventsApi) -> None:
        """Only the first ``limit`` events of the scope are enriched."""
        service = make_service(venue_api)

        report = await service.generate(ReportScope.UPCOMING, limit=1)

        assert [e.title for e in report.events] == ["Open Mic Night"]
        enriched_paths = [p for p in venue_api.paths() if p.count("/") > 3]
        assert enriched_paths == [
            "/events/v1/events/mic/rsvps",
            "/events/v1/events/mic/tickets",
        ]

    @pytest.mark.asyncio
    async def test_past_scope(self, venue_api: FakeEventsApi) -> None:
        """Past reports cover events that already started."""
        report = await make_service(venue_api).generate(ReportScope.PAST)

        assert [e.title for e in report.events] == ["Spring Recital"]
        assert report.events[0].free_tickets == 2

    @pytest.mark.asyncio
    async def test_primary_failure_raises_generation_error(
        self, venue_api: FakeEventsApi
    ) -> None:
        """A failing listing ends the run with ReportGenerationError."""
        venue_api.failures["/events/v1/events"] = 502
        event_logger = RecordingEventLogger()
        service = make_service(venue_api, event_logger=event_logger)  # type: ignore[arg-type]

        with pytest.raises(ReportGenerationError, match="Failed to fetch events"):
            await service.generate()

        assert event_logger.names() == ["log_report_started", "log_report_failed"]

    @pytest.mark.asyncio
    async def test_secondary_failure_degrades_run(self, venue_api: FakeEventsApi) -> None:
        """A failing enrichment lookup is logged and the run completes."""
        venue_api.failures["/events/v1/events/jazz/tickets"] = 500
        event_logger = RecordingEventLogger()
        service = make_service(venue_api, event_logger=event_logger)  # type: ignore[arg-type]

        report = await service.generate()

        assert report.summary.total_tickets_sold == 30
        assert report.summary.events_with_unknown_counts == 1
        assert event_logger.names() == [
            "log_report_started",
            "log_enrichment_degraded",
            "log_report_completed",
        ]
        _, degraded = event_logger.calls[1]
        assert degraded == {"degraded": 1, "total": 3}

    @pytest.mark.asyncio
    async def test_completed_event_carries_counts(self, venue_api: FakeEventsApi) -> None:
        """The completion hook reports size and duration."""
        event_logger = RecordingEventLogger()
        service = make_service(venue_api, event_logger=event_logger)  # type: ignore[arg-type]

        await service.generate(limit=2)

        name, kwargs = event_logger.calls[-1]
        assert name == "log_report_completed"
        assert kwargs["event_count"] == 2
        assert kwargs["total_tickets"] == 12
        assert kwargs["duration"].total_seconds() >= 0


class TestListings:
    """Tests for the unenriched listing helpers."""

    @pytest.mark.asyncio
    async def test_list_events_does_not_enrich(self, venue_api: FakeEventsApi) -> None:
        """Listings only read the event pages."""
        events = await make_service(venue_api).list_events(ReportScope.ALL)

        assert [e.event_id for e in events] == ["jazz", "mic", "gala", "recital"]
        assert set(venue_api.paths()) == {"/events/v1/events"}

    @pytest.mark.asyncio
    async def test_list_events_limit(self, venue_api: FakeEventsApi) -> None:
        """A limit truncates the ordered scope."""
        events = await make_service(venue_api).list_events(ReportScope.UPCOMING, 2)
        assert [e.event_id for e in events] == ["mic", "jazz"]

    @pytest.mark.asyncio
    async def test_overview(self, venue_api: FakeEventsApi) -> None:
        """The overview counts the whole listing."""
        overview = await make_service(venue_api).overview()

        assert (overview.total, overview.upcoming, overview.past) == (4, 3, 1)
        assert overview.next_event is not None
        assert overview.next_event.title == "Open Mic Night"

    @pytest.mark.asyncio
    async def test_fetch_failure_is_wrapped(self, venue_api: FakeEventsApi) -> None:
        """Listing failures surface as ReportGenerationError."""
        venue_api.failures["/events/v1/events"] = 401
        with pytest.raises(ReportGenerationError, match="HTTP 401"):
            await make_service(venue_api).overview()
