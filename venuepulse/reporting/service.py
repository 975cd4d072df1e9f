"""Pipeline driver: fetch, enrich, classify and aggregate.

``ReportingService`` wires the stages together for one run. It holds no
state between runs; the CLI, the scheduler and the HTTP resources each
call :meth:`ReportingService.generate` and decide what to do with the
result.
"""

from __future__ import annotations

import dataclasses as dc
import datetime as dt
import time
import typing as typ

from venuepulse.classification import (
    DEFAULT_CLASSIFICATION_CONFIG,
    ClassificationConfig,
)
from venuepulse.common.time import utcnow
from venuepulse.pipeline.fetcher import (
    ListingOverview,
    partition_events,
    summarize_listing,
)
from venuepulse.upstream.errors import UpstreamAPIError

from .builder import build_report
from .config import ReportingConfig
from .errors import ReportGenerationError
from .models import Report, ReportScope

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from venuepulse.pipeline.enrichment import EventEnricher
    from venuepulse.pipeline.fetcher import EventFetcher
    from venuepulse.upstream.client import EventsApiClient
    from venuepulse.upstream.models import Event

    from .observability import ReportingEventLogger


@dc.dataclass(frozen=True, slots=True)
class ReportingServiceDependencies:
    """Collaborators needed by :class:`ReportingService`.

    Attributes
    ----------
    fetcher
        Reads the event listing.
    enricher
        Attaches secondary counts.
    client
        Optional API client closed by :meth:`ReportingService.aclose`.

    """

    fetcher: EventFetcher
    enricher: EventEnricher
    client: EventsApiClient | None = None


class ReportingService:
    """Run the event pipeline and return report snapshots."""

    def __init__(
        self,
        dependencies: ReportingServiceDependencies,
        config: ReportingConfig | None = None,
        classification: ClassificationConfig | None = None,
        event_logger: ReportingEventLogger | None = None,
        clock: cabc.Callable[[], dt.datetime] = utcnow,
    ) -> None:
        """Configure the service with dependencies.

        Parameters
        ----------
        dependencies
            Fetcher, enricher and optional owned client.
        config
            Reporting configuration; uses defaults if not provided.
        classification
            Keyword table and thresholds; uses the built-in table if not
            provided.
        event_logger
            Optional structured event logger for run lifecycle events.
        clock
            Source of the reference instant for each run.

        """
        self._fetcher = dependencies.fetcher
        self._enricher = dependencies.enricher
        self._client = dependencies.client
        self._config = config or ReportingConfig()
        self._classification = classification or DEFAULT_CLASSIFICATION_CONFIG
        self._event_logger = event_logger
        self._clock = clock

    @property
    def config(self) -> ReportingConfig:
        """Reporting configuration in effect."""
        return self._config

    @property
    def classification(self) -> ClassificationConfig:
        """Classification rules applied to each report."""
        return self._classification

    def _log_to_event_logger(
        self,
        event_method_name: str,
        **kwargs: typ.Any,  # noqa: ANN401
    ) -> None:
        """Delegate to an event logger method if the logger is configured."""
        if self._event_logger is None:
            return
        method = getattr(self._event_logger, event_method_name)
        method(**kwargs)

    async def aclose(self) -> None:
        """Release the API client when the service owns one."""
        if self._client is not None:
            await self._client.aclose()

    async def fetch_events(self) -> list[Event]:
        """Return the raw event listing.

        Raises
        ------
        ReportGenerationError
            If the listing cannot be fetched.

        """
        try:
            return await self._fetcher.fetch_all_events()
        except UpstreamAPIError as exc:
            raise ReportGenerationError.upstream_failure(exc) from exc

    async def overview(self) -> ListingOverview:
        """Return headline counts for the whole listing."""
        events = await self.fetch_events()
        return summarize_listing(events, self._clock())

    async def list_events(
        self, scope: ReportScope, limit: int | None = None
    ) -> list[Event]:
        """Return raw events for ``scope`` without enrichment.

        ``all`` keeps service order and includes undated events.
        """
        events = await self.fetch_events()
        selected = self._select(events, scope, self._clock())
        return selected if limit is None else selected[:limit]

    @staticmethod
    def _select(
        events: list[Event], scope: ReportScope, now: dt.datetime
    ) -> list[Event]:
        if scope is ReportScope.ALL:
            return events
        partition = partition_events(events, now)
        if scope is ReportScope.PAST:
            return partition.past
        return partition.upcoming

    async def generate(
        self,
        scope: ReportScope = ReportScope.UPCOMING,
        limit: int | None = None,
    ) -> Report:
        """Run the full pipeline and return a fresh report.

        Parameters
        ----------
        scope
            Which partition of the listing to report on.
        limit
            Maximum number of events enriched and reported; ``None`` uses
            every event in the scope.

        Returns
        -------
        Report
            Immutable report snapshot.

        Raises
        ------
        ReportGenerationError
            If the primary event listing cannot be fetched.

        """
        started_at = time.monotonic()
        self._log_to_event_logger("log_report_started", scope=str(scope), limit=limit)
        try:
            events = await self.fetch_events()
        except ReportGenerationError as exc:
            self._log_to_event_logger(
                "log_report_failed",
                scope=str(scope),
                error=exc,
                duration=dt.timedelta(seconds=time.monotonic() - started_at),
            )
            raise

        now = self._clock()
        selected = self._select(events, scope, now)
        if limit is not None:
            selected = selected[:limit]
        enriched = await self._enricher.enrich(selected)

        degraded = sum(1 for item in enriched if item.unknown_sources)
        if degraded:
            self._log_to_event_logger(
                "log_enrichment_degraded", degraded=degraded, total=len(enriched)
            )

        report = build_report(
            enriched,
            now=now,
            scope=scope,
            venue=self._config.venue,
            classification=self._classification,
            tz=self._config.tz,
        )
        self._log_to_event_logger(
            "log_report_completed",
            scope=str(scope),
            event_count=len(report.events),
            total_tickets=report.summary.total_tickets_sold,
            duration=dt.timedelta(seconds=time.monotonic() - started_at),
        )
        return report


__all__ = ["ReportingService", "ReportingServiceDependencies"]
