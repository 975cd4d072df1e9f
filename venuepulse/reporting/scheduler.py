"""Periodic report refresh and the once-a-day digest.

``ReportRefresher.run`` loops forever: refresh, then sleep for the
configured interval. A failed refresh is logged and the previous report
stays in the store.
"""

from __future__ import annotations

import asyncio
import datetime as dt
import typing as typ

from venuepulse.common.time import utcnow
from venuepulse.logging import get_logger, log_error
from venuepulse.notify.errors import EmailDeliveryError, EmailNotConfiguredError

from .errors import ReportGenerationError
from .models import ReportScope

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from venuepulse.notify.email import EmailNotifier

    from .models import Report
    from .observability import ReportingEventLogger
    from .service import ReportingService
    from .store import CachedReport, ReportStore

logger = get_logger(__name__)


class DailyDigest:
    """Send the digest at most once per local calendar day."""

    def __init__(
        self,
        notifier: EmailNotifier,
        *,
        hour: int,
        tz: dt.tzinfo = dt.UTC,
        event_logger: ReportingEventLogger | None = None,
    ) -> None:
        """Initialise with a notifier and the local hour to send after."""
        self._notifier = notifier
        self._hour = hour
        self._tz = tz
        self._event_logger = event_logger
        self._last_sent: dt.date | None = None

    def is_due(self, now: dt.datetime) -> bool:
        """True when today's digest has not been sent and its hour has passed."""
        local = now.astimezone(self._tz)
        return local.hour >= self._hour and self._last_sent != local.date()

    async def maybe_send(self, report: Report, now: dt.datetime) -> bool:
        """Send the digest for ``report`` if it is due; return True if sent."""
        if not self.is_due(now):
            return False
        local_date = now.astimezone(self._tz).date()
        try:
            sent = await self._notifier.send_daily_report(report)
        except (EmailDeliveryError, EmailNotConfiguredError) as exc:
            if self._event_logger is not None:
                self._event_logger.log_digest_failed(error=exc)
            else:
                log_error(logger, "Daily digest failed: %s", exc)
            return False
        self._last_sent = local_date
        if sent and self._event_logger is not None:
            self._event_logger.log_digest_sent(
                recipients=len(self._notifier.config.recipients)
            )
        return sent


class ReportRefresher:
    """Re-run the pipeline on a timer and publish results to a store."""

    def __init__(
        self,
        service: ReportingService,
        store: ReportStore,
        *,
        limit: int | None = None,
        interval_s: float = 3600.0,
        digest: DailyDigest | None = None,
        event_logger: ReportingEventLogger | None = None,
        clock: cabc.Callable[[], dt.datetime] = utcnow,
    ) -> None:
        """Initialise the refresher.

        Parameters
        ----------
        service
            Pipeline driver.
        store
            Destination for each fresh report.
        limit
            Maximum number of upcoming events per report.
        interval_s
            Delay between refreshes.
        digest
            Optional daily digest sender checked after each refresh.
        event_logger
            Optional structured event logger.
        clock
            Source of "now" for digest scheduling.

        """
        self._service = service
        self._store = store
        self._limit = limit
        self._interval_s = interval_s
        self._digest = digest
        self._event_logger = event_logger
        self._clock = clock

    @property
    def store(self) -> ReportStore:
        """Store receiving refreshed reports."""
        return self._store

    async def refresh(self) -> CachedReport | None:
        """Run the pipeline once and replace the cached report.

        Returns
        -------
        CachedReport | None
            The new snapshot, or ``None`` when the run failed and the
            previous report was kept.

        """
        try:
            report = await self._service.generate(ReportScope.UPCOMING, self._limit)
        except ReportGenerationError as exc:
            log_error(logger, "Failed to update cached report: %s", exc)
            return None
        cached = self._store.set(report)
        if self._event_logger is not None:
            self._event_logger.log_cache_refreshed(
                event_count=len(report.events), updated_at=cached.last_updated
            )
        if self._digest is not None:
            await self._digest.maybe_send(report, self._clock())
        return cached

    async def run(self, poll_interval: float | None = None) -> None:
        """Refresh immediately, then forever at the configured interval."""
        interval = self._interval_s if poll_interval is None else poll_interval
        while True:
            await self.refresh()
            await asyncio.sleep(interval)


__all__ = ["DailyDigest", "ReportRefresher"]
