"""Health resource reporting process uptime and cache state.

Usage
-----
Register the health endpoint on the Falcon app::

    from venuepulse.api.health.resources import HealthResource

    app.add_route("/api/health", HealthResource(store))

"""

from __future__ import annotations

import time
import typing as typ
from http import HTTPStatus

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from falcon.asgi import Request, Response

    from venuepulse.reporting.store import ReportStore

__all__ = ["HealthResource"]


class HealthResource:
    """Liveness resource with a summary of the cached report.

    Always responds with HTTP 200 while the process is alive, even before
    the first report has been computed.

    Parameters
    ----------
    store
        Report store inspected for ``hasData`` and headline totals; ``None``
        when the app runs without a pipeline.
    monotonic
        Clock used to measure uptime.

    """

    def __init__(
        self,
        store: ReportStore | None = None,
        *,
        monotonic: cabc.Callable[[], float] = time.monotonic,
    ) -> None:
        """Record the start instant used for uptime."""
        self._store = store
        self._monotonic = monotonic
        self._started_at = monotonic()

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /api/health requests.

        Parameters
        ----------
        _req
            Falcon request (unused).
        resp
            Falcon response populated with health details.

        """
        cached = self._store.get() if self._store is not None else None
        summary = cached.report.summary if cached is not None else None
        resp.media = {
            "status": "healthy",
            "lastUpdate": cached.last_updated.isoformat() if cached else None,
            "hasData": cached is not None,
            "uptimeSeconds": round(self._monotonic() - self._started_at, 3),
            "totalEvents": summary.total_events if summary else 0,
            "totalTickets": summary.total_tickets_sold if summary else 0,
            "ticketedEvents": summary.ticketed_events_count if summary else 0,
        }
        resp.status = HTTPStatus.OK
