"""Report resources: run the pipeline now, or read the cached report.

Usage
-----
Register the report endpoints on the Falcon app::

    app.add_route("/api/events", EventsResource(service, store, default_limit=20))
    app.add_route("/api/events/cached", CachedEventsResource(store))

"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

from venuepulse.api.errors import InvalidInputError
from venuepulse.presenters.json_export import cached_report_media
from venuepulse.reporting.errors import ReportUnavailableError
from venuepulse.reporting.models import ReportScope

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from venuepulse.reporting.service import ReportingService
    from venuepulse.reporting.store import ReportStore

__all__ = ["CachedEventsResource", "EventsResource", "parse_limit"]

_MAX_LIMIT = 500


def parse_limit(raw: str | None, default: int) -> int:
    """Validate the ``limit`` query parameter.

    Raises
    ------
    InvalidInputError
        If ``raw`` is not an integer between 1 and 500.

    """
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise InvalidInputError(
            f"must be an integer, got {raw!r}", field="limit"
        ) from exc
    if not 1 <= value <= _MAX_LIMIT:
        raise InvalidInputError(f"must be between 1 and {_MAX_LIMIT}", field="limit")
    return value


class EventsResource:
    """Re-run the pipeline, update the cache, and return the new report."""

    def __init__(
        self,
        reporting_service: ReportingService,
        store: ReportStore,
        *,
        default_limit: int,
    ) -> None:
        """Initialise with the pipeline driver and the shared store."""
        self._reporting_service = reporting_service
        self._store = store
        self._default_limit = default_limit

    async def on_get(self, req: Request, resp: Response) -> None:
        """Handle GET /api/events.

        Parameters
        ----------
        req
            Falcon request; the optional ``limit`` query parameter caps the
            number of upcoming events.
        resp
            Falcon response populated with the report JSON.

        Raises
        ------
        InvalidInputError
            If ``limit`` is malformed.
        ReportGenerationError
            If the event listing cannot be fetched.

        """
        limit = parse_limit(req.get_param("limit"), self._default_limit)
        report = await self._reporting_service.generate(ReportScope.UPCOMING, limit)
        cached = self._store.set(report)
        resp.media = cached_report_media(cached)
        resp.status = HTTPStatus.OK


class CachedEventsResource:
    """Return the last computed report without touching the event service."""

    def __init__(self, store: ReportStore) -> None:
        """Initialise with the shared store."""
        self._store = store

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /api/events/cached.

        Raises
        ------
        ReportUnavailableError
            If no report has been computed yet.

        """
        cached = self._store.get()
        if cached is None:
            raise ReportUnavailableError
        resp.media = cached_report_media(cached)
        resp.status = HTTPStatus.OK
