"""Application factory for the venuepulse Falcon ASGI application.

This module provides ``create_app()`` which builds the Falcon ASGI
application with the health endpoint and, when a reporting service is
available, the report, dashboard and email endpoints.

Usage
-----
Create a health-only app::

    app = create_app()

Create a full app::

    from venuepulse.api.app import AppDependencies, create_app

    deps = AppDependencies(reporting_service=service, store=ReportStore())
    app = create_app(deps)

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import falcon.asgi

from venuepulse.api.errors import register_error_handlers
from venuepulse.api.health.resources import HealthResource
from venuepulse.reporting.config import DEFAULT_REPORT_LIMIT
from venuepulse.reporting.models import VenueInfo
from venuepulse.reporting.store import ReportStore

if typ.TYPE_CHECKING:
    from venuepulse.notify.email import EmailNotifier
    from venuepulse.reporting.scheduler import ReportRefresher
    from venuepulse.reporting.service import ReportingService

__all__ = ["AppDependencies", "create_app"]


@dc.dataclass(frozen=True, slots=True)
class AppDependencies:
    """Dependencies for the Falcon ASGI application.

    Attributes
    ----------
    reporting_service
        Pipeline driver; enables the report and dashboard endpoints.
    store
        Shared single-slot report store.
    refresher
        Optional background refresher started on ASGI lifespan startup.
    notifier
        Optional email notifier used by ``POST /api/email/test``.
    venue
        Venue metadata shown on the dashboard.
    report_limit
        Default number of upcoming events for ``GET /api/events``.

    """

    reporting_service: ReportingService | None = None
    store: ReportStore = dc.field(default_factory=ReportStore)
    refresher: ReportRefresher | None = None
    notifier: EmailNotifier | None = None
    venue: VenueInfo = dc.field(default_factory=VenueInfo)
    report_limit: int = DEFAULT_REPORT_LIMIT


def create_app(
    dependencies: AppDependencies | None = None,
) -> falcon.asgi.App:
    """Create and configure the Falcon ASGI application.

    Parameters
    ----------
    dependencies
        Optional application dependencies. When ``None`` or without a
        reporting service, only ``/api/health`` is available.

    Returns
    -------
    falcon.asgi.App
        Configured Falcon ASGI application.

    """
    deps = dependencies or AppDependencies()
    middleware: list[object] = []

    if deps.refresher is not None:
        from venuepulse.api.middleware import RefreshSchedulerMiddleware

        middleware.append(
            RefreshSchedulerMiddleware(
                deps.refresher, reporting_service=deps.reporting_service
            )
        )

    app = falcon.asgi.App(middleware=middleware)  # type: ignore[no-matching-overload]  # Falcon stubs

    app.add_route("/api/health", HealthResource(deps.store))

    if deps.reporting_service is not None:
        from venuepulse.api.dashboard.resources import DashboardResource
        from venuepulse.api.email.resources import EmailTestResource
        from venuepulse.api.events.resources import (
            CachedEventsResource,
            EventsResource,
        )

        app.add_route(
            "/api/events",
            EventsResource(
                deps.reporting_service,
                deps.store,
                default_limit=deps.report_limit,
            ),
        )
        app.add_route("/api/events/cached", CachedEventsResource(deps.store))
        app.add_route("/api/email/test", EmailTestResource(deps.notifier))
        app.add_route("/", DashboardResource(deps.venue))

    register_error_handlers(app)
    return app
