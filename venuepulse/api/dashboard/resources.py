"""Resource serving the live dashboard page."""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

import falcon

from venuepulse.presenters.dashboard import render_dashboard_page

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from venuepulse.reporting.models import VenueInfo

__all__ = ["DashboardResource"]


class DashboardResource:
    """Serve the dashboard HTML rendered once at start-up."""

    def __init__(self, venue: VenueInfo) -> None:
        """Render the page for ``venue``."""
        self._page = render_dashboard_page(venue)

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET / requests."""
        resp.content_type = falcon.MEDIA_HTML
        resp.text = self._page
        resp.status = HTTPStatus.OK
