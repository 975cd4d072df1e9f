"""Lifespan middleware running the report refresher beside the ASGI app.

On ASGI startup the middleware launches :meth:`ReportRefresher.run` as a
background task; on shutdown it cancels the task and releases the
reporting service's HTTP client.

Usage
-----
Register the middleware when creating the Falcon app::

    scheduler_mw = RefreshSchedulerMiddleware(refresher)
    app = falcon.asgi.App(middleware=[scheduler_mw])

"""

from __future__ import annotations

import asyncio
import contextlib
import typing as typ

from venuepulse.logging import get_logger, log_info

if typ.TYPE_CHECKING:
    from venuepulse.reporting.scheduler import ReportRefresher
    from venuepulse.reporting.service import ReportingService

__all__ = ["RefreshSchedulerMiddleware"]

logger = get_logger(__name__)


class RefreshSchedulerMiddleware:
    """Falcon middleware owning the background refresh task.

    Parameters
    ----------
    refresher
        Refresher whose ``run`` loop is started on startup.
    reporting_service
        Optional service closed on shutdown.

    """

    def __init__(
        self,
        refresher: ReportRefresher,
        *,
        reporting_service: ReportingService | None = None,
    ) -> None:
        """Initialise without starting anything."""
        self._refresher = refresher
        self._reporting_service = reporting_service
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        """True while the refresh task is alive."""
        return self._task is not None and not self._task.done()

    async def process_startup(
        self, _scope: dict[str, typ.Any], _event: dict[str, typ.Any]
    ) -> None:
        """Start the refresh loop; the first refresh runs immediately."""
        if self.running:
            return
        self._task = asyncio.create_task(self._refresher.run())
        log_info(logger, "Report refresher started")

    async def process_shutdown(
        self, _scope: dict[str, typ.Any], _event: dict[str, typ.Any]
    ) -> None:
        """Cancel the refresh loop and close owned resources."""
        if self._task is not None:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None
            log_info(logger, "Report refresher stopped")
        if self._reporting_service is not None:
            await self._reporting_service.aclose()
