"""Resource that sends a test email through the configured SMTP server."""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

from venuepulse.notify.errors import EmailNotConfiguredError

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from venuepulse.notify.email import EmailNotifier

__all__ = ["EmailTestResource"]


class EmailTestResource:
    """Send a test message; 400 without credentials, 500 on SMTP failure."""

    def __init__(self, notifier: EmailNotifier | None) -> None:
        """Initialise with an optional notifier."""
        self._notifier = notifier

    async def on_post(self, _req: Request, resp: Response) -> None:
        """Handle POST /api/email/test.

        Raises
        ------
        EmailNotConfiguredError
            If no notifier or no SMTP credentials are configured.
        EmailDeliveryError
            If the SMTP exchange fails.

        """
        if self._notifier is None:
            raise EmailNotConfiguredError
        await self._notifier.send_test()
        resp.media = {"success": True, "message": "Test email sent"}
        resp.status = HTTPStatus.OK
