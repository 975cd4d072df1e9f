"""SMTP delivery for test messages and the daily report digest.

``smtplib`` is blocking, so every delivery runs in a worker thread via
``asyncio.to_thread``.

Usage
-----
>>> notifier = EmailNotifier(EmailConfig.from_env())
>>> await notifier.send_test()

"""

from __future__ import annotations

import asyncio
import dataclasses as dc
import os
import smtplib
import typing as typ
from email.message import EmailMessage

from venuepulse.logging import get_logger, log_info, log_warning
from venuepulse.presenters.html import render_email_digest

from .errors import EmailDeliveryError, EmailNotConfiguredError

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from venuepulse.reporting.models import Report

logger = get_logger(__name__)

DEFAULT_SMTP_HOST = "smtp.gmail.com"
DEFAULT_SMTP_PORT = 587
DEFAULT_DASHBOARD_URL = "http://localhost:3000"
DEFAULT_DIGEST_HOUR = 9
_SMTP_TIMEOUT_S = 30.0
_MAX_HOUR = 23


def _parse_port(raw: str | None) -> int:
    if raw is None or not raw.strip():
        return DEFAULT_SMTP_PORT
    try:
        return int(raw)
    except ValueError as exc:
        msg = f"VENUEPULSE_SMTP_PORT must be an integer, got: {raw!r}"
        raise ValueError(msg) from exc


def _parse_hour(raw: str | None) -> int:
    if raw is None or not raw.strip():
        return DEFAULT_DIGEST_HOUR
    try:
        hour = int(raw)
    except ValueError as exc:
        msg = f"VENUEPULSE_DIGEST_HOUR must be an integer, got: {raw!r}"
        raise ValueError(msg) from exc
    if not 0 <= hour <= _MAX_HOUR:
        msg = f"VENUEPULSE_DIGEST_HOUR must be 0-23, got: {hour}"
        raise ValueError(msg)
    return hour


@dc.dataclass(frozen=True, slots=True)
class EmailConfig:
    """SMTP settings and digest recipients.

    Attributes
    ----------
    smtp_host
        SMTP server host name.
    smtp_port
        SMTP submission port; STARTTLS is always negotiated.
    username
        Login name, also used as the sender address.
    password
        Login password or app password.
    recipients
        Addresses receiving the daily digest.
    dashboard_url
        Link included in the digest.
    digest_hour
        Local hour (0-23) after which the daily digest is sent.

    """

    smtp_host: str = DEFAULT_SMTP_HOST
    smtp_port: int = DEFAULT_SMTP_PORT
    username: str | None = None
    password: str | None = None
    recipients: tuple[str, ...] = ()
    dashboard_url: str = DEFAULT_DASHBOARD_URL
    digest_hour: int = DEFAULT_DIGEST_HOUR

    @property
    def configured(self) -> bool:
        """True when credentials for SMTP login are present."""
        return bool(self.username and self.password)

    @classmethod
    def from_env(cls) -> EmailConfig:
        """Build configuration from ``VENUEPULSE_SMTP_*`` and related vars."""
        recipients = tuple(
            address.strip()
            for address in os.environ.get("VENUEPULSE_DAILY_REPORT_EMAILS", "").split(",")
            if address.strip()
        )
        return cls(
            smtp_host=os.environ.get("VENUEPULSE_SMTP_HOST", "").strip()
            or DEFAULT_SMTP_HOST,
            smtp_port=_parse_port(os.environ.get("VENUEPULSE_SMTP_PORT")),
            username=os.environ.get("VENUEPULSE_EMAIL_USER", "").strip() or None,
            password=os.environ.get("VENUEPULSE_EMAIL_PASSWORD") or None,
            recipients=recipients,
            dashboard_url=os.environ.get("VENUEPULSE_DASHBOARD_URL", "").strip()
            or DEFAULT_DASHBOARD_URL,
            digest_hour=_parse_hour(os.environ.get("VENUEPULSE_DIGEST_HOUR")),
        )


class _SMTPClient(typ.Protocol):
    def __enter__(self) -> _SMTPClient: ...

    def __exit__(self, *exc_info: object) -> object: ...

    def starttls(self) -> object: ...

    def login(self, user: str, password: str) -> object: ...

    def send_message(self, msg: EmailMessage) -> object: ...


SMTPFactory: typ.TypeAlias = "cabc.Callable[..., _SMTPClient]"


class EmailNotifier:
    """Send HTML email through an authenticated SMTP server."""

    def __init__(
        self,
        config: EmailConfig,
        *,
        smtp_factory: SMTPFactory | None = None,
    ) -> None:
        """Initialise with SMTP settings and an optional client factory."""
        self._config = config
        self._smtp_factory = smtp_factory or smtplib.SMTP

    @property
    def config(self) -> EmailConfig:
        """SMTP settings in effect."""
        return self._config

    def _build_message(
        self, subject: str, html_body: str, recipients: cabc.Sequence[str]
    ) -> EmailMessage:
        message = EmailMessage()
        message["Subject"] = subject
        message["From"] = typ.cast("str", self._config.username)
        message["To"] = ", ".join(recipients)
        message.set_content("This message requires an HTML capable mail client.")
        message.add_alternative(html_body, subtype="html")
        return message

    def _deliver(self, message: EmailMessage) -> None:
        username = typ.cast("str", self._config.username)
        password = typ.cast("str", self._config.password)
        try:
            with self._smtp_factory(
                self._config.smtp_host,
                self._config.smtp_port,
                timeout=_SMTP_TIMEOUT_S,
            ) as smtp:
                smtp.starttls()
                smtp.login(username, password)
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            raise EmailDeliveryError.from_exception(exc) from exc

    async def send(
        self, subject: str, html_body: str, recipients: cabc.Sequence[str]
    ) -> None:
        """Send one HTML message to ``recipients``.

        Raises
        ------
        EmailNotConfiguredError
            If SMTP credentials are missing.
        EmailDeliveryError
            If the SMTP exchange fails.

        """
        if not self._config.configured:
            raise EmailNotConfiguredError
        message = self._build_message(subject, html_body, recipients)
        await asyncio.to_thread(self._deliver, message)
        log_info(logger, "Sent email %r to %d recipients", subject, len(recipients))

    async def send_test(self) -> None:
        """Send a short test message to the configured sender address."""
        if not self._config.configured:
            raise EmailNotConfiguredError
        await self.send(
            "Venue dashboard test email",
            "<p>Email delivery for the event dashboard is working.</p>",
            [typ.cast("str", self._config.username)],
        )

    async def send_daily_report(self, report: Report) -> bool:
        """Email the digest for ``report`` to the configured recipients.

        Returns
        -------
        bool
            ``False`` when there are no recipients and nothing was sent.

        """
        if not self._config.recipients:
            log_warning(logger, "Daily digest skipped: no recipients configured")
            return False
        subject = (
            f"{report.venue.name} daily event report - "
            f"{report.generated_at.date().isoformat()}"
        )
        await self.send(
            subject,
            render_email_digest(report, dashboard_url=self._config.dashboard_url),
            self._config.recipients,
        )
        return True


__all__ = [
    "EmailConfig",
    "EmailDeliveryError",
    "EmailNotConfiguredError",
    "EmailNotifier",
]
