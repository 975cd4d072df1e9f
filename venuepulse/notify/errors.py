"""Email delivery errors."""

from __future__ import annotations


class EmailNotConfiguredError(RuntimeError):
    """Raised when email delivery is requested without SMTP credentials."""

    def __init__(self) -> None:
        """Initialise with the message shown to API clients."""
        super().__init__("Email not configured")


class EmailDeliveryError(RuntimeError):
    """Raised when the SMTP server rejects or drops a message."""

    @classmethod
    def from_exception(cls, exc: BaseException) -> EmailDeliveryError:
        """Return an error describing an SMTP or socket failure."""
        return cls(f"Email delivery failed: {exc}")
