"""Email notifications for the venue dashboard."""

from .email import EmailConfig, EmailNotifier
from .errors import EmailDeliveryError, EmailNotConfiguredError

__all__ = [
    "EmailConfig",
    "EmailDeliveryError",
    "EmailNotConfiguredError",
    "EmailNotifier",
]
