"""Domain exceptions and Falcon error handlers for the API layer.

Handlers translate pipeline and email failures into JSON bodies of the
form ``{"error": "<message>"}``.

Usage
-----
Register error handlers on the Falcon app::

    from venuepulse.api.errors import register_error_handlers

    register_error_handlers(app)

"""

from __future__ import annotations

import typing as typ

import falcon

from venuepulse.logging import get_logger, log_error
from venuepulse.notify.errors import EmailDeliveryError, EmailNotConfiguredError
from venuepulse.reporting.errors import ReportGenerationError, ReportUnavailableError

if typ.TYPE_CHECKING:
    import falcon.asgi
    from falcon.asgi import Request, Response

__all__ = [
    "InvalidInputError",
    "handle_email_delivery_failed",
    "handle_email_not_configured",
    "handle_invalid_input",
    "handle_report_generation_failed",
    "handle_report_unavailable",
    "register_error_handlers",
]

logger = get_logger(__name__)


class InvalidInputError(Exception):
    """Raised for client validation errors that should map to HTTP 400.

    Attributes
    ----------
    reason
        Human-readable description of the validation failure.
    field
        Optional name of the input field that failed validation.

    """

    def __init__(self, reason: str, *, field: str | None = None) -> None:
        """Initialize with a validation reason and optional field name."""
        self.reason = reason
        self.field = field
        message = f"{field}: {reason}" if field is not None else reason
        super().__init__(message)


async def handle_invalid_input(
    _req: Request,
    resp: Response,
    ex: InvalidInputError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``InvalidInputError`` to an HTTP 400 JSON response."""
    resp.status = falcon.HTTP_400
    media: dict[str, str] = {"error": ex.reason}
    if ex.field is not None:
        media["field"] = ex.field
    resp.media = media


async def handle_report_unavailable(
    _req: Request,
    resp: Response,
    ex: ReportUnavailableError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``ReportUnavailableError`` to an HTTP 404 JSON response."""
    resp.status = falcon.HTTP_404
    resp.media = {"error": str(ex)}


async def handle_report_generation_failed(
    _req: Request,
    resp: Response,
    ex: ReportGenerationError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``ReportGenerationError`` to an HTTP 500 JSON response.

    Parameters
    ----------
    _req
        Falcon request (unused).
    resp
        Falcon response whose status and media are set.
    ex
        The pipeline failure.
    _params
        URI template parameters (unused).

    """
    log_error(logger, "Report generation failed: %s", ex)
    resp.status = falcon.HTTP_500
    resp.media = {"error": str(ex)}


async def handle_email_not_configured(
    _req: Request,
    resp: Response,
    ex: EmailNotConfiguredError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``EmailNotConfiguredError`` to an HTTP 400 JSON response."""
    resp.status = falcon.HTTP_400
    resp.media = {"error": str(ex)}


async def handle_email_delivery_failed(
    _req: Request,
    resp: Response,
    ex: EmailDeliveryError,
    _params: dict[str, typ.Any],
) -> None:
    """Map ``EmailDeliveryError`` to an HTTP 500 JSON response."""
    log_error(logger, "Email delivery failed: %s", ex)
    resp.status = falcon.HTTP_500
    resp.media = {"error": str(ex)}


def register_error_handlers(app: falcon.asgi.App) -> None:
    """Attach every domain error handler to ``app``."""
    app.add_error_handler(InvalidInputError, handle_invalid_input)
    app.add_error_handler(ReportUnavailableError, handle_report_unavailable)
    app.add_error_handler(ReportGenerationError, handle_report_generation_failed)
    app.add_error_handler(EmailNotConfiguredError, handle_email_not_configured)
    app.add_error_handler(EmailDeliveryError, handle_email_delivery_failed)
