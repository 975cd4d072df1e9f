"""venuepulse runtime entrypoint for the dashboard server.

This module provides the ASGI application factory used by Granian. It
delegates to :func:`venuepulse.api.app.create_app` for application
construction while keeping the ``venuepulse.runtime:create_app`` Granian
entrypoint stable.

When the event service credentials are set, the runtime builds full
``AppDependencies`` (reporting service, cache, refresher and email) so
the app serves the dashboard and report endpoints. Otherwise it starts
in health-only mode.

Configuration is driven by environment variables:

- ``VENUEPULSE_HOST``: Bind address (default ``0.0.0.0``)
- ``VENUEPULSE_PORT``: Listen port (default ``3000``)
- ``VENUEPULSE_LOG_LEVEL``: Log level (default ``INFO``)
- ``VENUEPULSE_API_TOKEN`` and ``VENUEPULSE_SITE_ID``: Event service
  credentials (required by ``main``)

Run the service directly with ``python -m venuepulse.runtime``.
"""

from __future__ import annotations

import os
import typing as typ

from venuepulse.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_info,
    log_warning,
)
from venuepulse.upstream.client import UpstreamConfig
from venuepulse.upstream.errors import UpstreamConfigError

if typ.TYPE_CHECKING:
    import falcon.asgi

__all__ = ["create_app", "main"]

logger = get_logger(__name__)

DEFAULT_PORT = "3000"

# TCP port number range limits
_MIN_PORT = 1
_MAX_PORT = 65535


def _parse_port(port_str: str) -> int:
    """Parse and validate a port number string.

    Raises
    ------
    SystemExit
        If port_str is not a valid integer in range 1-65535.

    """
    try:
        port = int(port_str)
        if not (_MIN_PORT <= port <= _MAX_PORT):
            msg = f"port {port} outside valid range {_MIN_PORT}-{_MAX_PORT}"
            raise ValueError(msg)  # noqa: TRY301 - unify conversion and range errors
    except ValueError as exc:
        log_error(
            logger,
            "Invalid VENUEPULSE_PORT value: %r (must be %d-%d): %s",
            port_str,
            _MIN_PORT,
            _MAX_PORT,
            exc,
        )
        raise SystemExit(1) from exc
    return port


def _credentials_present() -> bool:
    try:
        UpstreamConfig.from_env()
    except UpstreamConfigError:
        return False
    return True


def create_app() -> falcon.asgi.App:
    """Create and configure the Falcon ASGI application.

    When the event service credentials are present, builds the full
    dependency graph so the dashboard, report and email endpoints are
    routed. Otherwise only ``/api/health`` is available.

    Returns
    -------
    falcon.asgi.App
        Configured Falcon ASGI application.

    """
    from venuepulse.api.app import create_app as _create_api_app

    if not _credentials_present():
        log_warning(
            logger,
            "Event service credentials missing; starting in health-only mode",
        )
        return _create_api_app()

    from venuepulse.api.factory import build_app_dependencies

    return _create_api_app(build_app_dependencies())


def main() -> None:
    """Start the venuepulse dashboard server using Granian.

    Reads ``VENUEPULSE_HOST``, ``VENUEPULSE_PORT``, and
    ``VENUEPULSE_LOG_LEVEL`` from the environment and starts the ASGI
    server.

    Raises
    ------
    SystemExit
        If the port is invalid or the event service credentials are
        missing.

    """
    from granian import Granian
    from granian.constants import Interfaces

    host = os.environ.get("VENUEPULSE_HOST", "0.0.0.0")  # noqa: S104 - bind all interfaces for container
    port = _parse_port(os.environ.get("VENUEPULSE_PORT", DEFAULT_PORT))
    log_level_str = os.environ.get("VENUEPULSE_LOG_LEVEL", "INFO")

    normalized_level, invalid_level = configure_logging(log_level_str)
    if invalid_level:
        log_warning(
            logger,
            "Invalid VENUEPULSE_LOG_LEVEL %r, falling back to %s",
            log_level_str,
            normalized_level,
        )

    try:
        UpstreamConfig.from_env()
    except UpstreamConfigError as exc:
        log_error(logger, "Cannot start server: %s", exc)
        raise SystemExit(1) from exc

    log_info(
        logger,
        "Starting venuepulse on %s:%d (log_level=%s)",
        host,
        port,
        normalized_level,
    )

    server = Granian(
        "venuepulse.runtime:create_app",
        address=host,
        port=port,
        interface=Interfaces.ASGI,
        factory=True,
    )
    server.serve()


if __name__ == "__main__":
    main()
