"""venuepulse HTTP API layer.

This package provides the Falcon Asynchronous Server Gateway Interface
(ASGI) application serving the cached report, the live dashboard and the
health endpoint.

Usage
-----
Create and run the application::

    from venuepulse.api import create_app

    app = create_app()              # health-only mode
    app = create_app(dependencies)  # full mode with report endpoints

"""

from venuepulse.api.app import AppDependencies, create_app

__all__ = ["AppDependencies", "create_app"]
