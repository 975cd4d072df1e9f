"""Health resource for the event dashboard server.

Usage
-----
Import the health resource for route registration::

    from venuepulse.api.health.resources import HealthResource
"""
