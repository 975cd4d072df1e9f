"""Client, records and errors for the upstream event service."""

from .client import ApiResult, EventsApiClient, UpstreamConfig
from .errors import UpstreamAPIError, UpstreamConfigError
from .models import Event, count_from_payload, event_from_payload

__all__ = [
    "ApiResult",
    "Event",
    "EventsApiClient",
    "UpstreamAPIError",
    "UpstreamConfig",
    "UpstreamConfigError",
    "count_from_payload",
    "event_from_payload",
]
