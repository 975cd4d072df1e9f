"""HTTP client for the upstream event service (Wix Events REST API).

Every request carries the bearer token and site id headers. HTTP 429
responses are retried with a linearly growing delay; every other failure
is returned as a failed :class:`ApiResult` so callers decide whether it is
fatal.

Usage
-----
>>> config = UpstreamConfig.from_env()
>>> async with EventsApiClient(config) as client:
...     result = await client.list_events(offset=0, limit=100)
...     payload = result.unwrap()

"""

from __future__ import annotations

import asyncio
import dataclasses as dc
import os
import typing as typ

import httpx

from venuepulse.logging import get_logger, log_warning

from .errors import UpstreamAPIError, UpstreamConfigError

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from types import TracebackType

logger = get_logger(__name__)

_HTTP_ERROR_STATUS_THRESHOLD = 400
_HTTP_TOO_MANY_REQUESTS = 429

DEFAULT_BASE_URL = "https://www.wixapis.com"
DEFAULT_TIMEOUT_S = 10.0

SleepFn: typ.TypeAlias = "cabc.Callable[[float], cabc.Awaitable[None]]"


def _parse_positive_float(env_var: str, default: float) -> float:
    raw = os.environ.get(env_var, "")
    if not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        msg = f"{env_var} must be a number, got: {raw!r}"
        raise ValueError(msg) from exc
    if value <= 0:
        msg = f"{env_var} must be positive, got: {value}"
        raise ValueError(msg)
    return value


@dc.dataclass(frozen=True, slots=True)
class UpstreamConfig:
    """Connection settings for the event service.

    Attributes
    ----------
    api_token
        Bearer token sent in the ``Authorization`` header.
    site_id
        Site identifier sent in the ``wix-site-id`` header.
    base_url
        API root; paths such as ``/events/v1/events`` are appended to it.
    timeout_s
        Connect and read timeout for each request.
    max_attempts
        Total attempts for a request answered with HTTP 429.
    backoff_s
        Delay unit; attempt ``n`` waits ``n * backoff_s`` before retrying.
    page_size
        Batch size used by paginated listings.

    """

    api_token: str
    site_id: str
    base_url: str = DEFAULT_BASE_URL
    timeout_s: float = DEFAULT_TIMEOUT_S
    max_attempts: int = 3
    backoff_s: float = 2.0
    page_size: int = 100

    @classmethod
    def from_env(cls) -> UpstreamConfig:
        """Build configuration from ``VENUEPULSE_*`` environment variables.

        Raises
        ------
        UpstreamConfigError
            If ``VENUEPULSE_API_TOKEN`` or ``VENUEPULSE_SITE_ID`` is unset.
        ValueError
            If ``VENUEPULSE_API_TIMEOUT_S`` is not a positive number.

        """
        token = os.environ.get("VENUEPULSE_API_TOKEN", "").strip()
        site_id = os.environ.get("VENUEPULSE_SITE_ID", "").strip()
        if not token or not site_id:
            raise UpstreamConfigError.missing_credentials()
        base_url = os.environ.get("VENUEPULSE_API_BASE_URL", "").strip()
        return cls(
            api_token=token,
            site_id=site_id,
            base_url=base_url or DEFAULT_BASE_URL,
            timeout_s=_parse_positive_float(
                "VENUEPULSE_API_TIMEOUT_S", DEFAULT_TIMEOUT_S
            ),
        )


@dc.dataclass(frozen=True, slots=True)
class ApiResult:
    """Outcome of one event service request.

    ``ok`` is ``False`` whenever ``error`` is set; callers must check it (or
    call :meth:`unwrap`) before reading ``data``.
    """

    path: str
    ok: bool
    data: dict[str, typ.Any] = dc.field(default_factory=dict)
    error: UpstreamAPIError | None = None
    status_code: int | None = None

    @classmethod
    def success(
        cls, path: str, data: dict[str, typ.Any], status_code: int
    ) -> ApiResult:
        """Return a successful result wrapping a decoded JSON object."""
        return cls(path=path, ok=True, data=data, status_code=status_code)

    @classmethod
    def failure(cls, error: UpstreamAPIError) -> ApiResult:
        """Return a failed result carrying ``error``."""
        return cls(
            path=error.path or "",
            ok=False,
            error=error,
            status_code=error.status_code,
        )

    @property
    def error_message(self) -> str | None:
        """Human readable failure description, ``None`` on success."""
        return None if self.error is None else str(self.error)

    def unwrap(self) -> dict[str, typ.Any]:
        """Return ``data`` or raise the captured :class:`UpstreamAPIError`."""
        if self.error is not None:
            raise self.error
        return self.data


class EventsApiClient:
    """Authenticated GET client for the event service."""

    def __init__(
        self,
        config: UpstreamConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
        sleep: SleepFn | None = None,
    ) -> None:
        """Initialise the client; an injected ``http_client`` is not closed."""
        if not config.api_token.strip() or not config.site_id.strip():
            raise UpstreamConfigError.missing_credentials()
        self._config = config
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=config.timeout_s)
        self._sleep = sleep or asyncio.sleep
        self._headers = {
            "Authorization": f"Bearer {config.api_token}",
            "wix-site-id": config.site_id,
            "Content-Type": "application/json",
        }

    @property
    def config(self) -> UpstreamConfig:
        """Configuration the client was built with."""
        return self._config

    async def __aenter__(self) -> typ.Self:
        """Return the client for use in ``async with`` blocks."""
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        """Close owned resources on exit."""
        await self.aclose()

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    async def request(
        self, path: str, params: dict[str, typ.Any] | None = None
    ) -> ApiResult:
        """GET ``path`` and return the decoded JSON object as an ApiResult.

        Parameters
        ----------
        path
            Path below ``base_url``, for example ``/events/v1/events``.
        params
            Optional query parameters.

        Returns
        -------
        ApiResult
            Success with the decoded body, or failure describing the HTTP
            status, transport error, or malformed body.

        """
        url = f"{self._config.base_url.rstrip('/')}{path}"
        max_attempts = max(self._config.max_attempts, 1)
        for attempt in range(1, max_attempts + 1):
            try:
                response = await self._client.get(
                    url, params=params, headers=self._headers
                )
            except httpx.HTTPError as exc:
                return ApiResult.failure(UpstreamAPIError.transport(path, exc))

            if response.status_code == _HTTP_TOO_MANY_REQUESTS:
                if attempt == max_attempts:
                    break
                delay = attempt * self._config.backoff_s
                log_warning(
                    logger,
                    "Rate limited on %s, retrying in %.1fs (attempt %d/%d)",
                    path,
                    delay,
                    attempt,
                    max_attempts,
                )
                await self._sleep(delay)
                continue

            if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
                return ApiResult.failure(
                    UpstreamAPIError.http_error(path, response.status_code)
                )
            return self._decode(path, response)

        return ApiResult.failure(UpstreamAPIError.rate_limited(path, max_attempts))

    @staticmethod
    def _decode(path: str, response: httpx.Response) -> ApiResult:
        try:
            payload = response.json()
        except ValueError:
            return ApiResult.failure(UpstreamAPIError.invalid_body(path))
        if not isinstance(payload, dict):
            return ApiResult.failure(UpstreamAPIError.invalid_body(path))
        return ApiResult.success(path, payload, response.status_code)

    async def list_events(self, *, offset: int, limit: int) -> ApiResult:
        """Fetch one page of the event listing."""
        return await self.request(
            "/events/v1/events", {"limit": limit, "offset": offset}
        )

    async def event_rsvps(self, event_id: str) -> ApiResult:
        """Fetch the RSVP collection for one event."""
        return await self.request(f"/events/v1/events/{event_id}/rsvps")

    async def event_tickets(self, event_id: str) -> ApiResult:
        """Fetch the sold tickets for one event."""
        return await self.request(
            f"/events/v1/events/{event_id}/tickets",
            {"limit": self._config.page_size},
        )

    async def list_orders(self, *, offset: int, limit: int) -> ApiResult:
        """Fetch one page of the site-wide order listing."""
        return await self.request(
            "/events/v1/orders", {"limit": limit, "offset": offset}
        )


__all__ = ["ApiResult", "EventsApiClient", "SleepFn", "UpstreamConfig"]
