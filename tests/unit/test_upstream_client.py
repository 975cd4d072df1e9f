"""Unit tests for the event service client."""

from __future__ import annotations

import httpx
import pytest

from tests.helpers.event_api import (
    BASE_URL,
    FakeEventsApi,
    RecordingSleep,
    make_client,
    make_config,
)
from venuepulse.upstream.client import (
    DEFAULT_BASE_URL,
    ApiResult,
    EventsApiClient,
    UpstreamConfig,
)
from venuepulse.upstream.errors import UpstreamAPIError, UpstreamConfigError


def _client_for(
    handler: httpx.MockTransport, sleep: RecordingSleep | None = None, **overrides: object
) -> EventsApiClient:
    return EventsApiClient(
        make_config(**overrides),
        http_client=httpx.AsyncClient(transport=handler),
        sleep=sleep or RecordingSleep(),
    )


class TestUpstreamConfig:
    """Tests for UpstreamConfig.from_env."""

    def test_reads_credentials_and_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Credentials come from the environment; the rest use defaults."""
        monkeypatch.setenv("VENUEPULSE_API_TOKEN", "tok")
        monkeypatch.setenv("VENUEPULSE_SITE_ID", "site")

        config = UpstreamConfig.from_env()

        assert config.api_token == "tok"
        assert config.site_id == "site"
        assert config.base_url == DEFAULT_BASE_URL
        assert config.timeout_s == pytest.approx(10.0)
        assert config.max_attempts == 3

    def test_reads_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Base URL and timeout can be overridden."""
        monkeypatch.setenv("VENUEPULSE_API_TOKEN", "tok")
        monkeypatch.setenv("VENUEPULSE_SITE_ID", "site")
        monkeypatch.setenv("VENUEPULSE_API_BASE_URL", "https://proxy.test")
        monkeypatch.setenv("VENUEPULSE_API_TIMEOUT_S", "2.5")

        config = UpstreamConfig.from_env()

        assert config.base_url == "https://proxy.test"
        assert config.timeout_s == pytest.approx(2.5)

    @pytest.mark.parametrize("missing", ["VENUEPULSE_API_TOKEN", "VENUEPULSE_SITE_ID"])
    def test_missing_credentials_raise(
        self, monkeypatch: pytest.MonkeyPatch, missing: str
    ) -> None:
        """Either credential missing is a configuration error."""
        monkeypatch.setenv("VENUEPULSE_API_TOKEN", "tok")
        monkeypatch.setenv("VENUEPULSE_SITE_ID", "site")
        monkeypatch.delenv(missing)

        with pytest.raises(UpstreamConfigError, match="VENUEPULSE_API_TOKEN"):
            UpstreamConfig.from_env()

    @pytest.mark.parametrize("raw", ["zero", "0", "-1"])
    def test_invalid_timeout_raises(
        self, monkeypatch: pytest.MonkeyPatch, raw: str
    ) -> None:
        """A non-positive or non-numeric timeout is rejected."""
        monkeypatch.setenv("VENUEPULSE_API_TOKEN", "tok")
        monkeypatch.setenv("VENUEPULSE_SITE_ID", "site")
        monkeypatch.setenv("VENUEPULSE_API_TIMEOUT_S", raw)

        with pytest.raises(ValueError, match="VENUEPULSE_API_TIMEOUT_S"):
            UpstreamConfig.from_env()


class TestEventsApiClient:
    """Tests for EventsApiClient.request and its helpers."""

    def test_blank_credentials_rejected_before_network(self) -> None:
        """The client refuses to start without credentials."""
        with pytest.raises(UpstreamConfigError):
            EventsApiClient(UpstreamConfig(api_token=" ", site_id="site"))

    @pytest.mark.asyncio
    async def test_sends_authentication_headers(self, fake_api: FakeEventsApi) -> None:
        """Every request carries the bearer token and site id."""
        client = make_client(fake_api)

        result = await client.list_events(offset=0, limit=100)

        assert result.ok, f"expected success, got {result.error_message}"
        request = fake_api.requests[0]
        assert str(request.url).startswith(f"{BASE_URL}/events/v1/events")
        assert request.headers["Authorization"] == "Bearer token-123"
        assert request.headers["wix-site-id"] == "site-456"
        assert request.headers["Content-Type"] == "application/json"
        assert request.url.params["limit"] == "100"
        assert request.url.params["offset"] == "0"

    @pytest.mark.asyncio
    async def test_retries_rate_limits_with_linear_backoff(self) -> None:
        """HTTP 429 is retried with ``attempt * backoff`` delays."""
        statuses = iter([429, 429, 200])

        def handler(_request: httpx.Request) -> httpx.Response:
            status = next(statuses)
            return httpx.Response(status, json={"events": []})

        sleep = RecordingSleep()
        client = _client_for(httpx.MockTransport(handler), sleep, backoff_s=2.0)

        result = await client.request("/events/v1/events")

        assert result.ok, "third attempt should succeed"
        assert sleep.delays == [2.0, 4.0], "expected linear backoff"

    @pytest.mark.asyncio
    async def test_persistent_rate_limit_returns_failure(self) -> None:
        """After the last attempt a rate-limited result is returned."""
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(429)

        sleep = RecordingSleep()
        client = _client_for(httpx.MockTransport(handler), sleep)

        result = await client.request("/events/v1/events")

        assert not result.ok
        assert result.status_code == 429
        assert len(calls) == 3, "expected max_attempts requests"
        assert len(sleep.delays) == 2, "no sleep after the final attempt"
        assert "rate limit" in (result.error_message or "")

    @pytest.mark.asyncio
    async def test_http_errors_are_returned_not_raised(self) -> None:
        """Non-429 error statuses become failed results without retry."""
        client = _client_for(httpx.MockTransport(lambda _r: httpx.Response(503)))

        result = await client.request("/events/v1/events/e1/rsvps")

        assert not result.ok
        assert result.status_code == 503
        assert result.path == "/events/v1/events/e1/rsvps"

    @pytest.mark.asyncio
    async def test_transport_errors_are_returned_not_raised(self) -> None:
        """Connection failures become failed results."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = _client_for(httpx.MockTransport(handler))

        result = await client.request("/events/v1/events")

        assert not result.ok
        assert result.status_code is None
        assert "connection refused" in (result.error_message or "")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(200, content=b"<html>"),
            httpx.Response(200, json=[1, 2, 3]),
        ],
    )
    async def test_non_object_bodies_are_failures(self, response: httpx.Response) -> None:
        """Undecodable or non-object JSON bodies are rejected."""
        client = _client_for(httpx.MockTransport(lambda _r: response))

        result = await client.request("/events/v1/events")

        assert not result.ok
        assert "non-object" in (result.error_message or "")

    @pytest.mark.asyncio
    async def test_ticket_lookup_requests_a_full_page(self, fake_api: FakeEventsApi) -> None:
        """Ticket lookups ask for a page of ``page_size`` tickets."""
        client = make_client(fake_api, page_size=50)

        await client.event_tickets("evt-9")

        request = fake_api.requests[0]
        assert request.url.path == "/events/v1/events/evt-9/tickets"
        assert request.url.params["limit"] == "50"

    @pytest.mark.asyncio
    async def test_owned_client_is_closed(self) -> None:
        """``async with`` closes a client the wrapper created itself."""
        async with EventsApiClient(make_config()) as client:
            inner = client._client  # noqa: SLF001
        assert inner.is_closed, "owned HTTP client should be closed"

    @pytest.mark.asyncio
    async def test_injected_client_is_left_open(self, fake_api: FakeEventsApi) -> None:
        """An injected HTTP client is not closed by ``aclose``."""
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(fake_api.handler))
        client = EventsApiClient(make_config(), http_client=http_client)

        await client.aclose()

        assert not http_client.is_closed, "injected client must stay open"
        await http_client.aclose()


class TestApiResult:
    """Tests for ApiResult."""

    def test_unwrap_returns_data(self) -> None:
        """Successful results unwrap to their payload."""
        result = ApiResult.success("/p", {"events": []}, 200)
        assert result.unwrap() == {"events": []}
        assert result.error_message is None

    def test_unwrap_raises_captured_error(self) -> None:
        """Failed results raise their error on unwrap."""
        result = ApiResult.failure(UpstreamAPIError.http_error("/p", 500))
        with pytest.raises(UpstreamAPIError, match="HTTP 500"):
            result.unwrap()
