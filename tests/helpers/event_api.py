"""In-memory event service used by unit and behavioural tests.

``FakeEventsApi`` answers the event service routes from plain Python data
through ``httpx.MockTransport`` so the real client, fetcher and enricher run
unchanged against it.

Examples
--------
>>> api = FakeEventsApi(events=[event_payload("e1", "Jazz Night", start=NOW)])
>>> api.tickets["e1"] = ticket_list(paid=3, free=1)
>>> client = make_client(api)

"""

from __future__ import annotations

import asyncio
import dataclasses as dc
import datetime as dt
import re
import typing as typ

import httpx

from venuepulse.upstream.client import EventsApiClient, UpstreamConfig

NOW = dt.datetime(2024, 7, 8, 12, 0, tzinfo=dt.UTC)
BASE_URL = "https://events.test"

_EVENT_SUB_RESOURCE = re.compile(r"^/events/v1/events/(?P<id>[^/]+)/(?P<kind>\w+)$")


def event_payload(
    event_id: str,
    title: str,
    *,
    start: dt.datetime | None = None,
    **extra: typ.Any,  # noqa: ANN401
) -> dict[str, typ.Any]:
    """Return one raw ``events`` entry as the service shapes it."""
    payload: dict[str, typ.Any] = {"id": event_id, "title": title}
    if start is not None:
        payload["scheduling"] = {
            "config": {"startDate": start.isoformat().replace("+00:00", "Z")}
        }
    payload.update(extra)
    return payload


def ticket_list(*, paid: int = 0, free: int = 0) -> dict[str, typ.Any]:
    """Return a tickets response with ``paid`` and ``free`` entries."""
    tickets = [{"free": False}] * paid + [{"free": True}] * free
    return {"tickets": tickets, "total": len(tickets)}


def rsvp_list(count: int) -> dict[str, typ.Any]:
    """Return an RSVP response holding ``count`` entries."""
    return {"rsvps": [{"status": "YES"}] * count, "total": count}


@dc.dataclass
class FakeEventsApi:
    """Route table for the event service backed by in-memory data.

    Attributes
    ----------
    events
        Raw event entries served by the paginated listing.
    rsvps
        RSVP responses keyed by event id; missing ids return no RSVPs.
    tickets
        Ticket responses keyed by event id; missing ids return no tickets.
    orders
        Raw order entries served by the paginated order listing.
    failures
        HTTP status codes to return for specific request paths.
    declared_total
        Overrides the ``total`` field of the event listing when set.
    delay_s
        Artificial latency per request, used to observe concurrency.

    """

    events: list[dict[str, typ.Any]] = dc.field(default_factory=list)
    rsvps: dict[str, dict[str, typ.Any]] = dc.field(default_factory=dict)
    tickets: dict[str, dict[str, typ.Any]] = dc.field(default_factory=dict)
    orders: list[dict[str, typ.Any]] = dc.field(default_factory=list)
    failures: dict[str, int] = dc.field(default_factory=dict)
    declared_total: int | None = None
    delay_s: float = 0.0
    requests: list[httpx.Request] = dc.field(default_factory=list)
    in_flight: int = 0
    max_in_flight: int = 0

    def paths(self) -> list[str]:
        """Return the request paths seen so far, in order."""
        return [request.url.path for request in self.requests]

    async def handler(self, request: httpx.Request) -> httpx.Response:
        """Answer one request; used as the ``MockTransport`` handler."""
        self.requests.append(request)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay_s:
                await asyncio.sleep(self.delay_s)
            return self._route(request)
        finally:
            self.in_flight -= 1

    def _route(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path in self.failures:
            return httpx.Response(self.failures[path], json={"message": "boom"})
        if path == "/events/v1/events":
            page = self._page(request, self.events)
            total = len(self.events) if self.declared_total is None else self.declared_total
            return httpx.Response(200, json={"events": page, "total": total})
        if path == "/events/v1/orders":
            page = self._page(request, self.orders)
            return httpx.Response(200, json={"orders": page, "total": len(self.orders)})
        match = _EVENT_SUB_RESOURCE.match(path)
        if match is None:
            return httpx.Response(404, json={"message": "not found"})
        event_id, kind = match.group("id"), match.group("kind")
        if kind == "rsvps":
            return httpx.Response(200, json=self.rsvps.get(event_id, rsvp_list(0)))
        if kind == "tickets":
            return httpx.Response(200, json=self.tickets.get(event_id, ticket_list()))
        return httpx.Response(404, json={"message": "not found"})

    @staticmethod
    def _page(
        request: httpx.Request, items: list[dict[str, typ.Any]]
    ) -> list[dict[str, typ.Any]]:
        offset = int(request.url.params.get("offset", "0"))
        limit = int(request.url.params.get("limit", "100"))
        return items[offset : offset + limit]


@dc.dataclass
class RecordingSleep:
    """Awaitable sleep replacement that records requested delays."""

    delays: list[float] = dc.field(default_factory=list)

    async def __call__(self, delay: float) -> None:
        """Record ``delay`` without waiting."""
        self.delays.append(delay)


def make_config(**overrides: typ.Any) -> UpstreamConfig:  # noqa: ANN401
    """Return an ``UpstreamConfig`` pointing at the fake base URL."""
    values: dict[str, typ.Any] = {
        "api_token": "token-123",
        "site_id": "site-456",
        "base_url": BASE_URL,
    }
    values.update(overrides)
    return UpstreamConfig(**values)


def make_client(
    api: FakeEventsApi,
    *,
    sleep: RecordingSleep | None = None,
    **overrides: typ.Any,  # noqa: ANN401
) -> EventsApiClient:
    """Return a client whose HTTP traffic is answered by ``api``."""
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(api.handler))
    return EventsApiClient(
        make_config(**overrides),
        http_client=http_client,
        sleep=sleep or RecordingSleep(),
    )


__all__ = [
    "BASE_URL",
    "NOW",
    "FakeEventsApi",
    "RecordingSleep",
    "event_payload",
    "make_client",
    "make_config",
    "rsvp_list",
    "ticket_list",
]
