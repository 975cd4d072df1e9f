"""Attach RSVP, ticket and order counts to fetched events.

Each enrichment source issues one secondary lookup per event. Lookups run
concurrently under a semaphore, and results are written back by event
index so the output order always matches the input. A failing lookup only
degrades its own count: the count reads as zero, but its status records
that the value is unknown rather than genuinely zero.

Usage
-----
>>> enricher = EventEnricher(client, sources=("rsvps", "tickets"), concurrency=5)
>>> enriched = await enricher.enrich(events)

"""

from __future__ import annotations

import asyncio
import collections
import enum
import typing as typ

import msgspec

from venuepulse.logging import get_logger, log_info, log_warning
from venuepulse.upstream.models import Event, count_from_payload

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from venuepulse.upstream.client import ApiResult, EventsApiClient

logger = get_logger(__name__)

DEFAULT_CONCURRENCY = 5


class EnrichmentSource(enum.StrEnum):
    """Secondary lookups that can be enabled per pipeline run."""

    RSVPS = "rsvps"
    TICKETS = "tickets"
    ORDERS = "orders"


DEFAULT_SOURCES: tuple[EnrichmentSource, ...] = (
    EnrichmentSource.RSVPS,
    EnrichmentSource.TICKETS,
)


class CountStatus(enum.StrEnum):
    """Whether a count was fetched, failed, or never requested."""

    OK = "ok"
    FAILED = "failed"
    SKIPPED = "skipped"


class CountResult(msgspec.Struct, kw_only=True, frozen=True):
    """A single attendance count with its provenance."""

    count: int = 0
    status: CountStatus = CountStatus.SKIPPED
    error: str | None = None

    @property
    def known(self) -> bool:
        """True when ``count`` reflects data returned by the service."""
        return self.status is CountStatus.OK

    @classmethod
    def of(cls, count: int) -> CountResult:
        """Return a successfully fetched count."""
        return cls(count=max(count, 0), status=CountStatus.OK)

    @classmethod
    def failed(cls, error: str) -> CountResult:
        """Return a zero count flagged as unknown."""
        return cls(count=0, status=CountStatus.FAILED, error=error)


class TicketCounts(msgspec.Struct, kw_only=True, frozen=True):
    """Tickets sold for one event, split into paid and free."""

    sold: int = 0
    paid: int = 0
    free: int = 0
    status: CountStatus = CountStatus.SKIPPED
    error: str | None = None

    @property
    def known(self) -> bool:
        """True when the counts reflect data returned by the service."""
        return self.status is CountStatus.OK

    @classmethod
    def failed(cls, error: str) -> TicketCounts:
        """Return zero counts flagged as unknown."""
        return cls(status=CountStatus.FAILED, error=error)


class EnrichedEvent(msgspec.Struct, kw_only=True, frozen=True):
    """An event with its secondary counts attached."""

    event: Event
    rsvps: CountResult = msgspec.field(default_factory=CountResult)
    tickets: TicketCounts = msgspec.field(default_factory=TicketCounts)
    orders: CountResult = msgspec.field(default_factory=CountResult)

    @property
    def unknown_sources(self) -> tuple[str, ...]:
        """Names of the sources whose lookup failed for this event."""
        outcomes = (
            (EnrichmentSource.RSVPS, self.rsvps.status),
            (EnrichmentSource.TICKETS, self.tickets.status),
            (EnrichmentSource.ORDERS, self.orders.status),
        )
        return tuple(
            str(name) for name, status in outcomes if status is CountStatus.FAILED
        )


def parse_sources(names: cabc.Iterable[str]) -> tuple[EnrichmentSource, ...]:
    """Convert source names to :class:`EnrichmentSource` values.

    Raises
    ------
    ValueError
        If a name is not a known source.

    """
    sources: list[EnrichmentSource] = []
    for raw in names:
        name = raw.strip().lower()
        if not name:
            continue
        try:
            source = EnrichmentSource(name)
        except ValueError as exc:
            valid = ", ".join(member.value for member in EnrichmentSource)
            msg = f"unknown enrichment source {raw!r}; expected one of: {valid}"
            raise ValueError(msg) from exc
        if source not in sources:
            sources.append(source)
    return tuple(sources)


def tickets_from_payload(payload: dict[str, typ.Any]) -> TicketCounts:
    """Count sold tickets and split them on each ticket's ``free`` flag."""
    sold, tickets = count_from_payload(payload, "tickets")
    free = sum(
        1 for ticket in tickets if isinstance(ticket, dict) and ticket.get("free")
    )
    paid = sum(
        1
        for ticket in tickets
        if isinstance(ticket, dict) and not ticket.get("free")
    )
    return TicketCounts(sold=sold, paid=paid, free=free, status=CountStatus.OK)


class OrderIndex:
    """Per-event order counts built from one pass over the order listing."""

    def __init__(self, client: EventsApiClient, *, page_size: int) -> None:
        """Initialise an empty index; the listing is read on first use."""
        self._client = client
        self._page_size = page_size
        self._lock = asyncio.Lock()
        self._counts: collections.Counter[str] | None = None
        self._error: str | None = None

    async def count_for(self, event_id: str) -> CountResult:
        """Return the number of orders placed for ``event_id``."""
        async with self._lock:
            if self._counts is None and self._error is None:
                await self._load()
        if self._error is not None:
            return CountResult.failed(self._error)
        counts = typ.cast("collections.Counter[str]", self._counts)
        return CountResult.of(counts[event_id])

    async def _load(self) -> None:
        counts: collections.Counter[str] = collections.Counter()
        offset = 0
        while True:
            result = await self._client.list_orders(
                offset=offset, limit=self._page_size
            )
            if not result.ok:
                self._error = result.error_message
                return
            orders = result.data.get("orders")
            batch = orders if isinstance(orders, list) else []
            counts.update(
                str(order.get("eventId"))
                for order in batch
                if isinstance(order, dict) and order.get("eventId")
            )
            offset += len(batch)
            total = result.data.get("total")
            if not batch or len(batch) < self._page_size:
                break
            if isinstance(total, int) and offset >= total:
                break
        self._counts = counts


class EventEnricher:
    """Run the enabled secondary lookups for a batch of events."""

    def __init__(
        self,
        client: EventsApiClient,
        *,
        sources: cabc.Iterable[str] = DEFAULT_SOURCES,
        concurrency: int = DEFAULT_CONCURRENCY,
    ) -> None:
        """Initialise with an API client, enabled sources and a request cap.

        Raises
        ------
        ValueError
            If ``concurrency`` is below one or a source name is unknown.

        """
        if concurrency < 1:
            msg = f"concurrency must be at least 1, got: {concurrency}"
            raise ValueError(msg)
        self._client = client
        self._sources = parse_sources(sources)
        self._concurrency = concurrency

    @property
    def sources(self) -> tuple[EnrichmentSource, ...]:
        """Enabled lookups in declaration order."""
        return self._sources

    async def enrich(self, events: cabc.Sequence[Event]) -> list[EnrichedEvent]:
        """Return ``events`` with counts attached, in the same order."""
        if not self._sources:
            return [EnrichedEvent(event=event) for event in events]

        semaphore = asyncio.Semaphore(self._concurrency)
        orders = (
            OrderIndex(self._client, page_size=self._client.config.page_size)
            if EnrichmentSource.ORDERS in self._sources
            else None
        )
        results: list[EnrichedEvent | None] = [None] * len(events)

        async def _run(index: int, event: Event) -> None:
            async with semaphore:
                results[index] = await self._enrich_one(event, orders)

        await asyncio.gather(*(_run(i, event) for i, event in enumerate(events)))

        enriched = [typ.cast("EnrichedEvent", item) for item in results]
        degraded = sum(1 for item in enriched if item.unknown_sources)
        log_info(
            logger,
            "Enriched %d events (sources=%s, degraded=%d)",
            len(enriched),
            ",".join(self._sources),
            degraded,
        )
        return enriched

    async def _enrich_one(
        self, event: Event, orders: OrderIndex | None
    ) -> EnrichedEvent:
        rsvps = CountResult()
        tickets = TicketCounts()
        order_count = CountResult()

        if EnrichmentSource.RSVPS in self._sources:
            rsvps = self._count(
                event, await self._client.event_rsvps(event.event_id), "rsvps"
            )
        if EnrichmentSource.TICKETS in self._sources:
            result = await self._client.event_tickets(event.event_id)
            if result.ok:
                tickets = tickets_from_payload(result.data)
            else:
                self._warn(event, EnrichmentSource.TICKETS, result)
                tickets = TicketCounts.failed(result.error_message or "unknown")
        if orders is not None:
            order_count = await orders.count_for(event.event_id)
            if not order_count.known:
                log_warning(
                    logger,
                    "Order lookup failed for event %s: %s",
                    event.event_id,
                    order_count.error,
                )

        return EnrichedEvent(
            event=event, rsvps=rsvps, tickets=tickets, orders=order_count
        )

    def _count(self, event: Event, result: ApiResult, items_key: str) -> CountResult:
        if not result.ok:
            self._warn(event, EnrichmentSource(items_key), result)
            return CountResult.failed(result.error_message or "unknown")
        count, _ = count_from_payload(result.data, items_key)
        return CountResult.of(count)

    @staticmethod
    def _warn(event: Event, source: EnrichmentSource, result: ApiResult) -> None:
        log_warning(
            logger,
            "%s lookup failed for event %s (%s): %s",
            source,
            event.event_id,
            event.title,
            result.error_message,
        )


__all__ = [
    "DEFAULT_CONCURRENCY",
    "DEFAULT_SOURCES",
    "CountResult",
    "CountStatus",
    "EnrichedEvent",
    "EnrichmentSource",
    "EventEnricher",
    "OrderIndex",
    "TicketCounts",
    "parse_sources",
    "tickets_from_payload",
]
