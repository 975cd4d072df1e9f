"""Paginated retrieval of the event listing and upcoming/past partitioning."""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from venuepulse.common.time import utcnow
from venuepulse.logging import get_logger, log_debug, log_info
from venuepulse.upstream.models import Event, event_from_payload

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    import datetime as dt

    from venuepulse.upstream.client import EventsApiClient

logger = get_logger(__name__)


class EventPartition(typ.NamedTuple):
    """Events split around a reference instant."""

    upcoming: list[Event]
    past: list[Event]
    undated: list[Event]


@dc.dataclass(frozen=True, slots=True)
class ListingOverview:
    """Counts and landmark events for the listing dashboard."""

    total: int
    upcoming: int
    past: int
    undated: int
    next_event: Event | None
    latest_event: Event | None


def _start_key(event: Event) -> dt.datetime:
    # Only called on dated events.
    return typ.cast("dt.datetime", event.start)


def partition_events(
    events: cabc.Iterable[Event], now: dt.datetime
) -> EventPartition:
    """Split ``events`` into upcoming (ascending) and past (descending).

    An event is upcoming when ``now < start`` and past otherwise. Events
    without a start timestamp are set aside in ``undated`` and never appear
    in either ordered list.
    """
    upcoming: list[Event] = []
    past: list[Event] = []
    undated: list[Event] = []
    for event in events:
        if event.start is None:
            undated.append(event)
        elif now < event.start:
            upcoming.append(event)
        else:
            past.append(event)
    upcoming.sort(key=_start_key)
    past.sort(key=_start_key, reverse=True)
    return EventPartition(upcoming=upcoming, past=past, undated=undated)


def summarize_listing(
    events: cabc.Sequence[Event], now: dt.datetime
) -> ListingOverview:
    """Return headline counts plus the next and most recent event."""
    partition = partition_events(events, now)
    return ListingOverview(
        total=len(events),
        upcoming=len(partition.upcoming),
        past=len(partition.past),
        undated=len(partition.undated),
        next_event=partition.upcoming[0] if partition.upcoming else None,
        latest_event=partition.past[0] if partition.past else None,
    )


def _declared_total(payload: dict[str, typ.Any]) -> int | None:
    total = payload.get("total")
    if isinstance(total, int) and not isinstance(total, bool):
        return total
    return None


class EventFetcher:
    """Read every event from the service one batch at a time."""

    def __init__(
        self,
        client: EventsApiClient,
        *,
        page_size: int | None = None,
        clock: cabc.Callable[[], dt.datetime] = utcnow,
    ) -> None:
        """Initialise with an API client and an optional clock override."""
        self._client = client
        self._page_size = page_size or client.config.page_size
        self._clock = clock

    async def fetch_all_events(self) -> list[Event]:
        """Return every event in service order.

        Paging stops on a short batch, when the declared ``total`` has been
        read, or on an empty batch even if ``total`` claims more remain.

        Raises
        ------
        UpstreamAPIError
            If any page request fails.

        """
        events: list[Event] = []
        offset = 0
        while True:
            result = await self._client.list_events(
                offset=offset, limit=self._page_size
            )
            payload = result.unwrap()
            raw_batch = payload.get("events")
            batch = raw_batch if isinstance(raw_batch, list) else []
            events.extend(
                event_from_payload(raw) for raw in batch if isinstance(raw, dict)
            )
            offset += len(batch)
            total = _declared_total(payload)
            log_debug(
                logger,
                "Fetched event page offset=%d size=%d total=%s",
                offset,
                len(batch),
                total,
            )
            if not batch or len(batch) < self._page_size:
                break
            if total is not None and offset >= total:
                break

        log_info(logger, "Fetched %d events", len(events))
        return events

    async def fetch_partitioned(self) -> EventPartition:
        """Fetch everything and partition around the current instant."""
        events = await self.fetch_all_events()
        return partition_events(events, self._clock())

    async def fetch_upcoming(self, limit: int | None = None) -> list[Event]:
        """Return future events soonest first, optionally truncated."""
        upcoming = (await self.fetch_partitioned()).upcoming
        return upcoming if limit is None else upcoming[:limit]

    async def fetch_past(self, limit: int | None = None) -> list[Event]:
        """Return past events most recent first, optionally truncated."""
        past = (await self.fetch_partitioned()).past
        return past if limit is None else past[:limit]


__all__ = [
    "EventFetcher",
    "EventPartition",
    "ListingOverview",
    "partition_events",
    "summarize_listing",
]
