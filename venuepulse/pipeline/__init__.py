"""Fetch and enrichment stages of the event pipeline."""

from .enrichment import (
    CountResult,
    CountStatus,
    EnrichedEvent,
    EnrichmentSource,
    EventEnricher,
    TicketCounts,
    parse_sources,
)
from .fetcher import (
    EventFetcher,
    EventPartition,
    ListingOverview,
    partition_events,
    summarize_listing,
)

__all__ = [
    "CountResult",
    "CountStatus",
    "EnrichedEvent",
    "EnrichmentSource",
    "EventEnricher",
    "EventFetcher",
    "EventPartition",
    "ListingOverview",
    "TicketCounts",
    "parse_sources",
    "partition_events",
    "summarize_listing",
]
