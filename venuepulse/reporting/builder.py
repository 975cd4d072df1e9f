"""Pure aggregation of enriched events into a :class:`Report`.

``build_report`` depends only on its arguments: the same events and the
same ``now`` always give the same report. Drivers (CLI, scheduler, HTTP)
fetch and enrich, then call it.
"""

from __future__ import annotations

import collections
import dataclasses as dc
import datetime as dt
import typing as typ

from venuepulse.classification import (
    DEFAULT_CLASSIFICATION_CONFIG,
    ClassificationConfig,
    SalesStatus,
    classify_popularity,
    classify_sales_status,
    classify_type,
    display_status,
    is_recurring,
    is_rsvp_only,
    status_text,
)
from venuepulse.common.time import days_until

from .models import (
    PresentedEvent,
    Report,
    ReportScope,
    ReportSummary,
    TicketKind,
    TopSeller,
    VenueInfo,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from venuepulse.pipeline.enrichment import EnrichedEvent

TBD = "TBD"
_DATE_FORMAT = "%a, %b %d, %Y %I:%M %p"


@dc.dataclass(frozen=True, slots=True)
class ReportLimits:
    """Window sizes and list lengths used in the summary."""

    top_sellers: int = 5
    this_week_days: int = 7
    this_month_days: int = 30


DEFAULT_REPORT_LIMITS = ReportLimits()


def format_event_date(
    start: dt.datetime | None,
    formatted: str | None = None,
    *,
    tz: dt.tzinfo = dt.UTC,
) -> str:
    """Return the display date, preferring the service's formatted text."""
    if formatted:
        return formatted
    if start is None:
        return TBD
    return start.astimezone(tz).strftime(_DATE_FORMAT)


def event_url(slug: str | None, page_url: str | None, venue: VenueInfo) -> str | None:
    """Return the public event page on the venue site, if known."""
    if slug:
        return f"https://{venue.website}/events/{slug}"
    return page_url


def _not_started(start: dt.datetime | None, now: dt.datetime) -> bool:
    return start is not None and start > now


def present_event(
    item: EnrichedEvent,
    *,
    now: dt.datetime,
    venue: VenueInfo,
    classification: ClassificationConfig = DEFAULT_CLASSIFICATION_CONFIG,
    tz: dt.tzinfo = dt.UTC,
) -> PresentedEvent:
    """Classify one enriched event and flatten it for display."""
    event = item.event
    days = days_until(event.start, now)
    sold = item.tickets.sold
    paid = item.tickets.paid
    free = item.tickets.free
    rsvp_only = is_rsvp_only(event.title, classification)
    recurring = is_recurring(event.title, classification)
    is_free = sold > 0 and free == sold
    # Unknown ticket counts never make an event ticketed or urgent.
    ticketed = item.tickets.known and not rsvp_only and not is_free
    # Events that already started are never urgent.
    upcoming_days = days if _not_started(event.start, now) else None
    sales_status = classify_sales_status(
        sold,
        upcoming_days,
        ticketed=ticketed,
        thresholds=classification.sales,
    )
    popularity = classify_popularity(
        item.rsvps.count + sold, classification.popularity
    )

    return PresentedEvent(
        event_id=event.event_id,
        title=event.title,
        date=format_event_date(event.start, event.formatted_date, tz=tz),
        start=event.start,
        days_from_now=days,
        venue=event.venue_name or venue.name,
        address=event.address,
        description=event.description,
        slug=event.slug,
        url=event_url(event.slug, event.page_url, venue),
        status=event.status,
        rsvp_count=item.rsvps.count,
        tickets_sold=sold,
        paid_tickets=paid,
        free_tickets=free,
        order_count=item.orders.count,
        event_type=classify_type(event.title, classification),
        sales_status=sales_status,
        display_status=display_status(sales_status, recurring=recurring),
        popularity=popularity,
        status_text=status_text(
            popularity,
            upcoming_days,
            recurring=recurring,
            soon_days=classification.popularity.soon_days,
        ),
        is_recurring=recurring,
        is_rsvp_only=rsvp_only,
        is_paid=paid > 0,
        is_free=is_free,
        is_ticketed=ticketed,
        unknown_sources=item.unknown_sources,
    )


def _order_for_scope(
    events: list[PresentedEvent], scope: ReportScope
) -> list[PresentedEvent]:
    if scope is ReportScope.ALL:
        return events
    dated = [event for event in events if event.start is not None]
    undated = [event for event in events if event.start is None]
    dated.sort(
        key=lambda event: typ.cast("dt.datetime", event.start),
        reverse=scope is ReportScope.PAST,
    )
    return dated + undated


def _average(total: int, count: int) -> float:
    if count == 0:
        return 0.0
    return round(total / count, 1)


def _within(event: PresentedEvent, now: dt.datetime, window: int) -> bool:
    days = event.days_from_now
    return _not_started(event.start, now) and days is not None and days <= window


def _ticket_kind(event: PresentedEvent) -> TicketKind:
    if event.is_paid:
        return TicketKind.PAID
    if event.is_free:
        return TicketKind.FREE
    return TicketKind.UNKNOWN


def _top_sellers(
    events: cabc.Sequence[PresentedEvent], limit: int
) -> tuple[TopSeller, ...]:
    selling = [event for event in events if event.tickets_sold > 0]
    # sorted() is stable, so ties keep report order.
    ranked = sorted(selling, key=lambda event: event.tickets_sold, reverse=True)
    return tuple(
        TopSeller(title=event.title, tickets=event.tickets_sold, kind=_ticket_kind(event))
        for event in ranked[:limit]
    )


def summarize(
    events: cabc.Sequence[PresentedEvent],
    limits: ReportLimits = DEFAULT_REPORT_LIMITS,
    *,
    now: dt.datetime,
) -> ReportSummary:
    """Compute totals, breakdowns and highlighted subsets.

    The ticket average divides total tickets sold by the number of ticketed
    events only; RSVP-only and free events never enter the denominator, nor
    do events whose ticket count is unknown. It is ``0.0`` when no event is
    ticketed. The week and month windows only hold events starting after
    ``now``.
    """
    total_tickets = sum(event.tickets_sold for event in events)
    total_rsvps = sum(event.rsvp_count for event in events)
    ticketed = [event for event in events if event.is_ticketed]

    sales_breakdown = {str(status): 0 for status in SalesStatus}
    sales_breakdown.update(
        collections.Counter(str(event.sales_status) for event in events)
    )

    return ReportSummary(
        total_events=len(events),
        total_rsvps=total_rsvps,
        total_tickets_sold=total_tickets,
        total_paid_tickets=sum(event.paid_tickets for event in events),
        total_free_tickets=sum(event.free_tickets for event in events),
        total_orders=sum(event.order_count for event in events),
        ticketed_events_count=len(ticketed),
        free_events_count=sum(1 for e in events if e.is_rsvp_only or e.is_free),
        average_tickets_per_event=_average(total_tickets, len(ticketed)),
        average_rsvps_per_event=_average(total_rsvps, len(events)),
        event_types=dict(collections.Counter(str(e.event_type) for e in events)),
        venue_breakdown=dict(collections.Counter(e.venue for e in events)),
        sales_breakdown=sales_breakdown,
        top_selling_events=_top_sellers(events, limits.top_sellers),
        urgent_events=tuple(
            e for e in events if e.sales_status is SalesStatus.URGENT
        ),
        this_week_events=tuple(
            e for e in events if _within(e, now, limits.this_week_days)
        ),
        events_this_month=sum(
            1 for e in events if _within(e, now, limits.this_month_days)
        ),
        events_with_unknown_counts=sum(1 for e in events if e.unknown_sources),
    )


def build_report(
    events: cabc.Sequence[EnrichedEvent],
    *,
    now: dt.datetime,
    scope: ReportScope = ReportScope.UPCOMING,
    venue: VenueInfo | None = None,
    classification: ClassificationConfig = DEFAULT_CLASSIFICATION_CONFIG,
    limits: ReportLimits = DEFAULT_REPORT_LIMITS,
    tz: dt.tzinfo = dt.UTC,
) -> Report:
    """Build a report snapshot from enriched events.

    Parameters
    ----------
    events
        Enriched events, typically one partition of the listing.
    now
        Reference instant for day counts; also the report timestamp.
    scope
        Orders upcoming events soonest first and past events latest first;
        ``all`` keeps the input order. Undated events always come last.
    venue
        Venue metadata; defaults to :class:`VenueInfo`.
    classification
        Keyword table and thresholds.
    limits
        Summary window sizes.
    tz
        Zone used when formatting dates the service did not pre-format.

    Returns
    -------
    Report
        Immutable snapshot.

    """
    venue_info = venue or VenueInfo()
    presented = [
        present_event(
            item, now=now, venue=venue_info, classification=classification, tz=tz
        )
        for item in events
    ]
    ordered = _order_for_scope(presented, scope)
    return Report(
        generated_at=now,
        scope=scope,
        venue=venue_info,
        summary=summarize(ordered, limits, now=now),
        events=tuple(ordered),
    )


__all__ = [
    "DEFAULT_REPORT_LIMITS",
    "TBD",
    "ReportLimits",
    "build_report",
    "event_url",
    "format_event_date",
    "present_event",
    "summarize",
]
