"""Report snapshot structures.

Reports are frozen ``msgspec`` structs that encode to camelCase JSON, so the
JSON export, the HTTP API and the dashboard all read the same shape.
"""

from __future__ import annotations

import datetime as dt
import enum

import msgspec

from venuepulse.classification.models import EventType, PopularityStatus, SalesStatus


class ReportScope(enum.StrEnum):
    """Which slice of the listing a report covers."""

    UPCOMING = "upcoming"
    PAST = "past"
    ALL = "all"


class TicketKind(enum.StrEnum):
    """Whether a top seller sold paid or free tickets."""

    PAID = "paid"
    FREE = "free"
    UNKNOWN = "unknown"


class VenueInfo(msgspec.Struct, kw_only=True, frozen=True, rename="camel"):
    """Static venue metadata printed on every report."""

    name: str = "The Listening Booth"
    location: str = "Lewes, Delaware"
    website: str = "listeningbooth.com"


class PresentedEvent(msgspec.Struct, kw_only=True, frozen=True, rename="camel"):
    """One event with counts and classification, ready for display."""

    event_id: str
    title: str
    date: str
    start: dt.datetime | None
    days_from_now: int | None
    venue: str
    address: str | None
    description: str | None
    slug: str | None
    url: str | None
    status: str | None
    rsvp_count: int
    tickets_sold: int
    paid_tickets: int
    free_tickets: int
    order_count: int
    event_type: EventType
    sales_status: SalesStatus
    display_status: str
    popularity: PopularityStatus
    status_text: str
    is_recurring: bool
    is_rsvp_only: bool
    is_paid: bool
    is_free: bool
    is_ticketed: bool
    unknown_sources: tuple[str, ...] = ()

    @property
    def attendance(self) -> int:
        """RSVPs plus tickets sold."""
        return self.rsvp_count + self.tickets_sold


class TopSeller(msgspec.Struct, kw_only=True, frozen=True, rename="camel"):
    """Entry in the top selling list."""

    title: str
    tickets: int
    kind: TicketKind


class ReportSummary(msgspec.Struct, kw_only=True, frozen=True, rename="camel"):
    """Aggregate statistics over the presented events."""

    total_events: int = 0
    total_rsvps: int = 0
    total_tickets_sold: int = 0
    total_paid_tickets: int = 0
    total_free_tickets: int = 0
    total_orders: int = 0
    ticketed_events_count: int = 0
    free_events_count: int = 0
    average_tickets_per_event: float = 0.0
    average_rsvps_per_event: float = 0.0
    event_types: dict[str, int] = msgspec.field(default_factory=dict)
    venue_breakdown: dict[str, int] = msgspec.field(default_factory=dict)
    sales_breakdown: dict[str, int] = msgspec.field(default_factory=dict)
    top_selling_events: tuple[TopSeller, ...] = ()
    urgent_events: tuple[PresentedEvent, ...] = ()
    this_week_events: tuple[PresentedEvent, ...] = ()
    events_this_month: int = 0
    events_with_unknown_counts: int = 0


class Report(msgspec.Struct, kw_only=True, frozen=True, rename="camel"):
    """Snapshot produced by one pipeline run."""

    generated_at: dt.datetime
    scope: ReportScope
    venue: VenueInfo
    summary: ReportSummary
    events: tuple[PresentedEvent, ...]


__all__ = [
    "PresentedEvent",
    "Report",
    "ReportScope",
    "ReportSummary",
    "TicketKind",
    "TopSeller",
    "VenueInfo",
]
