"""Plain-text renderers for terminal output.

Each renderer returns a list of lines; the CLI prints them joined with
newlines.
"""

from __future__ import annotations

import datetime as dt
import re
import typing as typ

from venuepulse.reporting.builder import event_url, format_event_date

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from venuepulse.pipeline.fetcher import ListingOverview
    from venuepulse.reporting.models import PresentedEvent, Report, VenueInfo
    from venuepulse.upstream.models import Event

DEFAULT_SUMMARY_LENGTH = 80
_RULE = "=" * 60
_WHITESPACE = re.compile(r"\s+")


def summarize_text(text: str | None, max_length: int = DEFAULT_SUMMARY_LENGTH) -> str:
    """Collapse whitespace and truncate to ``max_length`` characters."""
    if not text:
        return ""
    collapsed = _WHITESPACE.sub(" ", text).strip()
    if len(collapsed) <= max_length:
        return collapsed
    return collapsed[:max_length].rstrip() + "..."


def _render_header(lines: list[str], title: str, generated_at: dt.datetime) -> None:
    lines.append(_RULE)
    lines.append(title)
    lines.append(f"Generated: {generated_at.strftime('%Y-%m-%d %H:%M %Z')}")
    lines.append(_RULE)
    lines.append("")


def _render_counts(lines: list[str], heading: str, counts: dict[str, int]) -> None:
    if not counts:
        return
    lines.append(heading)
    lines.extend(f"  {key}: {value}" for key, value in sorted(counts.items()))
    lines.append("")


def _render_event_block(lines: list[str], index: int, event: PresentedEvent) -> None:
    lines.append(f"{index}. {event.title}")
    lines.append(f"   {event.date} | {event.venue} | {event.event_type}")
    if event.is_rsvp_only:
        sales = f"RSVP only, {event.rsvp_count} RSVPs"
    else:
        sales = (
            f"{event.tickets_sold} tickets "
            f"({event.paid_tickets} paid, {event.free_tickets} free), "
            f"{event.rsvp_count} RSVPs"
        )
    lines.append(f"   {sales} | status: {event.display_status}")
    if event.unknown_sources:
        lines.append(f"   counts unavailable: {', '.join(event.unknown_sources)}")


def render_ticket_report(report: Report) -> list[str]:
    """Render the ticket sales report for the terminal."""
    summary = report.summary
    lines: list[str] = []
    _render_header(
        lines, f"{report.venue.name} - Ticket Sales Report", report.generated_at
    )

    lines.append("SUMMARY")
    lines.append(f"  Events: {summary.total_events}")
    lines.append(
        f"  Tickets sold: {summary.total_tickets_sold} "
        f"({summary.total_paid_tickets} paid, {summary.total_free_tickets} free)"
    )
    lines.append(f"  RSVPs: {summary.total_rsvps}")
    lines.append(
        f"  Ticketed events: {summary.ticketed_events_count} "
        f"(RSVP-only or free: {summary.free_events_count})"
    )
    lines.append(
        f"  Average tickets per ticketed event: {summary.average_tickets_per_event}"
    )
    lines.append(f"  This week: {len(summary.this_week_events)}")
    if summary.events_with_unknown_counts:
        lines.append(
            f"  Events with unavailable counts: {summary.events_with_unknown_counts}"
        )
    lines.append("")

    _render_counts(lines, "EVENT TYPES", summary.event_types)
    _render_counts(lines, "SALES STATUS", summary.sales_breakdown)

    if summary.top_selling_events:
        lines.append("TOP SELLING")
        lines.extend(
            f"  {rank}. {seller.title} - {seller.tickets} tickets ({seller.kind})"
            for rank, seller in enumerate(summary.top_selling_events, start=1)
        )
        lines.append("")

    if summary.urgent_events:
        lines.append("URGENT: no tickets sold and less than a week away")
        lines.extend(
            f"  - {event.title} ({event.date})" for event in summary.urgent_events
        )
        lines.append("")

    lines.append("EVENTS")
    if not report.events:
        lines.append("  No events found.")
    for index, event in enumerate(report.events, start=1):
        _render_event_block(lines, index, event)
    return lines


def render_event_listing(
    events: cabc.Sequence[Event],
    *,
    heading: str,
    venue: VenueInfo,
    tz: dt.tzinfo = dt.UTC,
    full: bool = False,
    summary_length: int = DEFAULT_SUMMARY_LENGTH,
) -> list[str]:
    """Render raw events with dates, venues and descriptions.

    ``full`` prints the whole description; otherwise it is collapsed and
    truncated to ``summary_length`` characters.
    """
    lines = [f"{heading} ({len(events)})", "-" * 40]
    if not events:
        lines.append("No events found.")
        return lines
    for index, event in enumerate(events, start=1):
        lines.append(f"{index}. {event.title}")
        lines.append(
            f"   Date: {format_event_date(event.start, event.formatted_date, tz=tz)}"
        )
        lines.append(f"   Venue: {event.venue_name or venue.name}")
        if event.address:
            lines.append(f"   Address: {event.address}")
        description = (
            (event.description or "").strip()
            if full
            else summarize_text(event.description, summary_length)
        )
        if description:
            lines.append(f"   About: {description}")
        url = event_url(event.slug, event.page_url, venue)
        if url:
            lines.append(f"   Link: {url}")
        lines.append("")
    return lines


def render_overview(
    overview: ListingOverview, *, venue: VenueInfo, tz: dt.tzinfo = dt.UTC
) -> list[str]:
    """Render the headline listing dashboard."""
    lines = [
        f"{venue.name} - {venue.location}",
        "-" * 40,
        f"Total events: {overview.total}",
        f"Upcoming: {overview.upcoming}",
        f"Past: {overview.past}",
    ]
    if overview.undated:
        lines.append(f"Without a date: {overview.undated}")
    if overview.next_event is not None:
        event = overview.next_event
        when = format_event_date(event.start, event.formatted_date, tz=tz)
        lines.append(f"Next event: {event.title} ({when})")
    if overview.latest_event is not None:
        event = overview.latest_event
        when = format_event_date(event.start, event.formatted_date, tz=tz)
        lines.append(f"Most recent event: {event.title} ({when})")
    return lines


__all__ = [
    "DEFAULT_SUMMARY_LENGTH",
    "render_event_listing",
    "render_overview",
    "render_ticket_report",
    "summarize_text",
]
