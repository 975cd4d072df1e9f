"""Static HTML documents: the ticket report and the email digest.

Every interpolated value goes through ``html.escape``.

Usage
-----
>>> from venuepulse.presenters.html import render_report_html
>>> document = render_report_html(report)

"""

from __future__ import annotations

import html
import typing as typ

from venuepulse.classification.models import EventType

if typ.TYPE_CHECKING:
    from venuepulse.reporting.models import PresentedEvent, Report, ReportSummary

TYPE_COLOURS: dict[str, str] = {
    EventType.CONCERT: "#667eea",
    EventType.OPEN_MIC: "#f59e0b",
    EventType.JAM_SESSION: "#10b981",
    EventType.WORKSHOP: "#8b5cf6",
    EventType.FUNDRAISER: "#ef4444",
}

_STYLE = """
body { font-family: -apple-system, Segoe UI, Roboto, sans-serif; margin: 0;
       background: #f5f7fb; color: #1f2937; }
header { background: linear-gradient(135deg, #667eea, #764ba2); color: #fff;
         padding: 24px 32px; }
main { padding: 24px 32px; }
.cards { display: grid; grid-template-columns: repeat(auto-fit, minmax(160px, 1fr));
         gap: 16px; margin-bottom: 24px; }
.card { background: #fff; border-radius: 8px; padding: 16px;
        box-shadow: 0 1px 3px rgba(0,0,0,.1); }
.card .value { font-size: 28px; font-weight: 700; }
table { width: 100%; border-collapse: collapse; background: #fff; }
th, td { padding: 8px 12px; border-bottom: 1px solid #e5e7eb; text-align: left; }
.type { color: #fff; border-radius: 4px; padding: 2px 6px; font-size: 12px; }
.status { border-radius: 4px; padding: 2px 6px; font-size: 12px; }
.status-high { background: #d1fae5; }
.status-medium { background: #fef3c7; }
.status-low { background: #e5e7eb; }
.status-urgent { background: #fee2e2; font-weight: 700; }
.status-recurring { background: #e0e7ff; }
""".strip()


def _e(value: object) -> str:
    return html.escape(str(value))


def _render_cards(lines: list[str], summary: ReportSummary) -> None:
    cards = (
        ("Events", summary.total_events),
        ("Tickets sold", summary.total_tickets_sold),
        ("RSVPs", summary.total_rsvps),
        ("Ticketed events", summary.ticketed_events_count),
        ("Avg tickets / ticketed event", summary.average_tickets_per_event),
        ("This week", len(summary.this_week_events)),
    )
    lines.append('<section class="cards">')
    lines.extend(
        f'<div class="card"><div>{_e(label)}</div>'
        f'<div class="value">{_e(value)}</div></div>'
        for label, value in cards
    )
    lines.append("</section>")


def _render_event_row(event: PresentedEvent) -> str:
    colour = TYPE_COLOURS.get(event.event_type, TYPE_COLOURS[EventType.CONCERT])
    title = _e(event.title)
    if event.url:
        title = f'<a href="{_e(event.url)}">{title}</a>'
    tickets = "RSVP only" if event.is_rsvp_only else _e(event.tickets_sold)
    return (
        "<tr>"
        f"<td>{title}</td>"
        f"<td>{_e(event.date)}</td>"
        f"<td>{_e(event.venue)}</td>"
        f'<td><span class="type" style="background:{colour}">'
        f"{_e(event.event_type)}</span></td>"
        f"<td>{tickets}</td>"
        f"<td>{_e(event.rsvp_count)}</td>"
        f'<td><span class="status status-{_e(event.display_status)}">'
        f"{_e(event.display_status)}</span></td>"
        "</tr>"
    )


def _render_event_table(lines: list[str], events: tuple[PresentedEvent, ...]) -> None:
    if not events:
        lines.append("<p>No events found.</p>")
        return
    lines.append("<table>")
    lines.append(
        "<thead><tr><th>Event</th><th>Date</th><th>Venue</th><th>Type</th>"
        "<th>Tickets</th><th>RSVPs</th><th>Status</th></tr></thead>"
    )
    lines.append("<tbody>")
    lines.extend(_render_event_row(event) for event in events)
    lines.append("</tbody></table>")


def _render_top_sellers(lines: list[str], summary: ReportSummary) -> None:
    if not summary.top_selling_events:
        return
    lines.append("<h2>Top selling</h2><ol>")
    lines.extend(
        f"<li>{_e(seller.title)}: {_e(seller.tickets)} tickets ({_e(seller.kind)})</li>"
        for seller in summary.top_selling_events
    )
    lines.append("</ol>")


def _render_urgent(lines: list[str], summary: ReportSummary) -> None:
    if not summary.urgent_events:
        return
    lines.append("<h2>Needs attention</h2><ul>")
    lines.extend(
        f"<li>{_e(event.title)} ({_e(event.date)}): no tickets sold</li>"
        for event in summary.urgent_events
    )
    lines.append("</ul>")


def render_report_html(report: Report) -> str:
    """Render a self-contained HTML ticket report."""
    venue = report.venue
    generated = report.generated_at.strftime("%Y-%m-%d %H:%M %Z")
    lines = [
        "<!DOCTYPE html>",
        '<html lang="en"><head><meta charset="utf-8">',
        f"<title>{_e(venue.name)} ticket report</title>",
        f"<style>{_STYLE}</style></head><body>",
        f"<header><h1>{_e(venue.name)}</h1>",
        f"<p>{_e(venue.location)} · {_e(venue.website)} · generated {_e(generated)}</p>",
        "</header><main>",
    ]
    _render_cards(lines, report.summary)
    _render_urgent(lines, report.summary)
    _render_top_sellers(lines, report.summary)
    lines.append(f"<h2>{_e(report.scope).capitalize()} events</h2>")
    _render_event_table(lines, report.events)
    lines.append("</main></body></html>")
    return "\n".join(lines)


def render_email_digest(report: Report, *, dashboard_url: str) -> str:
    """Render the daily digest email body."""
    summary = report.summary
    lines = [
        '<div style="font-family: sans-serif; max-width: 640px;">',
        f"<h1>{_e(report.venue.name)} daily event report</h1>",
        f"<p>{_e(summary.total_events)} upcoming events, "
        f"{_e(summary.total_tickets_sold)} tickets sold, "
        f"{_e(summary.total_rsvps)} RSVPs.</p>",
    ]
    _render_urgent(lines, summary)
    if summary.this_week_events:
        lines.append("<h2>This week</h2><ul>")
        lines.extend(
            f"<li>{_e(event.title)} ({_e(event.date)}): {_e(event.status_text)}</li>"
            for event in summary.this_week_events
        )
        lines.append("</ul>")
    _render_top_sellers(lines, summary)
    lines.append(f'<p><a href="{_e(dashboard_url)}">Open the live dashboard</a></p>')
    lines.append("</div>")
    return "\n".join(lines)


__all__ = ["TYPE_COLOURS", "render_email_digest", "render_report_html"]
