"""Live dashboard page served at ``/``.

The page is static; its script reads ``/api/events/cached`` on load and
every five minutes, and the refresh button calls ``/api/events`` to re-run
the pipeline.
"""

from __future__ import annotations

import html
import typing as typ

from .html import TYPE_COLOURS

if typ.TYPE_CHECKING:
    from venuepulse.reporting.models import VenueInfo

_SCRIPT = """
const typeColours = __TYPE_COLOURS__;
function esc(value) {
  const div = document.createElement("div");
  div.textContent = value == null ? "" : String(value);
  return div.innerHTML;
}
function render(data) {
  const s = data.summary;
  document.getElementById("cards").innerHTML = [
    ["Events", s.totalEvents], ["Tickets sold", s.totalTicketsSold],
    ["RSVPs", s.totalRsvps], ["Avg tickets", s.averageTicketsPerEvent],
    ["This week", s.thisWeekEvents.length], ["Urgent", s.urgentEvents.length],
  ].map(([k, v]) => `<div class="card"><div>${esc(k)}</div>` +
    `<div class="value">${esc(v)}</div></div>`).join("");
  document.getElementById("events").innerHTML = data.events.map((e) =>
    `<tr><td>${esc(e.title)}</td><td>${esc(e.date)}</td>` +
    `<td><span class="type" style="background:${typeColours[e.eventType] || "#667eea"}">` +
    `${esc(e.eventType)}</span></td>` +
    `<td>${e.isRsvpOnly ? "RSVP only" : esc(e.ticketsSold)}</td>` +
    `<td>${esc(e.rsvpCount)}</td>` +
    `<td><span class="status status-${esc(e.displayStatus)}">${esc(e.statusText)}` +
    `</span></td></tr>`).join("");
  document.getElementById("updated").textContent =
    "Last updated: " + new Date(data.lastUpdated || data.generatedAt).toLocaleString();
}
async function load() {
  const response = await fetch("/api/events/cached");
  if (response.ok) { render(await response.json()); }
  else { document.getElementById("updated").textContent = "Waiting for first refresh"; }
}
async function refresh() {
  const response = await fetch("/api/events");
  if (response.ok) { render(await response.json()); }
  else { alert("Refresh failed"); }
}
load();
setInterval(load, 5 * 60 * 1000);
""".strip()

_STYLE = """
body { font-family: -apple-system, Segoe UI, Roboto, sans-serif; margin: 0;
       background: #f5f7fb; color: #1f2937; }
header { background: linear-gradient(135deg, #667eea, #764ba2); color: #fff;
         padding: 24px 32px; display: flex; justify-content: space-between; }
main { padding: 24px 32px; }
#cards { display: grid; grid-template-columns: repeat(auto-fit, minmax(150px, 1fr));
         gap: 16px; margin-bottom: 24px; }
.card { background: #fff; border-radius: 8px; padding: 16px; }
.card .value { font-size: 28px; font-weight: 700; }
table { width: 100%; border-collapse: collapse; background: #fff; }
th, td { padding: 8px 12px; border-bottom: 1px solid #e5e7eb; text-align: left; }
.type { color: #fff; border-radius: 4px; padding: 2px 6px; font-size: 12px; }
.status-high { color: #047857; } .status-medium { color: #b45309; }
.status-low { color: #6b7280; } .status-urgent { color: #b91c1c; font-weight: 700; }
.status-recurring { color: #4338ca; }
""".strip()


def _colours_json() -> str:
    pairs = ", ".join(
        f'"{name}": "{colour}"' for name, colour in TYPE_COLOURS.items()
    )
    return "{" + pairs + "}"


def render_dashboard_page(venue: VenueInfo) -> str:
    """Return the dashboard HTML for ``venue``."""
    name = html.escape(venue.name)
    script = _SCRIPT.replace("__TYPE_COLOURS__", _colours_json())
    return "\n".join(
        [
            "<!DOCTYPE html>",
            '<html lang="en"><head><meta charset="utf-8">',
            '<meta name="viewport" content="width=device-width, initial-scale=1">',
            f"<title>{name} event dashboard</title>",
            f"<style>{_STYLE}</style></head><body>",
            f"<header><div><h1>{name}</h1>",
            f"<p>{html.escape(venue.location)}</p></div>",
            '<div><button onclick="refresh()">Refresh now</button>',
            '<p id="updated"></p></div></header>',
            '<main><section id="cards"></section>',
            "<table><thead><tr><th>Event</th><th>Date</th><th>Type</th>",
            "<th>Tickets</th><th>RSVPs</th><th>Status</th></tr></thead>",
            '<tbody id="events"></tbody></table></main>',
            f"<script>{script}</script>",
            "</body></html>",
        ]
    )


__all__ = ["render_dashboard_page"]
