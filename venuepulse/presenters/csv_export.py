"""CSV export with the fixed venue spreadsheet header."""

from __future__ import annotations

import csv
import datetime as dt
import io
import typing as typ

if typ.TYPE_CHECKING:
    from venuepulse.reporting.models import Report

CSV_HEADER = ("Title", "Date", "Time", "Location", "Status", "RSVP Count")


def render_csv(report: Report, *, tz: dt.tzinfo = dt.UTC) -> str:
    """Render one row per report event, every value quoted.

    Date and time columns are empty for undated events. ``Status`` is the
    status reported by the event service.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for event in report.events:
        local = event.start.astimezone(tz) if event.start is not None else None
        writer.writerow(
            (
                event.title,
                local.strftime("%Y-%m-%d") if local else "",
                local.strftime("%I:%M %p") if local else "",
                event.address or event.venue,
                event.status or "",
                event.rsvp_count,
            )
        )
    return buffer.getvalue()


__all__ = ["CSV_HEADER", "render_csv"]
