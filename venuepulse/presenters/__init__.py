"""Renderers and writers for report snapshots."""

from .console import (
    render_event_listing,
    render_overview,
    render_ticket_report,
    summarize_text,
)
from .csv_export import CSV_HEADER, render_csv
from .dashboard import render_dashboard_page
from .filesystem import FilesystemArtefactSink
from .html import render_email_digest, render_report_html
from .json_export import cached_report_media, encode_report, report_media
from .sink import ArtefactKind, ArtefactMetadata, ArtefactSink

__all__ = [
    "CSV_HEADER",
    "ArtefactKind",
    "ArtefactMetadata",
    "ArtefactSink",
    "FilesystemArtefactSink",
    "cached_report_media",
    "encode_report",
    "render_csv",
    "render_dashboard_page",
    "render_email_digest",
    "render_event_listing",
    "render_overview",
    "render_report_html",
    "render_ticket_report",
    "report_media",
    "summarize_text",
]
