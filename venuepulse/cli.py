"""Command-line driver for venue event listings and ticket reports."""

from __future__ import annotations

import argparse
import asyncio
import os
import typing as typ
from pathlib import Path

from venuepulse.logging import configure_logging, get_logger, log_error
from venuepulse.presenters import (
    ArtefactKind,
    ArtefactMetadata,
    FilesystemArtefactSink,
    encode_report,
    render_csv,
    render_event_listing,
    render_overview,
    render_report_html,
    render_ticket_report,
)
from venuepulse.presenters.console import DEFAULT_SUMMARY_LENGTH
from venuepulse.reporting.errors import ReportGenerationError
from venuepulse.reporting.models import ReportScope
from venuepulse.upstream.errors import UpstreamConfigError

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from venuepulse.reporting.service import ReportingService

__all__ = ["build_parser", "main"]

logger = get_logger(__name__)

_LISTING_HEADINGS = {
    ReportScope.UPCOMING: "Upcoming events",
    ReportScope.PAST: "Past events",
    ReportScope.ALL: "All events",
}


def _positive_int(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        msg = f"expected a positive integer, got {value!r}"
        raise argparse.ArgumentTypeError(msg) from exc
    if parsed <= 0:
        msg = f"expected a positive integer, got {value!r}"
        raise argparse.ArgumentTypeError(msg)
    return parsed


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser for the ``venuepulse`` command."""
    parser = argparse.ArgumentParser(
        prog="venuepulse", description="Venue event listings and ticket reports."
    )
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("summary", help="Headline counts for the whole listing")

    for scope in ReportScope:
        listing = commands.add_parser(
            str(scope), help=f"{_LISTING_HEADINGS[scope]} with descriptions"
        )
        listing.add_argument(
            "--full", action="store_true", help="Print full descriptions"
        )
        listing.add_argument(
            "--summary-length",
            type=_positive_int,
            default=DEFAULT_SUMMARY_LENGTH,
            help="Truncate descriptions to this many characters",
        )
        listing.add_argument(
            "--limit", type=_positive_int, default=None, help="Maximum events"
        )

    report = commands.add_parser("report", help="Ticket sales report")
    report.add_argument("limit", nargs="?", type=_positive_int, default=None)

    html = commands.add_parser("html", help="Write the ticket report as HTML")
    html.add_argument("limit", nargs="?", type=_positive_int, default=None)
    html.add_argument("--output-dir", type=Path, default=None)

    export = commands.add_parser("export", help="Export all events as JSON or CSV")
    export.add_argument(
        "format", choices=[str(ArtefactKind.JSON), str(ArtefactKind.CSV)]
    )
    export.add_argument("--limit", type=_positive_int, default=None)
    export.add_argument("--output-dir", type=Path, default=None)

    commands.add_parser("serve", help="Run the dashboard server")
    return parser


async def _run_summary(service: ReportingService) -> list[str]:
    overview = await service.overview()
    return render_overview(
        overview, venue=service.config.venue, tz=service.config.tz
    )


async def _run_listing(
    service: ReportingService, scope: ReportScope, args: argparse.Namespace
) -> list[str]:
    events = await service.list_events(scope, args.limit)
    return render_event_listing(
        events,
        heading=_LISTING_HEADINGS[scope],
        venue=service.config.venue,
        tz=service.config.tz,
        full=args.full,
        summary_length=args.summary_length,
    )


async def _run_report(service: ReportingService, limit: int | None) -> list[str]:
    report = await service.generate(
        ReportScope.UPCOMING, limit or service.config.report_limit
    )
    return render_ticket_report(report)


def _sink(service: ReportingService, output_dir: Path | None) -> FilesystemArtefactSink:
    return FilesystemArtefactSink(output_dir or service.config.output_dir)


async def _run_html(
    service: ReportingService, limit: int | None, output_dir: Path | None
) -> list[str]:
    report = await service.generate(
        ReportScope.UPCOMING, limit or service.config.report_limit
    )
    metadata = ArtefactMetadata(
        kind=ArtefactKind.HTML,
        report_date=report.generated_at.astimezone(service.config.tz).date(),
    )
    path = await _sink(service, output_dir).write_artefact(
        render_report_html(report), metadata=metadata
    )
    return [f"Wrote ticket report for {len(report.events)} events to {path}"]


async def _run_export(
    service: ReportingService,
    kind: ArtefactKind,
    limit: int | None,
    output_dir: Path | None,
) -> list[str]:
    report = await service.generate(ReportScope.ALL, limit)
    content: str | bytes = (
        encode_report(report)
        if kind is ArtefactKind.JSON
        else render_csv(report, tz=service.config.tz)
    )
    metadata = ArtefactMetadata(
        kind=kind,
        report_date=report.generated_at.astimezone(service.config.tz).date(),
    )
    path = await _sink(service, output_dir).write_artefact(content, metadata=metadata)
    return [f"Exported {len(report.events)} events to {path}"]


async def _dispatch(service: ReportingService, args: argparse.Namespace) -> list[str]:
    command = args.command
    if command == "summary":
        return await _run_summary(service)
    if command in set(ReportScope):
        return await _run_listing(service, ReportScope(command), args)
    if command == "report":
        return await _run_report(service, args.limit)
    if command == "html":
        return await _run_html(service, args.limit, args.output_dir)
    return await _run_export(
        service, ArtefactKind(args.format), args.limit, args.output_dir
    )


async def _run(
    args: argparse.Namespace,
    service_factory: cabc.Callable[[], ReportingService],
) -> list[str]:
    service = service_factory()
    try:
        return await _dispatch(service, args)
    finally:
        await service.aclose()


def _default_service_factory() -> ReportingService:
    from venuepulse.api.factory import build_reporting_service

    return build_reporting_service()


def main(
    argv: list[str] | None = None,
    *,
    service_factory: cabc.Callable[[], ReportingService] | None = None,
) -> int:
    """Run one ``venuepulse`` command.

    Parameters
    ----------
    argv : list[str] | None, optional
        Command-line arguments. ``None`` defaults to ``sys.argv``.
    service_factory : Callable[[], ReportingService] | None, optional
        Builds the reporting service; defaults to one configured from the
        environment.

    Returns
    -------
    int
        Exit code: 0 on success, 1 on configuration or upstream failure.
        Usage errors exit with 2 from ``argparse``.

    """
    args = build_parser().parse_args(argv)
    if log_level := os.environ.get("VENUEPULSE_LOG_LEVEL"):
        configure_logging(log_level)

    if args.command == "serve":
        from venuepulse.runtime import main as serve

        serve()
        return 0

    try:
        lines = asyncio.run(_run(args, service_factory or _default_service_factory))
    except (UpstreamConfigError, ReportGenerationError, ValueError) as exc:
        log_error(logger, "Command %s failed: %s", args.command, exc)
        print(f"Error: {exc}")
        return 1

    print("\n".join(lines))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
