"""JSON export of report snapshots."""

from __future__ import annotations

import typing as typ

import msgspec

from venuepulse.reporting.models import Report

if typ.TYPE_CHECKING:
    from venuepulse.reporting.store import CachedReport


def encode_report(report: Report, *, indent: int = 2) -> bytes:
    """Serialize ``report`` as pretty-printed camelCase JSON."""
    return msgspec.json.format(msgspec.json.encode(report), indent=indent)


def decode_report(data: bytes | str) -> Report:
    """Parse JSON written by :func:`encode_report`."""
    return msgspec.json.decode(data, type=Report)


def report_media(report: Report) -> dict[str, typ.Any]:
    """Return ``report`` as JSON-compatible builtins for HTTP responses."""
    return typ.cast("dict[str, typ.Any]", msgspec.to_builtins(report))


def cached_report_media(cached: CachedReport) -> dict[str, typ.Any]:
    """Return the cached report with its ``lastUpdated`` timestamp."""
    media = report_media(cached.report)
    media["lastUpdated"] = cached.last_updated.isoformat()
    return media


__all__ = ["cached_report_media", "decode_report", "encode_report", "report_media"]
