"""Configuration for report generation, refresh scheduling and output.

Usage
-----
Create a configuration with defaults:

>>> config = ReportingConfig()
>>> config.report_limit
20

Or load from environment variables:

>>> import os
>>> os.environ["VENUEPULSE_REPORT_LIMIT"] = "50"
>>> ReportingConfig.from_env().report_limit
50

"""

from __future__ import annotations

import dataclasses as dc
import datetime as dt
import os
import zoneinfo
from pathlib import Path

from venuepulse.pipeline.enrichment import (
    DEFAULT_CONCURRENCY,
    DEFAULT_SOURCES,
    EnrichmentSource,
    parse_sources,
)

from .models import VenueInfo

DEFAULT_REPORT_LIMIT = 20
DEFAULT_REFRESH_INTERVAL_S = 3600
DEFAULT_TIMEZONE = "America/New_York"


def _parse_positive_int(env_var: str, default: int) -> int:
    """Read a positive integer env var, falling back to a default."""
    raw = os.environ.get(env_var, "")
    if not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        msg = f"{env_var} must be an integer, got: {raw!r}"
        raise ValueError(msg) from exc
    if value < 1:
        msg = f"{env_var} must be positive, got: {value}"
        raise ValueError(msg)
    return value


def _env_text(env_var: str) -> str | None:
    value = os.environ.get(env_var, "").strip()
    return value or None


def resolve_timezone(name: str) -> dt.tzinfo:
    """Return the zone called ``name``.

    Raises
    ------
    ValueError
        If the zone is not known to the system tz database.

    """
    if name.upper() == "UTC":
        return dt.UTC
    try:
        return zoneinfo.ZoneInfo(name)
    except (zoneinfo.ZoneInfoNotFoundError, ValueError) as exc:
        msg = f"unknown timezone: {name!r}"
        raise ValueError(msg) from exc


@dc.dataclass(frozen=True, slots=True)
class ReportingConfig:
    """Settings shared by the CLI and the server.

    Attributes
    ----------
    report_limit
        Default number of upcoming events in a ticket report.
    enrichment_sources
        Secondary lookups performed for each event.
    enrichment_concurrency
        Maximum number of events enriched at the same time.
    refresh_interval_s
        Seconds between scheduled refreshes in the server.
    timezone
        IANA zone used for display dates.
    venue
        Static venue metadata.
    classification_path
        Optional YAML file overriding the classification keyword table.
    output_dir
        Directory receiving exported artefacts.

    """

    report_limit: int = DEFAULT_REPORT_LIMIT
    enrichment_sources: tuple[EnrichmentSource, ...] = DEFAULT_SOURCES
    enrichment_concurrency: int = DEFAULT_CONCURRENCY
    refresh_interval_s: int = DEFAULT_REFRESH_INTERVAL_S
    timezone: str = DEFAULT_TIMEZONE
    venue: VenueInfo = dc.field(default_factory=VenueInfo)
    classification_path: Path | None = None
    output_dir: Path = dc.field(default_factory=Path)

    @property
    def tz(self) -> dt.tzinfo:
        """Resolved display timezone."""
        return resolve_timezone(self.timezone)

    @classmethod
    def from_env(cls) -> ReportingConfig:
        """Create configuration from ``VENUEPULSE_*`` environment variables.

        Reads ``VENUEPULSE_REPORT_LIMIT``, ``VENUEPULSE_ENRICHMENT_SOURCES``
        (comma separated), ``VENUEPULSE_ENRICHMENT_CONCURRENCY``,
        ``VENUEPULSE_REFRESH_INTERVAL_S``, ``VENUEPULSE_TIMEZONE``,
        ``VENUEPULSE_VENUE_NAME``, ``VENUEPULSE_VENUE_LOCATION``,
        ``VENUEPULSE_VENUE_WEBSITE``, ``VENUEPULSE_CLASSIFICATION_PATH`` and
        ``VENUEPULSE_OUTPUT_DIR``.

        Raises
        ------
        ValueError
            If a numeric value is not a positive integer, a source name is
            unknown, or the timezone does not exist.

        """
        default_venue = VenueInfo()
        venue = VenueInfo(
            name=_env_text("VENUEPULSE_VENUE_NAME") or default_venue.name,
            location=_env_text("VENUEPULSE_VENUE_LOCATION") or default_venue.location,
            website=_env_text("VENUEPULSE_VENUE_WEBSITE") or default_venue.website,
        )
        raw_sources = os.environ.get("VENUEPULSE_ENRICHMENT_SOURCES")
        sources = (
            parse_sources(raw_sources.split(","))
            if raw_sources is not None
            else DEFAULT_SOURCES
        )
        timezone = _env_text("VENUEPULSE_TIMEZONE") or DEFAULT_TIMEZONE
        resolve_timezone(timezone)
        classification_path = _env_text("VENUEPULSE_CLASSIFICATION_PATH")
        output_dir = _env_text("VENUEPULSE_OUTPUT_DIR")

        return cls(
            report_limit=_parse_positive_int(
                "VENUEPULSE_REPORT_LIMIT", DEFAULT_REPORT_LIMIT
            ),
            enrichment_sources=sources,
            enrichment_concurrency=_parse_positive_int(
                "VENUEPULSE_ENRICHMENT_CONCURRENCY", DEFAULT_CONCURRENCY
            ),
            refresh_interval_s=_parse_positive_int(
                "VENUEPULSE_REFRESH_INTERVAL_S", DEFAULT_REFRESH_INTERVAL_S
            ),
            timezone=timezone,
            venue=venue,
            classification_path=(
                Path(classification_path) if classification_path else None
            ),
            output_dir=Path(output_dir) if output_dir else Path(),
        )
