"""Unit tests for ReportingConfig environment parsing."""

from __future__ import annotations

import datetime as dt
from pathlib import Path

import pytest

from venuepulse.pipeline.enrichment import DEFAULT_SOURCES, EnrichmentSource
from venuepulse.reporting.config import (
    DEFAULT_REPORT_LIMIT,
    ReportingConfig,
    resolve_timezone,
)


class TestReportingConfigFromEnv:
    """Tests for ReportingConfig.from_env."""

    def test_defaults(self) -> None:
        """Without environment variables the defaults apply."""
        config = ReportingConfig.from_env()

        assert config.report_limit == DEFAULT_REPORT_LIMIT
        assert config.enrichment_sources == DEFAULT_SOURCES
        assert config.enrichment_concurrency == 5
        assert config.refresh_interval_s == 3600
        assert config.timezone == "America/New_York"
        assert config.venue.name == "The Listening Booth"
        assert config.classification_path is None
        assert config.output_dir == Path()

    def test_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Every setting can be overridden."""
        monkeypatch.setenv("VENUEPULSE_REPORT_LIMIT", "5")
        monkeypatch.setenv("VENUEPULSE_ENRICHMENT_SOURCES", "tickets, orders")
        monkeypatch.setenv("VENUEPULSE_ENRICHMENT_CONCURRENCY", "2")
        monkeypatch.setenv("VENUEPULSE_REFRESH_INTERVAL_S", "60")
        monkeypatch.setenv("VENUEPULSE_TIMEZONE", "UTC")
        monkeypatch.setenv("VENUEPULSE_VENUE_NAME", "Side Room")
        monkeypatch.setenv("VENUEPULSE_CLASSIFICATION_PATH", "rules.yaml")
        monkeypatch.setenv("VENUEPULSE_OUTPUT_DIR", "out")

        config = ReportingConfig.from_env()

        assert config.report_limit == 5
        assert config.enrichment_sources == (
            EnrichmentSource.TICKETS,
            EnrichmentSource.ORDERS,
        )
        assert config.enrichment_concurrency == 2
        assert config.refresh_interval_s == 60
        assert config.tz is dt.UTC
        assert config.venue.name == "Side Room"
        assert config.venue.location == "Lewes, Delaware", "unset fields keep defaults"
        assert config.classification_path == Path("rules.yaml")
        assert config.output_dir == Path("out")

    def test_empty_source_list_disables_enrichment(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """An empty source list turns every lookup off."""
        monkeypatch.setenv("VENUEPULSE_ENRICHMENT_SOURCES", "")
        assert ReportingConfig.from_env().enrichment_sources == ()

    @pytest.mark.parametrize(
        ("name", "value"),
        [
            ("VENUEPULSE_REPORT_LIMIT", "0"),
            ("VENUEPULSE_REPORT_LIMIT", "many"),
            ("VENUEPULSE_ENRICHMENT_CONCURRENCY", "-1"),
            ("VENUEPULSE_REFRESH_INTERVAL_S", "1.5"),
            ("VENUEPULSE_ENRICHMENT_SOURCES", "rsvps,waitlist"),
            ("VENUEPULSE_TIMEZONE", "Mars/Olympus_Mons"),
        ],
    )
    def test_invalid_values_raise(
        self, monkeypatch: pytest.MonkeyPatch, name: str, value: str
    ) -> None:
        """Malformed values are rejected with ValueError."""
        monkeypatch.setenv(name, value)
        with pytest.raises(ValueError, match=r"VENUEPULSE_|unknown"):
            ReportingConfig.from_env()


def test_resolve_timezone_uses_zoneinfo() -> None:
    """Named zones resolve through the tz database."""
    zone = resolve_timezone("America/New_York")
    summer = dt.datetime(2024, 7, 8, 12, 0, tzinfo=dt.UTC).astimezone(zone)
    assert summer.utcoffset() == dt.timedelta(hours=-4)
