"""Build the reporting service and app dependencies from the environment.

Both the CLI and the ASGI runtime assemble the pipeline here so the two
drivers always share one configuration path.

Usage
-----
Build a service for the CLI::

    from venuepulse.api.factory import build_reporting_service

    service = build_reporting_service()

"""

from __future__ import annotations

import typing as typ

from venuepulse.classification import (
    DEFAULT_CLASSIFICATION_CONFIG,
    ClassificationConfig,
    load_classification_config,
)
from venuepulse.pipeline.enrichment import EventEnricher
from venuepulse.pipeline.fetcher import EventFetcher
from venuepulse.reporting.config import ReportingConfig
from venuepulse.reporting.observability import ReportingEventLogger
from venuepulse.reporting.service import ReportingService, ReportingServiceDependencies
from venuepulse.upstream.client import EventsApiClient, UpstreamConfig

if typ.TYPE_CHECKING:
    import httpx

    from venuepulse.api.app import AppDependencies

__all__ = ["build_app_dependencies", "build_reporting_service"]


def _classification(config: ReportingConfig) -> ClassificationConfig:
    if config.classification_path is None:
        return DEFAULT_CLASSIFICATION_CONFIG
    return load_classification_config(config.classification_path)


def build_reporting_service(
    upstream_config: UpstreamConfig | None = None,
    reporting_config: ReportingConfig | None = None,
    *,
    http_client: httpx.AsyncClient | None = None,
) -> ReportingService:
    """Build a ``ReportingService`` from environment configuration.

    Parameters
    ----------
    upstream_config
        Event service settings; read from the environment when omitted.
    reporting_config
        Reporting settings; read from the environment when omitted.
    http_client
        Optional pre-built HTTP client, mainly for tests.

    Returns
    -------
    ReportingService
        Service owning its API client; call ``aclose`` when done.

    Raises
    ------
    UpstreamConfigError
        If the event service credentials are missing.
    ValueError
        If any setting is malformed.

    """
    upstream = upstream_config or UpstreamConfig.from_env()
    config = reporting_config or ReportingConfig.from_env()
    classification = _classification(config)

    client = EventsApiClient(upstream, http_client=http_client)
    dependencies = ReportingServiceDependencies(
        fetcher=EventFetcher(client),
        enricher=EventEnricher(
            client,
            sources=config.enrichment_sources,
            concurrency=config.enrichment_concurrency,
        ),
        client=client,
    )
    return ReportingService(
        dependencies,
        config=config,
        classification=classification,
        event_logger=ReportingEventLogger(),
    )


def build_app_dependencies() -> AppDependencies:
    """Assemble the full server: pipeline, store, refresher and email."""
    from venuepulse.api.app import AppDependencies
    from venuepulse.notify.email import EmailConfig, EmailNotifier
    from venuepulse.reporting.scheduler import DailyDigest, ReportRefresher
    from venuepulse.reporting.store import ReportStore

    config = ReportingConfig.from_env()
    service = build_reporting_service(reporting_config=config)
    email_config = EmailConfig.from_env()
    notifier = EmailNotifier(email_config)
    event_logger = ReportingEventLogger()
    digest = (
        DailyDigest(
            notifier,
            hour=email_config.digest_hour,
            tz=config.tz,
            event_logger=event_logger,
        )
        if email_config.configured and email_config.recipients
        else None
    )
    store = ReportStore()
    refresher = ReportRefresher(
        service,
        store,
        limit=config.report_limit,
        interval_s=config.refresh_interval_s,
        digest=digest,
        event_logger=event_logger,
    )
    return AppDependencies(
        reporting_service=service,
        store=store,
        refresher=refresher,
        notifier=notifier,
        venue=config.venue,
        report_limit=config.report_limit,
    )
