"""Report building, the pipeline driver and the cached report store."""

from .builder import (
    DEFAULT_REPORT_LIMITS,
    ReportLimits,
    build_report,
    present_event,
    summarize,
)
from .config import ReportingConfig
from .errors import ReportGenerationError, ReportingError, ReportUnavailableError
from .models import (
    PresentedEvent,
    Report,
    ReportScope,
    ReportSummary,
    TicketKind,
    TopSeller,
    VenueInfo,
)
from .observability import ReportingEventLogger, ReportingEventType
from .scheduler import DailyDigest, ReportRefresher
from .service import ReportingService, ReportingServiceDependencies
from .store import CachedReport, ReportStore

__all__ = [
    "DEFAULT_REPORT_LIMITS",
    "CachedReport",
    "DailyDigest",
    "PresentedEvent",
    "Report",
    "ReportGenerationError",
    "ReportLimits",
    "ReportRefresher",
    "ReportScope",
    "ReportStore",
    "ReportSummary",
    "ReportUnavailableError",
    "ReportingConfig",
    "ReportingError",
    "ReportingEventLogger",
    "ReportingEventType",
    "ReportingService",
    "ReportingServiceDependencies",
    "TicketKind",
    "TopSeller",
    "VenueInfo",
    "build_report",
    "present_event",
    "summarize",
]
