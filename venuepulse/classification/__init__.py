"""Event type and status classification."""

from .classifier import (
    classify_popularity,
    classify_sales_status,
    classify_type,
    display_status,
    is_recurring,
    is_rsvp_only,
    status_text,
)
from .config import (
    DEFAULT_CLASSIFICATION_CONFIG,
    ClassificationConfig,
    ClassificationConfigError,
    PopularityThresholds,
    SalesThresholds,
    TypeRule,
    load_classification_config,
)
from .models import RECURRING_STATUS, EventType, PopularityStatus, SalesStatus

__all__ = [
    "DEFAULT_CLASSIFICATION_CONFIG",
    "RECURRING_STATUS",
    "ClassificationConfig",
    "ClassificationConfigError",
    "EventType",
    "PopularityStatus",
    "PopularityThresholds",
    "SalesStatus",
    "SalesThresholds",
    "TypeRule",
    "classify_popularity",
    "classify_sales_status",
    "classify_type",
    "display_status",
    "is_recurring",
    "is_rsvp_only",
    "load_classification_config",
    "status_text",
]
