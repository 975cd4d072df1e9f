"""Title keyword and count threshold classification for events."""

from __future__ import annotations

import typing as typ

from .config import DEFAULT_CLASSIFICATION_CONFIG, ClassificationConfig
from .models import RECURRING_STATUS, EventType, PopularityStatus, SalesStatus

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .config import PopularityThresholds, SalesThresholds

_POPULARITY_TEXT = {
    PopularityStatus.HIGH: "High Interest",
    PopularityStatus.MEDIUM: "Good Interest",
    PopularityStatus.LOW: "Some Interest",
    PopularityStatus.INFO: "Event Scheduled",
}


def _normalise(text: str | None) -> str:
    return (text or "").lower()


def _contains_any(title: str, keywords: cabc.Iterable[str]) -> bool:
    return any(keyword.lower() in title for keyword in keywords if keyword)


def classify_type(
    title: str | None,
    config: ClassificationConfig = DEFAULT_CLASSIFICATION_CONFIG,
) -> EventType:
    """Return the event type for ``title``.

    Rules are tried in order and the first matching keyword wins, so
    "Open Mic Jam" is an Open Mic, never a Jam Session.

    Examples
    --------
    >>> classify_type("Open Mic Night")
    <EventType.OPEN_MIC: 'Open Mic'>
    >>> classify_type("Random Band Concert")
    <EventType.CONCERT: 'Concert'>

    """
    normalised = _normalise(title)
    for rule in config.type_rules:
        if _contains_any(normalised, rule.keywords):
            return rule.event_type
    return config.default_type


def classify_sales_status(
    tickets_sold: int,
    days_until_event: int | None,
    *,
    ticketed: bool = True,
    thresholds: SalesThresholds = DEFAULT_CLASSIFICATION_CONFIG.sales,
) -> SalesStatus:
    """Return the sales status for an event.

    Parameters
    ----------
    tickets_sold
        Tickets sold so far.
    days_until_event
        Whole days until the event starts, or ``None`` when undated.
    ticketed
        ``False`` for RSVP-only and free events, which are never urgent.
    thresholds
        Ticket and day cut-offs.

    Returns
    -------
    SalesStatus
        ``urgent`` for a ticketed event within ``urgent_days`` with no
        sales, otherwise ``high``, ``medium`` or ``low`` by ticket count.

    """
    if (
        ticketed
        and tickets_sold == 0
        and days_until_event is not None
        and days_until_event <= thresholds.urgent_days
    ):
        return SalesStatus.URGENT
    if tickets_sold >= thresholds.high:
        return SalesStatus.HIGH
    if tickets_sold >= thresholds.medium:
        return SalesStatus.MEDIUM
    return SalesStatus.LOW


def classify_popularity(
    attendance: int,
    thresholds: PopularityThresholds = DEFAULT_CLASSIFICATION_CONFIG.popularity,
) -> PopularityStatus:
    """Return interest level for combined RSVP and ticket attendance."""
    if attendance > thresholds.high:
        return PopularityStatus.HIGH
    if attendance > thresholds.medium:
        return PopularityStatus.MEDIUM
    if attendance > 0:
        return PopularityStatus.LOW
    return PopularityStatus.INFO


def is_recurring(
    title: str | None,
    config: ClassificationConfig = DEFAULT_CLASSIFICATION_CONFIG,
) -> bool:
    """Return True when ``title`` names a regular recurring event."""
    return _contains_any(_normalise(title), config.recurring_keywords)


def is_rsvp_only(
    title: str | None,
    config: ClassificationConfig = DEFAULT_CLASSIFICATION_CONFIG,
) -> bool:
    """Return True when ``title`` names an event that takes RSVPs only."""
    return _contains_any(_normalise(title), config.rsvp_only_keywords)


def display_status(sales_status: SalesStatus, *, recurring: bool) -> str:
    """Return the status shown to people; recurring wins over sales."""
    return RECURRING_STATUS if recurring else str(sales_status)


def status_text(
    popularity: PopularityStatus,
    days_until_event: int | None,
    *,
    recurring: bool,
    soon_days: int = DEFAULT_CLASSIFICATION_CONFIG.popularity.soon_days,
) -> str:
    """Return the human label for a popularity status."""
    text = "Regular Event" if recurring else _POPULARITY_TEXT[popularity]
    if days_until_event is not None and 0 <= days_until_event <= soon_days:
        text = f"{text} - Coming Soon!"
    return text


__all__ = [
    "classify_popularity",
    "classify_sales_status",
    "classify_type",
    "display_status",
    "is_recurring",
    "is_rsvp_only",
    "status_text",
]
