"""Typed records parsed from event service payloads.

The service returns loosely shaped JSON; absent fields are read as empty
values rather than errors so a partially populated event still flows
through the pipeline.
"""

from __future__ import annotations

import datetime as dt
import typing as typ

import msgspec

from venuepulse.common.time import parse_timestamp

_DESCRIPTION_FIELDS = ("about", "description", "summary", "details")


class Event(msgspec.Struct, kw_only=True, frozen=True):
    """One event as listed by the event service."""

    event_id: str
    title: str
    start: dt.datetime | None = None
    formatted_date: str | None = None
    venue_name: str | None = None
    address: str | None = None
    description: str | None = None
    slug: str | None = None
    status: str | None = None
    page_url: str | None = None


def _mapping(value: object) -> dict[str, typ.Any]:
    return value if isinstance(value, dict) else {}


def _text(value: object) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _page_url(raw: dict[str, typ.Any]) -> str | None:
    page = raw.get("eventPageUrl")
    if isinstance(page, dict):
        base = _text(page.get("base")) or ""
        path = _text(page.get("path")) or ""
        return (base + path) or None
    return _text(page)


def event_from_payload(raw: dict[str, typ.Any]) -> Event:
    """Build an :class:`Event` from one entry of the ``events`` array.

    The start timestamp is read from ``scheduling.config.startDate`` with a
    fallback to ``scheduling.startDate``; the venue comes from ``location``
    and the description from the first non-empty text field.
    """
    scheduling = _mapping(raw.get("scheduling"))
    schedule_config = _mapping(scheduling.get("config"))
    location = _mapping(raw.get("location"))
    start_value = schedule_config.get("startDate") or scheduling.get("startDate")

    description = next(
        (text for text in (_text(raw.get(f)) for f in _DESCRIPTION_FIELDS) if text),
        None,
    )

    return Event(
        event_id=str(raw.get("id") or ""),
        title=_text(raw.get("title")) or "Untitled event",
        start=parse_timestamp(start_value),
        formatted_date=_text(scheduling.get("formatted")),
        venue_name=_text(location.get("name")),
        address=_text(location.get("address")),
        description=description,
        slug=_text(raw.get("slug")),
        status=_text(raw.get("status")),
        page_url=_page_url(raw),
    )


def count_from_payload(
    payload: dict[str, typ.Any], items_key: str
) -> tuple[int, list[typ.Any]]:
    """Return ``(count, items)`` for a sub-resource response.

    ``total`` wins when present; otherwise the length of ``items_key`` is
    used. Missing or malformed values count as zero.
    """
    items = payload.get(items_key)
    item_list = items if isinstance(items, list) else []
    total = payload.get("total")
    if isinstance(total, int) and not isinstance(total, bool) and total >= 0:
        return (total, item_list)
    return (len(item_list), item_list)


__all__ = ["Event", "count_from_payload", "event_from_payload"]
