"""Common time utilities."""

from __future__ import annotations

import datetime as dt
import math

_SECONDS_PER_DAY = 86_400


def utcnow() -> dt.datetime:
    """Return an aware UTC timestamp."""
    return dt.datetime.now(dt.UTC)


def parse_timestamp(value: object) -> dt.datetime | None:
    """Parse an upstream ISO-8601 timestamp into an aware UTC datetime.

    Returns ``None`` for missing or unparsable values; naive timestamps are
    assumed to be UTC.
    """
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip().replace("Z", "+00:00")
    try:
        parsed = dt.datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=dt.UTC)
    return parsed.astimezone(dt.UTC)


def days_until(start: dt.datetime | None, now: dt.datetime) -> int | None:
    """Return whole days from ``now`` to ``start``, rounded up.

    An event 2.1 days away is 3 days out; past events give zero or a
    negative count.
    """
    if start is None:
        return None
    delta = (start - now).total_seconds() / _SECONDS_PER_DAY
    return math.ceil(delta)
