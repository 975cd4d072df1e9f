"""Single-slot holder for the most recent report.

The slot always points at a complete, frozen :class:`CachedReport`.
Refreshes build a new snapshot and swap the reference, so concurrent
readers see either the previous report or the new one, never a mix.
"""

from __future__ import annotations

import datetime as dt
import typing as typ

import msgspec

from venuepulse.common.time import utcnow

from .models import Report

if typ.TYPE_CHECKING:
    import collections.abc as cabc


class CachedReport(msgspec.Struct, kw_only=True, frozen=True):
    """A report paired with the instant it entered the store."""

    report: Report
    last_updated: dt.datetime


class ReportStore:
    """Hold at most one report; ``set`` replaces it atomically."""

    def __init__(self, *, clock: cabc.Callable[[], dt.datetime] = utcnow) -> None:
        """Initialise an empty store."""
        self._clock = clock
        self._current: CachedReport | None = None

    def get(self) -> CachedReport | None:
        """Return the current snapshot, or ``None`` before the first set."""
        return self._current

    def set(self, report: Report) -> CachedReport:
        """Replace the current snapshot and return the new one."""
        cached = CachedReport(report=report, last_updated=self._clock())
        self._current = cached
        return cached

    @property
    def has_data(self) -> bool:
        """True once a report has been stored."""
        return self._current is not None


__all__ = ["CachedReport", "ReportStore"]
