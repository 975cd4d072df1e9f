"""Closed sets of classification tags."""

from __future__ import annotations

import enum


class EventType(enum.StrEnum):
    """Kind of event inferred from its title."""

    CONCERT = "Concert"
    OPEN_MIC = "Open Mic"
    JAM_SESSION = "Jam Session"
    WORKSHOP = "Workshop"
    FUNDRAISER = "Fundraiser"


class SalesStatus(enum.StrEnum):
    """Ticket sales health for one event."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    URGENT = "urgent"


class PopularityStatus(enum.StrEnum):
    """Attendance interest from combined RSVPs and tickets."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFO = "info"


RECURRING_STATUS = "recurring"
