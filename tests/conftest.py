"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import datetime as dt
import os

import pytest

from tests.helpers.event_api import (
    NOW,
    FakeEventsApi,
    event_payload,
    rsvp_list,
    ticket_list,
)

_ENV_PREFIX = "VENUEPULSE_"


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove ``VENUEPULSE_*`` variables so tests start from defaults."""
    for name in list(os.environ):
        if name.startswith(_ENV_PREFIX):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fake_api() -> FakeEventsApi:
    """Return an empty in-memory event service."""
    return FakeEventsApi()


@pytest.fixture
def venue_api() -> FakeEventsApi:
    """Return a service holding three upcoming events and one past event.

    Open Mic Night is in two days with 5 RSVPs and no tickets; Jazz Night is
    in ten days with 12 paid tickets; Fundraiser Gala is in twenty days with
    30 paid tickets. Spring Recital happened a month ago.
    """
    api = FakeEventsApi(
        events=[
            event_payload(
                "jazz", "Jazz Night", start=NOW + dt.timedelta(days=10), slug="jazz-night"
            ),
            event_payload("mic", "Open Mic Night", start=NOW + dt.timedelta(days=2)),
            event_payload("gala", "Fundraiser Gala", start=NOW + dt.timedelta(days=20)),
            event_payload("recital", "Spring Recital", start=NOW - dt.timedelta(days=30)),
        ]
    )
    api.rsvps["mic"] = rsvp_list(5)
    api.tickets["jazz"] = ticket_list(paid=12)
    api.tickets["gala"] = ticket_list(paid=30)
    api.tickets["recital"] = ticket_list(paid=8, free=2)
    return api
