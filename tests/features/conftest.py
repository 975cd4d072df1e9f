"""Shared steps for behavioural scenarios over the in-memory event service."""

from __future__ import annotations

import typing as typ

from pytest_bdd import given, parsers

from tests.helpers.event_api import event_payload

if typ.TYPE_CHECKING:
    from tests.helpers.event_api import FakeEventsApi


@given(
    "the venue listing with three upcoming events and one past event",
    target_fixture="listing_api",
)
def given_venue_listing(venue_api: FakeEventsApi) -> FakeEventsApi:
    """Serve the standard venue listing."""
    return venue_api


@given(parsers.parse('an undated event "{title}"'))
def given_undated_event(listing_api: FakeEventsApi, title: str) -> None:
    """Add an event without a start date."""
    listing_api.events.append(event_payload(title.lower().replace(" ", "-"), title))
