"""Behavioural coverage for paginated fetching and partitioning."""

from __future__ import annotations

import asyncio
import datetime as dt
import typing as typ

import pytest
from pytest_bdd import given, parsers, scenario, then, when

from tests.helpers.event_api import NOW, event_payload, make_client
from venuepulse.pipeline.fetcher import EventFetcher

if typ.TYPE_CHECKING:
    from tests.helpers.event_api import FakeEventsApi
    from venuepulse.pipeline.fetcher import EventPartition


class PartitionContext(typ.TypedDict, total=False):
    """Shared mutable scenario state."""

    partition: EventPartition


@scenario("../event_partition.feature", "Upcoming and past events are split around now")
def test_split_around_now() -> None:
    """Wrap the pytest-bdd scenario for partitioning."""


@scenario("../event_partition.feature", "Undated events are kept out of upcoming and past")
def test_undated_events() -> None:
    """Wrap the pytest-bdd scenario for undated events."""


@scenario("../event_partition.feature", "Paging stops after a short page")
def test_paging_stops() -> None:
    """Wrap the pytest-bdd scenario for pagination."""


@pytest.fixture
def partition_context() -> PartitionContext:
    """Provide empty scenario state."""
    return {}


def _titles(raw: str) -> list[str]:
    return [title.strip() for title in raw.split(",")]


@given(parsers.parse("{count:d} dated events in the listing"), target_fixture="listing_api")
def given_dated_events(fake_api: FakeEventsApi, count: int) -> FakeEventsApi:
    """Fill the listing with one event per hour from now."""
    fake_api.events = [
        event_payload(f"e{i}", f"Event {i}", start=NOW + dt.timedelta(hours=i + 1))
        for i in range(count)
    ]
    return fake_api


@when("the listing is fetched")
def when_listing_fetched(
    listing_api: FakeEventsApi, partition_context: PartitionContext
) -> None:
    """Fetch every page and partition around the fixed clock."""

    async def _fetch() -> EventPartition:
        client = make_client(listing_api, page_size=100)
        async with client:
            return await EventFetcher(client, clock=lambda: NOW).fetch_partitioned()

    partition_context["partition"] = asyncio.run(_fetch())


@then(parsers.parse('the upcoming events are "{titles}"'))
def then_upcoming(partition_context: PartitionContext, titles: str) -> None:
    """Assert upcoming events, soonest first."""
    actual = [e.title for e in partition_context["partition"].upcoming]
    assert actual == _titles(titles), f"unexpected upcoming order {actual}"


@then(parsers.parse('the past events are "{titles}"'))
def then_past(partition_context: PartitionContext, titles: str) -> None:
    """Assert past events, most recent first."""
    actual = [e.title for e in partition_context["partition"].past]
    assert actual == _titles(titles), f"unexpected past order {actual}"


@then(parsers.parse('the undated events are "{titles}"'))
def then_undated(partition_context: PartitionContext, titles: str) -> None:
    """Assert events without a start date."""
    actual = [e.title for e in partition_context["partition"].undated]
    assert actual == _titles(titles), f"unexpected undated events {actual}"


@then(parsers.parse("{count:d} listing pages were requested"))
def then_pages_requested(listing_api: FakeEventsApi, count: int) -> None:
    """Assert the number of listing requests."""
    pages = listing_api.paths().count("/events/v1/events")
    assert pages == count, f"expected {count} pages, got {pages}"


@then(parsers.parse("{count:d} events were read"))
def then_events_read(partition_context: PartitionContext, count: int) -> None:
    """Assert the total number of events across the partition."""
    partition = partition_context["partition"]
    total = len(partition.upcoming) + len(partition.past) + len(partition.undated)
    assert total == count, f"expected {count} events, got {total}"
