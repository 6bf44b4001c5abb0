"""Tests for the server-side paged trip history."""

from datetime import datetime

import pytest

from tests.builders import NOW, make_trip
from trip_tracker.application.services import TripHistoryService
from trip_tracker.domain.models import Trip, TripPage, TripQuery, TripStatus


class MockTripRepository:
    """Repository that pages a fixed trip list and records the queries it receives."""

    def __init__(self, trips: list[Trip]) -> None:
        self.trips = trips
        self.queries: list[TripQuery] = []

    async def list_trips(self, query: TripQuery, now: datetime) -> TripPage:  # noqa: ARG002
        self.queries.append(query)
        start = (query.page - 1) * query.page_size
        return TripPage(
            items=self.trips[start : start + query.page_size], total_count=len(self.trips)
        )

    async def list_active_trips(self, dispatcher_id: int | None = None) -> list[Trip]:
        return [t for t in self.trips if dispatcher_id in (None, t.dispatcher_id)]


@pytest.mark.asyncio
async def test_fetch_page_passes_query_to_repository() -> None:
    """Given a history query, when fetching, then the repository receives it unchanged."""
    repo = MockTripRepository([make_trip(trip_id=i) for i in range(1, 24)])
    service = TripHistoryService(repo)
    query = TripQuery(search="ABC", status=TripStatus.COMPLETED, page=2, page_size=10)

    page = await service.fetch_page(query, NOW)

    assert repo.queries == [query]
    assert [t.id for t in page.items] == list(range(11, 21))
    assert page.pagination is not None
    assert page.pagination.total_pages == 3


@pytest.mark.asyncio
async def test_page_past_end_is_refetched_as_last_page() -> None:
    """Given page 9 of 3, when fetching, then the last page is requested instead."""
    repo = MockTripRepository([make_trip(trip_id=i) for i in range(1, 24)])
    service = TripHistoryService(repo)

    page = await service.fetch_page(TripQuery(page=9, page_size=10), NOW)

    assert [q.page for q in repo.queries] == [9, 3]
    assert [t.id for t in page.items] == [21, 22, 23]
    assert page.pagination is not None
    assert page.pagination.current_page == 3


@pytest.mark.asyncio
async def test_non_positive_page_and_size_are_raised_to_one() -> None:
    """Given page 0 and page size 0, when fetching, then both are sent as 1."""
    repo = MockTripRepository([make_trip(trip_id=1), make_trip(trip_id=2)])

    await TripHistoryService(repo).fetch_page(TripQuery(page=0, page_size=0), NOW)

    assert repo.queries[0].page == 1
    assert repo.queries[0].page_size == 1


@pytest.mark.asyncio
async def test_fetch_view_wraps_rows() -> None:
    """Given a page of trips, when fetching the view, then rows and page statistics are built."""
    repo = MockTripRepository([make_trip(trip_id=i) for i in range(1, 4)])

    view = await TripHistoryService(repo).fetch_view(TripQuery(), NOW)

    assert [row.trip.id for row in view.rows] == [1, 2, 3]
    assert view.fleet.total_trips == 3
    assert view.last_refreshed_at == NOW


@pytest.mark.asyncio
async def test_empty_history() -> None:
    """Given no trips, when fetching, then an empty first page is returned."""
    repo = MockTripRepository([])

    page = await TripHistoryService(repo).fetch_page(TripQuery(page=4), NOW)

    assert page.items == []
    assert page.total_count == 0
    assert page.pagination is not None
    assert page.pagination.current_page == 1
