"""Tests for RefreshController behavior."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from tests.builders import NOW, make_stops, make_trip
from trip_tracker.application.services import RefreshController, TripLifecycle
from trip_tracker.application.services.refresh_controller import extract_error_details
from trip_tracker.domain.exceptions import (
    InvalidStateTransition,
    TripFetchError,
    TripNotFoundError,
)
from trip_tracker.domain.models import ErrorDetails, StopStatus, Trip, TripStatus


def make_controller(fetcher: AsyncMock, **kwargs: object) -> RefreshController:
    """Create a controller with a fixed clock and a long interval."""
    return RefreshController(fetcher, interval_seconds=3600, clock=lambda: NOW, **kwargs)


@pytest.mark.asyncio
async def test_refresh_replaces_collection() -> None:
    """Given a fetcher, when refreshing, then the collection and refresh time are replaced."""
    trips = [make_trip(trip_id=1), make_trip(trip_id=2)]
    controller = make_controller(AsyncMock(return_value=trips))

    assert await controller.refresh() is True

    assert controller.trips == tuple(trips)
    assert controller.last_refreshed_at == NOW
    assert controller.last_error is None
    assert not controller.is_fetching


@pytest.mark.asyncio
async def test_concurrent_refreshes_fetch_once() -> None:
    """Given a slow fetch in flight, when triggering refresh again, then only one fetch runs."""
    release = asyncio.Event()
    calls = 0

    async def slow_fetch() -> list[Trip]:
        nonlocal calls
        calls += 1
        await release.wait()
        return [make_trip()]

    controller = RefreshController(slow_fetch, interval_seconds=3600, clock=lambda: NOW)

    first = asyncio.create_task(controller.refresh())
    await asyncio.sleep(0)
    assert controller.is_fetching

    second = await controller.refresh()
    release.set()

    assert second is False
    assert await first is True
    assert calls == 1


@pytest.mark.asyncio
async def test_failed_refresh_keeps_previous_data() -> None:
    """Given a successful refresh, when the next fetch fails, then previous trips are kept."""
    trips = [make_trip()]
    fetcher = AsyncMock(side_effect=[trips, TripFetchError("boom", status_code=503)])
    failures: list[ErrorDetails] = []
    controller = make_controller(fetcher, on_failure=failures.append)

    await controller.refresh()
    assert await controller.refresh() is False

    assert controller.trips == tuple(trips)
    assert controller.last_refreshed_at == NOW
    assert controller.last_error == ErrorDetails(status_code=503, reason="Service unavailable")
    assert failures == [controller.last_error]


@pytest.mark.asyncio
async def test_success_after_failure_clears_error() -> None:
    """Given a failed refresh, when the next fetch succeeds, then the error is cleared."""
    fetcher = AsyncMock(side_effect=[TimeoutError(), [make_trip()]])
    controller = make_controller(fetcher)

    await controller.refresh()
    assert controller.last_error is not None
    assert controller.last_error.reason == "Request timed out"

    await controller.refresh()
    assert controller.last_error is None


@pytest.mark.asyncio
async def test_on_refresh_callback_receives_controller() -> None:
    """Given an async refresh callback, when refreshing, then it is awaited with the controller."""
    received: list[RefreshController] = []

    async def on_refresh(controller: RefreshController) -> None:
        received.append(controller)

    controller = make_controller(AsyncMock(return_value=[]), on_refresh=on_refresh)
    await controller.refresh()

    assert received == [controller]


@pytest.mark.asyncio
async def test_failing_callback_does_not_break_refresh() -> None:
    """Given a callback that raises, when refreshing, then the refresh still succeeds."""

    def on_refresh(_controller: RefreshController) -> None:
        raise RuntimeError("display broke")

    controller = make_controller(AsyncMock(return_value=[make_trip()]), on_refresh=on_refresh)

    assert await controller.refresh() is True
    assert len(controller.trips) == 1


@pytest.mark.asyncio
async def test_start_refreshes_immediately_and_stop_is_idempotent() -> None:
    """Given a started controller, when stopping twice, then both calls succeed."""
    fetcher = AsyncMock(return_value=[make_trip()])
    controller = make_controller(fetcher)

    await controller.start()
    await asyncio.sleep(0.01)
    assert controller.is_running
    assert fetcher.await_count == 1

    await controller.stop()
    await controller.stop()
    assert not controller.is_running


@pytest.mark.asyncio
async def test_start_twice_keeps_single_loop() -> None:
    """Given a running controller, when starting again, then no second loop is created."""
    fetcher = AsyncMock(return_value=[])
    controller = make_controller(fetcher)

    await controller.start()
    task = controller._task
    await controller.start()

    assert controller._task is task
    await controller.stop()


@pytest.mark.asyncio
async def test_context_manager_stops_timer() -> None:
    """Given a controller used as a context manager, when leaving the block, then it is stopped."""
    controller = make_controller(AsyncMock(return_value=[]))

    async with controller:
        assert controller.is_running

    assert not controller.is_running


@pytest.mark.asyncio
async def test_result_arriving_after_stop_is_discarded() -> None:
    """Given a fetch in flight, when the controller stops, then the late result is discarded."""
    release = asyncio.Event()

    async def slow_fetch() -> list[Trip]:
        await release.wait()
        return [make_trip()]

    on_refresh = AsyncMock()
    controller = RefreshController(
        slow_fetch, interval_seconds=3600, on_refresh=on_refresh, clock=lambda: NOW
    )
    refresh = asyncio.create_task(controller.refresh())
    await asyncio.sleep(0)

    await controller.stop()
    release.set()

    assert await refresh is False
    assert controller.trips == ()
    assert controller.last_refreshed_at is None
    on_refresh.assert_not_awaited()


@pytest.mark.asyncio
async def test_restart_fetches_while_old_fetch_is_outstanding() -> None:
    """Given a fetch stuck across stop, when restarting, then the new run fetches immediately."""
    release = asyncio.Event()
    calls = 0

    async def fetch() -> list[Trip]:
        nonlocal calls
        calls += 1
        if calls == 1:
            await release.wait()
            return [make_trip(trip_id=1)]
        return [make_trip(trip_id=2)]

    controller = RefreshController(fetch, interval_seconds=3600, clock=lambda: NOW)

    await controller.start()
    await asyncio.sleep(0.01)
    await controller.stop()
    await controller.start()
    await asyncio.sleep(0.01)
    release.set()
    await asyncio.sleep(0.01)

    assert calls == 2
    assert [trip.id for trip in controller.trips] == [2]
    assert controller.last_refreshed_at == NOW
    await controller.stop()


@pytest.mark.asyncio
async def test_staleness() -> None:
    """Given a refresh at NOW, when asking for staleness later, then the elapsed time is returned."""
    controller = make_controller(AsyncMock(return_value=[]))
    assert controller.staleness() is None

    await controller.refresh()

    assert controller.staleness(NOW.replace(minute=35)).total_seconds() == 300


def test_interval_must_be_positive() -> None:
    """Given a zero interval, when creating a controller, then a ValueError is raised."""
    with pytest.raises(ValueError, match="positive"):
        RefreshController(AsyncMock(), interval_seconds=0)


@pytest.mark.asyncio
async def test_apply_updates_held_trip() -> None:
    """Given a held InProgress trip, when applying a delivery, then only that trip changes."""
    lifecycle = TripLifecycle(clock=lambda: NOW)
    trip = lifecycle.dispatch(make_trip(trip_id=1))
    other = make_trip(trip_id=2)
    controller = make_controller(AsyncMock(return_value=[trip, other]))
    await controller.refresh()

    updated = await controller.apply(1, lambda t: lifecycle.deliver_stop(t, 1))

    assert controller.trips == (updated, other)
    assert updated.delivered_stop_count == 1


@pytest.mark.asyncio
async def test_apply_rejected_command_leaves_collection() -> None:
    """Given a rejected command, when applying it, then the collection is unchanged."""
    lifecycle = TripLifecycle(clock=lambda: NOW)
    trip = make_trip(
        status=TripStatus.COMPLETED, stops=make_stops(StopStatus.DELIVERED, StopStatus.DELIVERED)
    )
    controller = make_controller(AsyncMock(return_value=[trip]))
    await controller.refresh()

    with pytest.raises(InvalidStateTransition):
        await controller.apply(1, lifecycle.cancel)

    assert controller.trips == (trip,)


@pytest.mark.asyncio
async def test_apply_unknown_trip() -> None:
    """Given no trip with the id, when applying a command, then TripNotFoundError is raised."""
    controller = make_controller(AsyncMock(return_value=[]))

    with pytest.raises(TripNotFoundError):
        await controller.apply(42, lambda t: t)


@pytest.mark.parametrize(
    ("error", "status_code", "reason"),
    [
        (TripFetchError("x", status_code=401), 401, "Not authorized"),
        (TripFetchError("x", status_code=429), 429, "Rate limit exceeded"),
        (TripFetchError("x", status_code=502), 502, "Bad gateway (server error)"),
        (TripFetchError("x", status_code=504), 504, "Gateway timeout"),
        (TripFetchError("x", status_code=418), 418, "HTTP 418"),
        (TripFetchError("Trip API reported failure"), None, "Trip API reported failure"),
        (RuntimeError("upstream failed (HTTP 503)"), 503, "Service unavailable"),
        (RuntimeError("nope"), None, "Unknown error"),
    ],
)
def test_extract_error_details(error: Exception, status_code: int | None, reason: str) -> None:
    """Given an exception, when extracting details, then status and reason are derived."""
    details = extract_error_details(error)

    assert details.status_code == status_code
    assert details.reason == reason
