"""Tests for the trip and stop lifecycle."""

from datetime import timedelta

import pytest

from tests.builders import NOW, make_stops, make_trip
from trip_tracker.application.services import TripLifecycle, trip_progress
from trip_tracker.domain.exceptions import InvalidStateTransition
from trip_tracker.domain.models import Stop, StopStatus, TripStatus


@pytest.fixture
def lifecycle() -> TripLifecycle:
    """Create a lifecycle with a fixed clock."""
    return TripLifecycle(clock=lambda: NOW)


def test_dispatch_starts_trip_and_first_stop(lifecycle: TripLifecycle) -> None:
    """Given a Created trip, when dispatching, then it is InProgress with the first stop in transit."""
    trip = make_trip(stops=make_stops(StopStatus.PENDING, StopStatus.PENDING, StopStatus.PENDING))

    dispatched = lifecycle.dispatch(trip)

    assert dispatched.status == TripStatus.IN_PROGRESS
    assert dispatched.departure_at == NOW
    assert [s.status for s in dispatched.stops] == [
        StopStatus.IN_TRANSIT,
        StopStatus.PENDING,
        StopStatus.PENDING,
    ]
    # Original is untouched
    assert trip.status == TripStatus.CREATED


def test_dispatch_without_stops_is_rejected(lifecycle: TripLifecycle) -> None:
    """Given a Created trip without stops, when dispatching, then the transition is rejected."""
    with pytest.raises(InvalidStateTransition, match="no stops"):
        lifecycle.dispatch(make_trip(stops=()))


def test_delivering_every_stop_completes_trip(lifecycle: TripLifecycle) -> None:
    """Given an InProgress trip, when every stop is resolved, then the trip completes in the same step."""
    trip = lifecycle.dispatch(make_trip(stops=make_stops(StopStatus.PENDING, StopStatus.PENDING)))
    later = NOW + timedelta(hours=2)

    trip = lifecycle.deliver_stop(trip, 1)
    assert trip.status == TripStatus.IN_PROGRESS
    assert trip.current_stop is not None
    assert trip.current_stop.id == 2

    trip = lifecycle.fail_stop(trip, 2, at=later)

    assert trip.status == TripStatus.COMPLETED
    assert trip.completed_at == later
    assert trip.current_stop is None
    assert trip.delivered_stop_count == 1
    assert trip.failed_stop_count == 1


def test_delivered_stop_records_delivery_time(lifecycle: TripLifecycle) -> None:
    """Given a stop in transit, when delivered, then its delivery time is recorded."""
    trip = lifecycle.dispatch(make_trip())

    trip = lifecycle.deliver_stop(trip, 1)

    stop = trip.find_stop(1)
    assert stop is not None
    assert stop.status == StopStatus.DELIVERED
    assert stop.delivered_at == NOW


def test_failed_stop_has_no_delivery_time(lifecycle: TripLifecycle) -> None:
    """Given a stop in transit, when failed, then no delivery time is set."""
    trip = lifecycle.fail_stop(lifecycle.dispatch(make_trip()), 1)

    stop = trip.find_stop(1)
    assert stop is not None
    assert stop.delivered_at is None


def test_delivered_stop_cannot_return_to_pending(lifecycle: TripLifecycle) -> None:
    """Given a Delivered stop, when moving it back to Pending, then the transition is rejected."""
    trip = lifecycle.deliver_stop(lifecycle.dispatch(make_trip()), 1)

    with pytest.raises(InvalidStateTransition) as exc_info:
        lifecycle.transition_stop(trip, 1, StopStatus.PENDING)

    assert exc_info.value.entity == "stop"
    assert exc_info.value.from_status == StopStatus.DELIVERED
    assert exc_info.value.to_status == StopStatus.PENDING


def test_pending_stop_cannot_be_delivered_directly(lifecycle: TripLifecycle) -> None:
    """Given a Pending stop, when delivering it, then the transition is rejected."""
    trip = lifecycle.dispatch(make_trip())

    with pytest.raises(InvalidStateTransition):
        lifecycle.deliver_stop(trip, 2)


def test_only_one_stop_in_transit(lifecycle: TripLifecycle) -> None:
    """Given a stop already in transit, when starting another, then the transition is rejected."""
    trip = lifecycle.dispatch(make_trip())

    with pytest.raises(InvalidStateTransition, match="already in transit"):
        lifecycle.start_stop(trip, 2)


def test_stop_commands_require_trip_in_progress(lifecycle: TripLifecycle) -> None:
    """Given a Created trip, when starting a stop, then the transition is rejected."""
    with pytest.raises(InvalidStateTransition, match="is Created"):
        lifecycle.start_stop(make_trip(), 1)


def test_unknown_stop_is_rejected(lifecycle: TripLifecycle) -> None:
    """Given a stop id not in the trip, when resolving it, then the transition is rejected."""
    trip = lifecycle.dispatch(make_trip())

    with pytest.raises(InvalidStateTransition) as exc_info:
        lifecycle.deliver_stop(trip, 99)

    assert exc_info.value.from_status is None


def test_pending_is_not_a_valid_outcome(lifecycle: TripLifecycle) -> None:
    """Given a stop in transit, when resolving it as Pending, then the transition is rejected."""
    trip = lifecycle.dispatch(make_trip())

    with pytest.raises(InvalidStateTransition, match="Delivered or Failed"):
        lifecycle.resolve_stop(trip, 1, StopStatus.PENDING)


def test_cancel_created_trip(lifecycle: TripLifecycle) -> None:
    """Given a Created trip, when cancelling with a reason, then it is Cancelled with the reason kept."""
    cancelled = lifecycle.cancel(make_trip(), reason="Vehicle breakdown")

    assert cancelled.status == TripStatus.CANCELLED
    assert cancelled.cancel_reason == "Vehicle breakdown"
    assert cancelled.completed_at == NOW


def test_cancel_after_delivery_is_rejected(lifecycle: TripLifecycle) -> None:
    """Given a trip with a delivered stop, when cancelling, then the transition is rejected."""
    trip = lifecycle.deliver_stop(lifecycle.dispatch(make_trip()), 1)

    with pytest.raises(InvalidStateTransition, match="already delivered"):
        lifecycle.cancel(trip)


def test_cancel_in_progress_trip_without_deliveries(lifecycle: TripLifecycle) -> None:
    """Given an InProgress trip with only failed stops, when cancelling, then it is Cancelled."""
    trip = lifecycle.fail_stop(lifecycle.dispatch(make_trip()), 1)

    assert lifecycle.cancel(trip).status == TripStatus.CANCELLED


def test_cancelled_trip_has_no_current_stop(lifecycle: TripLifecycle) -> None:
    """Given a dispatched trip, when cancelling, then no stop is current."""
    trip = lifecycle.dispatch(make_trip())
    assert trip.current_stop is not None

    cancelled = lifecycle.cancel(trip, reason="Road closed")

    assert cancelled.stops[0].status == StopStatus.IN_TRANSIT
    assert cancelled.current_stop is None
    assert trip_progress(cancelled).current_stop is None


def test_terminal_trips_do_not_change(lifecycle: TripLifecycle) -> None:
    """Given Completed and Cancelled trips, when transitioning them, then every edge is rejected."""
    cancelled = lifecycle.cancel(make_trip())
    completed = make_trip(
        status=TripStatus.COMPLETED, stops=make_stops(StopStatus.DELIVERED, StopStatus.FAILED)
    )

    for trip in (cancelled, completed):
        for target in TripStatus:
            with pytest.raises(InvalidStateTransition):
                lifecycle.transition_trip(trip, target)


def test_complete_requires_every_stop_resolved(lifecycle: TripLifecycle) -> None:
    """Given an InProgress trip with an unresolved stop, when completing, then it is rejected."""
    trip = lifecycle.dispatch(make_trip())

    with pytest.raises(InvalidStateTransition, match="2 stop"):
        lifecycle.complete(trip)


def test_transition_trip_dispatches(lifecycle: TripLifecycle) -> None:
    """Given a Created trip, when transitioning to InProgress, then it is dispatched."""
    assert lifecycle.transition_trip(make_trip(), TripStatus.IN_PROGRESS).status == (
        TripStatus.IN_PROGRESS
    )


def test_add_stop_while_planning(lifecycle: TripLifecycle) -> None:
    """Given a Created trip, when adding a stop, then it is appended in planned order."""
    trip = lifecycle.add_stop(make_trip(), Stop(id=3, store_id=103, store_name="Store 3"))

    assert [s.id for s in trip.stops] == [1, 2, 3]


def test_add_duplicate_stop_is_rejected(lifecycle: TripLifecycle) -> None:
    """Given a Created trip, when adding a stop with an existing id, then a ValueError is raised."""
    with pytest.raises(ValueError, match="already part"):
        lifecycle.add_stop(make_trip(), Stop(id=1, store_id=101))


def test_remove_and_reorder_stops_while_planning(lifecycle: TripLifecycle) -> None:
    """Given a Created trip, when removing and reordering stops, then the planned order changes."""
    trip = make_trip(stops=make_stops(StopStatus.PENDING, StopStatus.PENDING, StopStatus.PENDING))

    trip = lifecycle.reorder_stops(lifecycle.remove_stop(trip, 2), [3, 1])

    assert [s.id for s in trip.stops] == [3, 1]


def test_reorder_must_be_permutation(lifecycle: TripLifecycle) -> None:
    """Given a Created trip, when reordering with a missing id, then a ValueError is raised."""
    with pytest.raises(ValueError, match="permutation"):
        lifecycle.reorder_stops(make_trip(), [1])


def test_membership_changes_after_dispatch_are_rejected(lifecycle: TripLifecycle) -> None:
    """Given a dispatched trip, when changing its stops, then every change is rejected."""
    trip = lifecycle.dispatch(make_trip())

    with pytest.raises(InvalidStateTransition):
        lifecycle.add_stop(trip, Stop(id=3, store_id=103))
    with pytest.raises(InvalidStateTransition):
        lifecycle.remove_stop(trip, 2)
    with pytest.raises(InvalidStateTransition):
        lifecycle.reorder_stops(trip, [2, 1])
