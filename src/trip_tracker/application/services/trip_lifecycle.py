"""Trip and stop lifecycle state machine."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from trip_tracker.domain.exceptions import InvalidStateTransition
from trip_tracker.domain.models import Stop, StopStatus, Trip, TripStatus

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

logger = logging.getLogger(__name__)

TRIP_TRANSITIONS: dict[TripStatus, frozenset[TripStatus]] = {
    TripStatus.CREATED: frozenset({TripStatus.IN_PROGRESS, TripStatus.CANCELLED}),
    TripStatus.IN_PROGRESS: frozenset({TripStatus.COMPLETED, TripStatus.CANCELLED}),
    TripStatus.COMPLETED: frozenset(),
    TripStatus.CANCELLED: frozenset(),
}

STOP_TRANSITIONS: dict[StopStatus, frozenset[StopStatus]] = {
    StopStatus.PENDING: frozenset({StopStatus.IN_TRANSIT}),
    StopStatus.IN_TRANSIT: frozenset({StopStatus.DELIVERED, StopStatus.FAILED}),
    StopStatus.DELIVERED: frozenset(),
    StopStatus.FAILED: frozenset(),
}


def _replace_stop(stops: tuple[Stop, ...], updated: Stop) -> tuple[Stop, ...]:
    return tuple(updated if stop.id == updated.id else stop for stop in stops)


class TripLifecycle:
    """Applies status-changing commands to trips.

    Trips are immutable: every command returns a new Trip or raises
    InvalidStateTransition, so a command (including its cascade) either applies
    completely or leaves the caller's trip untouched.
    """

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        """Initialize the lifecycle.

        Args:
            clock: Source of the current instant for timestamps. Defaults to UTC now.
        """
        self._clock = clock or (lambda: datetime.now(UTC))

    def _now(self, at: datetime | None) -> datetime:
        return at if at is not None else self._clock()

    # Trip transitions

    def dispatch(self, trip: Trip, at: datetime | None = None) -> Trip:
        """Move a Created trip to InProgress and put its first stop in transit."""
        self._require_trip_edge(trip, TripStatus.IN_PROGRESS)
        if not trip.stops:
            raise InvalidStateTransition(
                "trip", trip.id, trip.status, TripStatus.IN_PROGRESS, "trip has no stops"
            )
        now = self._now(at)
        first = replace(trip.stops[0], status=StopStatus.IN_TRANSIT)
        logger.debug(f"Dispatching trip {trip.id} with {trip.total_stop_count} stops")
        return replace(
            trip,
            status=TripStatus.IN_PROGRESS,
            departure_at=now,
            stops=_replace_stop(trip.stops, first),
        )

    def complete(self, trip: Trip, at: datetime | None = None) -> Trip:
        """Complete an InProgress trip whose stops are all Delivered or Failed."""
        self._require_trip_edge(trip, TripStatus.COMPLETED)
        unresolved = trip.total_stop_count - trip.completed_stop_count
        if unresolved:
            raise InvalidStateTransition(
                "trip",
                trip.id,
                trip.status,
                TripStatus.COMPLETED,
                f"{unresolved} stop(s) are not delivered or failed yet",
            )
        logger.debug(f"Completing trip {trip.id}")
        return replace(trip, status=TripStatus.COMPLETED, completed_at=self._now(at))

    def cancel(self, trip: Trip, at: datetime | None = None, reason: str | None = None) -> Trip:
        """Cancel a trip that has not delivered to any stop yet."""
        self._require_trip_edge(trip, TripStatus.CANCELLED)
        if trip.delivered_stop_count:
            raise InvalidStateTransition(
                "trip",
                trip.id,
                trip.status,
                TripStatus.CANCELLED,
                f"{trip.delivered_stop_count} stop(s) already delivered",
            )
        logger.debug(f"Cancelling trip {trip.id}: {reason or 'no reason given'}")
        return replace(
            trip,
            status=TripStatus.CANCELLED,
            completed_at=self._now(at),
            cancel_reason=reason,
        )

    def transition_trip(
        self,
        trip: Trip,
        target: TripStatus,
        at: datetime | None = None,
        reason: str | None = None,
    ) -> Trip:
        """Move a trip to ``target`` through the matching command."""
        match target:
            case TripStatus.IN_PROGRESS:
                return self.dispatch(trip, at)
            case TripStatus.COMPLETED:
                return self.complete(trip, at)
            case TripStatus.CANCELLED:
                return self.cancel(trip, at, reason)
            case TripStatus.CREATED:
                raise InvalidStateTransition(
                    "trip", trip.id, trip.status, target, "trips never return to Created"
                )

    # Stop transitions

    def start_stop(
        self,
        trip: Trip,
        stop_id: int,
        at: datetime | None = None,  # noqa: ARG002 - Stops carry no in-transit timestamp
    ) -> Trip:
        """Put a Pending stop in transit."""
        stop = self._get_stop(trip, stop_id, StopStatus.IN_TRANSIT)
        self._require_trip_in_progress(trip, stop, StopStatus.IN_TRANSIT)
        self._require_stop_edge(trip, stop, StopStatus.IN_TRANSIT)
        current = trip.current_stop
        if current is not None:
            raise InvalidStateTransition(
                "stop",
                stop.id,
                stop.status,
                StopStatus.IN_TRANSIT,
                f"stop {current.id} of trip {trip.id} is already in transit",
            )
        return replace(
            trip, stops=_replace_stop(trip.stops, replace(stop, status=StopStatus.IN_TRANSIT))
        )

    def resolve_stop(
        self,
        trip: Trip,
        stop_id: int,
        outcome: StopStatus,
        at: datetime | None = None,
    ) -> Trip:
        """Resolve the in-transit stop as Delivered or Failed.

        The next Pending stop in planned order is put in transit. When none is
        left the trip is completed in the same operation.
        """
        stop = self._get_stop(trip, stop_id, outcome)
        if not outcome.is_terminal:
            raise InvalidStateTransition(
                "stop", stop.id, stop.status, outcome, "outcome must be Delivered or Failed"
            )
        self._require_trip_in_progress(trip, stop, outcome)
        self._require_stop_edge(trip, stop, outcome)

        now = self._now(at)
        resolved = replace(
            stop,
            status=outcome,
            delivered_at=now if outcome == StopStatus.DELIVERED else None,
        )
        stops = _replace_stop(trip.stops, resolved)
        logger.debug(f"Stop {stop.id} of trip {trip.id} resolved as {outcome}")

        next_stop = next((s for s in stops if s.status == StopStatus.PENDING), None)
        if next_stop is not None:
            stops = _replace_stop(stops, replace(next_stop, status=StopStatus.IN_TRANSIT))
            return replace(trip, stops=stops)

        logger.debug(f"Last stop of trip {trip.id} resolved, completing trip")
        return replace(trip, stops=stops, status=TripStatus.COMPLETED, completed_at=now)

    def deliver_stop(self, trip: Trip, stop_id: int, at: datetime | None = None) -> Trip:
        return self.resolve_stop(trip, stop_id, StopStatus.DELIVERED, at)

    def fail_stop(self, trip: Trip, stop_id: int, at: datetime | None = None) -> Trip:
        return self.resolve_stop(trip, stop_id, StopStatus.FAILED, at)

    def transition_stop(
        self,
        trip: Trip,
        stop_id: int,
        target: StopStatus,
        at: datetime | None = None,
    ) -> Trip:
        """Move a stop to ``target`` through the matching command."""
        match target:
            case StopStatus.IN_TRANSIT:
                return self.start_stop(trip, stop_id, at)
            case StopStatus.DELIVERED | StopStatus.FAILED:
                return self.resolve_stop(trip, stop_id, target, at)
            case StopStatus.PENDING:
                stop = self._get_stop(trip, stop_id, target)
                raise InvalidStateTransition(
                    "stop", stop.id, stop.status, target, "stops never return to Pending"
                )

    # Stop membership, only while the trip is still being planned

    def add_stop(self, trip: Trip, stop: Stop) -> Trip:
        """Append a Pending stop to a Created trip."""
        self._require_planning(trip, "add stops to")
        if trip.find_stop(stop.id) is not None:
            raise ValueError(f"Stop {stop.id} is already part of trip {trip.id}")
        if stop.status != StopStatus.PENDING:
            raise ValueError(f"New stops must be Pending, got {stop.status}")
        return replace(trip, stops=(*trip.stops, stop))

    def remove_stop(self, trip: Trip, stop_id: int) -> Trip:
        """Remove a stop from a Created trip."""
        self._require_planning(trip, "remove stops from")
        if trip.find_stop(stop_id) is None:
            raise ValueError(f"Stop {stop_id} is not part of trip {trip.id}")
        return replace(trip, stops=tuple(s for s in trip.stops if s.id != stop_id))

    def reorder_stops(self, trip: Trip, stop_ids: Iterable[int]) -> Trip:
        """Change the planned visitation order of a Created trip."""
        self._require_planning(trip, "reorder stops of")
        order = list(stop_ids)
        by_id = {stop.id: stop for stop in trip.stops}
        if sorted(order) != sorted(by_id):
            raise ValueError(
                f"New order {order} is not a permutation of the stops of trip {trip.id}"
            )
        return replace(trip, stops=tuple(by_id[stop_id] for stop_id in order))

    # Guards

    @staticmethod
    def _require_trip_edge(trip: Trip, target: TripStatus) -> None:
        if target not in TRIP_TRANSITIONS[trip.status]:
            raise InvalidStateTransition(
                "trip", trip.id, trip.status, target, "transition is not allowed"
            )

    @staticmethod
    def _require_stop_edge(trip: Trip, stop: Stop, target: StopStatus) -> None:
        if target not in STOP_TRANSITIONS[stop.status]:
            raise InvalidStateTransition(
                "stop",
                stop.id,
                stop.status,
                target,
                f"transition is not allowed on trip {trip.id}",
            )

    @staticmethod
    def _require_trip_in_progress(trip: Trip, stop: Stop, target: StopStatus) -> None:
        if trip.status != TripStatus.IN_PROGRESS:
            raise InvalidStateTransition(
                "stop", stop.id, stop.status, target, f"trip {trip.id} is {trip.status}"
            )

    @staticmethod
    def _require_planning(trip: Trip, action: str) -> None:
        if trip.status != TripStatus.CREATED:
            raise InvalidStateTransition(
                "trip",
                trip.id,
                trip.status,
                trip.status,
                f"cannot {action} a trip that is {trip.status}",
            )

    @staticmethod
    def _get_stop(trip: Trip, stop_id: int, target: StopStatus) -> Stop:
        stop = trip.find_stop(stop_id)
        if stop is None:
            raise InvalidStateTransition(
                "stop", stop_id, None, target, f"stop is not part of trip {trip.id}"
            )
        return stop
