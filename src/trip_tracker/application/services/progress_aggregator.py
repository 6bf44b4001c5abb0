"""Progress and success metrics derived from trip state.

All functions are pure and safe to call on a snapshot without locking.
Percentages are rounded half-up to the nearest integer and every division by
zero is defined as 0.
"""

from collections.abc import Iterable
from decimal import Decimal

from trip_tracker.domain.models import FleetProgress, Trip, TripProgress, TripStatus


def round_half_up_percent(part: int, whole: int) -> int:
    """Return ``round(100 * part / whole)`` with halves rounded up, or 0 if whole is 0."""
    if whole <= 0:
        return 0
    # Integer arithmetic avoids float error at exact halves (e.g. 1/8 -> 12.5 -> 13)
    return (200 * part + whole) // (2 * whole)


def progress_percent(trip: Trip) -> int:
    """Share of stops that reached Delivered or Failed."""
    return round_half_up_percent(trip.completed_stop_count, trip.total_stop_count)


def success_rate(trip: Trip) -> int:
    """Share of stops that were delivered. Failed stops count as complete, not successful."""
    return round_half_up_percent(trip.delivered_stop_count, trip.total_stop_count)


def overall_progress(trips: Iterable[Trip]) -> int:
    """Completed stops over all stops across a collection of trips."""
    completed = 0
    total = 0
    for trip in trips:
        completed += trip.completed_stop_count
        total += trip.total_stop_count
    return round_half_up_percent(completed, total)


def average_success_rate(trips: Iterable[Trip]) -> int:
    """Mean of the per-trip success rates, rounded half-up."""
    rates = [success_rate(trip) for trip in trips]
    if not rates:
        return 0
    # mean = sum / n, and round_half_up_percent computes round(100 * part / whole)
    return round_half_up_percent(sum(rates), 100 * len(rates))


def trip_progress(trip: Trip) -> TripProgress:
    """Build the progress row for a single trip."""
    return TripProgress(
        trip=trip,
        progress_percent=progress_percent(trip),
        success_rate=success_rate(trip),
        current_stop=trip.current_stop,
    )


def fleet_progress(trips: Iterable[Trip]) -> FleetProgress:
    """Aggregate dashboard statistics over a collection of trips."""
    snapshot = list(trips)
    completed = [trip for trip in snapshot if trip.status == TripStatus.COMPLETED]
    return FleetProgress(
        total_trips=len(snapshot),
        in_progress_trips=sum(1 for trip in snapshot if trip.status == TripStatus.IN_PROGRESS),
        completed_trips=len(completed),
        total_stops=sum(trip.total_stop_count for trip in snapshot),
        completed_stops=sum(trip.completed_stop_count for trip in snapshot),
        delivered_stops=sum(trip.delivered_stop_count for trip in snapshot),
        active_dispatchers=len({trip.dispatcher_id for trip in snapshot if trip.is_active}),
        completed_value=sum((trip.total_value for trip in completed), Decimal("0")),
        overall_progress=overall_progress(snapshot),
        average_success_rate=average_success_rate(snapshot),
    )
