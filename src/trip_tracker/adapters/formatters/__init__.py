"""Formatters for presenting trip data."""

from trip_tracker.adapters.formatters.trip_formatter import (
    TripFormatter,
    stop_status_badge,
    time_ago,
    trip_status_badge,
)

__all__ = ["TripFormatter", "stop_status_badge", "time_ago", "trip_status_badge"]
