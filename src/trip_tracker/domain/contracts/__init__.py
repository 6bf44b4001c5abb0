"""Contracts (protocols) between the application core and its adapters."""

from trip_tracker.domain.contracts.refresh_controller import RefreshControllerProtocol
from trip_tracker.domain.contracts.state_updater import TripStateUpdaterProtocol
from trip_tracker.domain.contracts.trip_formatter import TripFormatterProtocol

__all__ = [
    "RefreshControllerProtocol",
    "TripFormatterProtocol",
    "TripStateUpdaterProtocol",
]
