"""Published state of monitored trip views."""

from trip_tracker.adapters.state.state_updater import TripStateUpdater
from trip_tracker.adapters.state.trip_view_state import TripViewState

__all__ = ["TripStateUpdater", "TripViewState"]
