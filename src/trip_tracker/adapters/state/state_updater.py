"""Updater for trip view state."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from trip_tracker.adapters.state.trip_view_state import (
    TripViewState,  # noqa: TC001 - Runtime dependency: used in __init__
)
from trip_tracker.domain.contracts.state_updater import TripStateUpdaterProtocol

if TYPE_CHECKING:
    from trip_tracker.domain.models import ErrorDetails, TripViewModel

logger = logging.getLogger(__name__)


class TripStateUpdater(TripStateUpdaterProtocol):
    """Updates a view's published state."""

    def __init__(self, view_state: TripViewState) -> None:
        """Initialize the state updater.

        Args:
            view_state: The TripViewState instance to update.
        """
        self.view_state = view_state

    def update_view(self, view_model: TripViewModel) -> None:
        """Publish a freshly built view model and mark the API healthy."""
        self.view_state.view_model = view_model
        self.view_state.api_status = "success"
        self.view_state.last_error = None
        self.view_state.refresh_count += 1
        logger.info(
            f"Updated view {self.view_state.view_name}: {len(view_model.rows)} rows, "
            f"overall progress {view_model.fleet.overall_progress}%"
        )

    def update_error(self, error: ErrorDetails) -> None:
        """Record a failed refresh; the previous view model stays published."""
        self.view_state.api_status = "error"
        self.view_state.last_error = error
        self.view_state.last_error_at = datetime.now(UTC)
        logger.debug(f"View {self.view_state.view_name} is stale: {error.reason}")
