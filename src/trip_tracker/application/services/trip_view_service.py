"""Builds presentation view models from a refreshed trip collection."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from trip_tracker.application.services.progress_aggregator import fleet_progress, trip_progress
from trip_tracker.application.services.query_reducer import reduce_trips
from trip_tracker.domain.models import ErrorDetails, Trip, TripQuery, TripViewModel

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from trip_tracker.application.services.refresh_controller import RefreshController
    from trip_tracker.domain.contracts.state_updater import TripStateUpdaterProtocol

logger = logging.getLogger(__name__)


def build_view_model(
    trips: Iterable[Trip],
    query: TripQuery,
    now: datetime,
    last_refreshed_at: datetime | None = None,
    is_fetching: bool = False,
    last_error: ErrorDetails | None = None,
) -> TripViewModel:
    """Reduce a trip collection to one page of progress rows plus fleet statistics.

    Fleet statistics cover the whole collection, not just the visible page.
    """
    snapshot = list(trips)
    page = reduce_trips(snapshot, query, now)
    return TripViewModel(
        rows=[trip_progress(trip) for trip in page.items],
        pagination=page.pagination,
        fleet=fleet_progress(snapshot),
        last_refreshed_at=last_refreshed_at,
        is_fetching=is_fetching,
        last_error=last_error,
    )


class TripViewService:
    """Publishes a view model for a controller's collection after every refresh."""

    def __init__(
        self,
        controller: RefreshController,
        query: TripQuery,
        state_updater: TripStateUpdaterProtocol | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the view service and subscribe it to the controller.

        Args:
            controller: Controller that owns the trip collection.
            query: Filter, sort and page parameters of the view.
            state_updater: Receives view models and refresh failures.
            clock: Source of the current instant for date-range filters.

        Raises:
            ValueError: If the controller already has refresh or failure callbacks.
        """
        self.controller = controller
        self.query = query
        self.state_updater = state_updater
        self._clock = clock or (lambda: datetime.now(UTC))
        if controller.on_refresh is not None or controller.on_failure is not None:
            raise ValueError(f"Refresh controller for {controller.name} already has a subscriber")
        controller.on_refresh = self._on_refresh
        controller.on_failure = self._on_failure

    def build_view(self, now: datetime | None = None) -> TripViewModel:
        """Build the view model for the controller's current collection."""
        view_model = build_view_model(
            self.controller.trips,
            self.query,
            now or self._clock(),
            last_refreshed_at=self.controller.last_refreshed_at,
            is_fetching=self.controller.is_fetching,
            last_error=self.controller.last_error,
        )
        if view_model.pagination is not None:
            # Keep the stored page in range as the collection shrinks or grows
            self.query = replace(self.query, page=view_model.pagination.current_page)
        return view_model

    def set_query(self, query: TripQuery) -> TripViewModel:
        """Replace the view's query and rebuild the view."""
        self.query = query
        return self.build_view()

    def _on_refresh(self, _controller: RefreshController) -> None:
        if self.state_updater is not None:
            # Runs inside the fetch that just finished, which is no longer outstanding
            self.state_updater.update_view(replace(self.build_view(), is_fetching=False))

    def _on_failure(self, error: ErrorDetails) -> None:
        logger.debug(f"View for {self.controller.name} is stale: {error.reason}")
        if self.state_updater is not None:
            self.state_updater.update_error(error)
