"""Protocol for updating trip view state."""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from trip_tracker.domain.models.error_details import ErrorDetails
    from trip_tracker.domain.models.trip_view_model import TripViewModel


class TripStateUpdaterProtocol(Protocol):
    """Protocol for publishing refreshed trip views."""

    def update_view(self, view_model: "TripViewModel") -> None:
        """Replace the published view model.

        Args:
            view_model: The view model built from the latest refresh.
        """
        ...

    def update_error(self, error: "ErrorDetails") -> None:
        """Record a failed refresh while keeping the previous view.

        Args:
            error: Details of the failure.
        """
        ...
