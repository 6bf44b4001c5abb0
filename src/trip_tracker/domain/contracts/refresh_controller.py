"""Protocol for refreshing a trip view."""

from typing import Protocol


class RefreshControllerProtocol(Protocol):
    """Protocol for periodically re-fetching trip data."""

    async def start(self) -> None:
        """Start the recurring refresh."""
        ...

    async def stop(self) -> None:
        """Stop the recurring refresh."""
        ...

    async def refresh(self) -> bool:
        """Trigger a refresh now.

        Returns:
            True if a fetch ran and succeeded, False if it was coalesced or failed.
        """
        ...
