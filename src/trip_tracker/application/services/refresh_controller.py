"""Periodic and on-demand refresh of a trip collection."""

from __future__ import annotations

import asyncio
import inspect
import logging
import re
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

from trip_tracker.domain.contracts.refresh_controller import RefreshControllerProtocol
from trip_tracker.domain.exceptions import TripFetchError, TripNotFoundError
from trip_tracker.domain.models import ErrorDetails, Trip

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from types import TracebackType

    TripFetcher = Callable[[], Awaitable[list[Trip]]]
    RefreshCallback = Callable[["RefreshController"], Awaitable[None] | None]
    FailureCallback = Callable[[ErrorDetails], Awaitable[None] | None]

logger = logging.getLogger(__name__)

DEFAULT_REFRESH_INTERVAL_SECONDS = 30


def extract_error_details(error: Exception) -> ErrorDetails:
    """Extract HTTP status code and error reason from exception."""
    status_code: int | None = None
    if isinstance(error, TripFetchError):
        status_code = error.status_code
    if status_code is None:
        # Format: "... (HTTP 502)" or "... (502) ..."
        status_match = re.search(r"\((?:HTTP )?(\d{3})\)", str(error))
        status_code = int(status_match.group(1)) if status_match else None

    if status_code == 401:
        reason = "Not authorized"
    elif status_code == 429:
        reason = "Rate limit exceeded"
    elif status_code == 502:
        reason = "Bad gateway (server error)"
    elif status_code == 503:
        reason = "Service unavailable"
    elif status_code == 504:
        reason = "Gateway timeout"
    elif status_code is not None:
        reason = f"HTTP {status_code}"
    elif isinstance(error, TripFetchError):
        reason = error.reason
    elif isinstance(error, TimeoutError):
        reason = "Request timed out"
    else:
        reason = "Unknown error"

    return ErrorDetails(status_code=status_code, reason=reason)


class RefreshController(RefreshControllerProtocol):
    """Owns a view's trip collection and keeps it current.

    A recurring timer and manual triggers both go through ``refresh``, which
    runs at most one fetch at a time: a trigger that arrives while a fetch is
    outstanding is a no-op. Failed fetches keep the previous collection and
    are reported through ``on_failure`` instead of being raised.

    Use as an async context manager to guarantee the timer is released::

        async with RefreshController(repository.list_active_trips) as controller:
            ...
    """

    def __init__(
        self,
        fetcher: TripFetcher,
        interval_seconds: float = DEFAULT_REFRESH_INTERVAL_SECONDS,
        on_refresh: RefreshCallback | None = None,
        on_failure: FailureCallback | None = None,
        clock: Callable[[], datetime] | None = None,
        name: str = "trips",
    ) -> None:
        """Initialize the refresh controller.

        Args:
            fetcher: Coroutine function returning the full trip collection.
            interval_seconds: Period of the recurring refresh.
            on_refresh: Called after each successful refresh.
            on_failure: Called with error details after each failed refresh.
            clock: Source of the current instant. Defaults to UTC now.
            name: View name used in log messages.
        """
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.fetcher = fetcher
        self.interval_seconds = interval_seconds
        self.on_refresh = on_refresh
        self.on_failure = on_failure
        self.name = name
        self._clock = clock or (lambda: datetime.now(UTC))
        self._trips: tuple[Trip, ...] = ()
        self._last_refreshed_at: datetime | None = None
        self._last_error: ErrorDetails | None = None
        self._lock = asyncio.Lock()
        self._task: asyncio.Task[None] | None = None
        self._in_flight: asyncio.Task[bool] | None = None
        # Bumped on stop so fetches started before teardown are discarded
        self._generation = 0

    @property
    def trips(self) -> tuple[Trip, ...]:
        """Snapshot of the current trip collection."""
        return self._trips

    @property
    def last_refreshed_at(self) -> datetime | None:
        return self._last_refreshed_at

    @property
    def last_error(self) -> ErrorDetails | None:
        """Details of the last failed refresh, cleared by the next success."""
        return self._last_error

    @property
    def is_fetching(self) -> bool:
        return self._in_flight is not None and not self._in_flight.done()

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def staleness(self, now: datetime | None = None) -> timedelta | None:
        """Elapsed time since the last successful refresh, or None if there was none."""
        if self._last_refreshed_at is None:
            return None
        return (now or self._clock()) - self._last_refreshed_at

    async def start(self) -> None:
        """Start the recurring refresh. The first refresh runs immediately."""
        if self.is_running:
            logger.warning(f"Refresh controller for {self.name} already running")
            return

        self._task = asyncio.create_task(self._refresh_loop())
        logger.info(
            f"Started refresh controller for {self.name} (every {self.interval_seconds}s)"
        )

    async def stop(self) -> None:
        """Stop the recurring refresh. Safe to call more than once.

        A fetch still outstanding is allowed to finish, but its result is discarded.
        """
        self._generation += 1
        # The old fetch finishes detached; a restart may fetch immediately
        self._in_flight = None
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                logger.debug(f"Refresh loop for {self.name} cancelled")
            logger.info(f"Stopped refresh controller for {self.name}")

    async def __aenter__(self) -> RefreshController:
        await self.start()
        return self

    async def __aexit__(
        self,
        _exc_type: type[BaseException] | None,
        _exc_val: BaseException | None,
        _exc_tb: TracebackType | None,
    ) -> None:
        await self.stop()

    async def refresh(self) -> bool:
        """Fetch and replace the trip collection unless a fetch is already in flight.

        Returns:
            True if this call fetched successfully, False if it was coalesced,
            failed, or finished after teardown.
        """
        if self.is_fetching:
            logger.debug(f"Refresh of {self.name} already in flight, ignoring trigger")
            return False

        self._in_flight = asyncio.create_task(self._fetch_and_replace(self._generation))
        # Shielded so cancelling the refresh loop lets the fetch finish
        return await asyncio.shield(self._in_flight)

    async def apply(self, trip_id: int, command: Callable[[Trip], Trip]) -> Trip:
        """Apply a lifecycle command to one held trip.

        Runs under the same lock as collection replacement, so a command never
        interleaves with a refresh. Errors raised by the command propagate and
        leave the collection unchanged.

        Raises:
            TripNotFoundError: If no held trip has the given id.
        """
        async with self._lock:
            index = next((i for i, trip in enumerate(self._trips) if trip.id == trip_id), None)
            if index is None:
                raise TripNotFoundError(trip_id)
            updated = command(self._trips[index])
            self._trips = (*self._trips[:index], updated, *self._trips[index + 1 :])
        return updated

    async def _refresh_loop(self) -> None:
        """Main refresh loop."""
        await self.refresh()
        try:
            while True:
                await asyncio.sleep(self.interval_seconds)
                await self.refresh()
        except asyncio.CancelledError:
            logger.debug(f"Refresh loop for {self.name} cancelled")
            raise

    async def _fetch_and_replace(self, generation: int) -> bool:
        try:
            trips = await self.fetcher()
        except Exception as e:
            if generation != self._generation:
                logger.debug(f"Ignoring failed fetch of {self.name} that finished after stop")
                return False
            error_details = extract_error_details(e)
            self._last_error = error_details
            logger.warning(
                f"Failed to refresh {self.name}: {error_details.reason} "
                f"(status: {error_details.status_code}, error: {e}); keeping previous data"
            )
            await self._notify(self.on_failure, error_details)
            return False

        if generation != self._generation:
            logger.info(f"Discarding {len(trips)} trips for {self.name} fetched after stop")
            return False

        async with self._lock:
            self._trips = tuple(trips)
            self._last_refreshed_at = self._clock()
            self._last_error = None
        logger.debug(f"Refreshed {self.name}: {len(trips)} trips at {self._last_refreshed_at}")
        await self._notify(self.on_refresh, self)
        return True

    async def _notify(self, callback: Callable[[Any], Any] | None, argument: Any) -> None:
        if callback is None:
            return
        try:
            result = callback(argument)
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception(f"Refresh callback for {self.name} failed")
