"""Main entry point for the trip progress monitor."""

import asyncio
import logging
import sys
from contextlib import AsyncExitStack
from datetime import datetime
from functools import partial

import aiohttp

from trip_tracker.adapters.config import AppConfig, ViewConfigurationLoader
from trip_tracker.adapters.rest_api import RestTripRepository, TripApiHttpClient
from trip_tracker.adapters.state import TripStateUpdater, TripViewState
from trip_tracker.application.services import RefreshController, TripViewService
from trip_tracker.domain.models import ViewKind

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stderr,
)

logger = logging.getLogger(__name__)


async def main() -> None:
    """Main application entry point."""
    config = AppConfig()
    logging.getLogger().setLevel(config.log_level)

    # Load view configurations
    try:
        view_configs = ViewConfigurationLoader.load(config)
    except (ValueError, FileNotFoundError) as e:
        logger.error(f"Invalid view configuration: {e}")
        sys.exit(1)

    active_views = [view for view in view_configs if view.kind == ViewKind.ACTIVE]
    logger.info(f"Loaded {len(view_configs)} view(s), {len(active_views)} monitored:")
    for view_config in active_views:
        logger.info(
            f"  - '{view_config.name}' (dispatcher: {view_config.dispatcher_id or 'all'}, "
            f"every {view_config.refresh_interval_seconds or config.refresh_interval_seconds}s)"
        )

    if not active_views:
        logger.error("No active views configured.")
        logger.error("Please configure [[views]] with kind = \"active\" in your config.toml file.")
        logger.error("Or copy config.example.toml to config.toml and customize it.")
        sys.exit(1)

    # Create aiohttp session for efficient HTTP connections
    async with aiohttp.ClientSession() as session:
        client = TripApiHttpClient(
            session,
            config.api_base_url,
            token=config.api_token,
            timeout_seconds=config.api_timeout,
            min_delay_seconds=config.min_request_delay_seconds,
        )
        trip_repo = RestTripRepository(client)

        async with AsyncExitStack() as stack:
            for view_config in active_views:
                controller = RefreshController(
                    partial(trip_repo.list_active_trips, view_config.dispatcher_id),
                    interval_seconds=(
                        view_config.refresh_interval_seconds or config.refresh_interval_seconds
                    ),
                    name=view_config.name,
                )
                TripViewService(
                    controller,
                    view_config.to_query(),
                    state_updater=TripStateUpdater(TripViewState(view_config.name)),
                    clock=lambda: datetime.now(config.zone),
                )
                await stack.enter_async_context(controller)

            try:
                await asyncio.Event().wait()
            except asyncio.CancelledError:
                logger.info("Shutting down...")
                raise


def run() -> None:
    """Synchronous entry point for the monitor command."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Stopped.")


if __name__ == "__main__":
    run()
