"""CLI for inspecting and watching delivery trips."""

import argparse
import asyncio
import json
import logging
import sys
from datetime import datetime
from typing import Any

import aiohttp

from trip_tracker.adapters.config import PAGE_SIZE_OPTIONS, AppConfig
from trip_tracker.adapters.formatters import TripFormatter
from trip_tracker.adapters.rest_api import (
    RestTripRepository,
    RestWarehouseRepository,
    TripApiHttpClient,
)
from trip_tracker.adapters.state import TripStateUpdater, TripViewState
from trip_tracker.application.services import (
    RefreshController,
    TripHistoryService,
    TripViewService,
    build_view_model,
)
from trip_tracker.domain.exceptions import TripTrackerError
from trip_tracker.domain.models import (
    DateRange,
    TripProgress,
    TripQuery,
    TripStatus,
    TripViewModel,
)

logger = logging.getLogger(__name__)


def create_client(session: aiohttp.ClientSession, config: AppConfig) -> TripApiHttpClient:
    """Create an API client from configuration."""
    return TripApiHttpClient(
        session,
        config.api_base_url,
        token=config.api_token,
        timeout_seconds=config.api_timeout,
        min_delay_seconds=config.min_request_delay_seconds,
    )


def parse_status(value: str) -> TripStatus | None:
    """Parse a --status argument; 'All' means no status filter."""
    if value.lower() == "all":
        return None
    for status in TripStatus:
        if value.lower() in (status.value.lower(), status.name.lower()):
            return status
    raise argparse.ArgumentTypeError(f"unknown status '{value}'")


def parse_date_range(value: str) -> DateRange:
    for date_range in DateRange:
        if value.lower() == date_range.value.lower():
            return date_range
    raise argparse.ArgumentTypeError(f"unknown date range '{value}'")


def row_to_dict(row: TripProgress, formatter: TripFormatter) -> dict[str, Any]:
    """Convert a progress row to a JSON-serializable dict."""
    trip = row.trip
    return {
        "id": trip.id,
        "dispatcher": trip.dispatcher_name,
        "vehicle": trip.vehicle_id,
        "warehouse": trip.warehouse_name,
        "status": trip.status.value,
        "departureAt": trip.departure_at.isoformat() if trip.departure_at else None,
        "completedAt": trip.completed_at.isoformat() if trip.completed_at else None,
        "stops": trip.total_stop_count,
        "completedStops": trip.completed_stop_count,
        "progressPercent": row.progress_percent,
        "successRate": row.success_rate,
        "currentStop": row.current_stop.store_name if row.current_stop else None,
        "totalValue": formatter.format_currency(trip.total_value),
    }


def view_to_dict(view: TripViewModel, formatter: TripFormatter) -> dict[str, Any]:
    fleet = view.fleet
    result: dict[str, Any] = {
        "trips": [row_to_dict(row, formatter) for row in view.rows],
        "fleet": {
            "totalTrips": fleet.total_trips,
            "inProgressTrips": fleet.in_progress_trips,
            "completedTrips": fleet.completed_trips,
            "totalStops": fleet.total_stops,
            "completedStops": fleet.completed_stops,
            "activeDispatchers": fleet.active_dispatchers,
            "completedValue": formatter.format_currency(fleet.completed_value),
            "overallProgress": fleet.overall_progress,
            "averageSuccessRate": fleet.average_success_rate,
        },
        "lastRefreshedAt": (
            view.last_refreshed_at.isoformat() if view.last_refreshed_at else None
        ),
    }
    if view.pagination is not None:
        result["pagination"] = {
            "currentPage": view.pagination.current_page,
            "totalPages": view.pagination.total_pages,
            "pageSize": view.pagination.page_size,
            "total": view.pagination.total,
            "pages": view.pagination.page_numbers,
        }
    if view.last_error is not None:
        result["error"] = view.last_error.model_dump()
    return result


def print_view(view: TripViewModel, formatter: TripFormatter, title: str) -> None:
    """Print a view as a table with fleet statistics and the page bar."""
    fleet = view.fleet
    print(f"\n{title}")
    print("=" * 78)
    print(
        f"Trips: {fleet.total_trips}  In progress: {fleet.in_progress_trips}  "
        f"Stops: {fleet.completed_stops}/{fleet.total_stops}  "
        f"Overall progress: {fleet.overall_progress}%  "
        f"Avg success: {fleet.average_success_rate}%"
    )
    print(f"Last updated: {formatter.time_ago(view.last_refreshed_at)}")
    if view.last_error is not None:
        print(f"Showing stale data: {view.last_error.reason}")
    print("-" * 78)

    if not view.rows:
        print("No trips found. Try adjusting your search or filters.")
        return

    for row in view.rows:
        trip = row.trip
        badge = formatter.trip_status_badge(trip.status)
        current = row.current_stop.store_name if row.current_stop else "-"
        print(
            f"#{trip.id:<6} {trip.dispatcher_name[:18]:<18} {trip.vehicle_id[:10]:<10} "
            f"{badge.label:<12} {row.progress_percent:>3}% "
            f"({trip.completed_stop_count}/{trip.total_stop_count})  next: {current}"
        )

    if view.pagination is not None and view.pagination.total_pages > 1:
        pages = " ".join(
            f"[{n}]" if n == view.pagination.current_page else str(n)
            for n in view.pagination.page_numbers
        )
        print("-" * 78)
        print(f"{formatter.format_range(view.pagination)}   pages: {pages}")


class ConsoleStateUpdater(TripStateUpdater):
    """State updater that also prints every refreshed view."""

    def __init__(self, view_state: TripViewState, formatter: TripFormatter) -> None:
        super().__init__(view_state)
        self.formatter = formatter

    def update_view(self, view_model: TripViewModel) -> None:
        super().update_view(view_model)
        print_view(view_model, self.formatter, f"Active trips ({self.view_state.view_name})")

    def update_error(self, error: Any) -> None:
        super().update_error(error)
        print(f"Failed to load active trips: {error.reason}", file=sys.stderr)


async def show_active(config: AppConfig, dispatcher_id: int | None, format_json: bool) -> None:
    """Fetch active trips once and print their progress."""
    formatter = TripFormatter(config)
    async with aiohttp.ClientSession() as session:
        repository = RestTripRepository(create_client(session, config))
        trips = await repository.list_active_trips(dispatcher_id)

    now = datetime.now(config.zone)
    view = build_view_model(
        trips, TripQuery(page_size=max(1, len(trips))), now, last_refreshed_at=now
    )
    if format_json:
        print(json.dumps(view_to_dict(view, formatter), indent=2, ensure_ascii=False))
    else:
        print_view(view, formatter, "Active trips")


async def show_history(config: AppConfig, query: TripQuery, format_json: bool) -> None:
    """Fetch and print one page of trip history."""
    formatter = TripFormatter(config)
    async with aiohttp.ClientSession() as session:
        service = TripHistoryService(RestTripRepository(create_client(session, config)))
        view = await service.fetch_view(query, datetime.now(config.zone))

    if format_json:
        print(json.dumps(view_to_dict(view, formatter), indent=2, ensure_ascii=False))
    else:
        print_view(view, formatter, "Trip history")


async def show_warehouses(config: AppConfig, format_json: bool) -> None:
    async with aiohttp.ClientSession() as session:
        warehouses = await RestWarehouseRepository(
            create_client(session, config)
        ).lookup_warehouses()

    if format_json:
        print(json.dumps([{"id": w.id, "name": w.name} for w in warehouses], indent=2))
        return
    if not warehouses:
        print("No warehouses found.", file=sys.stderr)
        return
    for warehouse in warehouses:
        print(f"  {warehouse.id:>5}  {warehouse.name}")


async def watch_active(config: AppConfig, interval: int, dispatcher_id: int | None) -> None:
    """Refresh active trips every ``interval`` seconds until interrupted."""
    formatter = TripFormatter(config)
    async with aiohttp.ClientSession() as session:
        repository = RestTripRepository(create_client(session, config))

        async def fetch() -> list:
            return await repository.list_active_trips(dispatcher_id)

        controller = RefreshController(fetch, interval_seconds=interval, name="active")
        TripViewService(
            controller,
            TripQuery(dispatcher_id=dispatcher_id, page_size=config.default_page_size),
            state_updater=ConsoleStateUpdater(TripViewState("active"), formatter),
            clock=lambda: datetime.now(config.zone),
        )
        async with controller:
            await asyncio.Event().wait()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Inspect and watch delivery trips",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Active command
    active_parser = subparsers.add_parser("active", help="Show progress of active trips")
    active_parser.add_argument("--dispatcher-id", type=int, help="Only this dispatcher's trips")
    active_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # History command
    history_parser = subparsers.add_parser("history", help="Page through trip history")
    history_parser.add_argument("--search", default="", help="Dispatcher, vehicle or trip id")
    history_parser.add_argument(
        "--status", type=parse_status, default=None, help="Created, InProgress, ... or All"
    )
    history_parser.add_argument(
        "--date-range",
        type=parse_date_range,
        default=DateRange.ALL,
        help="All, Today, Week or Month",
    )
    history_parser.add_argument("--warehouse-id", type=int, help="Only this warehouse's trips")
    history_parser.add_argument("--page", type=int, default=1, help="Page number (1-based)")
    history_parser.add_argument(
        "--page-size", type=int, choices=PAGE_SIZE_OPTIONS, help="Trips per page"
    )
    history_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # Warehouses command
    warehouses_parser = subparsers.add_parser("warehouses", help="List warehouses")
    warehouses_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # Watch command
    watch_parser = subparsers.add_parser("watch", help="Keep refreshing active trips")
    watch_parser.add_argument("--interval", type=int, help="Refresh interval in seconds")
    watch_parser.add_argument("--dispatcher-id", type=int, help="Only this dispatcher's trips")

    return parser


async def main(argv: list[str] | None = None) -> int:
    """Run the CLI and return the exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    config = AppConfig()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )

    try:
        if args.command == "active":
            await show_active(config, args.dispatcher_id, format_json=args.json)

        elif args.command == "history":
            query = TripQuery(
                search=args.search,
                status=args.status,
                date_range=args.date_range,
                warehouse_id=args.warehouse_id,
                page=args.page,
                page_size=args.page_size or config.default_page_size,
            )
            await show_history(config, query, format_json=args.json)

        elif args.command == "warehouses":
            await show_warehouses(config, format_json=args.json)

        elif args.command == "watch":
            interval = args.interval or config.refresh_interval_seconds
            if interval <= 0:
                print("Error: --interval must be positive", file=sys.stderr)
                return 1
            await watch_active(config, interval, args.dispatcher_id)

    except TripTrackerError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


def cli_main() -> None:
    """Synchronous entry point for the CLI command."""
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    cli_main()
