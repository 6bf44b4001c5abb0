"""Constants for the trip backend REST API."""

TRIPS_PATH = "/trip"
ACTIVE_TRIPS_PATH = "/trip/active"
WAREHOUSES_PATH = "/warehouse"

# Name under which requests to the backend share one rate limiter
TRIP_API_NAME = "trip_api"

# Status spellings used by older backend versions
TRIP_STATUS_ALIASES = {
    "Assigned": "Created",
    "Started": "InProgress",
}
STOP_STATUS_ALIASES = {
    "Completed": "Delivered",
    "AtStore": "InTransit",
    "Dispatched": "Pending",
}
