"""Logging of outgoing API requests, enabled with TRIP_TRACKER_LOG_REQUESTS."""

import json
import logging
import os
from typing import Any

logger = logging.getLogger(__name__)

SENSITIVE_HEADERS = frozenset({"authorization", "cookie", "x-api-key"})


def should_log_requests() -> bool:
    """Check if request logging is enabled via the TRIP_TRACKER_LOG_REQUESTS variable."""
    return os.getenv("TRIP_TRACKER_LOG_REQUESTS", "").lower() == "true"


def _build_url_with_params(url: str, params: dict[str, Any] | None) -> str:
    if not params:
        return url
    param_str = "&".join(f"{k}={v}" for k, v in sorted(params.items()))
    return f"{url}&{param_str}" if "?" in url else f"{url}?{param_str}"


def redact_headers(headers: dict[str, str]) -> dict[str, str]:
    """Replace credentials in headers before they reach a log."""
    return {
        k: "***REDACTED***" if k.lower() in SENSITIVE_HEADERS else v for k, v in headers.items()
    }


def log_api_request(
    method: str,
    url: str,
    params: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
) -> None:
    """Log an outgoing request if request logging is enabled.

    Args:
        method: HTTP method.
        url: Request URL without query string.
        params: Query parameters.
        headers: Request headers; credentials are redacted.
    """
    if not should_log_requests():
        return

    lines = [f"{method} {_build_url_with_params(url, params)}"]
    if headers:
        lines.append(f"Headers: {json.dumps(redact_headers(headers), indent=2)}")
    logger.info("API Request:\n" + "\n".join(lines))
