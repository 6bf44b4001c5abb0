"""HTTP client for the trip backend API."""

import logging
from typing import TYPE_CHECKING, Any

import aiohttp

from trip_tracker.adapters.api_rate_limiter import ApiRateLimiter
from trip_tracker.adapters.api_request_logger import log_api_request
from trip_tracker.adapters.rest_api.constants import TRIP_API_NAME
from trip_tracker.domain.exceptions import TripFetchError

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from aiohttp import ClientResponse, ClientSession


class TripApiHttpClient:
    """HTTP client for the trip backend.

    Responses use the envelope ``{"success": bool, "data": ..., "message": str}``.
    Every failure is raised as TripFetchError so callers see one error type for
    transport problems.
    """

    def __init__(
        self,
        session: "ClientSession",
        base_url: str,
        token: str | None = None,
        timeout_seconds: float = 10,
        min_delay_seconds: float = 0.5,
    ) -> None:
        """Initialize the client.

        Args:
            session: Shared aiohttp session.
            base_url: API base URL without trailing slash.
            token: Optional bearer token.
            timeout_seconds: Total timeout per request.
            min_delay_seconds: Minimum spacing between requests to the API.
        """
        self._session = session
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._rate_limiter = ApiRateLimiter.get_instance(TRIP_API_NAME, min_delay_seconds)

    def _headers(self) -> dict[str, str]:
        headers = {"accept": "application/json"}
        if self._token:
            headers["authorization"] = f"Bearer {self._token}"
        return headers

    async def _log_error_response(self, response: "ClientResponse", url: str) -> None:
        """Log error response details."""
        error_text = await response.text()
        error_body = error_text[:500] if error_text else "(empty response body)"
        retry_after = response.headers.get("Retry-After")
        extra_info = f" [Retry-After: {retry_after}]" if retry_after else ""
        logger.error(
            f"Trip API returned status {response.status} for {url}: {error_body}{extra_info}"
        )

    @staticmethod
    def unwrap_envelope(payload: Any) -> Any:
        """Return the ``data`` member of a response envelope.

        Raises:
            TripFetchError: If the envelope reports ``success: false``.
        """
        if not isinstance(payload, dict) or "success" not in payload:
            return payload
        if not payload.get("success"):
            raise TripFetchError(payload.get("message") or "Trip API reported failure")
        return payload.get("data")

    async def get_json(self, path: str, params: dict[str, str | int] | None = None) -> Any:
        """GET a path below the base URL and return the unwrapped data.

        Raises:
            TripFetchError: On non-200 responses, connection errors, timeouts or
                unsuccessful envelopes.
        """
        url = f"{self._base_url}{path}"
        headers = self._headers()
        log_api_request("GET", url, params=params, headers=headers)

        await self._rate_limiter.acquire()
        try:
            async with self._session.get(
                url, params=params, headers=headers, timeout=self._timeout
            ) as response:
                if response.status != 200:
                    await self._log_error_response(response, url)
                    raise TripFetchError(
                        f"Trip API returned status {response.status}",
                        status_code=response.status,
                    )
                payload = await response.json(content_type=None)
        except aiohttp.ClientError as e:
            raise TripFetchError(f"Trip API request to {url} failed: {e}") from e
        except TimeoutError as e:
            raise TripFetchError(f"Trip API request to {url} timed out") from e

        return self.unwrap_envelope(payload)
