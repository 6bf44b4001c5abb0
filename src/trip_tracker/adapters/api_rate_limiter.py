"""Spacing of outgoing requests to the trip backend.

Every repository talking to the same API shares one limiter, so a refresh
loop and a manual trigger never burst requests at the backend.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import ClassVar

logger = logging.getLogger(__name__)


class ApiRateLimiter:
    """Enforces a minimum delay between consecutive requests to one API."""

    # Shared limiters keyed by API name
    _instances: ClassVar[dict[str, ApiRateLimiter]] = {}

    def __init__(self, api_name: str, min_delay_seconds: float = 0.5) -> None:
        """Initialize the rate limiter.

        Args:
            api_name: Name of the API (for logging).
            min_delay_seconds: Minimum delay between requests in seconds.
        """
        self.api_name = api_name
        self.min_delay_seconds = max(0.0, min_delay_seconds)
        self._last_request_time: float | None = None
        self._lock = asyncio.Lock()

    @classmethod
    def get_instance(cls, api_name: str, min_delay_seconds: float = 0.5) -> ApiRateLimiter:
        """Get the shared limiter for an API, creating it on first use.

        The delay of an existing limiter is kept; the first caller decides it.
        """
        limiter = cls._instances.get(api_name)
        if limiter is None:
            limiter = cls(api_name, min_delay_seconds)
            cls._instances[api_name] = limiter
            logger.info(f"Created rate limiter for {api_name} with {min_delay_seconds}s delay")
        return limiter

    @classmethod
    def reset_instances(cls) -> None:
        """Forget all shared limiters."""
        cls._instances.clear()

    async def acquire(self) -> None:
        """Wait until the minimum delay since the previous request has passed."""
        async with self._lock:
            if self._last_request_time is not None:
                wait_time = self.min_delay_seconds - (time.monotonic() - self._last_request_time)
                if wait_time > 0:
                    logger.debug(f"{self.api_name}: waiting {wait_time:.2f}s before next request")
                    await asyncio.sleep(wait_time)
            self._last_request_time = time.monotonic()

    async def __aenter__(self) -> ApiRateLimiter:
        await self.acquire()
        return self

    async def __aexit__(
        self, _exc_type: type | None, _exc_val: Exception | None, _exc_tb: object
    ) -> None:
        """Nothing to release; the delay is measured from request start."""
