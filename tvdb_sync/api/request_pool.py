"""
The outbound request budget shared by the feed client and the series fetcher.
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any

import aiohttp

from tvdb_sync import __version__

from .rate_limiter import AdaptiveRateLimiter

log = logging.getLogger(__name__)

MAX_RETRY_AFTER_S = 120.0


def parse_retry_after(value: str | None) -> float | None:
    """
    Reads a Retry-After header given in seconds or as an HTTP date, capped at
    MAX_RETRY_AFTER_S. Returns None when absent or unreadable.
    """
    if not value:
        return None
    try:
        seconds = float(value)
    except ValueError:
        try:
            when = parsedate_to_datetime(value)
        except (TypeError, ValueError):
            return None
        if when.tzinfo is None:
            when = when.replace(tzinfo=timezone.utc)
        seconds = (when - datetime.now(timezone.utc)).total_seconds()
    return min(max(0.0, seconds), MAX_RETRY_AFTER_S)


class RequestPool:
    """
    One aiohttp session plus a bounded number of in-flight requests and an
    adaptive rate limit. Created by the application and passed to every
    component that talks to TheTVDB, then closed by the application.
    """

    def __init__(
        self,
        max_connections: int = 4,
        requests_per_second: float = 4.0,
        timeout_s: float = 60,
    ):
        """
        Args:
            max_connections: Maximum number of concurrent requests.
            requests_per_second: Initial request rate.
            timeout_s: Total timeout for one request, including the body.
        """
        self.max_connections = max_connections
        self.timeout = aiohttp.ClientTimeout(
            total=timeout_s, sock_connect=min(15, timeout_s)
        )
        self._semaphore = asyncio.BoundedSemaphore(max_connections)
        self._rate_limiter = AdaptiveRateLimiter(
            requests_per_second, max_calls_per_second=requests_per_second * 2
        )
        self._session: aiohttp.ClientSession | None = None

    async def _initialize_session(self) -> aiohttp.ClientSession:
        """Ensures an active aiohttp session is available with compression enabled."""
        if self._session is None or self._session.closed:
            connector = aiohttp.TCPConnector(
                limit=self.max_connections,
                ttl_dns_cache=300,
                enable_cleanup_closed=True,
            )
            self._session = aiohttp.ClientSession(
                connector=connector,
                headers={
                    "User-Agent": f"tvdb-sync/{__version__}",
                    "Accept-Encoding": "gzip, deflate",
                },
                timeout=self.timeout,
            )
            log.debug(f"Created request pool with limit={self.max_connections}")
        return self._session

    @asynccontextmanager
    async def get(
        self, url: str, params: dict[str, Any] | None = None
    ) -> AsyncIterator[aiohttp.ClientResponse]:
        """
        Issues a GET request within the pool's limits and yields the response
        with its body still unread.

        Raises:
            aiohttp.ClientResponseError: For non-2xx statuses.
            asyncio.TimeoutError: When the request exceeds its timeout.
        """
        session = await self._initialize_session()
        async with self._semaphore:
            await self._rate_limiter.acquire()
            async with session.get(url, params=params) as response:
                if response.status == 429:
                    await self._rate_limiter.on_429(
                        parse_retry_after(response.headers.get("Retry-After"))
                    )
                response.raise_for_status()
                yield response

    async def close(self) -> None:
        """Gracefully closes the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()
            log.debug("Request pool closed.")

    async def __aenter__(self) -> "RequestPool":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
