"""
Client for TheTVDB update feed: the provider's current server time, and the
series changed since a previous server time.
"""

import asyncio
import logging

import aiohttp

from tvdb_sync.exceptions import FeedError
from tvdb_sync.models.sync import UpdateFeedResult

from .feed_parser import UpdateFeedParser
from .request_pool import RequestPool

log = logging.getLogger(__name__)


class RemoteFeedClient:
    """
    Streams and parses Updates.php documents. Failures are raised as FeedError
    and never retried here; the caller's next pass is the retry.
    """

    UPDATES_ENDPOINT = "/api/Updates.php"
    CHUNK_SIZE = 16384

    def __init__(self, pool: RequestPool, base_url: str):
        """
        Args:
            pool: The shared outbound request pool.
            base_url: Provider root URL, e.g. https://thetvdb.com
        """
        self.pool = pool
        self.base_url = base_url.rstrip("/")

    @property
    def updates_url(self) -> str:
        return self.base_url + self.UPDATES_ENDPOINT

    async def fetch_server_time(self) -> str:
        """Returns the provider's current time token, used to seed a first run."""
        parser = await self._fetch_feed({"type": "none"}, stop_at_time=True)
        server_time = parser.result().server_time
        log.debug(f"TheTVDB server time is {server_time}")
        return server_time

    async def fetch_changed_ids(self, since: str) -> UpdateFeedResult:
        """
        Returns every series id reported as changed since the given watermark, in
        feed order and unfiltered, together with the new server time.
        """
        parser = await self._fetch_feed({"type": "all", "time": since})
        result = parser.result()
        log.debug(
            f"Update feed since {since}: {len(result.changed_ids)} series changed, "
            f"{parser.skipped_elements} other entries skipped, "
            f"server time {result.server_time}"
        )
        return result

    async def _fetch_feed(
        self, params: dict[str, str], stop_at_time: bool = False
    ) -> UpdateFeedParser:
        parser = UpdateFeedParser()
        try:
            async with self.pool.get(self.updates_url, params=params) as response:
                async for chunk in response.content.iter_chunked(self.CHUNK_SIZE):
                    parser.feed(chunk)
                    if stop_at_time and parser.server_time is not None:
                        return parser
            parser.close()
        except asyncio.TimeoutError as e:
            raise FeedError(f"Timed out fetching update feed ({params})") from e
        except aiohttp.ClientError as e:
            raise FeedError(f"Could not fetch update feed ({params}): {e}") from e
        return parser
