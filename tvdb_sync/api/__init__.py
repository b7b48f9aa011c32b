"""
TheTVDB API Layer.

This package handles all communication with TheTVDB: the shared request pool,
the update feed and the per-series archive download.
"""

from .feed_client import RemoteFeedClient
from .feed_parser import UpdateFeedParser
from .rate_limiter import AdaptiveRateLimiter
from .request_pool import RequestPool
from .series_fetcher import ItemFetchService, TvdbSeriesFetcher

__all__ = [
    "AdaptiveRateLimiter",
    "ItemFetchService",
    "RemoteFeedClient",
    "RequestPool",
    "TvdbSeriesFetcher",
    "UpdateFeedParser",
]
