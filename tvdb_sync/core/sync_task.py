"""
The synchronization task: gating, throttling, planning, downloading, and the
final watermark commit.
"""

import logging
from datetime import timedelta

from tvdb_sync.api.feed_client import RemoteFeedClient
from tvdb_sync.api.request_pool import RequestPool
from tvdb_sync.api.series_fetcher import ItemFetchService, TvdbSeriesFetcher
from tvdb_sync.models.config import PROVIDER_NAME, SyncConfig
from tvdb_sync.models.stats import SyncStats
from tvdb_sync.models.sync import LibraryItemRef, SyncMode, SyncPlan
from tvdb_sync.storage.library_index import JsonLibraryIndex, LibraryIndex
from tvdb_sync.storage.series_cache import SeriesCache
from tvdb_sync.storage.watermark import WatermarkStore
from tvdb_sync.utils.formatting import format_duration

from .orchestrator import DownloadOrchestrator, ProgressSink
from .planner import SyncPlanner

log = logging.getLogger(__name__)


class SeriesSyncTask:
    """
    Brings the series cache up to date with TheTVDB in one pass.

    The pass is skipped (reporting 100%) when the provider is disabled or the
    previous pass is younger than the update interval. Otherwise the watermark
    decides the mode: with none, every library series is fetched and the new
    watermark is the server's current time; with one, the update feed lists what
    changed since. The new watermark is written only after every planned series
    was processed; any exception leaves it untouched for the next pass to retry.
    """

    def __init__(
        self,
        config: SyncConfig,
        feed_client: RemoteFeedClient,
        fetcher: ItemFetchService,
        library: LibraryIndex,
        watermark_store: WatermarkStore | None = None,
        cache: SeriesCache | None = None,
        planner: SyncPlanner | None = None,
    ):
        data_path = config.series_data_path
        self.config = config
        self.feed_client = feed_client
        self.library = library
        self.watermark_store = watermark_store or WatermarkStore(
            data_path, min_interval=timedelta(hours=config.update_interval_hours)
        )
        self.cache = cache or SeriesCache(data_path)
        self.planner = planner or SyncPlanner()
        self.orchestrator = DownloadOrchestrator(
            fetcher, self.cache, max_workers=config.max_workers
        )

    @classmethod
    def from_config(
        cls,
        config: SyncConfig,
        pool: RequestPool,
        library: LibraryIndex | None = None,
    ) -> "SeriesSyncTask":
        """Wires the TheTVDB feed client, fetcher and JSON library from the config."""
        return cls(
            config,
            feed_client=RemoteFeedClient(pool, config.base_url),
            fetcher=TvdbSeriesFetcher(pool, config.base_url, config.api_key),
            library=library
            or JsonLibraryIndex(config.library_path, config.preferred_language),
        )

    async def run(self, progress: ProgressSink) -> SyncStats:
        """
        Runs one pass.

        Returns:
            The pass statistics; `outcome` is disabled, throttled or completed.

        Raises:
            FeedError: If the update feed could not be fetched or parsed.
            ProviderTimeoutError: If a series download timed out.
            LibraryIndexError: If the library could not be read.
        """
        stats = SyncStats()

        if not self.config.provider_enabled:
            log.info(f"{PROVIDER_NAME} is disabled, skipping series update.")
            progress(100)
            stats.finish("disabled")
            return stats

        self.cache.ensure_root()

        # Don't check for updates more often than the update interval
        if self.watermark_store.is_throttled():
            age = self.watermark_store.age() or timedelta(0)
            log.info(
                f"Series data was updated {format_duration(age)} ago, "
                "skipping update check."
            )
            progress(100)
            stats.finish("throttled")
            return stats

        last_watermark = await self.watermark_store.read()
        stats.watermark_before = last_watermark

        library = self.library.list_series()
        plan = await self.build_plan(last_watermark, library)
        stats.mode = plan.mode
        stats.planned = len(plan)
        log.info(
            f"{plan.mode.value.replace('_', ' ').capitalize()} update: "
            f"{len(plan)} series to refresh."
        )

        await self.orchestrator.run(
            plan.series_ids, library, plan.since, progress, stats
        )

        await self.watermark_store.write(plan.new_watermark)
        stats.watermark_after = plan.new_watermark
        stats.watermark_written = True
        log.debug(f"Watermark advanced from '{last_watermark}' to '{plan.new_watermark}'")

        progress(100)
        stats.finish("completed")
        return stats

    async def build_plan(
        self, last_watermark: str, library: list[LibraryItemRef]
    ) -> SyncPlan:
        """Consults the feed and the cache to decide what this pass fetches."""
        existing = self.cache.list_cached_ids()
        library_ids = [ref.external_id for ref in library]

        if not last_watermark:
            new_watermark = await self.feed_client.fetch_server_time()
            return SyncPlan(
                mode=SyncMode.FIRST_RUN,
                series_ids=self.planner.plan(existing, library_ids, None),
                since=None,
                new_watermark=new_watermark,
            )

        feed = await self.feed_client.fetch_changed_ids(last_watermark)
        return SyncPlan(
            mode=SyncMode.INCREMENTAL,
            series_ids=self.planner.plan(existing, library_ids, feed.changed_ids),
            since=last_watermark,
            new_watermark=feed.server_time,
        )
