"""
Runs the per-series download loop of a synchronization pass.
"""

import asyncio
import logging
from collections.abc import Callable, Iterable

from tvdb_sync.api.series_fetcher import ItemFetchService
from tvdb_sync.exceptions import ProviderTimeoutError, TransientProviderError
from tvdb_sync.models.stats import SyncStats
from tvdb_sync.models.sync import LibraryItemRef
from tvdb_sync.storage.series_cache import SeriesCache

log = logging.getLogger(__name__)

ProgressSink = Callable[[float], None]


def resolve_languages(library: Iterable[LibraryItemRef]) -> dict[str, list[str]]:
    """
    Groups the distinct preferred languages of the library by case-folded series id.
    A series catalogued several times in different languages is fetched in each.
    """
    languages: dict[str, dict[str, str]] = {}
    for ref in library:
        per_series = languages.setdefault(ref.external_id.casefold(), {})
        per_series.setdefault(ref.preferred_language.casefold(), ref.preferred_language)
    return {key: list(langs.values()) for key, langs in languages.items()}


class DownloadOrchestrator:
    """
    Fetches every planned series in every language it is catalogued in.

    Transient provider errors are logged and the loop moves on. A timeout aborts
    the whole pass: it is re-raised after the other in-flight series are cancelled,
    so the caller never persists a watermark past a series that may be stale.
    """

    def __init__(
        self, fetcher: ItemFetchService, cache: SeriesCache, max_workers: int = 1
    ):
        """
        Args:
            fetcher: The per-series fetch-and-unpack service.
            cache: The series cache the directories are created in.
            max_workers: Number of series processed concurrently.
        """
        self.fetcher = fetcher
        self.cache = cache
        self.max_workers = max(1, max_workers)

    async def run(
        self,
        series_ids: list[str],
        library: Iterable[LibraryItemRef],
        since: str | None,
        progress: ProgressSink,
        stats: SyncStats | None = None,
    ) -> SyncStats:
        """
        Processes the planned series, reporting `completed / total * 100` to
        `progress` after each one finishes.

        Raises:
            ProviderTimeoutError: On the first per-series timeout.
        """
        stats = stats if stats is not None else SyncStats()
        total = len(series_ids)
        if total == 0:
            return stats

        languages = resolve_languages(library)
        completed = 0

        def mark_complete(series_id: str) -> None:
            nonlocal completed
            completed += 1
            stats.series_completed.append(series_id)
            progress(completed / total * 100)

        if self.max_workers == 1:
            for series_id in series_ids:
                await self._update_series(
                    series_id, languages.get(series_id.casefold(), []), since, stats
                )
                mark_complete(series_id)
            return stats

        semaphore = asyncio.Semaphore(self.max_workers)

        async def worker(series_id: str) -> None:
            async with semaphore:
                await self._update_series(
                    series_id, languages.get(series_id.casefold(), []), since, stats
                )
            mark_complete(series_id)

        tasks = [asyncio.create_task(worker(series_id)) for series_id in series_ids]
        try:
            await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        return stats

    async def _update_series(
        self,
        series_id: str,
        languages: list[str],
        since: str | None,
        stats: SyncStats,
    ) -> None:
        if not languages:
            log.debug(f"Series {series_id} is no longer in the library, not updating.")
            return

        for language in languages:
            try:
                target_dir = self.cache.ensure_series_dir(series_id)
            except ValueError as e:
                log.error(f"[red]Skipping series {series_id}: {e}[/red]")
                stats.record_failure(series_id, language, e)
                return

            stats.attempts += 1
            try:
                await self.fetcher.fetch_and_unpack(
                    series_id, target_dir, since, language
                )
            except ProviderTimeoutError as e:
                log.error(f"[red]Timed out updating series {series_id}: {e}[/red]")
                raise
            except TransientProviderError as e:
                log.error(
                    f"[red]Error updating TheTVDB series id {series_id}, "
                    f"language {language}: {e}[/red]"
                )
                stats.record_failure(series_id, language, e)
