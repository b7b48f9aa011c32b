"""
Computes which series need a fresh download in the current pass.
"""

import logging
from collections.abc import Iterable

log = logging.getLogger(__name__)


def _unique(ids: Iterable[str]) -> dict[str, str]:
    """Maps case-folded id -> first spelling seen, dropping blanks, keeping order."""
    seen: dict[str, str] = {}
    for series_id in ids:
        series_id = (series_id or "").strip()
        if series_id and series_id.casefold() not in seen:
            seen[series_id.casefold()] = series_id
    return seen


class SyncPlanner:
    """
    First run (no feed consulted): every library series is fetched.

    Incremental run: series that changed remotely and are already cached, plus
    library series that have never been cached. The second group does not depend
    on the feed, since a series added to the library may predate the watermark
    and never show up as changed.
    """

    def plan(
        self,
        existing_cache_dirs: Iterable[str],
        library_ids: Iterable[str],
        feed_changed_ids: Iterable[str] | None,
    ) -> list[str]:
        """
        Args:
            existing_cache_dirs: Names of the series directories in the cache.
            library_ids: Series ids referenced by the library.
            feed_changed_ids: Ids reported by the update feed, or None on first run.

        Returns:
            Ordered, duplicate-free ids. Matching ignores case.
        """
        library = _unique(library_ids)

        if feed_changed_ids is None:
            log.debug(f"First run: planning all {len(library)} library series.")
            return list(library.values())

        cached = _unique(existing_cache_dirs)
        plan: dict[str, str] = {}

        # Spell changed ids as their cache directory is spelled
        for key in _unique(feed_changed_ids):
            if key in cached:
                plan[key] = cached[key]
        changed_count = len(plan)

        for key, series_id in library.items():
            if key not in cached and key not in plan:
                plan[key] = series_id

        log.debug(
            f"Incremental run: {changed_count} changed and cached, "
            f"{len(plan) - changed_count} missing from cache."
        )
        return list(plan.values())
