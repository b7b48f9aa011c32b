"""
The on-disk series cache: one directory per TheTVDB series id under the series
data path. A directory's existence means the series has been downloaded before.
"""

import logging
from pathlib import Path

from pathvalidate import ValidationError, validate_filename

from tvdb_sync.utils.path import create_dir

log = logging.getLogger(__name__)


class SeriesCache:
    """Lists and creates per-series cache directories. Never deletes them."""

    def __init__(self, data_path: Path):
        self.data_path = data_path

    def ensure_root(self) -> None:
        create_dir(self.data_path)

    def list_cached_ids(self) -> list[str]:
        """Returns the names of all series directories currently in the cache."""
        if not self.data_path.is_dir():
            return []
        return sorted(entry.name for entry in self.data_path.iterdir() if entry.is_dir())

    def series_dir(self, series_id: str) -> Path:
        """
        Returns the cache directory for a series id.

        Raises:
            ValueError: If the id cannot be used as a directory name.
        """
        try:
            validate_filename(series_id, platform="auto")
        except ValidationError as e:
            raise ValueError(f"Series id '{series_id}' is not a valid directory name: {e}") from e
        return self.data_path / series_id

    def ensure_series_dir(self, series_id: str) -> Path:
        """Creates the cache directory for a series if absent. Safe to call concurrently."""
        path = self.series_dir(series_id)
        create_dir(path)
        return path
