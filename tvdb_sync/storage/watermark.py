"""
Persists the synchronization watermark: the opaque server time token returned by
the update feed, stored as the only content of a small text file.
"""

import asyncio
import logging
import os
import time
from datetime import timedelta
from pathlib import Path

import aiofiles

log = logging.getLogger(__name__)


class WatermarkStore:
    """
    Reads and atomically replaces the watermark file, and decides whether the
    last pass is recent enough to skip the next one.
    """

    FILE_NAME = "time.txt"
    DEFAULT_INTERVAL = timedelta(hours=24)

    def __init__(self, data_path: Path, min_interval: timedelta = DEFAULT_INTERVAL):
        """
        Args:
            data_path: The series data directory the watermark lives in.
            min_interval: Minimum time between two passes.
        """
        self.path = data_path / self.FILE_NAME
        self.min_interval = min_interval

    def age(self, now: float | None = None) -> timedelta | None:
        """Time since the watermark was last written, or None if it was never written."""
        try:
            mtime = self.path.stat().st_mtime
        except FileNotFoundError:
            return None
        now = time.time() if now is None else now
        # A modification time in the future counts as "just written"
        return timedelta(seconds=max(0.0, now - mtime))

    def is_throttled(self, now: float | None = None) -> bool:
        """True if a watermark exists and is younger than the minimum interval."""
        age = self.age(now)
        return age is not None and age < self.min_interval

    async def read(self) -> str:
        """Returns the stored token, or an empty string if none has been stored."""
        try:
            async with aiofiles.open(self.path, encoding="utf-8") as f:
                return (await f.read()).strip()
        except FileNotFoundError:
            return ""

    async def write(self, watermark: str) -> None:
        """Replaces the stored token. Readers never observe a partial write."""
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
            await f.write(watermark)
            await f.flush()
        await asyncio.to_thread(os.replace, tmp_path, self.path)
        log.debug(f"Watermark '{watermark}' written to {self.path}")

    def clear(self) -> bool:
        """Removes the watermark so the next pass runs in first-run mode."""
        try:
            self.path.unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            log.error(f"Failed to remove watermark file {self.path}: {e}")
            return False
