"""
Dataclass for tracking the statistics of a single synchronization pass.
"""

import time
from dataclasses import dataclass, field

from .sync import SyncMode


@dataclass
class SyncStats:
    """Tracks what a synchronization pass planned, attempted and skipped."""

    outcome: str = "pending"  # disabled | throttled | completed
    mode: SyncMode | None = None
    planned: int = 0
    attempts: int = 0
    series_completed: list[str] = field(default_factory=list)
    transient_failures: list[tuple[str, str, str]] = field(default_factory=list)
    watermark_before: str = ""
    watermark_after: str = ""
    watermark_written: bool = False
    started_at: float = field(default_factory=time.monotonic, repr=False)
    finished_at: float | None = field(default=None, repr=False)

    def record_failure(self, series_id: str, language: str, error: Exception) -> None:
        self.transient_failures.append((series_id, language, str(error)))

    def finish(self, outcome: str) -> None:
        self.outcome = outcome
        self.finished_at = time.monotonic()

    @property
    def duration_s(self) -> float:
        end = self.finished_at if self.finished_at is not None else time.monotonic()
        return end - self.started_at
