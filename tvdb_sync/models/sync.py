"""
Plain data structures passed between the stages of a synchronization pass.
"""

from dataclasses import dataclass, field
from enum import Enum


class SyncMode(Enum):
    """How the set of series to refresh is determined."""

    FIRST_RUN = "first_run"  # No watermark: every library series is fetched
    INCREMENTAL = "incremental"  # Changed-since-watermark plus uncached series


@dataclass(frozen=True)
class LibraryItemRef:
    """A series referenced by the library, with its preferred metadata language."""

    external_id: str
    preferred_language: str
    name: str = ""


@dataclass(frozen=True)
class UpdateFeedResult:
    """Result of one update feed request."""

    server_time: str
    changed_ids: list[str] = field(default_factory=list)


@dataclass
class SyncPlan:
    """
    The series to (re)download in one pass.

    Attributes:
        mode: First run or incremental.
        series_ids: Ordered, duplicate-free ids to fetch.
        since: Watermark handed to per-series fetches, None on first run.
        new_watermark: Token to persist once the pass completes.
    """

    mode: SyncMode
    series_ids: list[str]
    since: str | None
    new_watermark: str

    def __len__(self) -> int:
        return len(self.series_ids)
