"""
Core synchronization engine.

`SeriesSyncTask` runs a pass end to end. It delegates the choice of series to
the `SyncPlanner` and the download loop to the `DownloadOrchestrator`.
"""

from .orchestrator import DownloadOrchestrator
from .planner import SyncPlanner
from .sync_task import SeriesSyncTask

__all__ = ["DownloadOrchestrator", "SeriesSyncTask", "SyncPlanner"]
