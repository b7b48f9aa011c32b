"""
Data Models Layer.

This package contains the Pydantic configuration model and the dataclasses
passed between the stages of a synchronization pass.
"""

from .config import SyncConfig
from .stats import SyncStats
from .sync import LibraryItemRef, SyncMode, SyncPlan, UpdateFeedResult

__all__ = [
    "LibraryItemRef",
    "SyncConfig",
    "SyncMode",
    "SyncPlan",
    "SyncStats",
    "UpdateFeedResult",
]
