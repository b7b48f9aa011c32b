"""
Storage Layer.

This package handles all data persistence: the configuration file, the
synchronization watermark, the per-series cache directories and the library
index the series ids are read from.
"""

from .config_manager import ConfigManager
from .library_index import JsonLibraryIndex, LibraryIndex, StaticLibraryIndex
from .series_cache import SeriesCache
from .watermark import WatermarkStore

__all__ = [
    "ConfigManager",
    "JsonLibraryIndex",
    "LibraryIndex",
    "SeriesCache",
    "StaticLibraryIndex",
    "WatermarkStore",
]
