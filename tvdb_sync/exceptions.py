"""
Defines custom exceptions for the application to allow for more specific error handling.
"""


class TvdbSyncError(Exception):
    """Base exception for all application-specific errors."""


class ConfigurationError(TvdbSyncError):
    """Raised for issues related to configuration loading or validation."""


class LibraryIndexError(TvdbSyncError):
    """Raised when the library index file is missing or cannot be parsed."""


class FeedError(TvdbSyncError):
    """
    Raised when the update feed (server time or changed series) cannot be
    fetched or parsed. Always fatal for a synchronization pass.
    """


class ProviderError(TvdbSyncError):
    """Base class for failures while fetching a single series."""

    def __init__(self, series_id: str, language: str, message: str):
        super().__init__(f"Series {series_id} ({language}): {message}")
        self.series_id = series_id
        self.language = language


class TransientProviderError(ProviderError):
    """Raised for recoverable per-series failures (HTTP errors, corrupt archives)."""


class ProviderTimeoutError(ProviderError):
    """
    Raised when a per-series fetch exceeds its deadline. Aborts the whole pass so
    the watermark is not advanced past a series that may be stale.
    """
