"""Test configuration and fixtures"""

import asyncio
import tempfile
from contextlib import asynccontextmanager
from pathlib import Path

import pytest

from tvdb_sync.models.config import SyncConfig
from tvdb_sync.models.sync import LibraryItemRef, UpdateFeedResult


class FakeContent:
    """Stands in for aiohttp's StreamReader, yielding the body in small chunks."""

    def __init__(self, body: bytes, chunk_size: int):
        self.body = body
        self.chunk_size = chunk_size
        self.chunks_read = 0

    async def iter_chunked(self, n):
        for i in range(0, len(self.body), self.chunk_size):
            self.chunks_read += 1
            yield self.body[i : i + self.chunk_size]


class FakeResponse:
    def __init__(self, body: bytes, chunk_size: int):
        self.status = 200
        self.content = FakeContent(body, chunk_size)


class FakePool:
    """Records requests and serves a canned body or raises a canned error."""

    def __init__(self, body: bytes = b"", error: BaseException | None = None, chunk_size: int = 7):
        self.body = body
        self.error = error
        self.chunk_size = chunk_size
        self.requests = []
        self.responses = []

    @asynccontextmanager
    async def get(self, url, params=None):
        self.requests.append((url, params))
        if self.error is not None:
            raise self.error
        response = FakeResponse(self.body, self.chunk_size)
        self.responses.append(response)
        yield response


class FakeFeedClient:
    """Update feed double: serves a fixed server time and changed-id list."""

    def __init__(self, server_time="1000", changed=(), feed_time="2000", error=None):
        self.server_time = server_time
        self.changed = list(changed)
        self.feed_time = feed_time
        self.error = error
        self.server_time_calls = 0
        self.changed_calls = []

    @property
    def network_calls(self) -> int:
        return self.server_time_calls + len(self.changed_calls)

    async def fetch_server_time(self):
        self.server_time_calls += 1
        if self.error is not None:
            raise self.error
        return self.server_time

    async def fetch_changed_ids(self, since):
        self.changed_calls.append(since)
        if self.error is not None:
            raise self.error
        return UpdateFeedResult(server_time=self.feed_time, changed_ids=list(self.changed))


class FakeFetcher:
    """Per-series fetch double. `failures` maps (series_id, language) to an exception."""

    def __init__(self, failures=None):
        self.failures = failures or {}
        self.calls = []

    async def fetch_and_unpack(self, series_id, target_dir, since, language):
        assert target_dir.is_dir()
        self.calls.append((series_id, language, since))
        await asyncio.sleep(0)
        error = self.failures.get((series_id, language))
        if error is not None:
            raise error

    @property
    def fetched_ids(self) -> list[str]:
        return [series_id for series_id, _, _ in self.calls]


class ProgressRecorder:
    def __init__(self):
        self.values = []

    def __call__(self, percent):
        self.values.append(percent)


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests"""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def sync_config(temp_dir):
    """A valid configuration rooted in the temporary directory"""
    return SyncConfig(api_key="TESTKEY", config_path=str(temp_dir))


@pytest.fixture
def data_path(sync_config):
    path = sync_config.series_data_path
    path.mkdir(parents=True, exist_ok=True)
    return path


@pytest.fixture
def progress():
    return ProgressRecorder()


@pytest.fixture
def library_refs():
    """Library with series A, B and C; B is catalogued twice in different languages"""
    return [
        LibraryItemRef("A", "en", "Series A"),
        LibraryItemRef("B", "en", "Series B"),
        LibraryItemRef("B", "de", "Series B (German)"),
        LibraryItemRef("C", "en", "Series C"),
    ]
