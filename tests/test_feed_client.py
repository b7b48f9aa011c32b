"""Tests for the update feed client"""

import asyncio

import aiohttp
import pytest

from tests.conftest import FakePool
from tvdb_sync.api.feed_client import RemoteFeedClient
from tvdb_sync.exceptions import FeedError

UPDATES_URL = "https://thetvdb.com/api/Updates.php"


class TestServerTime:
    @pytest.mark.asyncio
    async def test_returns_time_and_uses_type_none(self):
        pool = FakePool(b"<Items><Time>1385483624</Time></Items>")
        client = RemoteFeedClient(pool, "https://thetvdb.com/")

        assert await client.fetch_server_time() == "1385483624"
        assert pool.requests == [(UPDATES_URL, {"type": "none"})]

    @pytest.mark.asyncio
    async def test_stops_reading_once_time_is_known(self):
        body = b"<Items><Time>1</Time>" + b"<Series>5</Series>" * 200 + b"</Items>"
        pool = FakePool(body, chunk_size=8)
        client = RemoteFeedClient(pool, "https://thetvdb.com")

        assert await client.fetch_server_time() == "1"
        total_chunks = -(-len(body) // 8)
        assert pool.responses[0].content.chunks_read < total_chunks

    @pytest.mark.asyncio
    async def test_missing_time_is_an_error(self):
        client = RemoteFeedClient(FakePool(b"<Items></Items>"), "https://thetvdb.com")
        with pytest.raises(FeedError):
            await client.fetch_server_time()


class TestChangedIds:
    @pytest.mark.asyncio
    async def test_returns_ids_in_feed_order(self):
        pool = FakePool(
            b"<Items><Series>80348</Series><Episode>1</Episode>"
            b"<Series>79126</Series><Time>2000</Time></Items>"
        )
        client = RemoteFeedClient(pool, "https://thetvdb.com")
        result = await client.fetch_changed_ids("1000")

        assert result.server_time == "2000"
        assert result.changed_ids == ["80348", "79126"]
        assert pool.requests == [(UPDATES_URL, {"type": "all", "time": "1000"})]

    @pytest.mark.asyncio
    async def test_malformed_body(self):
        client = RemoteFeedClient(
            FakePool(b"<Items><Time>2000</Time><Series>1"), "https://thetvdb.com"
        )
        with pytest.raises(FeedError):
            await client.fetch_changed_ids("1000")

    @pytest.mark.asyncio
    async def test_html_error_page(self):
        client = RemoteFeedClient(
            FakePool(b"<html><body><p>Maintenance<br></body></html>"),
            "https://thetvdb.com",
        )
        with pytest.raises(FeedError):
            await client.fetch_changed_ids("1000")


class TestTransportErrors:
    @pytest.mark.asyncio
    async def test_connection_error(self):
        pool = FakePool(error=aiohttp.ClientConnectionError("connection refused"))
        client = RemoteFeedClient(pool, "https://thetvdb.com")
        with pytest.raises(FeedError, match="connection refused"):
            await client.fetch_changed_ids("1000")

    @pytest.mark.asyncio
    async def test_timeout(self):
        pool = FakePool(error=asyncio.TimeoutError())
        client = RemoteFeedClient(pool, "https://thetvdb.com")
        with pytest.raises(FeedError, match="Timed out"):
            await client.fetch_server_time()
