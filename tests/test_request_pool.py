"""Tests for the shared request pool against a local aiohttp server"""

import asyncio

import aiohttp
import pytest
import pytest_asyncio
from aiohttp import test_utils, web

from tvdb_sync.api.request_pool import RequestPool


def make_app() -> web.Application:
    async def updates(request: web.Request) -> web.Response:
        return web.Response(text="<Items><Time>1000</Time></Items>")

    async def busy(request: web.Request) -> web.Response:
        return web.Response(status=429, headers={"Retry-After": "30"}, text="slow down")

    app = web.Application()
    app.router.add_get("/api/Updates.php", updates)
    app.router.add_get("/busy", busy)
    return app


@pytest_asyncio.fixture
async def server():
    async with test_utils.TestServer(make_app()) as test_server:
        yield test_server


class TestRequestPool:
    @pytest.mark.asyncio
    async def test_yields_unread_response(self, server):
        async with RequestPool(requests_per_second=50) as pool:
            url = str(server.make_url("/api/Updates.php"))
            async with pool.get(url, params={"type": "none"}) as response:
                assert response.status == 200
                assert await response.read() == b"<Items><Time>1000</Time></Items>"

    @pytest.mark.asyncio
    async def test_429_backs_off_and_raises(self, server):
        async with RequestPool(requests_per_second=8.0) as pool:
            with pytest.raises(aiohttp.ClientResponseError) as exc_info:
                async with pool.get(str(server.make_url("/busy"))):
                    pass

            assert exc_info.value.status == 429
            limiter = pool._rate_limiter
            # Halved from 8/s, allowing for the slow recovery step taken on acquire
            assert 4.0 <= limiter.rate <= 4.0 * 1.005
            # Retry-After: 30 holds later callers for about that long
            remaining = limiter._blocked_until - asyncio.get_running_loop().time()
            assert 25 < remaining <= 30

    @pytest.mark.asyncio
    async def test_session_closed_on_exit(self, server):
        pool = RequestPool()
        async with pool:
            async with pool.get(str(server.make_url("/api/Updates.php"))):
                pass
        assert pool._session.closed
