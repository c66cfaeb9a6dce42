"""
Tests for the relay transport.
"""

import httpx
import pytest

from scrapers.crawlers.relay import RelayCrawler
from scrapers.exceptions import (
    AutomationFlagged,
    BlockedError,
    FetchTimeout,
    PageFetchError,
    RateLimited,
    TransportUnavailable,
)

RELAY_URL = "http://relay.test/fetch"
TARGET = "https://movie.douban.com/people/ahbei/collect?start=0&sort=time&rating=all&filter=all&mode=grid"


def make_crawler(handler) -> RelayCrawler:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return RelayCrawler(relay_url=RELAY_URL, timeout=5.0, client=client)


class TestRelayCrawler:
    """Test RelayCrawler.fetch()."""

    @pytest.mark.asyncio
    async def test_fetch_passes_target_and_cookie(self):
        """Test that the target URL and cookie go to the relay as query params."""
        seen = {}

        def handler(request: httpx.Request):
            seen['url'] = request.url
            return httpx.Response(200, text="<html>ok</html>")

        crawler = make_crawler(handler)
        body = await crawler.fetch(TARGET, "bid=abc; dbcl2=xyz")

        assert body == "<html>ok</html>"
        assert seen['url'].host == "relay.test"
        assert seen['url'].path == "/fetch"
        assert seen['url'].params['url'] == TARGET
        assert seen['url'].params['cookie'] == "bid=abc; dbcl2=xyz"

    @pytest.mark.asyncio
    async def test_anonymous_sends_empty_cookie(self):
        seen = {}

        def handler(request: httpx.Request):
            seen['cookie'] = request.url.params.get('cookie')
            return httpx.Response(200, text="ok")

        await make_crawler(handler).fetch(TARGET, None)
        assert seen['cookie'] == ""

    @pytest.mark.asyncio
    async def test_403_is_rate_limited(self):
        crawler = make_crawler(lambda request: httpx.Response(403, text="Forbidden"))

        with pytest.raises(RateLimited) as exc_info:
            await crawler.fetch(TARGET)

        assert exc_info.value.status == 403
        assert "403" in str(exc_info.value)
        assert isinstance(exc_info.value, BlockedError)

    @pytest.mark.asyncio
    async def test_418_is_automation_flagged(self):
        crawler = make_crawler(lambda request: httpx.Response(418, text="teapot"))

        with pytest.raises(AutomationFlagged) as exc_info:
            await crawler.fetch(TARGET)

        assert exc_info.value.status == 418

    @pytest.mark.asyncio
    async def test_other_errors_are_page_fetch_errors(self):
        crawler = make_crawler(lambda request: httpx.Response(502, text="Bad Gateway" * 100))

        with pytest.raises(PageFetchError) as exc_info:
            await crawler.fetch(TARGET)

        assert exc_info.value.status == 502
        assert len(exc_info.value.body) == 200
        assert not isinstance(exc_info.value, BlockedError)

    @pytest.mark.asyncio
    async def test_3xx_is_success(self):
        crawler = make_crawler(lambda request: httpx.Response(304, text=""))
        assert await crawler.fetch(TARGET) == ""

    @pytest.mark.asyncio
    async def test_unreachable_relay(self):
        """Test that a refused connection is reported as a missing relay."""
        def handler(request):
            raise httpx.ConnectError("Connection refused", request=request)

        with pytest.raises(TransportUnavailable) as exc_info:
            await make_crawler(handler).fetch(TARGET)

        assert exc_info.value.relay_url == RELAY_URL
        assert "relay" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(FetchTimeout) as exc_info:
            await make_crawler(handler).fetch(TARGET)

        assert exc_info.value.url == TARGET
        assert not isinstance(exc_info.value, PageFetchError)

    @pytest.mark.asyncio
    async def test_close_leaves_injected_client_open(self):
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        crawler = RelayCrawler(relay_url=RELAY_URL, client=client)

        await crawler.close()

        assert not client.is_closed
        await client.aclose()

    @pytest.mark.asyncio
    async def test_context_manager_closes_own_client(self):
        async with RelayCrawler(relay_url=RELAY_URL) as crawler:
            client = await crawler._get_client()
        assert client.is_closed
