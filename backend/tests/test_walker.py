"""
Tests for the per-category pagination walker.
"""

import pytest

from scrapers.config import CrawlConfig
from scrapers.exceptions import AutomationFlagged, PageFetchError, RateLimited, TransportUnavailable
from scrapers.sites.douban import DoubanCollectionScraper


def offsets(crawler):
    return [int(url.split('start=')[1].split('&')[0]) for url, _ in crawler.calls]


class TestWalk:
    """Test DoubanCollectionScraper.walk()."""

    @pytest.mark.asyncio
    async def test_walks_until_empty_page(self, fake_crawler_factory, page_builder, sleeps):
        """Test pagination offsets advance by 15 and stop at the first empty page."""
        crawler = fake_crawler_factory(pages={
            ('movie', 0): page_builder.full(15, prefix="A"),
            ('movie', 15): page_builder.full(15, prefix="B"),
            ('movie', 30): page_builder.full(4, prefix="C"),
        })
        scraper = DoubanCollectionScraper(crawler)
        logs = []

        records = await scraper.walk('movie', 'ahbei', 'bid=1', logs.append)

        assert len(records) == 34
        assert records[0].title == "A 0"
        assert records[-1].title == "C 3"
        assert offsets(crawler) == [0, 15, 30, 45]
        assert all(cred == 'bid=1' for _, cred in crawler.calls)
        assert logs[0] == "⚡ [MOVIE] P1 requesting..."
        assert "✅ Captured 15 records" in logs

    @pytest.mark.asyncio
    async def test_urls_target_category_subdomain(self, fake_crawler_factory, sleeps):
        crawler = fake_crawler_factory()
        await DoubanCollectionScraper(crawler).walk('music', 'ahbei', None, lambda m: None)
        assert crawler.calls[0][0].startswith("https://music.douban.com/people/ahbei/collect?start=0")

    @pytest.mark.asyncio
    async def test_first_page_empty_logs_no_data(self, fake_crawler_factory, sleeps):
        """Test that an empty first page ends the category without an error."""
        crawler = fake_crawler_factory()
        scraper = DoubanCollectionScraper(crawler)
        logs = []

        result = await scraper.walk_category('book', 'ahbei', None, logs.append)

        assert result.records == []
        assert result.success
        assert len(crawler.calls) == 1
        assert any("no data" in line for line in logs)

    @pytest.mark.asyncio
    async def test_later_empty_page_is_silent(self, fake_crawler_factory, page_builder, sleeps):
        crawler = fake_crawler_factory(pages={('movie', 0): page_builder.full(15)})
        logs = []

        await DoubanCollectionScraper(crawler).walk('movie', 'ahbei', None, logs.append)

        assert not any("no data" in line for line in logs)

    @pytest.mark.asyncio
    async def test_block_body_stops_category(self, fake_crawler_factory, page_builder, sleeps):
        """Test that a block page keeps earlier records and fetches nothing more."""
        blocked = page_builder.page([page_builder.item(title="Hidden")]).replace(
            '<body>', '<body><p>检测到有异常请求从你的 IP 发出</p>'
        )
        crawler = fake_crawler_factory(
            pages={('movie', 0): page_builder.full(15), ('movie', 15): blocked},
            default=page_builder.full(15),
        )
        logs = []

        result = await DoubanCollectionScraper(crawler).walk_category('movie', 'ahbei', None, logs.append)

        assert len(result.records) == 15
        assert "Hidden" not in [r.title for r in result.records]
        assert isinstance(result.exception, AutomationFlagged)
        assert not result.success
        assert offsets(crawler) == [0, 15]
        assert logs[-1].startswith("⛔ movie stopped:")

    @pytest.mark.asyncio
    async def test_login_wall_body_stops_category(self, fake_crawler_factory, page_builder, sleeps):
        login_page = page_builder.page([], title="登录豆瓣")
        crawler = fake_crawler_factory(pages={('book', 0): login_page})

        result = await DoubanCollectionScraper(crawler).walk_category('book', 'ahbei', None, lambda m: None)

        assert result.records == []
        assert isinstance(result.exception, AutomationFlagged)

    @pytest.mark.asyncio
    async def test_fetch_error_returns_partial_records(self, fake_crawler_factory, page_builder, sleeps):
        crawler = fake_crawler_factory(pages={
            ('movie', 0): page_builder.full(15),
            ('movie', 15): page_builder.full(15),
            ('movie', 30): RateLimited("403 Forbidden", status=403),
        }, default=page_builder.full(15))

        result = await DoubanCollectionScraper(crawler).walk_category('movie', 'ahbei', None, lambda m: None)

        assert result.total == 30
        assert result.pages == 2
        assert "403" in result.error
        assert len(crawler.calls) == 3

    @pytest.mark.asyncio
    async def test_transport_error_is_caught_per_category(self, fake_crawler_factory, sleeps):
        crawler = fake_crawler_factory(pages={('movie', 0): TransportUnavailable("http://relay/fetch")})

        records = await DoubanCollectionScraper(crawler).walk('movie', 'ahbei', None, lambda m: None)

        assert records == []

    @pytest.mark.asyncio
    async def test_unknown_category_is_recorded_not_raised(self, fake_crawler_factory, sleeps):
        crawler = fake_crawler_factory()
        logs = []

        result = await DoubanCollectionScraper(crawler).walk_category('film', 'ahbei', None, logs.append)

        assert not result.success
        assert isinstance(result.exception, ValueError)
        assert result.records == []
        assert result.completed_at is not None
        assert crawler.calls == []
        assert logs == [f"⛔ film skipped: {result.error}"]

    @pytest.mark.asyncio
    async def test_page_cap(self, fake_crawler_factory, page_builder, sleeps):
        """Test that pagination stops at 30 pages even if every page is full."""
        crawler = fake_crawler_factory(default=page_builder.full(15))

        result = await DoubanCollectionScraper(crawler).walk_category('movie', 'ahbei', 'c', lambda m: None)

        assert len(crawler.calls) == 30
        assert result.pages == 30
        assert result.total == 450
        assert result.success
        assert offsets(crawler)[-1] == 29 * 15

    @pytest.mark.asyncio
    async def test_custom_page_cap(self, fake_crawler_factory, page_builder, sleeps):
        crawler = fake_crawler_factory(default=page_builder.full(15))
        config = CrawlConfig(max_pages=3)

        await DoubanCollectionScraper(crawler, config).walk('movie', 'ahbei', None, lambda m: None)

        assert len(crawler.calls) == 3


class TestPageDelay:
    """Test the delay between page requests."""

    @pytest.mark.asyncio
    async def test_no_delay_before_first_page(self, fake_crawler_factory, sleeps):
        await DoubanCollectionScraper(fake_crawler_factory()).walk('movie', 'ahbei', None, lambda m: None)
        assert sleeps == []

    @pytest.mark.asyncio
    async def test_short_delay_with_cookie(self, fake_crawler_factory, page_builder, sleeps):
        crawler = fake_crawler_factory(pages={
            ('movie', 0): page_builder.full(15),
            ('movie', 15): page_builder.full(15),
        })

        await DoubanCollectionScraper(crawler).walk('movie', 'ahbei', 'bid=1', lambda m: None)

        # pages 2 and 3 (the empty one) each wait once
        assert sleeps == [1.5, 1.5]

    @pytest.mark.asyncio
    async def test_long_delay_anonymous(self, fake_crawler_factory, page_builder, sleeps):
        crawler = fake_crawler_factory(pages={('movie', 0): page_builder.full(15)})

        await DoubanCollectionScraper(crawler).walk('movie', 'ahbei', None, lambda m: None)

        assert sleeps == [3.0]

    @pytest.mark.asyncio
    async def test_delay_precedes_fetch(self, fake_crawler_factory, page_builder, sleeps):
        """Test that each delay is awaited before the next request goes out."""
        events = []
        crawler = fake_crawler_factory(pages={('movie', 0): page_builder.full(15)})
        original_fetch = crawler.fetch

        async def tracking_fetch(url, credential=None):
            events.append(('fetch', len(sleeps)))
            return await original_fetch(url, credential)

        crawler.fetch = tracking_fetch
        await DoubanCollectionScraper(crawler).walk('movie', 'ahbei', None, lambda m: None)

        assert events == [('fetch', 0), ('fetch', 1)]

    @pytest.mark.asyncio
    async def test_error_does_not_delay_other_pages(self, fake_crawler_factory, sleeps):
        crawler = fake_crawler_factory(pages={('movie', 0): PageFetchError("boom", status=500)})

        await DoubanCollectionScraper(crawler).walk('movie', 'ahbei', None, lambda m: None)

        assert sleeps == []
        assert len(crawler.calls) == 1
