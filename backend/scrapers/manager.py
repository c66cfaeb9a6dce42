"""
Crawl Manager - orchestrates the per-category walkers.

Runs the Douban collection walker over movie, book and music in that
order, one after another, aggregates the records and decides whether the
crawl as a whole succeeded.
"""

import logging
from typing import Dict, List, Optional

from .base import Colors, CategoryResult, CrawlSession, ListingRecord, LogCallback
from .config import CrawlConfig, get_enabled_categories
from .crawlers.relay import RelayCrawler
from .exceptions import EmptyResult, TransportUnavailable
from .sites.douban import DoubanCollectionScraper

logger = logging.getLogger(__name__)


class CrawlManager:
    """
    Manages one user's crawl across all categories.

    Usage:
        manager = CrawlManager(config)

        # Crawl everything, streaming progress lines
        records = await manager.crawl('ahbei', cookie, print)

        # Per-category statistics of the last crawl
        summary = manager.get_results_summary()
    """

    def __init__(
        self,
        config: Optional[CrawlConfig] = None,
        crawler: Optional[RelayCrawler] = None
    ):
        """
        Initialize the crawl manager.

        Args:
            config: Crawl settings (defaults to CrawlConfig())
            crawler: Relay crawler to share; one is created from config otherwise
        """
        self.config = config or CrawlConfig()
        self.crawler = crawler or RelayCrawler(
            relay_url=self.config.relay_url,
            timeout=self.config.timeout,
        )
        self.scraper = DoubanCollectionScraper(self.crawler, self.config)
        self.session: Optional[CrawlSession] = None

    async def crawl(
        self,
        subject_id: str,
        credential: Optional[str],
        on_log: LogCallback,
        categories: Optional[List[str]] = None
    ) -> List[ListingRecord]:
        """
        Crawl every category for a user.

        Args:
            subject_id: Douban user id
            credential: Cookie string, or None/'' for anonymous access
            on_log: Called with every progress line, in order
            categories: Category keys to crawl (defaults to all enabled)

        Returns:
            All records, category by category

        Raises:
            TransportUnavailable: Nothing collected and the relay was down
            EmptyResult: Nothing collected in any category
        """
        session = CrawlSession(subject_id=subject_id, credential=credential or None)
        self.session = session

        def emit(message: str):
            session.log.append(message)
            on_log(message)

        if categories is None:
            categories = get_enabled_categories()

        emit("🔌 Mode: direct via local relay (your own IP)")
        emit(f"📡 Relay: {self.config.relay_url}")
        if session.authenticated:
            emit("🍪 Cookie loaded, crawling as a logged-in user")
        else:
            emit("⚠️ No cookie, crawling as a guest (public content only, stricter rate limits)")

        logger.info(f"Starting crawl for {subject_id}: {categories}")
        transport_error: Optional[TransportUnavailable] = None

        for category in categories:
            result = await self.scraper.walk_category(category, subject_id, session.credential, emit)
            session.results[category] = result
            session.collected.extend(result.records)

            if result.success:
                emit(f"📦 [{category.upper()}] done: {result.total} records from {result.pages} page(s)")
                logger.info(f"{Colors.green('[OK]')} {category}: {result.total} records")
            else:
                emit(f"❌ [{category.upper()}] failed after {result.total} records: {result.error}")
                logger.warning(f"{Colors.red('[ERR]')} {category}: {result.error}")
                if isinstance(result.exception, TransportUnavailable):
                    transport_error = result.exception

        if not session.collected:
            if transport_error is not None:
                raise transport_error
            raise EmptyResult(subject_id)

        logger.info(f"✅ Crawl complete for {subject_id}: {len(session.collected)} records")
        return session.collected

    async def close(self):
        await self.crawler.close()

    def get_results_summary(self) -> Dict:
        """
        Get summary of the last crawl.

        Returns:
            Summary dictionary with totals
        """
        results: Dict[str, CategoryResult] = self.session.results if self.session else {}
        if not results:
            return {
                'total_categories': 0,
                'successful': 0,
                'failed': 0,
                'total_records': 0,
            }

        successful = sum(1 for r in results.values() if r.success)
        return {
            'total_categories': len(results),
            'successful': successful,
            'failed': len(results) - successful,
            'total_records': sum(r.total for r in results.values()),
            'categories': {k: v.to_dict() for k, v in results.items()},
        }


# Convenience function for standalone usage

async def crawl_user_reviews(
    subject_id: str,
    credential: Optional[str],
    on_log: LogCallback,
    config: Optional[CrawlConfig] = None
) -> List[ListingRecord]:
    """
    Crawl all categories for a user with a throwaway manager.

    Args:
        subject_id: Douban user id
        credential: Optional cookie string
        on_log: Progress callback
        config: Optional crawl settings

    Returns:
        List of ListingRecord
    """
    manager = CrawlManager(config)
    try:
        return await manager.crawl(subject_id, credential, on_log)
    finally:
        await manager.close()
