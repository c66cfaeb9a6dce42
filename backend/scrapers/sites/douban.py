"""
Douban collection scraper.

Walks the paginated "collect" pages of one user for one category
(movie.douban.com, book.douban.com, music.douban.com) and turns every
item block into a ListingRecord.

Page structure (grid mode):
    <div class="item">
      <li class="title"><a href="...">Title</a></li>
      <span class="rating5-t"></span>
      <span class="date">2023-11-15</span>
      <span class="tags">标签: 剧情 科幻</span>
      <span class="comment">...</span>
    </div>
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import List, Optional

from bs4 import BeautifulSoup, Tag

from ..base import Colors, CategoryResult, ListingRecord, LogCallback
from ..config import (
    CrawlConfig,
    get_category_config,
    TITLE_BLOCK_SIGNALS,
    BODY_BLOCK_SIGNALS,
)
from ..crawlers.relay import RelayCrawler
from ..exceptions import AutomationFlagged
from ..utils.extractors import extract_rating, extract_tags, find_signal
from ..utils.normalizers import normalize_text

logger = logging.getLogger(__name__)


def parse_collection_page(html: str, category: str) -> List[ListingRecord]:
    """
    Parse one collection page into records.

    A block-looking <title> is only logged here; the walker makes the
    authoritative call from the raw body. Malformed items are skipped and
    items without a title are dropped.

    Args:
        html: Raw page markup
        category: Category key stamped on every record

    Returns:
        Records in page order
    """
    soup = BeautifulSoup(html, 'html.parser')

    page_title = soup.title.get_text() if soup.title else ''
    if find_signal(page_title, TITLE_BLOCK_SIGNALS):
        logger.warning(f"[Douban Block] suspicious page title: {page_title.strip()}")

    records = []
    for item in soup.select('.item'):
        try:
            record = _parse_item(item, category)
        except Exception as e:
            logger.debug(f"Skipping malformed item: {e}")
            continue
        if record is not None:
            records.append(record)
    return records


def _parse_item(item: Tag, category: str) -> Optional[ListingRecord]:
    """Extract one record from an item block, or None if it has no title."""
    anchor = item.select_one('.title a')
    title = normalize_text(anchor.get_text()) if anchor else ''
    if not title:
        return None

    rating = 0
    rating_el = item.select_one('[class^="rating"]')
    if rating_el is not None:
        rating = extract_rating(rating_el.get('class'))

    comment_el = item.select_one('.comment')
    date_el = item.select_one('.date')
    tags_el = item.select_one('.tags')

    return ListingRecord(
        title=title,
        category=category,
        rating=rating,
        comment=comment_el.get_text(strip=True) if comment_el else '',
        date=date_el.get_text(strip=True) if date_el else '',
        tags=extract_tags(tags_el.get_text()) if tags_el else [],
    )


class DoubanCollectionScraper:
    """
    Pagination walker for one user's Douban collections.

    Pages are fetched strictly one after another: page N+1 is only
    requested after page N was parsed and the inter-page delay elapsed.
    """

    def __init__(self, crawler: RelayCrawler, config: Optional[CrawlConfig] = None):
        self.crawler = crawler
        self.config = config or CrawlConfig()

    async def walk(
        self,
        category: str,
        subject_id: str,
        credential: Optional[str],
        on_log: LogCallback
    ) -> List[ListingRecord]:
        """Walk one category and return the records collected before stopping."""
        result = await self.walk_category(category, subject_id, credential, on_log)
        return result.records

    async def walk_category(
        self,
        category: str,
        subject_id: str,
        credential: Optional[str],
        on_log: LogCallback
    ) -> CategoryResult:
        """
        Walk one category until an empty page, an error or the page cap.

        Errors never escape: they are logged, recorded on the result and
        end this category's loop.
        """
        cat_logger = logging.getLogger(f"scraper.{category.upper()}")
        result = CategoryResult(category=category, started_at=datetime.now(timezone.utc))

        def emit(message: str, level: int = logging.INFO):
            on_log(message)
            cat_logger.log(level, message)

        try:
            category_config = get_category_config(category)
        except ValueError as e:
            result.error = str(e)
            result.exception = e
            emit(f"⛔ {category} skipped: {e}", logging.WARNING)
            result.completed_at = datetime.now(timezone.utc)
            return result

        delay = self.config.page_delay(credential)
        start = 0

        for page in range(1, self.config.max_pages + 1):
            url = category_config.collection_url(subject_id, start)
            try:
                emit(f"⚡ [{category.upper()}] P{page} requesting...")
                if page > 1:
                    await asyncio.sleep(delay)

                html = await self.crawler.fetch(url, credential)

                signal = find_signal(html, BODY_BLOCK_SIGNALS)
                if signal:
                    raise AutomationFlagged(
                        f"Douban anti-bot page ({signal}): request rate too high",
                        body=html[:200],
                    )

                items = parse_collection_page(html, category)
                if not items:
                    if page == 1:
                        emit(f"ℹ️ {category}: no data, or the collection is private")
                    break

                result.pages = page
                result.records.extend(items)
                emit(f"✅ Captured {len(items)} records")
                start += self.config.page_size

            except Exception as e:
                result.error = str(e)
                result.exception = e
                emit(f"⛔ {category} stopped: {e}", logging.WARNING)
                cat_logger.debug(f"{Colors.red('[ERR]')} {url}")
                break

        result.completed_at = datetime.now(timezone.utc)
        return result
