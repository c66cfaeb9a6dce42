"""Site-specific scraper implementations."""

from .douban import DoubanCollectionScraper, parse_collection_page

__all__ = ['DoubanCollectionScraper', 'parse_collection_page']
