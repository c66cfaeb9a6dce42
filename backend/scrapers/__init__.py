"""
Douban collection crawler for Douban Persona.

This module provides the ingestion pipeline:
- Relay transport (httpx, through the local /fetch relay)
- Collection page parsing (BeautifulSoup)
- Per-category pagination and cross-category orchestration
"""

from .base import Category, CategoryConfig, ListingRecord, CrawlSession
from .config import CATEGORIES, CrawlConfig, get_category_config, get_enabled_categories
from .manager import CrawlManager, crawl_user_reviews

__all__ = [
    'Category',
    'CategoryConfig',
    'ListingRecord',
    'CrawlSession',
    'CATEGORIES',
    'CrawlConfig',
    'get_category_config',
    'get_enabled_categories',
    'CrawlManager',
    'crawl_user_reviews',
]
