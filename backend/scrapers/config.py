"""
Category configurations and crawl constants for Douban collections.

Each category has a CategoryConfig that defines:
- The subdomain its collection pages live on
- Display label and icon
- Whether it is included in crawls
"""

from dataclasses import dataclass
from typing import List

from .base import Category, CategoryConfig


# ============================================================
# PAGINATION & BLOCK SIGNALS
# ============================================================

# Douban lists 15 items per collection page in grid mode
PAGE_SIZE = 15

# Hard cap per category, regardless of how many items the user has
MAX_PAGES = 30

# Substrings of the <title> that hint at a block page (advisory only)
TITLE_BLOCK_SIGNALS = (
    '禁止访问',    # access forbidden
    '登录豆瓣',    # login required
)

# Substrings of the raw body that confirm a block page (stops the category)
BODY_BLOCK_SIGNALS = (
    '检测到有异常请求',   # abnormal request detected
    '登录豆瓣',          # login required
)

# Label prefix in front of the tag list on a collection item
TAG_LABEL_PREFIX = '标签: '


# ============================================================
# CATEGORY CONFIGURATIONS
# ============================================================

CATEGORIES = {
    'movie': CategoryConfig(
        category=Category.MOVIE,
        label='Movies',
        subdomain='movie',
        icon='🎬',
    ),

    'book': CategoryConfig(
        category=Category.BOOK,
        label='Books',
        subdomain='book',
        icon='📖',
    ),

    'music': CategoryConfig(
        category=Category.MUSIC,
        label='Music',
        subdomain='music',
        icon='🎵',
    ),
}


@dataclass
class CrawlConfig:
    """Knobs for one crawl run."""
    relay_url: str = "http://localhost:8000/fetch"
    page_size: int = PAGE_SIZE
    max_pages: int = MAX_PAGES
    delay_with_credential: float = 1.5
    delay_anonymous: float = 3.0
    timeout: float = 30.0

    def page_delay(self, credential) -> float:
        """Seconds to wait between pages; logged-in sessions are throttled less."""
        return self.delay_with_credential if credential else self.delay_anonymous

    @classmethod
    def from_settings(cls, settings=None) -> 'CrawlConfig':
        if settings is None:
            from api.config import settings
        return cls(
            relay_url=settings.relay_url,
            delay_with_credential=settings.crawl_delay_with_cookie,
            delay_anonymous=settings.crawl_delay_anonymous,
            timeout=settings.request_timeout,
        )


# ============================================================
# HELPER FUNCTIONS
# ============================================================

def get_category_config(key: str) -> CategoryConfig:
    """
    Get configuration for a category by its key.

    Args:
        key: Category identifier ('movie', 'book' or 'music')

    Returns:
        CategoryConfig for the category

    Raises:
        ValueError: If key is not found
    """
    if key not in CATEGORIES:
        valid_keys = ', '.join(CATEGORIES.keys())
        raise ValueError(f"Unknown category: '{key}'. Valid categories: {valid_keys}")
    return CATEGORIES[key]


def get_enabled_categories() -> List[str]:
    """Enabled category keys, in crawl order."""
    return [k for k, v in CATEGORIES.items() if v.enabled]


def get_category_summary() -> list:
    """Get a summary of all categories for display."""
    summary = []
    for key, config in CATEGORIES.items():
        summary.append({
            'key': key,
            'label': config.label,
            'host': config.host,
            'icon': config.icon,
            'enabled': config.enabled,
        })
    return summary
