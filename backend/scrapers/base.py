"""
Base data structures for the Douban collection crawler.

This module defines the record shape produced by the page parser, the
per-category configuration and the crawl-wide settings object.
"""

from typing import List, Dict, Optional, Callable, Any
from dataclasses import dataclass, field, asdict
from enum import Enum
from datetime import datetime


# ANSI color codes for terminal output
class Colors:
    """ANSI color codes for colorized logging."""
    RESET = '\033[0m'
    GREEN = '\033[92m'
    RED = '\033[91m'

    @staticmethod
    def green(text):
        return f"{Colors.GREEN}{text}{Colors.RESET}"

    @staticmethod
    def red(text):
        return f"{Colors.RED}{text}{Colors.RESET}"


# Observer invoked with each progress line, in emission order
LogCallback = Callable[[str], None]


class Category(Enum):
    """Collection categories, in crawl order."""
    MOVIE = "movie"
    BOOK = "book"
    MUSIC = "music"


@dataclass
class CategoryConfig:
    """Configuration for one collection category."""
    category: Category
    label: str                          # Display name
    subdomain: str                      # e.g. 'movie' -> movie.douban.com
    icon: str                           # Used when compressing records for the profile prompt
    enabled: bool = True

    @property
    def host(self) -> str:
        return f"{self.subdomain}.douban.com"

    def collection_url(self, subject_id: str, start: int) -> str:
        """Build the listing URL for one page of a user's collection."""
        return (
            f"https://{self.host}/people/{subject_id}/collect"
            f"?start={start}&sort=time&rating=all&filter=all&mode=grid"
        )


@dataclass
class ListingRecord:
    """One consumed item from a collection page."""
    title: str
    category: str
    rating: int = 0                     # 0 = unrated, otherwise 1-5
    comment: str = ""
    date: str = ""                      # YYYY-MM-DD, may be empty
    tags: List[str] = field(default_factory=list)

    @property
    def year(self) -> str:
        return self.date[:4] if self.date else ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class CategoryResult:
    """Outcome of walking one category."""
    category: str
    started_at: datetime
    completed_at: Optional[datetime] = None
    pages: int = 0
    records: List[ListingRecord] = field(default_factory=list)
    error: Optional[str] = None
    exception: Optional[Exception] = field(default=None, repr=False)

    @property
    def success(self) -> bool:
        return self.error is None

    @property
    def total(self) -> int:
        return len(self.records)

    @property
    def duration_seconds(self) -> Optional[float]:
        if self.completed_at and self.started_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None

    def to_dict(self) -> Dict:
        return {
            'category': self.category,
            'started_at': self.started_at.isoformat(),
            'completed_at': self.completed_at.isoformat() if self.completed_at else None,
            'duration_seconds': self.duration_seconds,
            'pages': self.pages,
            'total': self.total,
            'error': self.error,
            'success': self.success,
        }


@dataclass
class CrawlSession:
    """State for one user-initiated crawl."""
    subject_id: str
    credential: Optional[str] = None
    collected: List[ListingRecord] = field(default_factory=list)
    log: List[str] = field(default_factory=list)
    results: Dict[str, CategoryResult] = field(default_factory=dict)

    @property
    def authenticated(self) -> bool:
        return bool(self.credential)
