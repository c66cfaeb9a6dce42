"""
Data normalization utilities for scrapers.

These functions standardize scraped and imported data into consistent formats.
"""

from typing import Any, List, Optional

from ..base import ListingRecord
from ..config import CATEGORIES
from ..exceptions import InvalidImport


def normalize_text(text: Optional[str]) -> str:
    """
    Collapse whitespace and strip.

    Examples:
        "  The   Truman Show \\n" -> "The Truman Show"
        None -> ""
    """
    if not text:
        return ""
    return ' '.join(text.split())


def normalize_rating(value: Any) -> int:
    """
    Coerce a rating into the 0-5 range.

    Examples:
        "4" -> 4
        7 -> 5
        None -> 0
    """
    try:
        rating = int(value)
    except (TypeError, ValueError):
        return 0
    return max(0, min(5, rating))


def normalize_category(value: Any) -> str:
    """Known category key, defaulting to 'movie'."""
    if isinstance(value, str) and value.strip().lower() in CATEGORIES:
        return value.strip().lower()
    return 'movie'


def normalize_tags(value: Any) -> List[str]:
    if isinstance(value, str):
        return value.split()
    if isinstance(value, (list, tuple)):
        return [str(t).strip() for t in value if str(t).strip()]
    return []


def normalize_imported_records(payload: Any) -> List[ListingRecord]:
    """
    Validate and normalize a user-supplied JSON export of records.

    The payload must be a non-empty list whose first element carries a
    title. Items without a title are dropped; missing categories default
    to 'movie'.

    Raises:
        InvalidImport: If the payload has the wrong shape
    """
    if not isinstance(payload, list) or len(payload) == 0:
        raise InvalidImport("JSON must be a non-empty array of reviews")
    first = payload[0]
    if not isinstance(first, dict) or not first.get('title'):
        raise InvalidImport("Invalid JSON format: missing 'title' field")

    records = []
    for item in payload:
        if not isinstance(item, dict):
            continue
        title = normalize_text(str(item.get('title') or ''))
        if not title:
            continue
        records.append(ListingRecord(
            title=title,
            category=normalize_category(item.get('category')),
            rating=normalize_rating(item.get('rating')),
            comment=str(item.get('comment') or '').strip(),
            date=str(item.get('date') or '').strip(),
            tags=normalize_tags(item.get('tags')),
        ))
    return records
