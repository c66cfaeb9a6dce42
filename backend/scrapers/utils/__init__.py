"""Shared utilities for scrapers."""

from .normalizers import (
    normalize_text,
    normalize_rating,
    normalize_imported_records,
)
from .extractors import (
    extract_rating,
    extract_tags,
    extract_subject_id,
    find_signal,
)

__all__ = [
    'normalize_text',
    'normalize_rating',
    'normalize_imported_records',
    'extract_rating',
    'extract_tags',
    'extract_subject_id',
    'find_signal',
]
