"""
Data extraction utilities for scrapers.

These functions pull individual fields out of collection-page markup
and user input using regex patterns.
"""

import re
from typing import Optional, List, Iterable, Union

from ..config import TAG_LABEL_PREFIX


RATING_PATTERN = re.compile(r'rating(\d)-')
PEOPLE_PATH_PATTERN = re.compile(r'/people/([^/]+)/?')
BARE_ID_PATTERN = re.compile(r'^\w+$')


def extract_rating(class_names: Union[str, Iterable[str], None]) -> int:
    """
    Extract the star rating from a rating element's class.

    Examples:
        "rating5-t" -> 5
        ["rating3-t"] -> 3
        "date" -> 0

    Args:
        class_names: Class attribute as a string or a list of class names

    Returns:
        Rating digit, or 0 if no rating class is present
    """
    if not class_names:
        return 0
    if not isinstance(class_names, str):
        class_names = ' '.join(class_names)
    match = RATING_PATTERN.search(class_names)
    if match:
        return int(match.group(1))
    return 0


def extract_tags(text: Optional[str]) -> List[str]:
    """
    Split a tag line into tokens.

    Examples:
        "标签: 科幻 剧情" -> ['科幻', '剧情']
        "" -> []
    """
    if not text:
        return []
    text = text.replace(TAG_LABEL_PREFIX, '').strip()
    if not text:
        return []
    return text.split()


def extract_subject_id(text: Optional[str]) -> Optional[str]:
    """
    Resolve a Douban user id from a profile URL or a bare id.

    Examples:
        https://www.douban.com/people/ahbei/ -> ahbei
        ahbei -> ahbei
        "not an id!" -> None
    """
    if not text:
        return None
    text = text.strip()
    match = PEOPLE_PATH_PATTERN.search(text)
    if match and match.group(1):
        return match.group(1)
    if BARE_ID_PATTERN.match(text):
        return text
    return None


def find_signal(text: Optional[str], signals: Iterable[str]) -> Optional[str]:
    """Return the first signal substring present in text, if any."""
    if not text:
        return None
    for signal in signals:
        if signal in text:
            return signal
    return None
