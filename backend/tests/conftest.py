"""
Pytest configuration and fixtures for Douban Persona tests.
"""

from types import SimpleNamespace
from typing import List, Optional
from urllib.parse import urlparse, parse_qs

import pytest
from fastapi.testclient import TestClient

from api.main import app


def build_item(
    title: Optional[str] = "Test Movie",
    rating: Optional[int] = None,
    comment: str = "",
    date: str = "",
    tags: Optional[List[str]] = None,
) -> str:
    """Markup for one collection item in Douban's grid mode."""
    parts = ['<div class="item">', '<div class="pic"><a href="#"><img src="x.jpg"></a></div>', '<div class="info"><ul>']
    if title is not None:
        parts.append(f'<li class="title"><a href="https://movie.douban.com/subject/1/"><em>{title}</em></a></li>')
    parts.append('<li>')
    if rating is not None:
        parts.append(f'<span class="rating{rating}-t"></span>')
    if date:
        parts.append(f'<span class="date">{date}</span>')
    if tags:
        parts.append(f'<span class="tags">标签: {" ".join(tags)}</span>')
    parts.append('</li>')
    if comment:
        parts.append(f'<li><span class="comment">{comment}</span></li>')
    parts.append('</ul></div></div>')
    return ''.join(parts)


def build_page(items: List[str], title: str = "ahbei看过的影视") -> str:
    """Markup for a whole collection page."""
    return (
        f'<html><head><title>{title}</title></head><body>'
        f'<div class="grid-view">{"".join(items)}</div>'
        f'</body></html>'
    )


def full_page(count: int = 15, prefix: str = "Film") -> str:
    return build_page([build_item(title=f"{prefix} {i}", rating=4) for i in range(count)])


class FakeCrawler:
    """
    Stands in for RelayCrawler.

    Pages are keyed by (category subdomain, start offset). A value may be
    HTML or an exception to raise. Unknown keys get `default`, or an empty
    page when no default is set.
    """

    def __init__(self, pages=None, default=None):
        self.pages = pages or {}
        self.default = default
        self.calls = []
        self.closed = False

    async def fetch(self, url: str, credential: Optional[str] = None) -> str:
        self.calls.append((url, credential))
        parsed = urlparse(url)
        category = parsed.netloc.split('.')[0]
        start = int(parse_qs(parsed.query)['start'][0])
        page = self.pages.get((category, start), self.default)
        if isinstance(page, Exception):
            raise page
        if page is None:
            return build_page([])
        return page

    async def close(self):
        self.closed = True


@pytest.fixture
def page_builder():
    """Helpers for building collection-page markup."""
    return SimpleNamespace(item=build_item, page=build_page, full=full_page)


@pytest.fixture
def fake_crawler_factory():
    return FakeCrawler


@pytest.fixture
def sleeps(monkeypatch):
    """Record inter-page delays instead of waiting for them."""
    calls = []

    async def fake_sleep(seconds):
        calls.append(seconds)

    monkeypatch.setattr("scrapers.sites.douban.asyncio", SimpleNamespace(sleep=fake_sleep))
    return calls


@pytest.fixture(scope="function")
def client():
    """Create a test client; dependency overrides are cleared afterwards."""
    test_client = TestClient(app)
    yield test_client
    app.dependency_overrides.clear()
