"""Exceptions raised by the crawl pipeline."""

from typing import Optional


class CrawlError(Exception):
    """Base class for crawl failures."""
    pass


class TransportUnavailable(CrawlError):
    """The local relay could not be reached."""

    def __init__(self, relay_url: str):
        self.relay_url = relay_url
        super().__init__(
            f"Cannot connect to the local relay at {relay_url}. "
            f"Make sure the backend is running ('uvicorn api.main:app') and retry."
        )


class FetchTimeout(CrawlError):
    """The request did not complete within the configured timeout."""

    def __init__(self, url: str, timeout: float):
        self.url = url
        self.timeout = timeout
        super().__init__(f"Request timed out after {timeout:.0f}s: {url}")


class FetchError(CrawlError):
    """The target answered with a failure status or a block page."""

    def __init__(self, message: str, status: Optional[int] = None, body: str = ""):
        self.status = status
        self.body = body
        super().__init__(message)


class PageFetchError(FetchError):
    """Generic 4xx/5xx response."""
    pass


class BlockedError(FetchError):
    """The platform refused the request as throttled or automated."""
    pass


class RateLimited(BlockedError):
    """403: IP throttled by the platform or the cookie is not valid."""
    pass


class AutomationFlagged(BlockedError):
    """418 or an anti-bot page: the request was flagged as automated."""
    pass


class EmptyResult(CrawlError):
    """No records were collected in any category."""

    def __init__(self, subject_id: str = ""):
        self.subject_id = subject_id
        super().__init__(
            "No data collected. Possible causes: the IP is blocked, "
            "the user id is wrong, or the user's collection is private."
        )


class InvalidImport(CrawlError):
    """An imported record payload has the wrong shape."""
    pass
