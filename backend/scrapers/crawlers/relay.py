"""
Relay crawler: fetches pages through the local /fetch relay.

The relay adds the browser identity, the session cookie and the Douban
Referer/Host headers, so every request leaves from the operator's own IP
with a realistic fingerprint. This crawler only talks to the relay.
"""

from typing import Optional
import httpx
import logging

from ..exceptions import (
    TransportUnavailable,
    FetchTimeout,
    PageFetchError,
    RateLimited,
    AutomationFlagged,
)

logger = logging.getLogger(__name__)

# Longest body excerpt kept on a FetchError
BODY_SNIPPET_LENGTH = 200


class RelayCrawler:
    """
    Fetches target URLs via the relay endpoint.

    Uses a reusable httpx.AsyncClient. Failures are classified into the
    crawl exception hierarchy; no retries happen here, the walker decides
    what a failure means for its category.
    """

    def __init__(
        self,
        relay_url: str = "http://localhost:8000/fetch",
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None
    ):
        """
        Initialize the relay crawler.

        Args:
            relay_url: Full URL of the relay's /fetch endpoint
            timeout: Per-request timeout in seconds
            client: Pre-built client (mainly for tests); owned by the caller
        """
        self.relay_url = relay_url
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create reusable HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.timeout)
            self._owns_client = True
        return self._client

    async def close(self):
        """Close the HTTP client if this crawler created it."""
        if self._owns_client and self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> 'RelayCrawler':
        return self

    async def __aexit__(self, *exc_info):
        await self.close()

    async def fetch(self, url: str, credential: Optional[str] = None) -> str:
        """
        Fetch a URL through the relay and return its HTML.

        Args:
            url: Target page URL
            credential: Douban cookie string, or None for anonymous access

        Returns:
            Response body as text

        Raises:
            TransportUnavailable: The relay is not reachable
            FetchTimeout: No response within the timeout
            RateLimited: 403 from the target
            AutomationFlagged: 418 from the target
            PageFetchError: Any other 4xx/5xx
        """
        logger.debug(f"RelayCrawler fetching: {url}")
        client = await self._get_client()
        params = {'url': url, 'cookie': credential or ''}

        try:
            response = await client.get(self.relay_url, params=params, timeout=self.timeout)
        except httpx.TimeoutException as e:
            raise FetchTimeout(url, self.timeout) from e
        except (httpx.ConnectError, httpx.RemoteProtocolError) as e:
            logger.error(f"Relay unreachable at {self.relay_url}: {e}")
            raise TransportUnavailable(self.relay_url) from e

        if response.status_code >= 400:
            raise self._classify(response)

        return response.text

    @staticmethod
    def _classify(response: httpx.Response):
        """Map a failed response to the matching exception."""
        status = response.status_code
        body = response.text[:BODY_SNIPPET_LENGTH]

        if status == 403:
            return RateLimited(
                "403 Forbidden: IP restricted by Douban or cookie invalid",
                status=status, body=body,
            )
        if status == 418:
            return AutomationFlagged(
                "418 I'm a teapot: Douban thinks this is a robot, IP temporarily blocked",
                status=status, body=body,
            )
        return PageFetchError(f"Request failed (status {status}): {body}", status=status, body=body)
