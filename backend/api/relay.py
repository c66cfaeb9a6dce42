"""
Local fetch relay.

GET /fetch?url=<target>&cookie=<cookie> requests the target from this
machine with a real browser User-Agent, the caller's cookie and Douban's
Referer/Host, then hands back the body with the target's status code.
"""

import logging
from typing import AsyncIterator, Dict, Optional
from urllib.parse import urlparse

import httpx
from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse, Response

from api.config import settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["relay"])


def build_upstream_headers(url: str, cookie: str) -> Dict[str, str]:
    """Headers sent to the target platform."""
    headers = {
        'User-Agent': settings.relay_user_agent,
        'Cookie': cookie or '',
        'Referer': settings.relay_referer,
    }
    host = urlparse(url).netloc
    if host:
        headers['Host'] = host
    return headers


async def get_upstream_client() -> AsyncIterator[httpx.AsyncClient]:
    """HTTP client used to reach the target; overridden in tests."""
    async with httpx.AsyncClient(
        follow_redirects=True,
        max_redirects=settings.relay_max_redirects,
        timeout=settings.request_timeout,
    ) as client:
        yield client


@router.get("/fetch")
async def relay_fetch(
    url: Optional[str] = Query(None, description="Target URL"),
    cookie: str = Query("", description="Cookie header to forward"),
    client: httpx.AsyncClient = Depends(get_upstream_client),
):
    """Fetch a target page on behalf of the crawler."""
    if not url:
        return PlainTextResponse("Missing URL", status_code=400)

    logger.info(f"[Relay] Requesting: {url}")

    try:
        response = await client.get(url, headers=build_upstream_headers(url, cookie))
    except httpx.HTTPError as e:
        logger.error(f"[Relay Error] {e}")
        return PlainTextResponse("Network Error", status_code=500)

    media_type = response.headers.get('content-type', 'text/html; charset=utf-8')

    # Douban answers 403 (IP blocked) or 418 (robot) here
    if response.status_code >= 400:
        logger.warning(f"[Relay] {url} -> {response.status_code}")
        return Response(
            content=response.content or b"Relay Error",
            status_code=response.status_code,
            media_type=media_type,
        )

    return Response(content=response.content, media_type=media_type)
