"""
HTTP client for the Instagram feed service.

Fetches the feed JSON and keeps it for a while, so page views don't each
hit the upstream service. Only successful responses are cached.
"""

import logging
import time
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)


class FeedFetchError(Exception):
    """Raised on network errors, non-2xx responses, or unparseable JSON."""
    pass


class FeedClient:
    def __init__(
        self,
        feed_url: str,
        cache_seconds: int = 3600,
        timeout_seconds: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._feed_url = feed_url
        self._cache_seconds = cache_seconds
        self._timeout = timeout_seconds
        self._transport = transport

        self._cached: Any = None
        self._fetched_at: Optional[float] = None

    def _cache_fresh(self) -> bool:
        return (
            self._fetched_at is not None
            and time.monotonic() - self._fetched_at < self._cache_seconds
        )

    async def fetch(self) -> Any:
        """Feed JSON, from cache when fresh."""
        if self._cache_fresh():
            return self._cached

        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.get(self._feed_url)
                response.raise_for_status()
                data = response.json()

        except (httpx.HTTPError, ValueError) as e:
            logger.error("Instagram feed fetch failed", extra={"error": str(e)})
            raise FeedFetchError(f"Feed fetch failed: {e}")

        self._cached = data
        self._fetched_at = time.monotonic()

        logger.debug("Fetched Instagram feed")

        return data

    def clear_cache(self) -> None:
        self._cached = None
        self._fetched_at = None
