"""Resource cache: fetch text resources over HTTP at most once per URL.

Texts are kept for the lifetime of the cache object, keyed by the exact URL
string. There is no eviction or expiry. Concurrent first-time requests for
the same URL share one in-flight download.
"""

from __future__ import annotations

import asyncio
import logging

import httpx

from bingo_convert.errors import NetworkError

logger = logging.getLogger(__name__)


class ResourceCache:
    """Memoizing text fetcher backed by ``httpx.AsyncClient``.

    Attributes:
        network_fetches: Number of HTTP requests actually issued.
    """

    def __init__(
        self,
        *,
        timeout_seconds: float | None = 30.0,
        headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Create an empty cache.

        Args:
            timeout_seconds: Per-request timeout, ``None`` to disable.
            headers: Extra headers sent with every request.
            transport: Optional httpx transport (tests use ``MockTransport``).
        """
        self._timeout = timeout_seconds
        self._headers = dict(headers or {})
        self._transport = transport
        self._texts: dict[str, str] = {}
        self._inflight: dict[str, asyncio.Future[str]] = {}
        self.network_fetches = 0

    def __contains__(self, url: object) -> bool:
        return url in self._texts

    def __len__(self) -> int:
        return len(self._texts)

    async def fetch_text(self, url: str) -> str:
        """Return the body of *url*, downloading it only on first use.

        Args:
            url: Absolute URL of the resource.

        Returns:
            The response body as text.

        Raises:
            NetworkError: If the request fails or returns a non-2xx status.
                Failed responses are not cached.
        """
        cached = self._texts.get(url)
        if cached is not None:
            logger.debug("Cache hit: %s", url)
            return cached

        pending = self._inflight.get(url)
        if pending is None:
            logger.debug("Cache miss: %s", url)
            pending = asyncio.ensure_future(self._download(url))
            self._inflight[url] = pending
            pending.add_done_callback(lambda _f, key=url: self._inflight.pop(key, None))
        else:
            logger.debug("Joining in-flight request: %s", url)
        return await asyncio.shield(pending)

    async def _download(self, url: str) -> str:
        self.network_fetches += 1
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                headers=self._headers,
                transport=self._transport,
                follow_redirects=True,
            ) as client:
                response = await client.get(url)
        except httpx.HTTPError as exc:
            msg = f"Request failed while fetching {url}: {exc}"
            raise NetworkError(msg, url=url) from exc

        if not response.is_success:
            msg = f"HTTP {response.status_code} fetching resource {url}"
            raise NetworkError(msg, url=url, status_code=response.status_code)

        text = response.text
        self._texts[url] = text
        return text
