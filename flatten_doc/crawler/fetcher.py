"""
Fetcher module: page GETs with domain allow-list, politeness delay and retry/backoff.
"""
from __future__ import annotations

import asyncio
import logging
import random
from typing import Optional
from urllib.parse import urlparse

from aiohttp import ClientError, ClientSession

from flatten_doc.config import CrawlConfig
from flatten_doc.crawler.models import FetchedPage
from flatten_doc.crawler.retry import RetryContext, backoff_delay, is_retryable
from flatten_doc.exceptions import FetchError

logger = logging.getLogger("FlattenDoc")


def host_allowed(url: str, allowed_domains: tuple[str, ...]) -> bool:
    """True if the URL's hostname is in the allow-list (an empty list allows all)."""
    host = (urlparse(url).hostname or "").lower()
    if not host:
        return False
    return not allowed_domains or host in allowed_domains


class PageFetcher:
    """Issues page requests on a shared session; no knowledge of page content."""

    def __init__(self, session: ClientSession, config: CrawlConfig) -> None:
        self.session = session
        self.config = config

    def is_allowed(self, url: str) -> bool:
        return host_allowed(url, self.config.allowed_domains)

    async def fetch(self, url: str) -> Optional[FetchedPage]:
        """
        Fetch a page, re-issuing it while the retry policy allows.

        Returns None when the URL is outside the allowed domains. Raises
        FetchError once the request's retries are used up.
        """
        if not self.is_allowed(url):
            logger.debug("Skipping %s: domain not allowed", url)
            return None

        ctx: Optional[RetryContext] = None
        while True:
            await self._politeness_pause()
            status: Optional[int] = None
            try:
                async with self.session.get(url) as resp:
                    status = resp.status
                    if not is_retryable(status):
                        ctype = resp.headers.get("Content-Type", "").lower()
                        html = await resp.text(errors="replace") if "html" in ctype else None
                        return FetchedPage(url=url, final_url=str(resp.url), status=status, html=html)
                    error: object = f"HTTP {status}"
            except (ClientError, asyncio.TimeoutError) as exc:
                error = exc

            if ctx is None:
                ctx = RetryContext(url)
            if not ctx.can_retry(self.config.max_retries):
                logger.warning(
                    "Error requesting %s: %s. Max retries (%d) reached.",
                    url, error, self.config.max_retries,
                )
                raise FetchError(url, status, error)
            attempt = ctx.record(error)
            delay = backoff_delay(attempt, self.config.retry_backoff)
            logger.debug(
                "Error requesting %s (attempt %d/%d): %s. Retrying in %.2f s",
                url, attempt, self.config.max_retries, error, delay,
            )
            if delay:
                await asyncio.sleep(delay)

    async def _politeness_pause(self) -> None:
        bound = self.config.politeness_delay
        if bound > 0:
            await asyncio.sleep(random.uniform(0, bound))
