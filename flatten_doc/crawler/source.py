"""
Source downloader: raw-content URL resolution and GET with linear backoff.
"""
from __future__ import annotations

import asyncio
import logging
from urllib.parse import urlparse, urlunparse

from aiohttp import ClientError, ClientSession

from flatten_doc.crawler.retry import RetryContext
from flatten_doc.exceptions import SourceDownloadError

logger = logging.getLogger("FlattenDoc")

GITHUB_HOSTS = ("github.com", "www.github.com")
GITHUB_RAW_HOST = "raw.githubusercontent.com"


def get_raw_url(url: str) -> str:
    """
    Map a code-host "blob" view to the endpoint serving the raw file.

    https://github.com/user/repo/blob/branch/path/file.go
        -> https://raw.githubusercontent.com/user/repo/branch/path/file.go
    https://gitlab.com/group/repo/-/blob/branch/file.go
        -> https://gitlab.com/group/repo/-/raw/branch/file.go

    Anything else is returned unchanged.
    """
    parsed = urlparse(url)
    host = (parsed.hostname or "").lower()
    if host in GITHUB_HOSTS and "/blob/" in parsed.path:
        path = parsed.path.replace("/blob/", "/", 1)
        return urlunparse((parsed.scheme, GITHUB_RAW_HOST, path, "", parsed.query, ""))
    if host == "gitlab.com" and "/-/blob/" in parsed.path:
        path = parsed.path.replace("/-/blob/", "/-/raw/", 1)
        return urlunparse((parsed.scheme, parsed.netloc, path, "", parsed.query, ""))
    return url


async def download_source(
    session: ClientSession,
    url: str,
    max_retries: int,
    backoff: float = 0.5,
) -> str:
    """
    Download the raw text of a source file.

    Attempt ``n`` (counting from 0) is preceded by a sleep of ``n * backoff``
    seconds. Any status other than 200 and any transport error are retried;
    SourceDownloadError is raised when ``max_retries`` extra attempts fail too.
    """
    raw_url = get_raw_url(url)
    if raw_url != url:
        logger.debug("Resolved %s -> %s", url, raw_url)

    ctx = RetryContext(url)
    attempt = 0
    while True:
        if attempt:
            await asyncio.sleep(attempt * backoff)
        error: object
        try:
            async with session.get(raw_url) as resp:
                if resp.status == 200:
                    return await resp.text(errors="replace")
                error = f"unexpected status code: {resp.status}"
        except (ClientError, asyncio.TimeoutError) as exc:
            error = exc

        if not ctx.can_retry(max_retries):
            raise SourceDownloadError(url, attempt + 1, error)
        attempt = ctx.record(error)
        logger.debug("Download of %s failed (%s), retry %d/%d", raw_url, error, attempt, max_retries)
