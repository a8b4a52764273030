"""
Coroutine wrappers used by the CLI to run the crawler.
"""
import asyncio
from typing import List

from aiohttp import ClientError, ClientSession, ClientTimeout

from flatten_doc.config import CrawlConfig
from flatten_doc.crawler.crawler import Flattener
from flatten_doc.crawler.models import PageResult


async def start_flatten(cfg: CrawlConfig, url: str) -> List[PageResult]:
    """
    Run the flattener in its session context and return the ordered results.

    Parameters
    ----------
    cfg : CrawlConfig
        Crawl configuration.
    url : str
        Root URL of the documentation tree.

    Returns
    -------
    List[PageResult]
        Page and source results sorted by URL.
    """
    async with Flattener(cfg) as flattener:
        return await flattener.flatten(url)


async def check_available(cfg: CrawlConfig, url: str) -> int:
    """GET ``url`` once with the configured User-Agent and return the status (0 on transport error)."""
    async with ClientSession(
        timeout=ClientTimeout(total=cfg.timeout),
        headers={"User-Agent": cfg.user_agent},
    ) as session:
        try:
            async with session.get(url) as resp:
                return resp.status
        except (ClientError, asyncio.TimeoutError):
            return 0


__all__ = ["start_flatten", "check_available"]
