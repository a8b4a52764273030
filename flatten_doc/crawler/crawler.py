from __future__ import annotations

import asyncio
import logging
import time
from typing import List, Optional, Set
from urllib.parse import urlparse

from aiohttp import ClientSession, ClientTimeout
from bs4 import BeautifulSoup

from flatten_doc.aggregator import ResultStore
from flatten_doc.config import CrawlConfig
from flatten_doc.converter import ContentConverter, format_source
from flatten_doc.crawler.fetcher import PageFetcher, host_allowed
from flatten_doc.crawler.link_extractor import extract_child_links, extract_source_links, in_scope
from flatten_doc.crawler.models import FetchedPage, PageResult
from flatten_doc.crawler.source import download_source
from flatten_doc.exceptions import FetchError, FlattenError, SourceDownloadError

__all__ = ("Flattener",)


def _page_key(url: str) -> str:
    return url.rstrip("/")


class Flattener:
    """Crawls a documentation tree and returns its pages and source files as Markdown."""

    def __init__(self, config: CrawlConfig) -> None:
        self.config = config
        self.session: Optional[ClientSession] = None
        self.converter = ContentConverter()
        self.logger = logging.getLogger("FlattenDoc")

    async def __aenter__(self) -> Flattener:
        self.session = ClientSession(
            timeout=ClientTimeout(total=self.config.timeout),
            headers={"User-Agent": self.config.user_agent},
            raise_for_status=False,
        )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    async def flatten(self, root_url: str) -> List[PageResult]:
        """
        Crawl ``root_url`` and everything in scope below it.

        Raises FlattenError when the root cannot be dispatched. Pages and
        source files that fail after their retries are left out of the result.
        """
        if not self.session:
            raise RuntimeError("Session not initialized")
        root = root_url.strip().rstrip("/")
        self._validate_root(root)
        self.logger.info("Starting crawl: %s", root)
        start = time.monotonic()

        run = _Run(self, root)
        try:
            page = await run.fetcher.fetch(root)
        except FetchError as exc:
            if exc.status is None:
                raise FlattenError(f"failed to start scraping: {exc}") from exc
            self.logger.warning("Root page unavailable: %s", exc)
            return []
        try:
            if page is not None:
                run.visited.add(_page_key(root))
                try:
                    await run.process(page)
                except Exception:
                    self.logger.exception("Failed to process %s", root)
            await run.drain()
        finally:
            await run.close()

        results = run.store.sorted_results()
        self.logger.info(
            "Finished: %d result(s), %d page(s) visited, %d source file(s) claimed in %.2f s",
            len(results), len(run.visited), len(run.store.visited_sources), time.monotonic() - start,
        )
        return results

    def _validate_root(self, root: str) -> None:
        parsed = urlparse(root)
        if parsed.scheme not in ("http", "https") or not parsed.hostname:
            raise FlattenError(f"invalid root URL: {root!r}")
        if not host_allowed(root, self.config.allowed_domains):
            raise FlattenError(f"domain of {root!r} is not in allowed_domains")


class _Run:
    """State of one flatten call; discarded when it returns."""

    def __init__(self, owner: Flattener, root: str) -> None:
        self.config = owner.config
        self.session = owner.session
        self.converter = owner.converter
        self.logger = owner.logger
        self.root = root
        self.fetcher = PageFetcher(owner.session, owner.config)
        self.store = ResultStore()
        self.visited: Set[str] = set()
        self.queue: asyncio.Queue[str] = asyncio.Queue()
        self.workers: List[asyncio.Task[None]] = []
        self.source_tasks: List[asyncio.Task[None]] = []
        limit = self.config.source_parallelism
        self.source_limit: Optional[asyncio.Semaphore] = asyncio.Semaphore(limit) if limit else None

    async def drain(self) -> None:
        self.workers = [asyncio.create_task(self._worker()) for _ in range(self.config.parallelism)]
        await self.queue.join()
        # downloads are spawned only by page workers, so the list is final here
        await asyncio.gather(*self.source_tasks)

    async def close(self) -> None:
        """Cancel whatever is still running; nothing outlives the run."""
        pending = [t for t in (*self.workers, *self.source_tasks) if not t.done()]
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)

    async def _worker(self) -> None:
        while True:
            url = await self.queue.get()
            try:
                page = await self.fetcher.fetch(url)
                if page is not None:
                    await self.process(page)
            except FetchError as exc:
                self.logger.warning("Giving up on %s", exc)
            except Exception:
                self.logger.exception("Failed to process %s", url)
            finally:
                self.queue.task_done()

    async def process(self, page: FetchedPage) -> None:
        """fetch → extract → convert → dispatch for one page."""
        if page.html is None:
            self.logger.debug("No HTML at %s", page.url)
            return
        soup = BeautifulSoup(page.html, "html.parser")

        for link in extract_child_links(soup, page.final_url):
            key = _page_key(link)
            if key in self.visited or not in_scope(link, self.root, self.config.allowed_domains):
                continue
            self.visited.add(key)
            self.queue.put_nowait(link)

        for link in extract_source_links(soup, page.final_url, self.config.source_extensions):
            if await self.store.claim_source(link):
                self.source_tasks.append(asyncio.create_task(self._download(link)))

        content = self.converter.convert_page(soup, page.url)
        if content is None:
            self.logger.debug("No documentation section at %s", page.url)
            return
        await self.store.add(PageResult(url=page.url, content=content))
        self.logger.info("Converted %s", page.url)

    async def _download(self, url: str) -> None:
        try:
            if self.source_limit is None:
                text = await self._get_source(url)
            else:
                async with self.source_limit:
                    text = await self._get_source(url)
        except SourceDownloadError as exc:
            self.logger.warning("Error downloading source %s", exc)
            return
        except Exception:
            self.logger.exception("Failed to download %s", url)
            return
        await self.store.add(PageResult(url=url, content=format_source(url, text)))
        self.logger.info("Downloaded source %s", url)

    async def _get_source(self, url: str) -> str:
        return await download_source(
            self.session, url, self.config.max_retries, self.config.retry_backoff
        )
