"""flatten_doc.aggregator: shared store of crawl results and claimed source URLs."""

from __future__ import annotations

import asyncio
import logging
from types import MappingProxyType
from typing import Dict, List, Mapping

from flatten_doc.crawler.models import PageResult

logger = logging.getLogger("FlattenDoc")


class ResultStore:
    """
    Single synchronized store handed to every task of a run.

    Page workers and source download tasks both add results here, and source
    URLs are claimed here; one lock covers both so a check-and-mark never
    spans two critical sections.
    """

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._results: Dict[str, PageResult] = {}
        self._visited_sources: Dict[str, bool] = {}

    async def add(self, result: PageResult) -> bool:
        """Store a result; a URL already present keeps its first result."""
        async with self._lock:
            if result.url in self._results:
                logger.debug("Duplicate result for %s ignored", result.url)
                return False
            self._results[result.url] = result
            return True

    async def claim_source(self, url: str) -> bool:
        """Mark a source URL as taken. True only for the first caller."""
        async with self._lock:
            if self._visited_sources.get(url):
                return False
            self._visited_sources[url] = True
            return True

    @property
    def visited_sources(self) -> Mapping[str, bool]:
        return MappingProxyType(self._visited_sources)

    def sorted_results(self) -> List[PageResult]:
        """All results ordered by URL."""
        return sorted(self._results.values(), key=lambda r: r.url)

    def __len__(self) -> int:
        return len(self._results)
