# File: tests/test_aggregator.py
import asyncio

import pytest

from flatten_doc.aggregator import ResultStore
from flatten_doc.crawler.models import PageResult


@pytest.mark.asyncio()
async def test_claim_source_is_atomic():
    store = ResultStore()
    url = "https://example.com/pkg/file.go"

    claims = await asyncio.gather(*(store.claim_source(url) for _ in range(50)))

    assert claims.count(True) == 1
    assert dict(store.visited_sources) == {url: True}


@pytest.mark.asyncio()
async def test_duplicate_result_keeps_first():
    store = ResultStore()
    assert await store.add(PageResult("https://a/x", "first"))
    assert not await store.add(PageResult("https://a/x", "second"))
    assert len(store) == 1
    assert store.sorted_results()[0].content == "first"


@pytest.mark.asyncio()
async def test_sorted_results_by_url():
    store = ResultStore()
    urls = ["https://a/pkg/sub", "https://a/pkg", "https://a/pkg/file.go", "https://a/pkg/a/b"]
    await asyncio.gather(*(store.add(PageResult(u, u)) for u in urls))

    assert [r.url for r in store.sorted_results()] == sorted(urls)


def test_visited_sources_is_read_only():
    store = ResultStore()
    with pytest.raises(TypeError):
        store.visited_sources["x"] = True  # type: ignore[index]
