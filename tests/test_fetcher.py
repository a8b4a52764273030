# File: tests/test_fetcher.py
from __future__ import annotations

import random
import time
from collections import Counter

import pytest
from aiohttp import ClientSession, web

import flatten_doc.crawler.fetcher as fetcher_module
from flatten_doc.crawler.fetcher import PageFetcher

PAGE = "<html><body><main><div class='UnitReadme'><h1>Pkg</h1></div></main></body></html>"


@pytest.fixture()
def delays(monkeypatch) -> list[tuple[float, float, float]]:
    """Record every (low, high, chosen) politeness pause drawn by the fetcher."""
    chosen: list[tuple[float, float, float]] = []
    real_uniform = random.uniform

    def recording_uniform(a: float, b: float) -> float:
        value = real_uniform(a, b)
        chosen.append((a, b, value))
        return value

    monkeypatch.setattr(fetcher_module.random, "uniform", recording_uniform)
    return chosen


async def _page_app(serve, hits: Counter, failures: int = 0) -> str:
    async def handler(request: web.Request) -> web.Response:
        hits[request.path] += 1
        if hits[request.path] <= failures:
            return web.Response(status=500)
        return web.Response(text=PAGE, content_type="text/html")

    app = web.Application()
    app.router.add_get("/pkg", handler)
    return await serve(app)


@pytest.mark.asyncio()
async def test_politeness_delay_within_bound(serve, make_config, hits, delays):
    base = await _page_app(serve, hits)
    config = make_config(politeness_delay=0.2)

    async with ClientSession() as session:
        start = time.perf_counter()
        page = await PageFetcher(session, config).fetch(f"{base}/pkg")
        elapsed = time.perf_counter() - start

    assert page is not None and page.status == 200
    assert len(delays) == 1
    low, high, value = delays[0]
    assert (low, high) == (0, 0.2)
    assert 0 <= value <= 0.2
    assert elapsed >= value - 0.01


@pytest.mark.asyncio()
async def test_politeness_delay_precedes_dispatch(serve, make_config, hits, monkeypatch):
    base = await _page_app(serve, hits)
    monkeypatch.setattr(fetcher_module.random, "uniform", lambda a, b: b)
    config = make_config(politeness_delay=0.3)

    async with ClientSession() as session:
        start = time.perf_counter()
        await PageFetcher(session, config).fetch(f"{base}/pkg")
        elapsed = time.perf_counter() - start

    assert elapsed >= 0.29
    assert hits["/pkg"] == 1


@pytest.mark.asyncio()
async def test_politeness_delay_applies_to_every_attempt(serve, make_config, hits, delays):
    base = await _page_app(serve, hits, failures=2)
    config = make_config(politeness_delay=0.05, max_retries=2)

    async with ClientSession() as session:
        page = await PageFetcher(session, config).fetch(f"{base}/pkg")

    assert page is not None
    assert hits["/pkg"] == 3
    assert len(delays) == 3
    assert all(0 <= value <= 0.05 for _, _, value in delays)


@pytest.mark.asyncio()
async def test_no_delay_when_disabled(serve, make_config, hits, delays):
    base = await _page_app(serve, hits)

    async with ClientSession() as session:
        await PageFetcher(session, make_config(politeness_delay=0)).fetch(f"{base}/pkg")

    assert delays == []


@pytest.mark.asyncio()
async def test_disallowed_domain_not_dispatched(make_config, delays):
    async with ClientSession() as session:
        page = await PageFetcher(session, make_config()).fetch("https://example.com/pkg")

    assert page is None
    assert delays == []
