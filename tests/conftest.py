# File: tests/conftest.py
from __future__ import annotations

from collections import Counter
from collections.abc import AsyncIterator, Awaitable, Callable

import pytest
import pytest_asyncio
from aiohttp import web

from flatten_doc.config import CrawlConfig

ServeFn = Callable[[web.Application], Awaitable[str]]


def pytest_configure(config):
    """Register custom markers so that `--strict-markers` does not fail."""
    config.addinivalue_line(
        "markers",
        "slow: marks tests as slow (deselect with '-m \"not slow\"')",
    )


@pytest.fixture()
def make_config() -> Callable[..., CrawlConfig]:
    """
    Factory for a fast CrawlConfig aimed at the local test server:
    no politeness delay, no backoff, one retry.
    """
    def _make(**overrides) -> CrawlConfig:
        params = dict(
            user_agent="TestAgent/1.0",
            parallelism=2,
            politeness_delay=0,
            allowed_domains=("127.0.0.1",),
            max_retries=1,
            timeout=5.0,
            retry_backoff=0,
        )
        params.update(overrides)
        return CrawlConfig(**params)

    return _make


@pytest_asyncio.fixture
async def serve(unused_tcp_port: int) -> AsyncIterator[ServeFn]:
    """Start an aiohttp app on a free port and return its base URL; cleaned up after the test."""
    runners: list[web.AppRunner] = []

    async def _start(app: web.Application) -> str:
        runner = web.AppRunner(app)
        await runner.setup()
        site = web.TCPSite(runner, "127.0.0.1", unused_tcp_port)
        await site.start()
        runners.append(runner)
        return f"http://127.0.0.1:{unused_tcp_port}"

    yield _start
    for runner in runners:
        await runner.cleanup()


@pytest.fixture()
def hits() -> Counter:
    """Request counter keyed by path."""
    return Counter()
