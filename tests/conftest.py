# File: tests/conftest.py
from __future__ import annotations

from typing import Callable, Dict, List, Optional, Sequence, Union

import pytest
import pytest_asyncio
from aiohttp import web

from site_mapper.config import CrawlConfig
from site_mapper.logger import configure


class FakeFetcher:
    """In-memory stand-in for the aiohttp Fetcher.

    *pages* maps a URL to the raw links found on it, or to an exception that
    ``fetch`` raises. Unknown URLs have no links.
    """

    def __init__(
        self,
        pages: Dict[str, Union[Sequence[str], Exception]],
        on_fetch: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.pages = pages
        self.on_fetch = on_fetch
        self.calls: List[str] = []
        self.limiter = None
        self.timeout = None
        self.entered = False
        self.closed = False

    def factory(self, limiter, timeout) -> FakeFetcher:
        self.limiter = limiter
        self.timeout = timeout
        return self

    async def __aenter__(self) -> FakeFetcher:
        self.entered = True
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.closed = True

    async def fetch(self, url: str) -> List[str]:
        self.calls.append(url)
        if self.on_fetch is not None:
            self.on_fetch(url)
        result = self.pages.get(url, [])
        if isinstance(result, Exception):
            raise result
        return list(result)


@pytest.fixture()
def fake_fetcher():
    """Return the FakeFetcher class for building per-test fetchers."""
    return FakeFetcher


@pytest.fixture(autouse=True)
def reset_logger():
    """Re-create logger handlers so no test leaves them bound to a closed stream."""
    yield
    configure()


@pytest.fixture()
def basic_config() -> CrawlConfig:
    """
    Return a basic valid CrawlConfig for crawler tests.
    """
    return CrawlConfig(
        root_url="http://example.com",
        max_depth=1,
        timeout=2.0,
        user_agent="TestAgent/1.0",
        rate_limit=5.0,
    )


@pytest_asyncio.fixture
async def serve(unused_tcp_port: int):
    """Start an aiohttp app on a free port; yields ``start(app) -> base_url``."""
    runners: List[web.AppRunner] = []

    async def _start(app: web.Application) -> str:
        runner = web.AppRunner(app)
        await runner.setup()
        site = web.TCPSite(runner, "127.0.0.1", unused_tcp_port)
        await site.start()
        runners.append(runner)
        return f"http://127.0.0.1:{unused_tcp_port}"

    try:
        yield _start
    finally:
        for runner in runners:
            await runner.cleanup()
