# site_mapper/crawler/crawler.py
"""
Breadth-first crawl orchestration.

:func:`crawl` drains a FIFO queue of site-map nodes: each node is fetched
through the host's rate limiter, its links are resolved against the node URL
and offered to the :class:`SiteMap`; accepted children go to the back of the
queue. Only a malformed root URL and cancellation end the crawl with an error.
"""
from __future__ import annotations

import time
from collections import deque
from typing import Callable, Deque, List, Optional, Protocol

from site_mapper.crawler import ratelimiter
from site_mapper.crawler.context import CrawlContext
from site_mapper.crawler.fetcher import DEFAULT_USER_AGENT, Fetcher
from site_mapper.crawler.ratelimiter import RateLimiter
from site_mapper.crawler.resolver import resolve
from site_mapper.crawler.sitemap import SiteMap, URLNode
from site_mapper.exceptions import (
    CrawlCancelledError,
    FetchError,
    InvalidNodeError,
    ParseError,
    SiteMapperError,
)
from site_mapper.logger import logger

__all__ = ("crawl", "PageFetcher")


class PageFetcher(Protocol):
    async def __aenter__(self) -> "PageFetcher": ...

    async def __aexit__(self, exc_type, exc, tb) -> None: ...

    async def fetch(self, url: str) -> List[str]: ...


FetcherFactory = Callable[[RateLimiter, float], PageFetcher]


async def crawl(
    ctx: Optional[CrawlContext],
    root_url: str,
    timeout: float,
    rate_limit: float,
    max_depth: int,
    *,
    user_agent: str = DEFAULT_USER_AGENT,
    fetcher_factory: Optional[FetcherFactory] = None,
) -> SiteMap:
    """Crawl *root_url* breadth-first down to *max_depth* and return the site map.

    Raises :class:`ParseError` if *root_url* is malformed and
    :class:`CrawlCancelledError` if *ctx* is cancelled (or its deadline passes)
    before the queue drains.
    """
    if timeout <= 0:
        raise ValueError("timeout must be > 0")
    if rate_limit <= 0:
        raise ValueError("rate_limit must be > 0")
    if max_depth < 0:
        raise ValueError("max_depth must be >= 0")
    ctx = ctx or CrawlContext()

    start = time.monotonic()
    logger.info("Starting crawl of %s with max depth %d", root_url, max_depth)
    try:
        root = URLNode(resolve(None, root_url), 0)
    except ParseError as exc:
        raise ParseError(root_url, f"parsing root url: {exc.reason}") from exc
    site_map = SiteMap(root, max_depth)

    hostname = root.hostname
    limiter = ratelimiter.get(hostname, rate_limit)
    try:
        if fetcher_factory is None:
            fetcher = Fetcher(limiter, timeout, user_agent=user_agent)
        else:
            fetcher = fetcher_factory(limiter, timeout)
        async with fetcher:
            fetched = await _drain(ctx, site_map, fetcher)
    finally:
        ratelimiter.stop(hostname)

    logger.info(
        "Crawl of %s finished in %.2fs after fetching %d urls (%d in site map)",
        root_url, time.monotonic() - start, fetched, len(site_map),
    )
    return site_map


async def _drain(ctx: CrawlContext, site_map: SiteMap, fetcher: PageFetcher) -> int:
    queue: Deque[URLNode] = deque([site_map.root])
    fetched = 0
    while True:
        if ctx.cancelled:
            raise CrawlCancelledError(fetched, ctx.reason or "crawl cancelled")
        if not queue:
            return fetched

        parent = queue.popleft()
        try:
            links = await fetcher.fetch(parent.url)
        except FetchError as exc:
            logger.error("Fetching %s: %s", parent.url, exc.reason)
            continue
        fetched += 1

        for raw in links:
            try:
                child = URLNode(resolve(parent.url, raw), parent.depth + 1)
            except ParseError as exc:
                logger.error("Parsing url %r found on %s: %s", raw, parent.url, exc.reason)
                continue
            try:
                site_map.add_child(parent, child)
            except InvalidNodeError as exc:
                logger.debug("Url %r skipped: %s", raw, exc.reason)
            except SiteMapperError as exc:
                logger.error("Url %r skipped: %s", raw, exc)
            else:
                queue.append(child)
