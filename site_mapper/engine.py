# File: site_mapper/engine.py
"""site_mapper.engine: glue between a loaded CrawlConfig and the crawler."""

from __future__ import annotations

from typing import Optional

from site_mapper.config import CrawlConfig
from site_mapper.crawler.context import CrawlContext
from site_mapper.crawler.crawler import crawl
from site_mapper.crawler.sitemap import SiteMap
from site_mapper.logger import logger

__all__ = ["start_crawl", "make_context"]


def make_context(cfg: CrawlConfig) -> CrawlContext:
    """Build the cancellation context, applying ``crawl_timeout`` as a deadline."""
    return CrawlContext(deadline=cfg.crawl_timeout)


async def start_crawl(cfg: CrawlConfig, ctx: Optional[CrawlContext] = None) -> SiteMap:
    """
    Run a crawl described by *cfg* and return the resulting SiteMap.

    Parameters
    ----------
    cfg : CrawlConfig
        Crawl configuration.
    ctx : CrawlContext, optional
        Cancellation handle; defaults to one derived from ``cfg.crawl_timeout``.
    """
    ctx = ctx or make_context(cfg)
    logger.debug("Crawl config: %s", cfg.model_dump())
    return await crawl(
        ctx,
        cfg.root_url,
        cfg.timeout,
        cfg.rate_limit,
        cfg.max_depth,
        user_agent=cfg.user_agent,
    )
