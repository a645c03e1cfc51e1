"""site_mapper.crawler: traversal engine (resolver, site map, rate limiter, fetcher, orchestrator)."""

from site_mapper.crawler.context import CrawlContext
from site_mapper.crawler.crawler import crawl
from site_mapper.crawler.resolver import resolve
from site_mapper.crawler.sitemap import SiteMap, URLNode

__all__ = ["CrawlContext", "crawl", "resolve", "SiteMap", "URLNode"]
