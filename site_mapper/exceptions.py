"""site_mapper.exceptions: error taxonomy shared by the crawler components."""

from __future__ import annotations

__all__ = [
    "SiteMapperError",
    "ParseError",
    "InvalidNodeError",
    "StructuralError",
    "FetchError",
    "CrawlCancelledError",
]


class SiteMapperError(Exception):
    """Base class for every error raised by SiteMapper."""


class ParseError(SiteMapperError):
    """Raised when a link string cannot be turned into an absolute URL."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"invalid url {url!r}: {reason}")


class InvalidNodeError(SiteMapperError):
    """Expected rejection by the site map: duplicate URL or depth exceeded."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"node {url!r} rejected: {reason}")


class StructuralError(SiteMapperError):
    """Insertion failed for a reason that points at an orchestration defect."""


class FetchError(SiteMapperError):
    """Raised when fetching a single page fails (network, timeout, HTTP status)."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"fetching {url!r} failed: {reason}")


class CrawlCancelledError(SiteMapperError):
    """The caller aborted the crawl before the queue drained."""

    def __init__(self, fetched: int, reason: str = "crawl cancelled"):
        self.fetched = fetched
        self.reason = reason
        super().__init__(f"aborted after {fetched} url fetches: {reason}")
