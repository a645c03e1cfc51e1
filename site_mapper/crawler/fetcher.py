# site_mapper/crawler/fetcher.py
"""
Fetcher module: rate-limited HTTP GET returning the raw links of a page.
"""
from __future__ import annotations

import asyncio
from typing import List, Optional

from aiohttp import ClientError, ClientSession, ClientTimeout

from site_mapper.crawler.link_extractor import extract_links
from site_mapper.crawler.ratelimiter import RateLimiter
from site_mapper.exceptions import FetchError
from site_mapper.logger import logger

DEFAULT_USER_AGENT = "SiteMapperBot/1.0"


class Fetcher:
    """Fetches pages through a :class:`RateLimiter` with a per-request timeout.

    Use as an async context manager; the underlying ``ClientSession`` lives
    for the duration of the ``async with`` block.
    """

    def __init__(
        self,
        limiter: RateLimiter,
        timeout: float,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self.limiter = limiter
        self.timeout = timeout
        self.user_agent = user_agent
        self.session: Optional[ClientSession] = None

    async def __aenter__(self) -> Fetcher:
        self.session = ClientSession(
            timeout=ClientTimeout(total=self.timeout),
            headers={"User-Agent": self.user_agent},
            raise_for_status=False,
        )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    async def fetch(self, url: str) -> List[str]:
        """
        Fetch *url* and return the raw link strings found on it.

        Non-HTML responses yield no links. Raises :class:`FetchError` on
        transport errors, timeouts and HTTP statuses >= 400.
        """
        if not self.session:
            raise RuntimeError("Session not initialized")

        await self.limiter.acquire()
        try:
            async with self.session.get(url) as resp:
                if resp.status >= 400:
                    raise FetchError(url, f"HTTP {resp.status}")
                mime = resp.headers.get("Content-Type", "").split(";", 1)[0].strip().lower()
                if mime not in ("text/html", "application/xhtml+xml"):
                    logger.debug("Skipping links of %s (content type %r)", url, mime)
                    return []
                text = await resp.text(errors="replace")
        except asyncio.TimeoutError as exc:
            raise FetchError(url, f"timed out after {self.timeout}s") from exc
        except ClientError as exc:
            raise FetchError(url, str(exc) or type(exc).__name__) from exc
        except ValueError as exc:
            # URLs the HTTP layer cannot encode, e.g. hosts failing IDNA
            raise FetchError(url, f"invalid url: {exc}") from exc

        return extract_links(text)
