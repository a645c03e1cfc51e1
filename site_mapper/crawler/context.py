# site_mapper/crawler/context.py
"""Cancellation handle passed to :func:`site_mapper.crawler.crawler.crawl`."""
from __future__ import annotations

import threading
import time
from typing import Optional

__all__ = ("CrawlContext",)


class CrawlContext:
    """Cooperative cancellation signal with an optional deadline.

    ``cancel()`` may be called from any thread or from a signal handler. The
    crawler only checks :attr:`cancelled` between two fetches.
    """

    def __init__(self, deadline: Optional[float] = None) -> None:
        if deadline is not None and deadline <= 0:
            raise ValueError("deadline must be > 0")
        self._event = threading.Event()
        self._expires_at = None if deadline is None else time.monotonic() + deadline

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set() or self._deadline_exceeded()

    @property
    def reason(self) -> Optional[str]:
        if self._event.is_set():
            return "crawl cancelled"
        if self._deadline_exceeded():
            return "deadline exceeded"
        return None

    def _deadline_exceeded(self) -> bool:
        return self._expires_at is not None and time.monotonic() >= self._expires_at
