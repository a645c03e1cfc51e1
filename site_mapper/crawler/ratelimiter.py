# site_mapper/crawler/ratelimiter.py
"""
Per-hostname throttling.

A :class:`RateLimiter` hands out permits no faster than ``rate`` per second.
Limiters are shared through a small registry keyed by hostname: every
:func:`get` must be paired with a :func:`stop`, and the limiter is stopped and
dropped once its last holder releases it.
"""
from __future__ import annotations

import asyncio
import threading
import time
from dataclasses import dataclass
from typing import Dict, Optional

from site_mapper.logger import logger

__all__ = ("RateLimiter", "get", "stop", "is_active")


class RateLimiter:
    """Async permit source with a fixed minimum interval between permits.

    Permit slots are reserved under a ``threading.Lock`` and waited for with
    ``asyncio.sleep``, so one limiter can serve crawls running on different
    event loops (threads).
    """

    def __init__(self, rate: float) -> None:
        if rate <= 0:
            raise ValueError("rate must be > 0")
        self.rate = rate
        self._interval = 1.0 / rate
        self._lock = threading.Lock()
        self._next_ts: Optional[float] = None
        self._stopped = False

    @property
    def stopped(self) -> bool:
        return self._stopped

    async def acquire(self) -> None:
        """Wait until the next permit is available."""
        if self._stopped:
            raise RuntimeError("rate limiter is stopped")
        with self._lock:
            now = time.monotonic()
            slot = now if self._next_ts is None else max(now, self._next_ts)
            self._next_ts = slot + self._interval
        if slot > now:
            await asyncio.sleep(slot - now)

    def stop(self) -> None:
        self._stopped = True


@dataclass(slots=True)
class _Entry:
    limiter: RateLimiter
    holders: int = 0


_registry: Dict[str, _Entry] = {}
_registry_lock = threading.Lock()


def get(hostname: str, rate: float) -> RateLimiter:
    """Return the shared limiter for *hostname*, creating it at *rate* if needed."""
    with _registry_lock:
        entry = _registry.get(hostname)
        if entry is None:
            entry = _registry[hostname] = _Entry(RateLimiter(rate))
        elif entry.limiter.rate != rate:
            logger.debug(
                "Reusing limiter for %s at %.2f req/s (requested %.2f)",
                hostname, entry.limiter.rate, rate,
            )
        entry.holders += 1
        return entry.limiter


def stop(hostname: str) -> None:
    """Release one hold on *hostname*'s limiter; stop it when unused."""
    with _registry_lock:
        entry = _registry.get(hostname)
        if entry is None:
            logger.debug("No rate limiter registered for %s", hostname)
            return
        entry.holders -= 1
        if entry.holders <= 0:
            entry.limiter.stop()
            del _registry[hostname]


def is_active(hostname: str) -> bool:
    with _registry_lock:
        return hostname in _registry
