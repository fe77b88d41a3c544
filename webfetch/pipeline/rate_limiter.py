"""Per-origin minimum-spacing rate limiter.

One :class:`RateLimiter` exists per origin for the lifetime of the process,
handed out by a :class:`RateLimiterRegistry` that the pipeline owns.  The
limiter's lock is held while waiting, so concurrent callers are admitted one
at a time and each completes at least ``min_interval`` after the previous one.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable, Dict, Optional
from urllib.parse import urlsplit

logger = logging.getLogger(__name__)


def origin_of(url: str) -> str:
    """Return ``scheme://host[:port]`` for *url*, lower-cased."""
    parts = urlsplit(url)
    return f"{parts.scheme}://{parts.netloc}".lower()


class RateLimiter:
    """Enforces ``min_interval`` seconds between successive acquisitions."""

    def __init__(
        self,
        min_interval: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if min_interval < 0:
            raise ValueError("min_interval must be non-negative")
        self.min_interval = min_interval
        self.last_request: Optional[float] = None
        self.lock = asyncio.Lock()
        self._clock = clock
        self._sleep = sleep

    async def acquire(self) -> None:
        """Wait until the interval since the previous acquisition has elapsed."""
        async with self.lock:
            if self.last_request is not None:
                wait = self.min_interval - (self._clock() - self.last_request)
                if wait > 0:
                    logger.debug("Rate limiter waiting %.3fs", wait)
                    await self._sleep(wait)
            self.last_request = self._clock()

    async def __aenter__(self) -> RateLimiter:
        await self.acquire()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        return None


class RateLimiterRegistry:
    """Hands out the single shared :class:`RateLimiter` for each origin.

    ``overrides`` maps a host name (``docs.python.org``) or a full origin
    (``https://docs.python.org``) to its own interval.
    """

    def __init__(
        self,
        default_interval: float,
        overrides: Optional[Dict[str, float]] = None,
    ) -> None:
        self.default_interval = default_interval
        self.overrides = {k.lower(): v for k, v in (overrides or {}).items()}
        self._limiters: Dict[str, RateLimiter] = {}

    def _interval_for(self, origin: str) -> float:
        if origin in self.overrides:
            return self.overrides[origin]
        host = urlsplit(origin).hostname or ""
        return self.overrides.get(host, self.default_interval)

    def for_url(self, url: str) -> RateLimiter:
        origin = origin_of(url)
        limiter = self._limiters.get(origin)
        if limiter is None:
            limiter = RateLimiter(self._interval_for(origin))
            self._limiters[origin] = limiter
        return limiter

    def __len__(self) -> int:
        return len(self._limiters)
