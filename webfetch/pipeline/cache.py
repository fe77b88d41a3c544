"""Opt-in in-process cache of normalized content keyed by ``(url, raw)``.

Lets a caller page through a large resource without re-fetching it for every
window.  Output is the same whether or not the cache is used.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Optional, Tuple

from webfetch.pipeline.models import NormalizedContent

logger = logging.getLogger(__name__)

CacheKey = Tuple[str, bool]


class ContentCache:
    """A small LRU map of ``(url, raw)`` → :class:`NormalizedContent`."""

    def __init__(self, max_entries: int = 32) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self._entries: "OrderedDict[CacheKey, NormalizedContent]" = OrderedDict()

    def get(self, url: str, raw: bool) -> Optional[NormalizedContent]:
        key = (url, raw)
        content = self._entries.get(key)
        if content is not None:
            self._entries.move_to_end(key)
            logger.debug("Cache hit for %s (raw=%s)", url, raw)
        return content

    def put(self, url: str, raw: bool, content: NormalizedContent) -> None:
        key = (url, raw)
        self._entries[key] = content
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries
