"""The caller-facing fetch pipeline.

``FetchPipeline.run`` orchestrates one tool call end to end:

    validate → rate-limit gate → fetch → classify → normalize → paginate

and converts every failure into an error :class:`ToolResult`, so nothing
escapes to the host runtime.  Two profiles ship with the package: the generic
``fetch`` tool and the domain-restricted ``read_documentation`` tool.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Optional, Pattern, Sequence
from urllib.parse import urlsplit

from webfetch.config import settings
from webfetch.pipeline.cache import ContentCache
from webfetch.pipeline.classifier import classify
from webfetch.pipeline.errors import InvalidURL, NoMoreContent, WebFetchError
from webfetch.pipeline.fetcher import Fetcher
from webfetch.pipeline.models import FetchRequest, NormalizedContent, PaginationWindow, ToolResult
from webfetch.pipeline.normalizer import normalize
from webfetch.pipeline.paginator import continuation_notice, slice_text
from webfetch.pipeline.rate_limiter import RateLimiterRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolProfile:
    """How a tool names itself, frames its output and restricts its URLs."""

    name: str
    header: str = "Contents of {url}:\n"
    allowed_patterns: Sequence[Pattern[str]] = field(default_factory=tuple)
    require_html_suffix: bool = False
    header_on_exhausted: bool = False

    def check_url(self, url: str) -> None:
        if self.allowed_patterns and not any(p.search(url) for p in self.allowed_patterns):
            raise InvalidURL(f"Invalid URL: {url}. URL must be from list of supported domains")
        if self.require_html_suffix and not urlsplit(url).path.endswith(".html"):
            raise InvalidURL(f"Invalid URL: {url}. URL must end with .html")


FETCH_PROFILE = ToolProfile(name="fetch")


def documentation_profile(patterns: Optional[Sequence[str]] = None) -> ToolProfile:
    """Profile for ``read_documentation``: only *patterns* (regexes) are allowed."""
    compiled = tuple(re.compile(p) for p in (patterns or settings.docs_allowed_patterns))
    return ToolProfile(
        name="read_documentation",
        header="Documentation from {url}:\n\n",
        allowed_patterns=compiled,
        require_html_suffix=True,
        header_on_exhausted=True,
    )


class FetchPipeline:
    """Runs requests through one :class:`ToolProfile`.

    The fetcher, limiter registry and cache are injected so several pipelines
    can share one limiter per origin.
    """

    def __init__(
        self,
        fetcher: Fetcher,
        limiters: RateLimiterRegistry,
        profile: ToolProfile = FETCH_PROFILE,
        cache: Optional[ContentCache] = None,
    ) -> None:
        self.fetcher = fetcher
        self.limiters = limiters
        self.profile = profile
        self.cache = cache

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    async def _load(self, request: FetchRequest) -> NormalizedContent:
        """Fetch and normalize *request.url*, or reuse a cached result."""
        if self.cache is not None:
            cached = self.cache.get(request.url, request.raw)
            if cached is not None:
                return cached

        limiter = self.limiters.for_url(request.url)
        async with limiter:
            payload = await self.fetcher.retrieve(request.url)

        result = classify(payload)
        content = normalize(payload, result.is_html, request.raw)

        if self.cache is not None:
            self.cache.put(request.url, request.raw, content)
        return content

    def _render(self, request: FetchRequest, content: NormalizedContent, window: PaginationWindow) -> str:
        if window.exhausted:
            raise NoMoreContent()
        header = self.profile.header.format(url=request.url)
        text = window.slice
        if window.next_index is not None:
            text += continuation_notice(self.profile.name, window.next_index)
        return f"{content.prefix}{header}{text}"

    # ------------------------------------------------------------------
    # Boundary
    # ------------------------------------------------------------------

    async def run(self, request: FetchRequest) -> ToolResult:
        """Execute *request* and return the host-facing result."""
        try:
            self.profile.check_url(request.url)
            content = await self._load(request)
            window = slice_text(content.text, request.start_index, request.max_length)
            return ToolResult.text(self._render(request, content, window))
        except NoMoreContent as exc:
            text = str(exc)
            if self.profile.header_on_exhausted:
                text = self.profile.header.format(url=request.url) + text
            return ToolResult.text(text)
        except WebFetchError as exc:
            logger.info("%s failed for %s: %s", self.profile.name, request.url, exc)
            return ToolResult.text(str(exc), is_error=True)
        except Exception as exc:
            logger.exception("Unexpected error in %s for %s", self.profile.name, request.url)
            return ToolResult.text(f"Failed to fetch URL: {exc}", is_error=True)

    async def run_params(self, params: dict[str, Any]) -> ToolResult:
        """Validate loosely-typed host *params* and run them."""
        try:
            request = FetchRequest.from_params(params, settings.default_max_length)
        except WebFetchError as exc:
            return ToolResult.text(str(exc), is_error=True)
        return await self.run(request)


# ---------------------------------------------------------------------------
# Process-wide defaults used by the tool functions, the API and the CLI
# ---------------------------------------------------------------------------

_limiters: Optional[RateLimiterRegistry] = None
_fetcher: Optional[Fetcher] = None
_cache: Optional[ContentCache] = None


def shared_limiters() -> RateLimiterRegistry:
    """Return the process-wide limiter registry, creating it on first use."""
    global _limiters
    if _limiters is None:
        _limiters = RateLimiterRegistry(
            settings.rate_limit_interval, settings.rate_limit_overrides
        )
    return _limiters


def _shared_fetcher() -> Fetcher:
    global _fetcher
    if _fetcher is None:
        _fetcher = Fetcher()
    return _fetcher


def _shared_cache() -> Optional[ContentCache]:
    global _cache
    if settings.cache_enabled and _cache is None:
        _cache = ContentCache(settings.cache_size)
    return _cache if settings.cache_enabled else None


def build_pipeline(profile: ToolProfile = FETCH_PROFILE, fetcher: Optional[Fetcher] = None) -> FetchPipeline:
    """Build a pipeline that shares the process-wide limiters and cache."""
    return FetchPipeline(
        fetcher=fetcher or _shared_fetcher(),
        limiters=shared_limiters(),
        profile=profile,
        cache=_shared_cache(),
    )


async def close_shared() -> None:
    """Close the shared HTTP client (server shutdown, end of a CLI run)."""
    global _fetcher
    if _fetcher is not None:
        await _fetcher.aclose()
        _fetcher = None


async def fetch_tool(params: dict[str, Any]) -> dict[str, Any]:
    """Host entry point for the ``fetch`` tool."""
    result = await build_pipeline(FETCH_PROFILE).run_params(params)
    return result.to_dict()


async def read_documentation(params: dict[str, Any]) -> dict[str, Any]:
    """Host entry point for the ``read_documentation`` tool."""
    result = await build_pipeline(documentation_profile()).run_params(params)
    return result.to_dict()
