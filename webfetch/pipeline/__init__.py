"""Pipeline package: rate-limited fetch, normalization and pagination."""

from webfetch.pipeline.errors import (
    HttpStatusError,
    InvalidParameter,
    InvalidURL,
    NetworkError,
    NoMoreContent,
    WebFetchError,
)
from webfetch.pipeline.fetcher import Fetcher
from webfetch.pipeline.models import FetchRequest, ToolResult
from webfetch.pipeline.rate_limiter import RateLimiter, RateLimiterRegistry
from webfetch.pipeline.service import (
    FETCH_PROFILE,
    FetchPipeline,
    ToolProfile,
    build_pipeline,
    documentation_profile,
    fetch_tool,
    read_documentation,
)

__all__ = [
    "FETCH_PROFILE",
    "FetchPipeline",
    "FetchRequest",
    "Fetcher",
    "HttpStatusError",
    "InvalidParameter",
    "InvalidURL",
    "NetworkError",
    "NoMoreContent",
    "RateLimiter",
    "RateLimiterRegistry",
    "ToolProfile",
    "ToolResult",
    "WebFetchError",
    "build_pipeline",
    "documentation_profile",
    "fetch_tool",
    "read_documentation",
]
