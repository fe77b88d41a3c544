"""Exception hierarchy for the fetch pipeline.

Every error is converted into an error :class:`~webfetch.pipeline.models.ToolResult`
at the pipeline boundary; none of them escape to the host.
"""

from __future__ import annotations


class WebFetchError(Exception):
    """Base class for all pipeline errors."""


class InvalidURL(WebFetchError):
    """The URL is missing, malformed, not http(s), or not on an allowed domain."""


class InvalidParameter(WebFetchError):
    """``max_length`` or ``start_index`` is out of bounds."""


class NetworkError(WebFetchError):
    """The origin could not be reached (DNS, connect, timeout, ...)."""

    def __init__(self, url: str, cause: BaseException) -> None:
        self.url = url
        self.cause = cause
        super().__init__(f"Failed to fetch {url}: {str(cause) or type(cause).__name__}")


class HttpStatusError(WebFetchError):
    """The origin answered with a non-2xx status."""

    def __init__(self, url: str, status_code: int) -> None:
        self.url = url
        self.status_code = status_code
        super().__init__(f"Failed to fetch {url} - status code {status_code}")


class NoMoreContent(WebFetchError):
    """``start_index`` lies at or beyond the end of the content.

    Not a failure: the boundary renders it as a normal, non-error result.
    """

    def __init__(self) -> None:
        super().__init__("<error>No more content available.</error>")
