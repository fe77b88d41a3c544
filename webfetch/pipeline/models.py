"""Data models for the fetch pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional
from urllib.parse import urlsplit

from webfetch.pipeline.errors import InvalidParameter, InvalidURL

MAX_LENGTH_LIMIT = 1_000_000
DEFAULT_MAX_LENGTH = 5000


def is_valid_url(url: str) -> bool:
    """Return ``True`` if *url* is an absolute ``http`` or ``https`` URL."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return False
    return parts.scheme in ("http", "https") and bool(parts.netloc)


def _as_int(name: str, value: Any) -> int:
    # bool is an int subclass; reject it explicitly.
    if isinstance(value, bool):
        raise InvalidParameter(f"{name} must be an integer")
    if isinstance(value, float) and not value.is_integer():
        raise InvalidParameter(f"{name} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise InvalidParameter(f"{name} must be an integer") from exc


def _as_bool(name: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise InvalidParameter(f"{name} must be a boolean")
    return value


@dataclass(frozen=True)
class FetchRequest:
    """A validated request for one window of a remote resource."""

    url: str
    max_length: int = DEFAULT_MAX_LENGTH
    start_index: int = 0
    raw: bool = False

    def __post_init__(self) -> None:
        if not self.url:
            raise InvalidURL("URL is required")
        if not is_valid_url(self.url):
            raise InvalidURL(
                f"Invalid URL: {self.url}. URL must be a valid HTTP or HTTPS URL."
            )
        if self.max_length <= 0 or self.max_length > MAX_LENGTH_LIMIT:
            raise InvalidParameter(f"max_length must be between 1 and {MAX_LENGTH_LIMIT}")
        if self.start_index < 0:
            raise InvalidParameter("start_index must be non-negative")

    @classmethod
    def from_params(
        cls, params: dict[str, Any], default_max_length: int = DEFAULT_MAX_LENGTH
    ) -> FetchRequest:
        """Build a request from the loosely-typed parameters a host sends."""
        url = params.get("url")
        if not isinstance(url, str) or not url:
            raise InvalidURL("URL is required")
        max_length = params.get("max_length")
        start_index = params.get("start_index")
        raw = params.get("raw")
        return cls(
            url=url,
            max_length=default_max_length if max_length is None else _as_int("max_length", max_length),
            start_index=0 if start_index is None else _as_int("start_index", start_index),
            raw=False if raw is None else _as_bool("raw", raw),
        )


@dataclass(frozen=True)
class RetrievedPayload:
    """The decoded body and headers of a successful HTTP response."""

    url: str
    body: str
    content_type: str
    status_code: int
    final_url: str = ""


@dataclass(frozen=True)
class ClassificationResult:
    is_html: bool


@dataclass(frozen=True)
class NormalizedContent:
    """Readable text derived from a payload, plus an optional notice prefix."""

    text: str
    prefix: str = ""

    @property
    def length(self) -> int:
        return len(self.text)


@dataclass(frozen=True)
class PaginationWindow:
    """One bounded slice of :class:`NormalizedContent`.

    ``exhausted`` marks the "no more content" terminal case; ``next_index``
    is only set when ``has_more`` is true.
    """

    slice: str
    start_index: int
    next_index: Optional[int] = None
    exhausted: bool = False

    @property
    def has_more(self) -> bool:
        return self.next_index is not None


@dataclass
class TextContent:
    text: str
    type: str = "text"

    def to_dict(self) -> dict[str, str]:
        return {"type": self.type, "text": self.text}


@dataclass
class ToolResult:
    """The host-facing response of a tool call."""

    content: List[TextContent] = field(default_factory=list)
    is_error: bool = False

    @classmethod
    def text(cls, text: str, is_error: bool = False) -> ToolResult:
        return cls(content=[TextContent(text=text)], is_error=is_error)

    @property
    def first_text(self) -> str:
        return self.content[0].text if self.content else ""

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the camelCase ``isError`` key hosts expect."""
        data: dict[str, Any] = {"content": [c.to_dict() for c in self.content]}
        if self.is_error:
            data["isError"] = True
        return data
