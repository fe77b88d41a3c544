"""Text normalization: turns a :class:`RetrievedPayload` into readable text."""

from __future__ import annotations

import logging
import re
from typing import List, Optional

import trafilatura
from bs4 import BeautifulSoup, NavigableString, Tag

from webfetch.pipeline.models import NormalizedContent, RetrievedPayload

logger = logging.getLogger(__name__)

CONVERSION_FAILED = "<error>Page failed to be simplified from HTML</error>"

_SKIP_TAGS = {"script", "style", "noscript", "template", "nav", "footer", "header", "svg"}
_HEADINGS = {"h1": 1, "h2": 2, "h3": 3, "h4": 4, "h5": 5, "h6": 6}
_BLOCK_TAGS = {
    "p", "div", "section", "article", "main", "aside", "blockquote",
    "table", "tr", "figure", "figcaption", "dl", "dt", "dd", "form",
}


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _unsupported_notice(content_type: str) -> str:
    return (
        f"Content type {content_type} cannot be simplified to markdown, "
        "but here is the raw content:\n"
    )


def _collapse(text: str) -> str:
    return re.sub(r"\s+", " ", text)


def _inline(node: Tag) -> str:
    """Render the inline content of *node*, links as ``[text](href)``."""
    parts: List[str] = []
    for child in node.children:
        if isinstance(child, NavigableString):
            parts.append(_collapse(str(child)))
        elif isinstance(child, Tag):
            if child.name in _SKIP_TAGS:
                continue
            if child.name == "br":
                parts.append("\n")
            elif child.name == "a":
                label = _inline(child).strip()
                href = (child.get("href") or "").strip()
                if href and not href.startswith(("#", "javascript:")):
                    parts.append(f"[{label or href}]({href})")
                else:
                    parts.append(label)
            elif child.name == "img":
                alt = (child.get("alt") or "").strip()
                if alt:
                    parts.append(alt)
            elif child.name in ("strong", "b"):
                inner = _inline(child).strip()
                parts.append(f"**{inner}**" if inner else "")
            elif child.name in ("em", "i"):
                inner = _inline(child).strip()
                parts.append(f"*{inner}*" if inner else "")
            elif child.name == "code":
                parts.append(f"`{child.get_text()}`")
            else:
                parts.append(_inline(child))
    return "".join(parts)


def _has_block_children(node: Tag) -> bool:
    return any(
        isinstance(c, Tag) and (c.name in _BLOCK_TAGS or c.name in _HEADINGS
                                or c.name in ("ul", "ol", "pre", "hr"))
        for c in node.children
    )


def _blocks(node: Tag, out: List[str]) -> None:
    """Append one markdown block per structural element under *node*."""
    pending: List[str] = []

    def flush() -> None:
        text = "".join(pending).strip()
        if text:
            out.append(text)
        pending.clear()

    for child in node.children:
        if isinstance(child, NavigableString):
            pending.append(_collapse(str(child)))
            continue
        if not isinstance(child, Tag) or child.name in _SKIP_TAGS:
            continue
        name = child.name
        if name in _HEADINGS:
            flush()
            text = _inline(child).strip()
            if text:
                out.append(f"{'#' * _HEADINGS[name]} {text}")
        elif name in ("ul", "ol"):
            flush()
            items: List[str] = []
            for i, li in enumerate(child.find_all("li", recursive=False), start=1):
                marker = f"{i}." if name == "ol" else "-"
                text = _inline(li).strip()
                if text:
                    items.append(f"{marker} {text}")
            if items:
                out.append("\n".join(items))
        elif name == "pre":
            flush()
            out.append(f"```\n{child.get_text().rstrip()}\n```")
        elif name == "hr":
            flush()
            out.append("---")
        elif name in _BLOCK_TAGS or name in ("body", "html"):
            flush()
            if _has_block_children(child):
                _blocks(child, out)
            else:
                text = _inline(child).strip()
                if text:
                    prefix = "> " if name == "blockquote" else ""
                    out.append(prefix + text)
        else:
            pending.append(_inline(child) if name != "br" else "\n")
    flush()


def html_to_markdown(html: str) -> str:
    """Convert structural HTML into simplified markdown with BeautifulSoup.

    Headings become ``#`` lines, lists become ``-``/``1.`` items, links are
    kept inline as ``[text](href)``; scripts, styles and page chrome are
    dropped.
    """
    soup = BeautifulSoup(html, "html.parser")
    root = soup.find("main") or soup.find("article") or soup.body or soup
    out: List[str] = []
    _blocks(root, out)
    return "\n\n".join(out).strip()


def _trafilatura_markdown(html: str, url: Optional[str]) -> str:
    text: str | None = trafilatura.extract(
        html,
        output_format="markdown",
        include_links=True,
        include_images=False,
        include_tables=True,
        no_fallback=False,
        url=url,
    )
    return (text or "").strip()


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def simplify_html(html: str, url: Optional[str] = None) -> str:
    """Return *html* as markdown, or ``""`` when nothing readable was found.

    The whole page goes through :func:`html_to_markdown` so headings, lists,
    links and repeated paragraphs all survive.  ``trafilatura`` is only
    consulted when that pass finds no text at all.
    """
    text = html_to_markdown(html)
    if not text:
        logger.debug("Structural conversion empty for %s; trying trafilatura", url)
        text = _trafilatura_markdown(html, url)
    return text


def normalize(payload: RetrievedPayload, is_html: bool, raw: bool) -> NormalizedContent:
    """Produce the text the paginator will window over.

    * ``raw`` or non-HTML: the body passes through unchanged; non-HTML that
      was not requested raw gets a content-type notice as ``prefix``.
    * HTML: simplified to markdown.  An empty conversion yields the
      :data:`CONVERSION_FAILED` marker as content rather than an error.
    """
    if raw or not is_html:
        prefix = "" if raw else _unsupported_notice(payload.content_type)
        return NormalizedContent(text=payload.body, prefix=prefix)

    text = simplify_html(payload.body, url=payload.final_url or payload.url)
    if not text:
        logger.warning("Could not simplify HTML from %s", payload.url)
        text = CONVERSION_FAILED
    return NormalizedContent(text=text)
