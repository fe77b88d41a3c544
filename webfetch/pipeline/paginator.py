"""Sliding-window pagination over normalized text.

Pagination is stateless: the caller re-supplies ``start_index`` on every call
and nothing about previous windows is remembered here.
"""

from __future__ import annotations

from webfetch.pipeline.models import PaginationWindow


def slice_text(text: str, start_index: int, max_length: int) -> PaginationWindow:
    """Return the window ``text[start_index:start_index + max_length]``.

    ``next_index`` is set only when the window is full and text remains
    beyond it.  A start at or past the end, or an empty slice, yields an
    ``exhausted`` window.
    """
    if start_index >= len(text):
        return PaginationWindow(slice="", start_index=start_index, exhausted=True)

    window = text[start_index:start_index + max_length]
    if not window:
        return PaginationWindow(slice="", start_index=start_index, exhausted=True)

    end = start_index + len(window)
    next_index = end if len(window) == max_length and end < len(text) else None
    return PaginationWindow(slice=window, start_index=start_index, next_index=next_index)


def continuation_notice(tool_name: str, next_index: int) -> str:
    return (
        "\n\n<error>Content truncated. Call the "
        f"{tool_name} tool with a start_index of {next_index} to get more content.</error>"
    )
