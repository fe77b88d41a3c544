"""webfetch CLI: run the fetch tools from a terminal.

Usage:
    python cli/main.py --help

Commands:
    fetch      → fetch a URL and print one window of its content
    read-docs  → same, restricted to the configured documentation sites
    serve      → run the HTTP tool server
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from webfetch.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import asyncio
import json
from typing import Any, Optional

import typer

from webfetch.config import settings
from webfetch.logging_setup import configure_logging
from webfetch.pipeline.models import ToolResult
from webfetch.pipeline.service import (
    FETCH_PROFILE,
    ToolProfile,
    build_pipeline,
    close_shared,
    documentation_profile,
)

app = typer.Typer(
    name="webfetch",
    help="Fetch remote content as simplified, paginated text.",
    no_args_is_help=True,
)


@app.callback()
def main(
    log_level: str = typer.Option(settings.log_level, "--log-level", help="Logging level."),
) -> None:
    configure_logging(log_level)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

async def _run(profile: ToolProfile, params: dict[str, Any]) -> ToolResult:
    try:
        return await build_pipeline(profile).run_params(params)
    finally:
        await close_shared()


def _emit(result: ToolResult, as_json: bool) -> None:
    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    else:
        typer.echo(result.first_text)
    if result.is_error:
        raise typer.Exit(code=1)


def _params(url: str, max_length: Optional[int], start_index: int, raw: bool) -> dict[str, Any]:
    return {"url": url, "max_length": max_length, "start_index": start_index, "raw": raw}


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

@app.command("fetch")
def fetch(
    url: str = typer.Argument(..., help="URL to fetch (http or https)."),
    max_length: Optional[int] = typer.Option(None, "--max-length", help="Window size in characters."),
    start_index: int = typer.Option(0, "--start-index", help="Offset to start the window at."),
    raw: bool = typer.Option(False, "--raw", help="Return the body without HTML simplification."),
    as_json: bool = typer.Option(False, "--json", help="Print the tool result as JSON."),
) -> None:
    """Fetch URL and print one window of its simplified content."""
    result = asyncio.run(_run(FETCH_PROFILE, _params(url, max_length, start_index, raw)))
    _emit(result, as_json)


@app.command("read-docs")
def read_docs(
    url: str = typer.Argument(..., help="Documentation page URL (must end in .html)."),
    max_length: Optional[int] = typer.Option(None, "--max-length", help="Window size in characters."),
    start_index: int = typer.Option(0, "--start-index", help="Offset to start the window at."),
    as_json: bool = typer.Option(False, "--json", help="Print the tool result as JSON."),
) -> None:
    """Read a page from one of the configured documentation sites."""
    result = asyncio.run(_run(documentation_profile(), _params(url, max_length, start_index, False)))
    _emit(result, as_json)


@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", help="Interface to bind."),
    port: int = typer.Option(8000, help="Port to listen on."),
) -> None:
    """Run the HTTP tool server."""
    import uvicorn

    uvicorn.run("webfetch.api.app:app", host=host, port=port)


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
