"""FastAPI application factory.

Lifespan
--------
On startup the app opens a single :class:`~webfetch.pipeline.fetcher.Fetcher`
(shared across all requests via ``request.app.state.fetcher``).  On shutdown
it closes the underlying HTTP client cleanly.  Rate limiters are process-wide
and outlive the app.

Routers
-------
    /tools     fetch and read_documentation tool calls
    /health    liveness probe
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from webfetch.config import settings
from webfetch.logging_setup import configure_logging
from webfetch.pipeline.fetcher import Fetcher

from webfetch.api.routers import tools as tools_router


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the HTTP client on startup and close it on shutdown."""
    fetcher = Fetcher()
    app.state.fetcher = fetcher
    try:
        yield
    finally:
        await fetcher.aclose()


def create_app() -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    configure_logging(settings.log_level)
    app = FastAPI(
        title="webfetch",
        description=(
            "Tool endpoints that fetch a remote resource, simplify HTML to "
            "markdown and return it one bounded window at a time, with a "
            "minimum spacing between calls to the same origin."
        ),
        version="0.1.0",
        lifespan=lifespan,
    )

    app.include_router(tools_router.router, prefix="/tools", tags=["tools"])

    @app.get("/health", tags=["health"])
    def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


# Module-level instance used by uvicorn:
#   uvicorn webfetch.api.app:app --reload
app = create_app()
