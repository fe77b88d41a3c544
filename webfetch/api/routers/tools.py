"""Tool endpoints: the host runtime calls these with a JSON request body.

Routes
------
POST /tools/fetch                 Body: {"url": "...", "max_length": 5000, ...}
POST /tools/read_documentation    Same body, restricted to documentation URLs

Validation failures, network errors and HTTP errors from the origin all come
back as ``200`` with ``isError: true`` in the body; the host decides what to
show the user.
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Request
from pydantic import BaseModel

from webfetch.pipeline.service import (
    FETCH_PROFILE,
    ToolProfile,
    build_pipeline,
    documentation_profile,
)

router = APIRouter()


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class FetchToolRequest(BaseModel):
    url: Optional[str] = None
    max_length: Optional[int] = None
    start_index: Optional[int] = None
    raw: bool = False


class TextItem(BaseModel):
    type: str = "text"
    text: str


class ToolResponse(BaseModel):
    content: list[TextItem]
    isError: bool = False


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

async def _run(profile: ToolProfile, body: FetchToolRequest, request: Request) -> dict[str, Any]:
    pipeline = build_pipeline(profile, fetcher=request.app.state.fetcher)
    result = await pipeline.run_params(body.model_dump())
    return result.to_dict()


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("/fetch", response_model=ToolResponse)
async def fetch_endpoint(body: FetchToolRequest, request: Request) -> dict[str, Any]:
    """Fetch a URL and return one window of its simplified content."""
    return await _run(FETCH_PROFILE, body, request)


@router.post("/read_documentation", response_model=ToolResponse)
async def read_documentation_endpoint(body: FetchToolRequest, request: Request) -> dict[str, Any]:
    """Like ``/fetch`` but only for URLs on the configured documentation sites."""
    return await _run(documentation_profile(), body, request)
