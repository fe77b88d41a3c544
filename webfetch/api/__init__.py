"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from webfetch.api import app

    uvicorn webfetch.api:app --reload
"""

from webfetch.api.app import app

__all__ = ["app"]
