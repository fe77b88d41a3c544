"""HTTP fetcher: one GET per call, redirects followed, failures classified."""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from webfetch.config import settings
from webfetch.pipeline.errors import HttpStatusError, NetworkError
from webfetch.pipeline.models import RetrievedPayload

logger = logging.getLogger(__name__)


def default_headers(user_agent: Optional[str] = None) -> dict[str, str]:
    return {"User-Agent": user_agent or settings.user_agent}


class Fetcher:
    """Retrieves a URL with a fixed identifying ``User-Agent``.

    The underlying :class:`httpx.AsyncClient` is created lazily and reused for
    every call; pass ``client`` to share one (tests hand in a client wired to
    ``respx``).  Call :meth:`aclose` when done, or use ``async with``.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        user_agent: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self._client = client
        self._owns_client = client is None
        self.user_agent = user_agent or settings.user_agent
        self.timeout = settings.request_timeout if timeout is None else timeout

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                headers=default_headers(self.user_agent),
                timeout=self.timeout,
                follow_redirects=True,
            )
        return self._client

    async def retrieve(self, url: str, follow_redirects: bool = True) -> RetrievedPayload:
        """GET *url* and return its decoded body and headers.

        Raises:
            NetworkError: DNS, connect, read or timeout failure.
            HttpStatusError: The final response is not 2xx.
        """
        try:
            response = await self.client.get(
                url,
                headers=default_headers(self.user_agent),
                follow_redirects=follow_redirects,
            )
        except httpx.TransportError as exc:
            logger.debug("Transport failure for %s: %r", url, exc)
            raise NetworkError(url, exc) from exc

        if not response.is_success:
            logger.debug("HTTP %s from %s", response.status_code, url)
            raise HttpStatusError(url, response.status_code)

        payload = RetrievedPayload(
            url=url,
            body=response.text,
            content_type=response.headers.get("content-type", ""),
            status_code=response.status_code,
            final_url=str(response.url),
        )
        logger.debug(
            "Fetched %s (HTTP %s, %d chars, content-type=%r)",
            payload.final_url,
            payload.status_code,
            len(payload.body),
            payload.content_type,
        )
        return payload

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> Fetcher:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
