"""Tests for the HTTP fetcher.

``respx`` patches ``httpx`` at the transport layer so no real network calls
are made.
"""

from __future__ import annotations

import httpx
import pytest
import respx

from webfetch.pipeline.errors import HttpStatusError, NetworkError
from webfetch.pipeline.fetcher import Fetcher
from webfetch.pipeline.models import RetrievedPayload


class TestFetcher:
    async def test_successful_fetch_returns_payload(self) -> None:
        with respx.mock:
            respx.get("https://example.com/article").mock(
                return_value=httpx.Response(
                    200, text="<html>hi</html>", headers={"Content-Type": "text/html; charset=utf-8"}
                )
            )
            async with Fetcher() as fetcher:
                payload = await fetcher.retrieve("https://example.com/article")

        assert isinstance(payload, RetrievedPayload)
        assert payload.status_code == 200
        assert payload.body == "<html>hi</html>"
        assert payload.content_type == "text/html; charset=utf-8"
        assert payload.final_url == "https://example.com/article"

    async def test_sends_identifying_user_agent(self) -> None:
        with respx.mock:
            route = respx.get("https://example.com/").mock(return_value=httpx.Response(200, text="ok"))
            async with Fetcher(user_agent="webfetch-test/9") as fetcher:
                await fetcher.retrieve("https://example.com/")

        assert route.calls.last.request.headers["User-Agent"] == "webfetch-test/9"

    async def test_missing_content_type_is_empty_string(self) -> None:
        with respx.mock:
            respx.get("https://example.com/").mock(return_value=httpx.Response(200, content=b"bytes"))
            async with Fetcher() as fetcher:
                payload = await fetcher.retrieve("https://example.com/")

        assert payload.content_type == ""

    async def test_redirects_are_followed(self) -> None:
        with respx.mock:
            respx.get("https://example.com/old").mock(
                return_value=httpx.Response(301, headers={"Location": "https://example.com/new"})
            )
            respx.get("https://example.com/new").mock(
                return_value=httpx.Response(200, text="moved", headers={"Content-Type": "text/plain"})
            )
            async with Fetcher() as fetcher:
                payload = await fetcher.retrieve("https://example.com/old")

        assert payload.body == "moved"
        assert payload.content_type == "text/plain"
        assert payload.url == "https://example.com/old"
        assert payload.final_url == "https://example.com/new"

    async def test_http_error_raises_status_error(self) -> None:
        with respx.mock:
            respx.get("https://example.com/missing").mock(return_value=httpx.Response(404, text="Not Found"))
            async with Fetcher() as fetcher:
                with pytest.raises(HttpStatusError) as info:
                    await fetcher.retrieve("https://example.com/missing")

        assert info.value.status_code == 404
        assert str(info.value) == "Failed to fetch https://example.com/missing - status code 404"

    async def test_connect_error_raises_network_error(self) -> None:
        with respx.mock:
            respx.get("https://unreachable.example/").mock(side_effect=httpx.ConnectError("connection refused"))
            async with Fetcher() as fetcher:
                with pytest.raises(NetworkError) as info:
                    await fetcher.retrieve("https://unreachable.example/")

        assert isinstance(info.value.cause, httpx.ConnectError)
        assert "connection refused" in str(info.value)

    async def test_timeout_raises_network_error(self) -> None:
        with respx.mock:
            respx.get("https://slow.example/").mock(side_effect=httpx.ReadTimeout("timed out"))
            async with Fetcher(timeout=0.01) as fetcher:
                with pytest.raises(NetworkError):
                    await fetcher.retrieve("https://slow.example/")

    async def test_injected_client_is_not_closed(self) -> None:
        client = httpx.AsyncClient()
        fetcher = Fetcher(client=client)
        await fetcher.aclose()
        assert client.is_closed is False
        await client.aclose()
