"""Tests for KnowledgeClient (Wikipedia + DuckDuckGo lookups)."""

from __future__ import annotations

import httpx
import pytest

from note_enhancer.clients.knowledge_client import KnowledgeClient


def _client(handler) -> KnowledgeClient:
    return KnowledgeClient(http=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


class TestWikipediaSummary:
    async def test_returns_extract(self):
        seen: list[httpx.URL] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url)
            return httpx.Response(200, json={"extract": "  Google LLC is a company.  "})

        client = _client(handler)
        assert await client.wikipedia_summary("Google") == "Google LLC is a company."
        assert seen[0].path.endswith("/page/summary/Google")

    async def test_spaces_become_underscores(self):
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url.path)
            return httpx.Response(200, json={"extract": "x"})

        await _client(handler).wikipedia_summary("Jane Street")
        assert seen[0].endswith("/Jane_Street")

    async def test_not_found_returns_none(self):
        client = _client(lambda request: httpx.Response(404, json={"title": "Not found"}))
        assert await client.wikipedia_summary("Nope") is None

    async def test_network_error_returns_none(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("down", request=request)

        assert await _client(handler).wikipedia_summary("Google") is None

    async def test_non_json_returns_none(self):
        client = _client(lambda request: httpx.Response(200, text="<html>"))
        assert await client.wikipedia_summary("Google") is None

    async def test_blank_extract_returns_none(self):
        client = _client(lambda request: httpx.Response(200, json={"extract": "   "}))
        assert await client.wikipedia_summary("Google") is None


class TestWikipediaSearch:
    async def test_returns_top_title(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.params["srsearch"] == "MIT Physics"
            return httpx.Response(
                200, json={"query": {"search": [{"title": "MIT Department of Physics"}]}}
            )

        assert await _client(handler).wikipedia_search("MIT Physics") == "MIT Department of Physics"

    async def test_no_hits(self):
        client = _client(lambda request: httpx.Response(200, json={"query": {"search": []}}))
        assert await client.wikipedia_search("zzzz") is None


class TestInstantAnswer:
    async def test_abstract_text(self):
        client = _client(lambda request: httpx.Response(200, json={"AbstractText": "An olympiad."}))
        assert await client.instant_answer("olympiad") == "An olympiad."

    async def test_empty_abstract(self):
        client = _client(
            lambda request: httpx.Response(200, json={"AbstractText": "", "Abstract": ""})
        )
        assert await client.instant_answer("nothing") is None


class TestNonSuccess:
    @pytest.mark.parametrize("status", [301, 429, 503])
    async def test_non_success_statuses(self, status):
        client = _client(lambda request: httpx.Response(status))
        assert await client.instant_answer("x") is None
