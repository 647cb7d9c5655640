"""Best-effort lookups against public knowledge sources (Wikipedia, DuckDuckGo).

Every method returns ``None`` instead of raising: a missing page, a non-2xx
status, a network error or a malformed body all mean "nothing known".
"""

from __future__ import annotations

import logging
from urllib.parse import quote

import httpx

logger = logging.getLogger(__name__)

WIKIPEDIA_SUMMARY_URL = "https://en.wikipedia.org/api/rest_v1/page/summary/{title}"
WIKIPEDIA_SEARCH_URL = "https://en.wikipedia.org/w/api.php"
DUCKDUCKGO_URL = "https://api.duckduckgo.com/"

DEFAULT_USER_AGENT = "NoteEnhancer/0.1 (knowledge lookup)"


class KnowledgeClient:
    """Async client for the encyclopedia and instant-answer sources."""

    def __init__(
        self,
        http: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        self.http = http or httpx.AsyncClient(
            timeout=timeout,
            headers={"User-Agent": user_agent},
            follow_redirects=True,
        )

    async def aclose(self) -> None:
        await self.http.aclose()

    async def _get_json(self, url: str, params: dict | None = None) -> dict | None:
        try:
            response = await self.http.get(url, params=params)
        except httpx.HTTPError as exc:
            logger.debug("Knowledge lookup failed for %s: %s", url, exc)
            return None
        if not response.is_success:
            logger.debug("Knowledge lookup %s returned %d", url, response.status_code)
            return None
        try:
            data = response.json()
        except ValueError:
            logger.debug("Knowledge lookup %s returned non-JSON body", url)
            return None
        return data if isinstance(data, dict) else None

    async def wikipedia_summary(self, title: str) -> str | None:
        """Return the summary extract of the page with exactly this title."""
        url = WIKIPEDIA_SUMMARY_URL.format(title=quote(title.replace(" ", "_"), safe=""))
        data = await self._get_json(url)
        if not data:
            return None
        extract = data.get("extract")
        return extract.strip() if isinstance(extract, str) and extract.strip() else None

    async def wikipedia_search(self, query: str) -> str | None:
        """Full-text search; return the title of the top hit."""
        data = await self._get_json(
            WIKIPEDIA_SEARCH_URL,
            params={
                "action": "query",
                "list": "search",
                "srsearch": query,
                "srlimit": 1,
                "format": "json",
            },
        )
        if not data:
            return None
        hits = (data.get("query") or {}).get("search") or []
        if not hits or not isinstance(hits[0], dict):
            return None
        title = hits[0].get("title")
        return title if isinstance(title, str) and title else None

    async def instant_answer(self, query: str) -> str | None:
        """Return the abstract from the DuckDuckGo Instant Answer API."""
        data = await self._get_json(
            DUCKDUCKGO_URL,
            params={"q": query, "format": "json", "no_html": 1, "skip_disambig": 1},
        )
        if not data:
            return None
        abstract = data.get("AbstractText") or data.get("Abstract")
        return abstract.strip() if isinstance(abstract, str) and abstract.strip() else None
