"""Web search providers: SearXNG (self-hosted) and Brave Search.

Each provider queries one JSON API and maps its result shape onto
``WebSearchHit``. HTTP and transport failures raise ``ProviderError``;
the coordinator decides what to do with them.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

from src.config import settings
from src.errors import ConfigurationError, ProviderError
from src.search.models import WebSearchHit, WebSearchOutcome

logger = logging.getLogger(__name__)

BRAVE_SEARCH_URL = "https://api.search.brave.com/res/v1/web/search"
NO_DESCRIPTION = "(no description)"


def format_results(provider: str, query: str, hits: list[WebSearchHit]) -> str:
    """Render hits as a numbered, provider-labelled list."""
    lines = [
        f"{i}. **{hit.title}**\n   {hit.url}\n   {hit.snippet or NO_DESCRIPTION}"
        for i, hit in enumerate(hits, start=1)
    ]
    return f'{provider} results for "{query}":\n\n' + "\n\n".join(lines)


class SearchProvider(ABC):
    """One web search backend."""

    name: str = ""

    @property
    @abstractmethod
    def configured(self) -> bool:
        """Whether the provider has the URL or key it needs."""

    @abstractmethod
    async def _fetch(self, query: str) -> dict[str, Any]:
        """Run the HTTP request and return the decoded JSON body."""

    @abstractmethod
    def _parse(self, body: dict[str, Any]) -> list[WebSearchHit]:
        """Map the provider's result list onto ``WebSearchHit``."""

    async def search(self, query: str, max_results: int = 5) -> WebSearchOutcome:
        """Search and return at most *max_results* hits.

        The request always asks for the provider's default page size; the
        list is truncated after mapping.

        Raises:
            ProviderError: Non-2xx status, network failure, or timeout.
        """
        body = await self._fetch(query)
        hits = self._parse(body)[:max_results]

        if not hits:
            return WebSearchOutcome(
                success=True,
                text=f'{self.name}: no results found for "{query}"',
                provider=self.name,
            )

        logger.info("%s returned %d result(s) for %r", self.name, len(hits), query)
        return WebSearchOutcome(
            success=True,
            text=format_results(self.name, query, hits),
            data=hits,
            provider=self.name,
        )

    async def _get_json(
        self,
        url: str,
        *,
        params: dict[str, Any],
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        try:
            async with httpx.AsyncClient(timeout=settings.http_timeout_seconds) as client:
                resp = await client.get(url, params=params, headers=headers)
        except httpx.HTTPError as exc:
            msg = f"{self.name} request failed: {exc!r}"
            raise ProviderError(msg) from exc

        if not resp.is_success:
            msg = f"{self.name} error: {resp.status_code}"
            raise ProviderError(msg)

        try:
            body = resp.json()
        except ValueError as exc:
            msg = f"{self.name} returned invalid JSON"
            raise ProviderError(msg) from exc

        if not isinstance(body, dict):
            msg = f"{self.name} returned a JSON {type(body).__name__}, expected an object"
            raise ProviderError(msg)
        return body


class SearxngProvider(SearchProvider):
    """Primary provider: a self-hosted SearXNG instance."""

    name = "SearXNG"

    def __init__(self, base_url: str | None = None) -> None:
        self._base_url = base_url

    @property
    def base_url(self) -> str:
        return settings.searxng_url if self._base_url is None else self._base_url

    @property
    def configured(self) -> bool:
        return bool(self.base_url)

    async def _fetch(self, query: str) -> dict[str, Any]:
        if not self.configured:
            msg = "SEARXNG_URL is not configured"
            raise ConfigurationError(msg)
        url = f"{self.base_url.rstrip('/')}/search"
        return await self._get_json(url, params={"q": query, "format": "json"})

    def _parse(self, body: dict[str, Any]) -> list[WebSearchHit]:
        return [
            WebSearchHit(
                title=r.get("title", ""),
                url=r.get("url", ""),
                snippet=r.get("content") or "",
            )
            for r in body.get("results") or []
        ]


class BraveProvider(SearchProvider):
    """Fallback provider: the Brave Search API."""

    name = "Brave Search"

    def __init__(self, api_key: str | None = None) -> None:
        self._api_key = api_key

    @property
    def api_key(self) -> str:
        return settings.brave_search_api_key if self._api_key is None else self._api_key

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def search(self, query: str, max_results: int = 5) -> WebSearchOutcome:
        if not self.configured:
            return WebSearchOutcome(
                success=False,
                text="Brave Search is not configured (BRAVE_SEARCH_API_KEY missing)",
                error="BRAVE_SEARCH_API_KEY is not configured",
                provider=self.name,
            )
        return await super().search(query, max_results)

    async def _fetch(self, query: str) -> dict[str, Any]:
        headers = {
            "Accept": "application/json",
            "Accept-Encoding": "gzip",
            "X-Subscription-Token": self.api_key,
        }
        params = {"q": query, "result_filter": "web"}
        return await self._get_json(BRAVE_SEARCH_URL, params=params, headers=headers)

    def _parse(self, body: dict[str, Any]) -> list[WebSearchHit]:
        web = body.get("web") or {}
        return [
            WebSearchHit(
                title=r.get("title", ""),
                url=r.get("url", ""),
                snippet=r.get("description") or "",
            )
            for r in web.get("results") or []
        ]
