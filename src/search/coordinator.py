"""Ordered web search fallback: SearXNG first, then Brave Search."""

import logging

from src.errors import ConfigurationError, ProviderError
from src.search.models import SearchAttempt, WebSearchOutcome
from src.search.providers import BraveProvider, SearchProvider, SearxngProvider

logger = logging.getLogger(__name__)

NO_ENGINE_CONFIGURED = (
    "No web search engine configured (set SEARXNG_URL or BRAVE_SEARCH_API_KEY)"
)


class WebSearchCoordinator:
    """Runs a query against the primary provider, falling back once.

    The returned outcome lists every attempt made, so the path taken and
    any swallowed primary error can be inspected.
    """

    def __init__(
        self,
        primary: SearchProvider | None = None,
        fallback: SearchProvider | None = None,
    ) -> None:
        self.primary = primary or SearxngProvider()
        self.fallback = fallback or BraveProvider()

    async def search(self, query: str, max_results: int = 5) -> WebSearchOutcome:
        if not self.primary.configured and not self.fallback.configured:
            return WebSearchOutcome(
                success=False,
                text=NO_ENGINE_CONFIGURED,
                error=NO_ENGINE_CONFIGURED,
            )

        attempts: list[SearchAttempt] = []

        if self.primary.configured:
            try:
                outcome = await self.primary.search(query, max_results)
            except Exception as exc:
                error = str(exc) or type(exc).__name__
                attempts.append(SearchAttempt(self.primary.name, "failed", error))
                logger.warning(
                    "%s failed, falling back to %s: %s",
                    self.primary.name,
                    self.fallback.name,
                    exc,
                )
            else:
                attempts.append(SearchAttempt(self.primary.name, "succeeded"))
                outcome.attempts = attempts
                return outcome
        else:
            attempts.append(SearchAttempt(self.primary.name, "skipped"))

        try:
            outcome = await self.fallback.search(query, max_results)
        except (ProviderError, ConfigurationError) as exc:
            attempts.append(SearchAttempt(self.fallback.name, "failed", str(exc)))
            logger.warning("%s failed: %s", self.fallback.name, exc)
            return WebSearchOutcome(
                success=False,
                text=f"Web search failed: {_describe_failures(attempts)}",
                error=str(exc),
                attempts=attempts,
            )

        if outcome.success:
            attempts.append(SearchAttempt(self.fallback.name, "succeeded"))
        else:
            attempts.append(SearchAttempt(self.fallback.name, "unsuccessful", outcome.error))
            if attempts[0].status == "failed":
                outcome.text = f"Web search failed: {_describe_failures(attempts)}. {outcome.text}"
        outcome.attempts = attempts
        return outcome


def _describe_failures(attempts: list[SearchAttempt]) -> str:
    return "; ".join(f"{a.provider}: {a.error}" for a in attempts if a.status == "failed")


async def web_search(query: str, max_results: int = 5) -> WebSearchOutcome:
    """Search the web with the configured engines."""
    return await WebSearchCoordinator().search(query, max_results)
