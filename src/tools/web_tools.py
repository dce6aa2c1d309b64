"""Web research tools: search the web and read webpage content."""

import logging

from pydantic import Field

from src.errors import ProviderError
from src.search.coordinator import WebSearchCoordinator
from src.search.pages import PAGE_TEXT_LIMIT, fetch_page
from src.tools.base import ToolParams, ToolResult
from src.tools.registry import registry

logger = logging.getLogger(__name__)


class WebSearchParams(ToolParams):
    query: str = Field(description="Search query string")
    count: int = Field(
        default=5,
        description="Number of results to return (1-20)",
        ge=1,
        le=20,
    )


class ReadWebpageParams(ToolParams):
    url: str = Field(description="Full URL of the page to read")


@registry.tool(
    name="web_search",
    description=(
        "Search the web (SearXNG, falling back to Brave Search). Returns titles, "
        "URLs, and snippets for matching pages. Use read_webpage to get the full "
        "content of interesting results."
    ),
    category="research",
    params_model=WebSearchParams,
)
async def web_search(query: str, count: int = 5) -> ToolResult:
    outcome = await WebSearchCoordinator().search(query, max_results=count)
    if not outcome.success:
        return ToolResult(error=outcome.text)
    return ToolResult(data={**outcome.to_dict(), "query": query})


@registry.tool(
    name="read_webpage",
    description=(
        "Fetch a URL and return its readable text content "
        f"(text pages only, capped at {PAGE_TEXT_LIMIT} characters). "
        "Use this to read pages found via web_search."
    ),
    category="research",
    params_model=ReadWebpageParams,
)
async def read_webpage(url: str) -> ToolResult:
    try:
        outcome = await fetch_page(url)
    except ProviderError as exc:
        logger.warning("read_webpage failed: %s", exc)
        return ToolResult(error=str(exc))

    if not outcome.success:
        return ToolResult(error=outcome.text)
    return ToolResult(data=outcome.to_dict())
