"""Fetch a web page and reduce it to plain text for the model's context."""

import asyncio
import logging

import httpx
import trafilatura
from bs4 import BeautifulSoup

from src.config import settings
from src.errors import ProviderError
from src.search.models import WebPageOutcome

logger = logging.getLogger(__name__)

PAGE_TEXT_LIMIT = 4000
USER_AGENT = "Mozilla/5.0 (compatible; ContextRetrieval/1.0)"


def _collapse(text: str) -> str:
    return " ".join(text.split())


def _html_title(soup: BeautifulSoup) -> str:
    if soup.title and soup.title.string:
        return soup.title.string.strip()
    return ""


def _html_text(html: str, soup: BeautifulSoup) -> str:
    """Main content via trafilatura, or every visible string when it finds none."""
    extracted = trafilatura.extract(html)
    if extracted:
        return extracted
    for tag in soup(["script", "style", "noscript"]):
        tag.decompose()
    return soup.get_text(" ")


def extract_page(url: str, body: str, content_type: str) -> WebPageOutcome:
    """Turn a fetched body into a capped plain-text outcome.

    Only ``text/*`` content is read; anything else yields an unsuccessful
    outcome naming the content type.
    """
    if "text" not in content_type.lower():
        return WebPageOutcome(
            success=False,
            text=f"Unsupported content type: {content_type or 'unknown'}",
            url=url,
            error="Non-text content",
        )

    title = ""
    if "html" in content_type.lower():
        soup = BeautifulSoup(body, "html.parser")
        title = _html_title(soup)
        text = _html_text(body, soup)
    else:
        text = body

    text = _collapse(text)
    truncated = len(text) > PAGE_TEXT_LIMIT
    text = text[:PAGE_TEXT_LIMIT]

    return WebPageOutcome(
        success=True,
        text=f"Content of {url}:\n\n{text}",
        url=url,
        title=title,
        content=text,
        truncated=truncated,
    )


async def fetch_page(url: str) -> WebPageOutcome:
    """Download *url* and return its readable text.

    Raises:
        ProviderError: Non-2xx status, network failure, or timeout.
    """
    try:
        async with httpx.AsyncClient(
            timeout=settings.http_timeout_seconds,
            follow_redirects=True,
            headers={"User-Agent": USER_AGENT},
        ) as client:
            resp = await client.get(url)
    except httpx.HTTPError as exc:
        msg = f"Fetching {url} failed: {exc!r}"
        raise ProviderError(msg) from exc

    if not resp.is_success:
        msg = f"HTTP {resp.status_code} fetching {url}"
        raise ProviderError(msg)

    content_type = resp.headers.get("content-type", "")
    # HTML parsing and extraction are CPU-bound
    outcome = await asyncio.to_thread(extract_page, url, resp.text, content_type)
    logger.info("Fetched %s: %d chars (truncated=%s)", url, len(outcome.content), outcome.truncated)
    return outcome
