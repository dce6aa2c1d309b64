"""Obsidian reference notes for auto-retrieval.

Talks to the Obsidian Local REST API plugin, which serves a self-signed
certificate on localhost. Two kinds of notes are pulled in:

- Fixed notes listed in OBSIDIAN_CONTEXT_NOTES (always injected).
- Notes carrying OBSIDIAN_CONTEXT_TAG, up to ``MAX_TAGGED_NOTES``.

Without OBSIDIAN_REST_API_KEY the source is disabled and returns no notes.
"""

import logging
from urllib.parse import quote

import httpx

from src.config import settings
from src.errors import ProviderError
from src.memory.models import ObsidianNote

logger = logging.getLogger(__name__)

MAX_NOTE_LENGTH = 1000
MAX_TAGGED_NOTES = 5


def _truncate(text: str, limit: int = MAX_NOTE_LENGTH) -> str:
    if len(text) > limit:
        return text[:limit] + "…"
    return text


class ObsidianNotes:
    """Fetches context notes from the Obsidian vault."""

    _instance: "ObsidianNotes | None" = None

    @classmethod
    def get(cls) -> "ObsidianNotes":
        """Return the shared notes source."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def _reset(cls) -> None:
        """Reset the singleton (for testing)."""
        cls._instance = None

    @property
    def enabled(self) -> bool:
        return bool(settings.obsidian_rest_api_key) and settings.obsidian_context_enabled

    async def fetch_relevant_notes(self, query: str) -> list[ObsidianNote]:
        """Return fixed and tagged context notes.

        *query* is accepted for interface symmetry with the memory index;
        note selection is driven by settings, not by the query text.

        Raises:
            ProviderError: The Obsidian REST API is unreachable or answers
                the tag search with a malformed body.
        """
        if not self.enabled:
            return []

        base_url = settings.obsidian_rest_url.rstrip("/")
        headers = {
            "Authorization": f"Bearer {settings.obsidian_rest_api_key}",
            "Content-Type": "application/json",
        }

        notes: list[ObsidianNote] = []
        seen: set[str] = set()

        try:
            async with httpx.AsyncClient(
                base_url=base_url,
                headers=headers,
                timeout=settings.http_timeout_seconds,
                verify=False,
            ) as client:
                for path in settings.get_obsidian_context_notes():
                    note = await self._read_note(client, path)
                    if note is not None:
                        notes.append(note)
                        seen.add(path)

                if settings.obsidian_context_tag:
                    tagged = 0
                    for path in await self._search_tag(client, settings.obsidian_context_tag):
                        if tagged >= MAX_TAGGED_NOTES:
                            break
                        if path in seen:
                            continue
                        note = await self._read_note(client, path)
                        if note is None:
                            continue
                        notes.append(note)
                        seen.add(path)
                        tagged += 1
        except httpx.HTTPError as exc:
            msg = f"Obsidian request failed: {exc}"
            raise ProviderError(msg) from exc

        logger.debug("Fetched %d Obsidian note(s) for %r", len(notes), query[:50])
        return notes

    @staticmethod
    async def _read_note(client: httpx.AsyncClient, path: str) -> ObsidianNote | None:
        resp = await client.get(f"/vault/{quote(path)}")
        if not resp.is_success:
            logger.warning("Obsidian note %s unavailable (HTTP %d)", path, resp.status_code)
            return None
        return ObsidianNote(path=path, content=_truncate(resp.text))

    @staticmethod
    async def _search_tag(client: httpx.AsyncClient, tag: str) -> list[str]:
        resp = await client.post("/search/simple/", params={"query": f"tag:#{tag}"})
        if not resp.is_success:
            logger.warning("Obsidian tag search failed (HTTP %d)", resp.status_code)
            return []
        try:
            results = resp.json()
        except ValueError as exc:
            msg = "Obsidian tag search returned invalid JSON"
            raise ProviderError(msg) from exc

        if not isinstance(results, list) or not all(isinstance(r, dict) for r in results):
            msg = "Obsidian tag search returned an unexpected body, expected a list of objects"
            raise ProviderError(msg)
        return [r["filename"] for r in results if r.get("filename")]
