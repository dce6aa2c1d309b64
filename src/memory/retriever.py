"""Automatic context retrieval before each LLM call.

Pipeline for one conversational turn:

1. Embed the user message (Voyage).
2. Search Qdrant (conversations + knowledge).
3. Keep hits scoring at least ``min_score`` (default from settings, 0.5).
4. Classify each payload and label it with a relative time.
5. Fetch Obsidian context notes.

Provider failures propagate to the caller, which decides whether to retry
or carry on without context. Unconfigured sources contribute nothing.
"""

from __future__ import annotations

import logging
import math
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Protocol

from src.config import settings
from src.errors import ParseError
from src.memory.classifier import classify
from src.memory.embeddings import VoyageEmbedder
from src.memory.index import QdrantMemoryIndex
from src.memory.models import (
    ObsidianNote,
    RetrievalResult,
    RetrievedMemory,
    ScoredSearchHit,
    parse_payload,
)
from src.memory.notes import ObsidianNotes
from src.memory.recency import format_time_ago

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)

MAX_CONTENT_LENGTH = 500
# Extra hits requested so the business threshold still leaves enough results.
SEARCH_HEADROOM = 2


class Embedder(Protocol):
    @property
    def enabled(self) -> bool: ...

    async def embed(self, text: str) -> list[float]: ...


class MemoryIndex(Protocol):
    @property
    def enabled(self) -> bool: ...

    async def search(self, vector: list[float], limit: int = 5) -> list[ScoredSearchHit]: ...


class NotesSource(Protocol):
    async def fetch_relevant_notes(self, query: str) -> list[ObsidianNote]: ...


def to_memory(hit: ScoredSearchHit, now: datetime | None = None) -> RetrievedMemory:
    """Normalize one search hit.

    Raises:
        ParseError: Unknown payload type or malformed timestamp.
    """
    payload = parse_payload(hit.payload)
    current = now or datetime.now(UTC)
    timestamp = payload.timestamp or current.isoformat()

    content = classify(payload)
    if len(content) > MAX_CONTENT_LENGTH:
        content = content[:MAX_CONTENT_LENGTH] + "…"

    return RetrievedMemory(
        content=content,
        score=hit.score,
        channel=payload.channel,
        timestamp=timestamp,
        time_ago=format_time_ago(timestamp, now=current),
        type=payload.type,
    )


def estimate_tokens(result: RetrievalResult) -> int:
    """Rough token cost of the retrieval block (~4 chars per token)."""
    chars = 0
    for m in result.qdrant_memories:
        chars += len(m.content) + len(m.time_ago) + len(m.channel or "") + 20
    for n in result.obsidian_notes:
        chars += len(n.content) + len(n.path) + 20
    return math.ceil(chars / 4)


class SemanticRetriever:
    """Retrieves memories and notes relevant to a user message.

    Collaborators default to the shared Voyage, Qdrant, and Obsidian
    clients; tests pass fakes.
    """

    def __init__(
        self,
        embedder: Embedder | None = None,
        index: MemoryIndex | None = None,
        notes: NotesSource | None = None,
    ) -> None:
        self._embedder = embedder or VoyageEmbedder.get()
        self._index = index or QdrantMemoryIndex.get()
        self._notes = notes or ObsidianNotes.get()

    async def retrieve(
        self,
        query: str,
        channel: str,
        *,
        min_score: float | None = None,
        now: datetime | None = None,
    ) -> RetrievalResult:
        """Retrieve context for *query* coming from *channel*.

        Args:
            query: The user's message.
            channel: Where the message came from (logged only).
            min_score: Override for ``settings.auto_retrieve_min_score``.
            now: Reference instant for relative time labels.
        """
        if not settings.auto_retrieve_enabled:
            return RetrievalResult()

        threshold = settings.auto_retrieve_min_score if min_score is None else min_score

        memories: list[RetrievedMemory] = []
        if self._embedder.enabled and self._index.enabled:
            vector = await self._embedder.embed(query)
            limit = settings.auto_retrieve_max_results
            hits = await self._index.search(vector, limit=limit + SEARCH_HEADROOM)
            memories = self._normalize(hits, threshold, now)[:limit]
        else:
            logger.debug("Semantic memory disabled, skipping vector search")

        notes = await self._notes.fetch_relevant_notes(query)

        result = RetrievalResult(qdrant_memories=memories, obsidian_notes=notes)
        logger.info(
            "Auto-retrieve [%s] %r: %d memories, %d notes, ~%d tokens",
            channel,
            query[:100],
            len(result.qdrant_memories),
            len(result.obsidian_notes),
            estimate_tokens(result),
        )
        return result

    @staticmethod
    def _normalize(
        hits: Sequence[ScoredSearchHit],
        threshold: float,
        now: datetime | None,
    ) -> list[RetrievedMemory]:
        memories = []
        for hit in hits:
            if hit.score < threshold:
                continue
            try:
                memories.append(to_memory(hit, now))
            except ParseError as exc:
                logger.warning("Skipping memory hit (score %.2f): %s", hit.score, exc)
        return memories


async def auto_retrieve(
    query: str,
    channel: str,
    *,
    min_score: float | None = None,
) -> RetrievalResult:
    """Retrieve context with the shared collaborators."""
    return await SemanticRetriever().retrieve(query, channel, min_score=min_score)
