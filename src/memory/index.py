"""Qdrant vector index over conversations and knowledge.

Two collections are searched:
    conversations: each user/assistant exchange
    knowledge: summaries and facts

Disabled (``enabled`` is False) when QDRANT_URL is not set.
"""

import asyncio
import logging
from typing import Any

import httpx
from qdrant_client import AsyncQdrantClient
from qdrant_client.http.exceptions import ResponseHandlingException, UnexpectedResponse

from src.config import settings
from src.errors import ConfigurationError, ProviderError
from src.memory.models import ScoredSearchHit

logger = logging.getLogger(__name__)

CONVERSATIONS_COLLECTION = "conversations"
KNOWLEDGE_COLLECTION = "knowledge"
COLLECTIONS = (CONVERSATIONS_COLLECTION, KNOWLEDGE_COLLECTION)

# Coarse store-side floor; the retriever applies its own stricter threshold.
SCORE_THRESHOLD = 0.3


class QdrantMemoryIndex:
    """Semantic search across the memory collections.

    Get the shared instance via ``QdrantMemoryIndex.get()``.
    """

    _instance: "QdrantMemoryIndex | None" = None

    def __init__(self, client: Any = None) -> None:
        self._client = client
        self._enabled = client is not None or bool(settings.qdrant_url)

    @classmethod
    def get(cls) -> "QdrantMemoryIndex":
        """Return the shared index instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def _reset(cls) -> None:
        """Reset the singleton (for testing)."""
        cls._instance = None

    @property
    def enabled(self) -> bool:
        return self._enabled

    def _get_client(self) -> Any:
        if self._client is None:
            if not settings.qdrant_url:
                msg = "QDRANT_URL is not configured"
                raise ConfigurationError(msg)
            self._client = AsyncQdrantClient(
                url=settings.qdrant_url,
                api_key=settings.qdrant_api_key or None,
                timeout=int(settings.http_timeout_seconds),
            )
            logger.info("Qdrant client created for %s", settings.qdrant_url)
        return self._client

    async def search(self, vector: list[float], limit: int = 5) -> list[ScoredSearchHit]:
        """Search both collections for content similar to *vector*.

        Returns at most *limit* hits scoring at least ``SCORE_THRESHOLD``,
        sorted by score descending.

        Raises:
            ProviderError: Qdrant is unreachable or rejected the query.
        """
        client = self._get_client()

        try:
            responses = await asyncio.gather(
                *(
                    client.query_points(
                        collection_name=name,
                        query=vector,
                        limit=limit,
                        with_payload=True,
                    )
                    for name in COLLECTIONS
                )
            )
        except (UnexpectedResponse, ResponseHandlingException, httpx.HTTPError) as exc:
            msg = f"Qdrant search failed: {exc}"
            raise ProviderError(msg) from exc

        points = [point for response in responses for point in response.points]
        hits = [
            ScoredSearchHit(score=point.score, payload=point.payload or {})
            for point in points
            if point.score >= SCORE_THRESHOLD
        ]
        hits.sort(key=lambda h: h.score, reverse=True)
        return hits[:limit]
