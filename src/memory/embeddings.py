"""Voyage AI embedding client.

Disabled (``enabled`` is False) when VOYAGE_API_KEY is not set; the
retriever then skips semantic search entirely.
"""

import logging

import httpx

from src.config import settings
from src.errors import ConfigurationError, ProviderError

logger = logging.getLogger(__name__)

VOYAGE_EMBEDDINGS_URL = "https://api.voyageai.com/v1/embeddings"
VOYAGE_MODEL = "voyage-3"
EMBEDDING_DIMENSION = 1024


class VoyageEmbedder:
    """Embeds text with Voyage's ``voyage-3`` model (1024 dimensions)."""

    _instance: "VoyageEmbedder | None" = None

    def __init__(self, api_key: str | None = None) -> None:
        self._api_key = settings.voyage_api_key if api_key is None else api_key

    @classmethod
    def get(cls) -> "VoyageEmbedder":
        """Return the shared embedder instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def _reset(cls) -> None:
        """Reset the singleton (for testing)."""
        cls._instance = None

    @property
    def enabled(self) -> bool:
        return bool(self._api_key)

    async def embed(self, text: str) -> list[float]:
        """Embed a single text.

        Raises:
            ConfigurationError: VOYAGE_API_KEY is not set.
            ProviderError: The Voyage API failed or returned no embedding.
        """
        vectors = await self.embed_many([text])
        return vectors[0]

    async def embed_many(self, texts: list[str]) -> list[list[float]]:
        """Embed several texts in one request, preserving order."""
        if not self.enabled:
            msg = "VOYAGE_API_KEY is not configured"
            raise ConfigurationError(msg)

        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }
        body = {"input": texts, "model": VOYAGE_MODEL}

        try:
            async with httpx.AsyncClient(timeout=settings.http_timeout_seconds) as client:
                resp = await client.post(VOYAGE_EMBEDDINGS_URL, headers=headers, json=body)
        except httpx.HTTPError as exc:
            msg = f"Voyage request failed: {exc}"
            raise ProviderError(msg) from exc

        if not resp.is_success:
            msg = f"Voyage error: {resp.status_code}"
            raise ProviderError(msg)

        data = resp.json().get("data") or []
        vectors = [item.get("embedding") for item in sorted(data, key=lambda d: d.get("index", 0))]
        if len(vectors) != len(texts) or not all(vectors):
            msg = "Voyage returned no embedding"
            raise ProviderError(msg)

        logger.debug("Embedded %d text(s) with %s", len(texts), VOYAGE_MODEL)
        return vectors
