"""Tests for the Qdrant memory index."""

from types import SimpleNamespace
from unittest.mock import AsyncMock

import httpx
import pytest

from src.errors import ConfigurationError, ProviderError
from src.memory.index import (
    CONVERSATIONS_COLLECTION,
    KNOWLEDGE_COLLECTION,
    SCORE_THRESHOLD,
    QdrantMemoryIndex,
)


def _point(score: float, **payload) -> SimpleNamespace:
    return SimpleNamespace(score=score, payload=payload)


def _client(conversations: list, knowledge: list) -> AsyncMock:
    by_collection = {
        CONVERSATIONS_COLLECTION: SimpleNamespace(points=conversations),
        KNOWLEDGE_COLLECTION: SimpleNamespace(points=knowledge),
    }

    async def query_points(*, collection_name, **kwargs):
        return by_collection[collection_name]

    client = AsyncMock()
    client.query_points.side_effect = query_points
    return client


async def test_search_merges_and_sorts_collections() -> None:
    client = _client(
        conversations=[_point(0.6, user_message="a"), _point(0.9, user_message="b")],
        knowledge=[_point(0.75, type="fact", content="c")],
    )
    hits = await QdrantMemoryIndex(client=client).search([0.1, 0.2], limit=5)

    assert [h.score for h in hits] == [0.9, 0.75, 0.6]
    assert hits[1].payload == {"type": "fact", "content": "c"}


async def test_search_applies_coarse_floor() -> None:
    client = _client(
        conversations=[_point(SCORE_THRESHOLD - 0.01, user_message="low")],
        knowledge=[_point(SCORE_THRESHOLD, type="summary", content="edge")],
    )
    hits = await QdrantMemoryIndex(client=client).search([0.1], limit=5)

    assert [h.payload.get("content") for h in hits] == ["edge"]


async def test_search_slices_to_limit() -> None:
    client = _client(
        conversations=[_point(0.9 - i * 0.1, user_message=str(i)) for i in range(3)],
        knowledge=[_point(0.85 - i * 0.1, type="fact", content=str(i)) for i in range(3)],
    )
    hits = await QdrantMemoryIndex(client=client).search([0.1], limit=2)

    assert [h.score for h in hits] == [0.9, 0.85]


async def test_search_queries_both_collections_with_payload() -> None:
    client = _client([], [])
    await QdrantMemoryIndex(client=client).search([0.3], limit=7)

    collections = {c.kwargs["collection_name"] for c in client.query_points.call_args_list}
    assert collections == {CONVERSATIONS_COLLECTION, KNOWLEDGE_COLLECTION}
    for call in client.query_points.call_args_list:
        assert call.kwargs["query"] == [0.3]
        assert call.kwargs["limit"] == 7
        assert call.kwargs["with_payload"] is True


async def test_missing_payload_becomes_empty_dict() -> None:
    client = _client([SimpleNamespace(score=0.8, payload=None)], [])
    hits = await QdrantMemoryIndex(client=client).search([0.1])
    assert hits[0].payload == {}


async def test_transport_error_raises_provider_error() -> None:
    client = AsyncMock()
    client.query_points.side_effect = httpx.ConnectError("refused")
    with pytest.raises(ProviderError, match="Qdrant search failed"):
        await QdrantMemoryIndex(client=client).search([0.1])


async def test_unconfigured_index() -> None:
    index = QdrantMemoryIndex.get()
    assert not index.enabled
    with pytest.raises(ConfigurationError, match="QDRANT_URL"):
        await index.search([0.1])


def test_enabled_with_url(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("src.config.settings.qdrant_url", "http://localhost:6333")
    assert QdrantMemoryIndex().enabled
