"""Tests for the Voyage embedding client."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from src.errors import ConfigurationError, ProviderError
from src.memory.embeddings import EMBEDDING_DIMENSION, VOYAGE_MODEL, VoyageEmbedder


def _mock_httpx_client(mock_client_cls: MagicMock, response: httpx.Response) -> AsyncMock:
    mock_client = AsyncMock()
    mock_client.post.return_value = response
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=False)
    mock_client_cls.return_value = mock_client
    return mock_client


def _voyage_response(vectors: list[list[float]], status_code: int = 200) -> httpx.Response:
    return httpx.Response(
        status_code=status_code,
        json={"data": [{"index": i, "embedding": v} for i, v in enumerate(vectors)]},
        request=httpx.Request("POST", "https://api.voyageai.com/v1/embeddings"),
    )


async def test_embed_returns_vector() -> None:
    vector = [0.5] * EMBEDDING_DIMENSION
    with patch("src.memory.embeddings.httpx.AsyncClient") as mock_cls:
        mock_client = _mock_httpx_client(mock_cls, _voyage_response([vector]))
        result = await VoyageEmbedder(api_key="voyage-key").embed("bonjour")

    assert result == vector
    _, kwargs = mock_client.post.call_args
    assert kwargs["json"] == {"input": ["bonjour"], "model": VOYAGE_MODEL}
    assert kwargs["headers"]["Authorization"] == "Bearer voyage-key"


async def test_embed_many_orders_by_index() -> None:
    resp = httpx.Response(
        status_code=200,
        json={"data": [{"index": 1, "embedding": [2.0]}, {"index": 0, "embedding": [1.0]}]},
        request=httpx.Request("POST", "https://api.voyageai.com/v1/embeddings"),
    )
    with patch("src.memory.embeddings.httpx.AsyncClient") as mock_cls:
        _mock_httpx_client(mock_cls, resp)
        result = await VoyageEmbedder(api_key="k").embed_many(["a", "b"])

    assert result == [[1.0], [2.0]]


async def test_embed_http_error() -> None:
    resp = httpx.Response(
        status_code=429,
        text="rate limited",
        request=httpx.Request("POST", "https://api.voyageai.com/v1/embeddings"),
    )
    with patch("src.memory.embeddings.httpx.AsyncClient") as mock_cls:
        _mock_httpx_client(mock_cls, resp)
        with pytest.raises(ProviderError, match="Voyage error: 429"):
            await VoyageEmbedder(api_key="k").embed("x")


async def test_embed_transport_error() -> None:
    with patch("src.memory.embeddings.httpx.AsyncClient") as mock_cls:
        mock_client = _mock_httpx_client(mock_cls, _voyage_response([]))
        mock_client.post.side_effect = httpx.ConnectTimeout("timed out")
        with pytest.raises(ProviderError, match="Voyage request failed"):
            await VoyageEmbedder(api_key="k").embed("x")


async def test_embed_empty_data() -> None:
    with patch("src.memory.embeddings.httpx.AsyncClient") as mock_cls:
        _mock_httpx_client(mock_cls, _voyage_response([]))
        with pytest.raises(ProviderError, match="no embedding"):
            await VoyageEmbedder(api_key="k").embed("x")


async def test_embed_without_key() -> None:
    embedder = VoyageEmbedder(api_key="")
    assert not embedder.enabled
    with pytest.raises(ConfigurationError, match="VOYAGE_API_KEY"):
        await embedder.embed("x")


def test_enabled_follows_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    assert not VoyageEmbedder.get().enabled

    VoyageEmbedder._reset()
    monkeypatch.setattr("src.config.settings.voyage_api_key", "from-env")
    assert VoyageEmbedder.get().enabled
