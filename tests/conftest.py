"""Shared test fixtures."""

import pytest

from src.memory.embeddings import VoyageEmbedder
from src.memory.index import QdrantMemoryIndex
from src.memory.notes import ObsidianNotes


@pytest.fixture(autouse=True)
def _reset_singletons():
    """Keep shared collaborators from leaking between tests."""
    VoyageEmbedder._reset()
    QdrantMemoryIndex._reset()
    ObsidianNotes._reset()
    yield
    VoyageEmbedder._reset()
    QdrantMemoryIndex._reset()
    ObsidianNotes._reset()
