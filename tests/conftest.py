"""
Shared fixtures: a small catalog and a vocabulary-based embedder whose
similarities are predictable without downloading a model.
"""

import re

import pytest

from catalog_rag.core.schema import Item
from catalog_rag.vector.embeddings import IEmbeddingProvider

VOCABULARY = ["shoes", "red", "hat", "blue", "leather", "running", "wool", "boots", "winter"]


class KeywordEmbedding(IEmbeddingProvider):
    """Counts vocabulary words; texts sharing words point the same way."""

    def __init__(self):
        self.calls = []
        self.load_calls = 0
        self.error = None

    def load(self) -> None:
        self.load_calls += 1

    def embed_text(self, text: str):
        self.calls.append(text)
        if self.error is not None:
            raise self.error
        tokens = re.findall(r"[a-z]+", text.lower())
        return [float(tokens.count(word)) for word in VOCABULARY]

    def get_dimension(self) -> int:
        return len(VOCABULARY)


@pytest.fixture
def keyword_embedder():
    return KeywordEmbedding()


@pytest.fixture
def sample_catalog():
    """The two-item catalog used throughout the search scenarios."""
    return [
        Item(id=1, name="Red Shoes", description="leather running shoes", tags=["shoes", "red"]),
        Item(id=2, name="Blue Hat", description="wool hat", tags=["hat", "blue"]),
    ]


@pytest.fixture
def larger_catalog():
    return [
        Item(id=1, name="Red Shoes", description="leather running shoes", tags=["shoes", "red"], price=89.99),
        Item(id=2, name="Blue Hat", description="wool hat", tags=["hat", "blue", "winter"], price=24.5),
        Item(id=3, name="Hiking Boots", description="waterproof leather boots", tags=["boots"], price=129.0),
        Item(id=4, name="Running Socks", description="breathable socks for running", tags=["running"], price=9.0),
        Item(id=5, name="Winter Scarf", description="blue wool scarf", tags=["winter", "wool"], price=19.0),
        Item(id=6, name="Sandals", description="open toe summer sandals", tags=["summer"], price=39.0),
        Item(id=7, name="Red Cap", description="cotton baseball cap", tags=["hat", "red"], price=15.0),
    ]
