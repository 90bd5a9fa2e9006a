"""
Tests for embedding providers.
"""

import sys
from unittest.mock import MagicMock, patch

import pytest
import numpy as np

from catalog_rag.core.errors import EmbedderError, EmbedderUnavailable
from catalog_rag.vector.embeddings import (
    IEmbeddingProvider,
    DeterministicHashEmbedding,
    SentenceTransformerEmbedding,
)
from catalog_rag.vector.similarity import cosine_similarity


def test_embedding_interface():
    """Test that the embedding provider implements the interface correctly."""
    embedder = DeterministicHashEmbedding(dimension=384)

    assert isinstance(embedder, IEmbeddingProvider)
    assert embedder.get_dimension() == 384

    # load() is a no-op for providers without a model
    assert embedder.load() is None


def test_deterministic_embedding():
    """Test that the same input always produces the same output."""
    embedder = DeterministicHashEmbedding(dimension=384)

    text = "Red running shoes"
    vector1 = embedder.embed_text(text)
    vector2 = DeterministicHashEmbedding(dimension=384).embed_text(text)

    assert vector1 == vector2
    assert len(vector1) == 384


def test_embeddings_are_normalized():
    embedder = DeterministicHashEmbedding(dimension=128)
    vector = embedder.embed_text("Warm knitted wool hat for cold winter days")
    assert np.linalg.norm(vector) == pytest.approx(1.0)


def test_different_inputs_produce_different_vectors():
    """Test that texts without shared words produce different vectors."""
    embedder = DeterministicHashEmbedding(dimension=384)

    vector1 = embedder.embed_text("red leather running shoes")
    vector2 = embedder.embed_text("blue wool winter hat")

    assert vector1 != vector2


def test_shared_words_increase_similarity():
    embedder = DeterministicHashEmbedding(dimension=384)

    item = embedder.embed_text("Red Running Shoes. leather running shoes. Tags: shoes, red")
    same = embedder.embed_text("red running shoes")

    assert cosine_similarity(item, same) > 0.5
    assert cosine_similarity(same, same) == pytest.approx(1.0)


def test_embedding_edge_cases():
    """Test embedding with edge cases."""
    embedder = DeterministicHashEmbedding(dimension=64)

    # Empty and punctuation-only text embed to the zero vector
    assert embedder.embed_text("") == [0.0] * 64
    assert embedder.embed_text("!!! ...") == [0.0] * 64

    long_vector = embedder.embed_text("shoe " * 1000)
    assert len(long_vector) == 64

    special_vector = embedder.embed_text("Hello\n\t\rWorld!@#$%^&*()")
    assert len(special_vector) == 64


def test_invalid_dimension_rejected():
    with pytest.raises(ValueError):
        DeterministicHashEmbedding(dimension=0)


@pytest.fixture
def fake_sentence_transformers():
    """Stand-in for the sentence_transformers module so no model is downloaded."""
    module = MagicMock()
    with patch.dict(sys.modules, {"sentence_transformers": module}):
        yield module


class TestSentenceTransformerEmbedding:
    """Test the sentence-transformers provider without loading a real model."""

    def test_model_is_loaded_lazily(self, fake_sentence_transformers):
        embedder = SentenceTransformerEmbedding("some-model")
        fake_sentence_transformers.SentenceTransformer.assert_not_called()

        embedder.load()
        embedder.load()
        fake_sentence_transformers.SentenceTransformer.assert_called_once_with("some-model")

    def test_embed_text_returns_normalized_list(self, fake_sentence_transformers):
        model = fake_sentence_transformers.SentenceTransformer.return_value
        model.encode.return_value = np.array([0.6, 0.8], dtype=np.float32)

        embedder = SentenceTransformerEmbedding("some-model")
        vector = embedder.embed_text("red shoes")

        assert vector == pytest.approx([0.6, 0.8])
        model.encode.assert_called_once_with("red shoes", convert_to_numpy=True, normalize_embeddings=True)

    def test_load_failure_is_unavailable(self, fake_sentence_transformers):
        fake_sentence_transformers.SentenceTransformer.side_effect = OSError("no network")

        embedder = SentenceTransformerEmbedding("missing-model")
        with pytest.raises(EmbedderUnavailable) as exc_info:
            embedder.load()

        assert "missing-model" in str(exc_info.value)

    def test_embed_before_load_surfaces_unavailable(self, fake_sentence_transformers):
        fake_sentence_transformers.SentenceTransformer.side_effect = OSError("no network")

        with pytest.raises(EmbedderUnavailable):
            SentenceTransformerEmbedding("missing-model").embed_text("hat")

    def test_encode_failure_is_embedder_error(self, fake_sentence_transformers):
        model = fake_sentence_transformers.SentenceTransformer.return_value
        model.encode.side_effect = RuntimeError("CUDA out of memory")

        embedder = SentenceTransformerEmbedding("some-model")
        with pytest.raises(EmbedderError) as exc_info:
            embedder.embed_text("hat")

        assert not isinstance(exc_info.value, EmbedderUnavailable)

    def test_get_dimension(self, fake_sentence_transformers):
        model = fake_sentence_transformers.SentenceTransformer.return_value
        model.get_sentence_embedding_dimension.return_value = 384

        assert SentenceTransformerEmbedding("some-model").get_dimension() == 384

    def test_get_dimension_falls_back_to_encoding(self, fake_sentence_transformers):
        model = fake_sentence_transformers.SentenceTransformer.return_value
        model.get_sentence_embedding_dimension.return_value = None
        model.encode.return_value = np.zeros(12, dtype=np.float32)

        assert SentenceTransformerEmbedding("some-model").get_dimension() == 12


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
