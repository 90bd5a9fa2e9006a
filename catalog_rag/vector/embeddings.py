"""
Embedding providers. The retrieval core only depends on IEmbeddingProvider;
the sentence-transformers model is loaded lazily so a missing model or
package surfaces as EmbedderUnavailable instead of an import failure.
"""

from abc import ABC, abstractmethod
import hashlib
import re
from typing import List

import numpy as np

from ..core.errors import EmbedderError, EmbedderUnavailable
from ..util.logging import logger


class IEmbeddingProvider(ABC):
    """Abstract interface for embedding providers."""

    @abstractmethod
    def embed_text(self, text: str) -> List[float]:
        """Generate embedding vector for given text."""
        pass

    @abstractmethod
    def get_dimension(self) -> int:
        """Get the dimension of the embedding vectors."""
        pass

    def load(self) -> None:
        """Prepare the provider for use. Raises EmbedderUnavailable on failure."""
        return None


def _tokenize(text: str) -> List[str]:
    return re.findall(r"\b[a-zA-Z0-9]+\b", text.lower())


class DeterministicHashEmbedding(IEmbeddingProvider):
    """Deterministic hash-based embedding provider for testing purposes.

    Each token is hashed into one of `dimension` buckets and the bucket
    counts are L2-normalized, so texts sharing words score higher under
    cosine similarity. Useful for tests and offline development without
    downloading a model.
    """

    def __init__(self, dimension: int = 384):
        if dimension < 1:
            raise ValueError(f"Dimension must be >= 1: {dimension}")
        self.dimension = dimension

    def embed_text(self, text: str) -> List[float]:
        """Generate deterministic embedding vector using hash function."""
        vector = np.zeros(self.dimension, dtype=np.float64)
        for token in _tokenize(text):
            bucket = int(hashlib.md5(token.encode()).hexdigest(), 16) % self.dimension
            vector[bucket] += 1.0

        # Empty or token-free text stays the zero vector
        norm = np.linalg.norm(vector)
        if norm > 0:
            vector = vector / norm
        return vector.tolist()

    def get_dimension(self) -> int:
        """Get the dimension of the embedding vectors."""
        return self.dimension


class SentenceTransformerEmbedding(IEmbeddingProvider):
    """Sentence transformers embedding provider using pre-trained models.

    Defaults to all-MiniLM-L6-v2 (mean pooling, 384 dimensions). Vectors are
    normalized so cosine similarity reduces to an inner product.
    """

    def __init__(self, model_name: str = "sentence-transformers/all-MiniLM-L6-v2"):
        self.model_name = model_name
        self._model = None
        self._dimension = None

    def load(self) -> None:
        """Load the model once. Subsequent calls are no-ops."""
        if self._model is not None:
            return

        logger.info(f"Loading embedding model {self.model_name}")
        try:
            from sentence_transformers import SentenceTransformer
            self._model = SentenceTransformer(self.model_name)
        except Exception as e:
            raise EmbedderUnavailable(f"Could not load embedding model {self.model_name}: {e}") from e

    @property
    def model(self):
        if self._model is None:
            self.load()
        return self._model

    def embed_text(self, text: str) -> List[float]:
        """Generate embedding vector using sentence transformers."""
        model = self.model
        try:
            embedding = model.encode(text, convert_to_numpy=True, normalize_embeddings=True)
        except Exception as e:
            raise EmbedderError(f"Embedding failed: {e}") from e
        return embedding.tolist()

    def get_dimension(self) -> int:
        """Get the dimension of the embedding vectors."""
        if self._dimension is None:
            dimension = self.model.get_sentence_embedding_dimension()
            if dimension is None:
                # Get dimension by encoding a dummy string
                dimension = len(self.embed_text("test"))
            self._dimension = dimension
        return self._dimension
