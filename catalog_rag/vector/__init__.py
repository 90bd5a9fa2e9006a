"""
Embedding, similarity, index and ranking primitives for catalog search.
"""

# Package initialization for vector module
from .embeddings import IEmbeddingProvider, DeterministicHashEmbedding, SentenceTransformerEmbedding
from .index import EmbeddingIndex, build_embedding_text, embed_catalog
from .ranker import rank, score_entries
from .similarity import cosine_similarity
from .types import IndexEntry, ScoredEntry

__all__ = [
    'IEmbeddingProvider',
    'DeterministicHashEmbedding',
    'SentenceTransformerEmbedding',
    'EmbeddingIndex',
    'build_embedding_text',
    'embed_catalog',
    'rank',
    'score_entries',
    'cosine_similarity',
    'IndexEntry',
    'ScoredEntry'
]
