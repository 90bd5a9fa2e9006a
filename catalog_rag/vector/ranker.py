"""
Exact top-K ranking by cosine similarity over every index entry.
"""

from typing import List

from .index import EmbeddingIndex
from .similarity import VectorLike, as_vector, cosine_similarity
from .types import ItemId, ScoredEntry


def score_entries(query_vector: VectorLike, index: EmbeddingIndex) -> List[ScoredEntry]:
    """
    Score every entry against the query, best first.

    Equal scores keep the index iteration order (the sort is stable).
    """
    query = as_vector(query_vector)
    scored = [
        ScoredEntry(item_id=entry.item_id, score=cosine_similarity(query, entry.vector))
        for entry in index.entries()
    ]
    scored.sort(key=lambda s: s.score, reverse=True)
    return scored


def rank(query_vector: VectorLike, index: EmbeddingIndex, k: int) -> List[ItemId]:
    """Return the ids of the k entries most similar to the query."""
    if len(index) == 0 or k <= 0:
        return []

    scored = score_entries(query_vector, index)
    return [s.item_id for s in scored[:min(k, len(scored))]]
