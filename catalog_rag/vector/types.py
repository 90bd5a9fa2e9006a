"""
Index entry and scored entry records shared by the index and the ranker.
"""

from dataclasses import dataclass

import numpy as np

from ..core.errors import InvalidInputError, ItemId


@dataclass(frozen=True, eq=False)
class IndexEntry:
    """Pairs a catalog item identifier with its embedding vector."""

    item_id: ItemId
    """Identifier of the catalog item"""

    vector: np.ndarray
    """Read-only 1-D embedding of the item's name, description and tags"""

    def __post_init__(self):
        vector = np.array(self.vector, dtype=np.float64)
        if vector.ndim != 1 or vector.size == 0:
            raise InvalidInputError(f"Embedding for item {self.item_id!r} must be a non-empty 1-D vector, got shape {vector.shape}")
        if not np.all(np.isfinite(vector)):
            raise InvalidInputError(f"Embedding for item {self.item_id!r} contains NaN or infinite values")
        vector.setflags(write=False)
        object.__setattr__(self, "vector", vector)

    @property
    def dimension(self) -> int:
        return self.vector.shape[0]


@dataclass(frozen=True)
class ScoredEntry:
    """Similarity of one index entry to the current query."""

    item_id: ItemId
    """Identifier of the matching item"""

    score: float
    """Cosine similarity to the query, in [-1, 1]"""
