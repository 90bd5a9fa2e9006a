"""
Cosine similarity between embedding vectors.
"""

from typing import Sequence, Union

import numpy as np

from ..core.errors import InvalidInputError

VectorLike = Union[Sequence[float], np.ndarray]


def as_vector(values: VectorLike) -> np.ndarray:
    """Coerce a sequence of numbers into a 1-D float array."""
    vector = np.asarray(values, dtype=np.float64)
    if vector.ndim != 1:
        raise InvalidInputError(f"Expected a 1-D vector, got shape {vector.shape}")
    if not np.all(np.isfinite(vector)):
        raise InvalidInputError("Vector contains NaN or infinite values")
    return vector


def cosine_similarity(a: VectorLike, b: VectorLike) -> float:
    """
    Cosine similarity of two equal-length vectors.

    Returns 0.0 when either vector has zero norm instead of dividing by zero.

    Raises:
        InvalidInputError: if the vectors differ in length
    """
    a = as_vector(a)
    b = as_vector(b)
    if a.shape[0] != b.shape[0]:
        raise InvalidInputError(f"Vector dimension mismatch: {a.shape[0]} != {b.shape[0]}")

    norm_a = np.linalg.norm(a)
    norm_b = np.linalg.norm(b)
    if norm_a == 0 or norm_b == 0:
        return 0.0

    score = float(np.dot(a, b) / (norm_a * norm_b))
    # Floating point can overshoot the cosine range slightly
    return max(-1.0, min(1.0, score))
