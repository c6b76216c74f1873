from __future__ import annotations

"""Cosine similarity between embedding vectors."""

import math
from typing import Sequence

from notes_rag.rag.errors import VectorLengthError

# Returned when either vector has zero magnitude.
DEGENERATE_SIMILARITY = 0.0


def _rescale(vector: Sequence[float]) -> list[float] | None:
    """Divide by the largest component so squares and products stay finite."""
    largest = max((abs(value) for value in vector), default=0.0)
    if largest == 0.0:
        return None
    return [value / largest for value in vector]


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Compute cosine similarity between two vectors of equal length."""
    if len(a) != len(b):
        raise VectorLengthError(f"Vector length mismatch: {len(a)} != {len(b)}")
    scaled_a = _rescale(a)
    scaled_b = _rescale(b)
    if scaled_a is None or scaled_b is None:
        return DEGENERATE_SIMILARITY
    dot = sum(x * y for x, y in zip(scaled_a, scaled_b))
    norm_a = math.hypot(*scaled_a)
    norm_b = math.hypot(*scaled_b)
    return max(-1.0, min(1.0, dot / (norm_a * norm_b)))
