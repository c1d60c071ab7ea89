"""Cosine similarity between embedding vectors."""

import math
from typing import Sequence

from mentormatch.errors import DegenerateVectorError, DimensionMismatchError


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Compute dot(a, b) / (|a| * |b|).

    Returns
    -------
    float
        A value in [-1, 1]. 1 means same direction, -1 opposite.

    Raises
    ------
    DimensionMismatchError
        If the vectors differ in length.
    DegenerateVectorError
        If either vector has zero norm.
    """
    if len(a) != len(b):
        raise DimensionMismatchError(len(a), len(b))

    dot = 0.0
    norm_a = 0.0
    norm_b = 0.0
    for x, y in zip(a, b):
        dot += x * y
        norm_a += x * x
        norm_b += y * y

    if norm_a == 0.0 or norm_b == 0.0:
        raise DegenerateVectorError("Cannot compute cosine similarity of a zero vector")

    score = dot / (math.sqrt(norm_a) * math.sqrt(norm_b))

    # Rounding can push |score| a hair past 1 for (anti)parallel vectors.
    return max(-1.0, min(1.0, score))
