"""Similarity functions for text vectors and image histograms."""

import math
from typing import Sequence


def _check_lengths(a: Sequence[float], b: Sequence[float]) -> None:
    if len(a) != len(b):
        raise ValueError(f"Vector length mismatch: {len(a)} != {len(b)}")


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine of the angle between two vectors.

    Returns 0.0 when either vector has zero norm, so an all-zero vector is
    dissimilar to everything, itself included.

    Raises:
        ValueError: If the vectors differ in length
    """
    _check_lengths(a, b)

    dot = 0.0
    norm_a = 0.0
    norm_b = 0.0
    for x, y in zip(a, b):
        dot += x * y
        norm_a += x * x
        norm_b += y * y

    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0
    return dot / math.sqrt(norm_a * norm_b)


def histogram_intersection(a: Sequence[float], b: Sequence[float]) -> float:
    """Sum of elementwise minimums of two normalized histograms.

    Bounded in [0, 1] for probability histograms; 1.0 for identical ones.

    Raises:
        ValueError: If the histograms differ in length
    """
    _check_lengths(a, b)
    return sum(min(x, y) for x, y in zip(a, b))
