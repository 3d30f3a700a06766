"""Similarity strategies between two users' rating vectors."""

from __future__ import annotations

import math
from typing import Callable, Dict, Mapping, Protocol, runtime_checkable

import numpy as np


RatingVector = Mapping[str, float]
RatingsTable = Mapping[str, RatingVector]

# Denominators at or below this are treated as zero.
SIMILARITY_EPSILON = 1e-10


@runtime_checkable
class SimilarityStrategy(Protocol):
    """Anything that scores two rating vectors in [-1, 1].

    A return value of exactly 0.0 means "no usable signal".
    """

    def calculate_similarity(self, vector_a: RatingVector, vector_b: RatingVector) -> float:
        ...


def common_items(vector_a: RatingVector, vector_b: RatingVector) -> list[str]:
    """Item ids rated in both vectors, sorted.

    Sorting fixes the summation order so that f(a, b) == f(b, a) exactly.
    """
    return sorted(set(vector_a).intersection(vector_b))


def pearson_correlation(vector_a: RatingVector, vector_b: RatingVector) -> float:
    """Pearson correlation restricted to the items both users rated.

    Returns 0.0 when there are no common items or when either side has zero
    variance over them (e.g. a single common item, or identical ratings).
    """
    items = common_items(vector_a, vector_b)
    if not items:
        return 0.0

    a = np.fromiter((float(vector_a[i]) for i in items), dtype=np.float64, count=len(items))
    b = np.fromiter((float(vector_b[i]) for i in items), dtype=np.float64, count=len(items))

    d1 = a - a.mean()
    d2 = b - b.mean()

    numerator = float(np.sum(d1 * d2))
    sum_sq1 = float(np.sum(d1 * d1))
    sum_sq2 = float(np.sum(d2 * d2))

    denominator = math.sqrt(sum_sq1 * sum_sq2)
    if denominator <= SIMILARITY_EPSILON:
        return 0.0
    # Rounding can overshoot |r| = 1 by an ulp.
    return max(-1.0, min(1.0, numerator / denominator))


class PearsonSimilarity:
    """Pearson correlation over common items as a `SimilarityStrategy`."""

    name = "pearson"

    def calculate_similarity(self, vector_a: RatingVector, vector_b: RatingVector) -> float:
        return pearson_correlation(vector_a, vector_b)

    def __repr__(self) -> str:
        return "PearsonSimilarity()"


class _CallableSimilarity:
    def __init__(self, fn: Callable[[RatingVector, RatingVector], float]) -> None:
        self._fn = fn

    def calculate_similarity(self, vector_a: RatingVector, vector_b: RatingVector) -> float:
        return float(self._fn(vector_a, vector_b))

    def __repr__(self) -> str:
        return f"_CallableSimilarity({getattr(self._fn, '__name__', self._fn)!r})"


def as_strategy(obj: SimilarityStrategy | Callable[[RatingVector, RatingVector], float]) -> SimilarityStrategy:
    """Adapt a strategy object or a plain two-argument callable to `SimilarityStrategy`."""
    if obj is None:
        raise ValueError("similarity strategy must not be None")
    if isinstance(obj, type):
        raise TypeError(f"Expected a strategy instance, got the class {obj.__name__}; instantiate it first")
    if isinstance(obj, SimilarityStrategy):
        return obj
    if callable(obj):
        return _CallableSimilarity(obj)
    raise TypeError(f"Expected a SimilarityStrategy or callable, got {type(obj)}")


_REGISTRY: Dict[str, Callable[[], SimilarityStrategy]] = {
    "pearson": PearsonSimilarity,
}


def available_similarities() -> list[str]:
    return sorted(_REGISTRY)


def get_similarity(name: str) -> SimilarityStrategy:
    """Build the strategy registered under `name` (case-insensitive)."""
    key = str(name).strip().lower()
    factory = _REGISTRY.get(key)
    if factory is None:
        raise ValueError(f"Unknown similarity {name!r}; expected one of {available_similarities()}")
    return factory()
