"""Similarity-weighted neighbor aggregation for a single (user, item) rating."""

from __future__ import annotations

import logging
from typing import Callable

from .similarity import (
    SIMILARITY_EPSILON,
    RatingsTable,
    RatingVector,
    SimilarityStrategy,
    as_strategy,
)


logger = logging.getLogger(__name__)


class RatingPredictor:
    """User-based CF predictor:

        predicted = sum(sim(u, v) * r_v,i) / sum(|sim(u, v)|)

    over every neighbor v who rated item i. The denominator uses absolute
    similarity so positive and negative neighbors do not cancel out, while the
    numerator keeps the sign.

    A result of 0.0 means "not enough data" (unknown user, nobody rated the
    item, or every neighbor had zero similarity). It is never an error.
    """

    def __init__(self, similarity: SimilarityStrategy | Callable[[RatingVector, RatingVector], float]) -> None:
        if similarity is None:
            raise ValueError("RatingPredictor requires a similarity strategy, got None")
        self.similarity = as_strategy(similarity)

    def predict_rating(self, target_item: str, target_user: str, ratings: RatingsTable) -> float:
        target_ratings = ratings.get(target_user)
        if target_ratings is None:
            logger.debug("predict_rating: unknown user=%r", target_user)
            return 0.0

        total_abs_sim = 0.0
        weighted_sum = 0.0
        n_neighbors = 0

        for other_user, other_ratings in ratings.items():
            if other_user == target_user:
                continue

            neighbor_rating = other_ratings.get(target_item)
            if neighbor_rating is None:
                continue

            sim = self.similarity.calculate_similarity(target_ratings, other_ratings)
            if sim == 0.0:
                continue

            total_abs_sim += abs(sim)
            weighted_sum += sim * float(neighbor_rating)
            n_neighbors += 1

        logger.debug(
            "predict_rating: user=%r item=%r neighbors=%d total_abs_sim=%.6f",
            target_user,
            target_item,
            n_neighbors,
            total_abs_sim,
        )

        if total_abs_sim <= SIMILARITY_EPSILON:
            return 0.0
        return weighted_sum / total_abs_sim
