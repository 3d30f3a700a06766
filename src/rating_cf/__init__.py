"""User-based collaborative filtering: predict how a user would rate an item.

Core idea:
- Score every other user against the target with a pluggable similarity
  strategy (Pearson correlation over commonly rated items by default)
- Predict the rating as the similarity-weighted average of the neighbors who
  rated the item, normalized by total absolute similarity
- 0.0 is returned when there is not enough data to predict
"""
from .predictor import RatingPredictor
from .similarity import PearsonSimilarity, SimilarityStrategy, get_similarity, pearson_correlation

__all__ = [
    "PearsonSimilarity",
    "RatingPredictor",
    "SimilarityStrategy",
    "get_similarity",
    "pearson_correlation",
]
