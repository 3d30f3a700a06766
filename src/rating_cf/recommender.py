from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Mapping

from ..config import AppConfig
from ..data import load_ratings, ratings_table_from_frame
from ..paths import get_repo_root
from .predictor import RatingPredictor
from .similarity import RatingVector, SimilarityStrategy, common_items, get_similarity


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimilarUser:
    userId: str
    similarity: float
    common_rated: int


@dataclass(frozen=True)
class RecommendedItem:
    itemId: str
    score: float
    support: int


class UserCFRecommender:
    """Ranking conveniences over a fixed ratings table.

    Every score comes from a fresh `RatingPredictor.predict_rating` or
    similarity call; nothing is cached between calls.
    """

    def __init__(
        self,
        ratings: Mapping[str, RatingVector],
        *,
        similarity: SimilarityStrategy | Callable[[RatingVector, RatingVector], float] | None = None,
    ) -> None:
        self.ratings = ratings
        self.predictor = RatingPredictor(similarity if similarity is not None else get_similarity("pearson"))

        n_items = len({item for vector in ratings.values() for item in vector})
        n_ratings = sum(len(vector) for vector in ratings.values())
        logger.info(
            "UserCF loaded: users=%d items=%d ratings=%d similarity=%r",
            len(ratings),
            n_items,
            n_ratings,
            self.predictor.similarity,
        )

    @classmethod
    def from_config(cls, cfg: AppConfig, *, repo_root: Path | None = None) -> "UserCFRecommender":
        repo_root = repo_root if repo_root is not None else get_repo_root()
        ratings_path = cfg.ratings_path(repo_root)
        logger.info("Loading ratings from %s", ratings_path)
        df = load_ratings(ratings_path)
        return cls(ratings_table_from_frame(df), similarity=get_similarity(cfg.predictor.similarity))

    @property
    def similarity(self) -> SimilarityStrategy:
        return self.predictor.similarity

    def has_user(self, userId: str) -> bool:
        return str(userId) in self.ratings

    def predict(self, userId: str, itemId: str) -> float:
        """Predicted rating, or 0.0 when there is not enough data."""
        return self.predictor.predict_rating(str(itemId), str(userId), self.ratings)

    def similar_users(self, userId: str, *, top_n: int = 10, min_common_rated: int = 2) -> list[SimilarUser]:
        if int(top_n) < 0:
            raise ValueError(f"top_n must be >= 0, got {top_n}")
        uid = str(userId)
        if uid not in self.ratings:
            raise KeyError(f"Unknown userId: {uid}")

        target = self.ratings[uid]
        out: list[SimilarUser] = []
        for other_uid, other in self.ratings.items():
            if other_uid == uid:
                continue
            common = len(common_items(target, other))
            if common < int(min_common_rated):
                continue
            sim = float(self.similarity.calculate_similarity(target, other))
            if sim == 0.0:
                continue
            out.append(SimilarUser(userId=other_uid, similarity=sim, common_rated=common))

        out.sort(key=lambda s: (-s.similarity, s.userId))
        return out[: int(top_n)]

    def recommend_items(self, userId: str, *, k: int = 10) -> list[RecommendedItem]:
        """Rank items the user has not rated by predicted rating.

        Items whose prediction is the 0.0 sentinel are dropped. Ties are broken
        by support (neighbors who rated the item) and then by item id.
        """
        if int(k) < 0:
            raise ValueError(f"k must be >= 0, got {k}")
        uid = str(userId)
        if uid not in self.ratings:
            raise KeyError(f"Unknown userId: {uid}")

        seen = set(self.ratings[uid])
        support: dict[str, int] = {}
        for other_uid, other in self.ratings.items():
            if other_uid == uid:
                continue
            for item in other:
                if item not in seen:
                    support[item] = support.get(item, 0) + 1

        out: list[RecommendedItem] = []
        for item, n in support.items():
            score = self.predict(uid, item)
            if score == 0.0:
                continue
            out.append(RecommendedItem(itemId=item, score=float(score), support=int(n)))

        out.sort(key=lambda r: (-r.score, -r.support, r.itemId))
        return out[: int(k)]
