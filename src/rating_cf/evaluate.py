"""Hold-out evaluation of the rating predictor (RMSE / MAE / coverage)."""

from __future__ import annotations

import logging
import math
import time
from dataclasses import asdict, dataclass
from typing import Any, Callable

import numpy as np
import pandas as pd
from sklearn import model_selection
from sklearn.metrics import mean_absolute_error, mean_squared_error

from ..config import EvaluationConfig
from ..data import ratings_table_from_frame, validate_ratings
from .predictor import RatingPredictor
from .similarity import RatingVector, SimilarityStrategy


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EvaluationReport:
    n_train: int
    n_test: int
    n_predicted: int
    coverage: float
    rmse: float | None
    mae: float | None
    elapsed_s: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def split_ratings(df: pd.DataFrame, cfg: EvaluationConfig) -> tuple[pd.DataFrame, pd.DataFrame]:
    """Random row-level train/test split of the ratings frame."""
    if len(df) < 2:
        raise ValueError(f"Need at least 2 ratings to split, got {len(df)}")
    df_train, df_test = model_selection.train_test_split(
        df,
        test_size=float(cfg.test_size),
        random_state=int(cfg.random_state),
    )
    if cfg.max_queries is not None:
        df_test = df_test.head(int(cfg.max_queries))
    return df_train.reset_index(drop=True), df_test.reset_index(drop=True)


def evaluate_predictor(
    ratings: pd.DataFrame,
    *,
    similarity: SimilarityStrategy | Callable[[RatingVector, RatingVector], float],
    cfg: EvaluationConfig,
) -> EvaluationReport:
    """Predict every held-out rating from the training table.

    Predictions equal to the 0.0 sentinel count against coverage and are left
    out of RMSE/MAE.
    """
    validate_ratings(ratings)
    df_train, df_test = split_ratings(ratings, cfg)
    train_table = ratings_table_from_frame(df_train)
    predictor = RatingPredictor(similarity)

    logger.info("Evaluating: train=%d test=%d similarity=%r", len(df_train), len(df_test), predictor.similarity)
    start = time.time()

    preds: list[float] = []
    trues: list[float] = []
    for user_id, item_id, true_r in zip(
        df_test["userId"].astype(str), df_test["itemId"].astype(str), df_test["rating"].astype("float64")
    ):
        pred = predictor.predict_rating(item_id, user_id, train_table)
        if pred == 0.0:
            continue
        preds.append(float(pred))
        trues.append(float(true_r))

    elapsed = time.time() - start
    n_test = int(len(df_test))
    coverage = (len(preds) / n_test) if n_test else 0.0

    rmse: float | None = None
    mae: float | None = None
    if preds:
        rmse = float(math.sqrt(mean_squared_error(np.asarray(trues), np.asarray(preds))))
        mae = float(mean_absolute_error(np.asarray(trues), np.asarray(preds)))

    report = EvaluationReport(
        n_train=int(len(df_train)),
        n_test=n_test,
        n_predicted=len(preds),
        coverage=float(coverage),
        rmse=rmse,
        mae=mae,
        elapsed_s=float(elapsed),
    )
    logger.info(
        "Evaluation done: predicted=%d/%d coverage=%.3f rmse=%s mae=%s in %.2fs",
        report.n_predicted,
        report.n_test,
        report.coverage,
        "n/a" if rmse is None else f"{rmse:.4f}",
        "n/a" if mae is None else f"{mae:.4f}",
        elapsed,
    )
    return report
