"""FastAPI service entrypoint for the user-based CF rating predictor."""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, HTTPException

from ..config import AppConfig
from ..paths import get_repo_root
from ..rating_cf.recommender import UserCFRecommender
from ..rating_cf.similarity import common_items
from ..utils import setup_logging
from .schemas import (
    PredictRequest,
    PredictResponse,
    RecommendRequest,
    RecommendResponse,
    SimilarityRequest,
    SimilarityResponse,
    SimilarUsersRequest,
    SimilarUsersResponse,
)

logger = logging.getLogger(__name__)


def _get_env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or str(raw).strip() == "":
        return default
    p = Path(str(raw))
    return p if p.is_absolute() else (get_repo_root() / p).resolve()


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(os.getenv("LOG_LEVEL", "INFO"))

    if getattr(app.state, "recommender", None) is None:
        repo_root = get_repo_root()
        config_path = _get_env_path("CONFIG_PATH", repo_root / "config.yaml")
        logger.info("Starting service with config=%s", config_path)
        cfg = AppConfig.from_yaml(config_path)
        app.state.recommender = UserCFRecommender.from_config(cfg, repo_root=repo_root)
    else:
        logger.info("Starting service with a pre-built recommender")
    yield


app = FastAPI(title="User-based CF Rating Prediction Service", lifespan=lifespan)


def _recommender(app_: FastAPI) -> UserCFRecommender:
    rec = getattr(app_.state, "recommender", None)
    if rec is None:
        raise HTTPException(status_code=503, detail="Recommender not initialized")
    return rec


@app.post("/predict", response_model=PredictResponse)
def predict(req: PredictRequest) -> dict:
    """Predict a single rating; unknown users/items yield rating=0.0 with has_signal=false."""
    rec = _recommender(app)
    rating = rec.predict(req.userId, req.itemId)
    return {
        "userId": req.userId,
        "itemId": req.itemId,
        "rating": float(rating),
        "has_signal": rating != 0.0,
    }


@app.post("/similarity", response_model=SimilarityResponse)
def similarity(req: SimilarityRequest) -> dict:
    """Score two rating vectors with the configured similarity strategy."""
    rec = _recommender(app)
    sim = rec.similarity.calculate_similarity(req.ratings_a, req.ratings_b)
    return {
        "similarity": float(sim),
        "common_rated": len(common_items(req.ratings_a, req.ratings_b)),
    }


@app.post("/similar_users", response_model=SimilarUsersResponse)
def similar_users(req: SimilarUsersRequest) -> dict:
    """Return users with similar rating patterns."""
    rec = _recommender(app)
    try:
        sims = rec.similar_users(req.userId, top_n=int(req.top_n), min_common_rated=int(req.min_common_rated))
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return {
        "userId": req.userId,
        "top_n": int(req.top_n),
        "results": [s.__dict__ for s in sims],
    }


@app.post("/recommend", response_model=RecommendResponse)
def recommend(req: RecommendRequest) -> dict:
    """Recommend unrated items ranked by predicted rating."""
    rec = _recommender(app)
    try:
        recs = rec.recommend_items(req.userId, k=int(req.k))
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return {
        "userId": req.userId,
        "k": int(req.k),
        "results": [r.__dict__ for r in recs],
    }
