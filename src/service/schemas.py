"""Pydantic schemas for the online rating-prediction API."""

from __future__ import annotations

from pydantic import BaseModel, Field


class PredictRequest(BaseModel):
    """Predict one (user, item) rating from the loaded ratings table."""

    userId: str = Field(..., min_length=1, description="userId from ratings.csv")
    itemId: str = Field(..., min_length=1, description="itemId to predict")


class PredictResponse(BaseModel):
    userId: str
    itemId: str
    rating: float
    has_signal: bool = Field(..., description="False when rating is the 0.0 'not enough data' sentinel")


class SimilarityRequest(BaseModel):
    """Score two ad-hoc rating vectors with the configured similarity."""

    ratings_a: dict[str, float] = Field(default_factory=dict, description="itemId -> rating")
    ratings_b: dict[str, float] = Field(default_factory=dict, description="itemId -> rating")


class SimilarityResponse(BaseModel):
    similarity: float
    common_rated: int


class SimilarUsersRequest(BaseModel):
    userId: str = Field(..., min_length=1, description="userId from ratings.csv")
    top_n: int = Field(10, ge=1, le=100, description="Number of similar users to return")
    min_common_rated: int = Field(2, ge=0, le=1000, description="Minimum number of commonly-rated items")


class SimilarUserItem(BaseModel):
    userId: str
    similarity: float
    common_rated: int


class SimilarUsersResponse(BaseModel):
    userId: str
    top_n: int
    results: list[SimilarUserItem]


class RecommendRequest(BaseModel):
    userId: str = Field(..., min_length=1, description="userId from ratings.csv")
    k: int = Field(10, ge=1, le=50, description="Number of item recommendations to return (1..50).")


class RecommendationItem(BaseModel):
    itemId: str
    score: float
    support: int


class RecommendResponse(BaseModel):
    userId: str
    k: int
    results: list[RecommendationItem]
