from __future__ import annotations

from pathlib import Path
from typing import Dict, Tuple

import numpy as np
import pandas as pd


REQUIRED_COLUMNS: Tuple[str, ...] = ("userId", "itemId", "rating")


def load_ratings(path: Path) -> pd.DataFrame:
    """Load a ratings CSV (userId, itemId, rating[, timestamp]).

    Notes
    -----
    Ids are read as strings: they are opaque keys and may carry leading zeros.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"ratings file not found: {path}")

    df = pd.read_csv(
        path,
        dtype={"userId": "string", "itemId": "string", "rating": "float64"},
    )
    validate_ratings(df)
    return df


def validate_ratings(df: pd.DataFrame) -> None:
    """Validate that required columns exist and basic constraints hold."""
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"ratings missing columns: {missing}")

    for col in REQUIRED_COLUMNS:
        if df[col].isna().any():
            raise ValueError(f"ratings column {col!r} contains missing values")

    values = df["rating"].astype("float64").to_numpy()
    if not np.isfinite(values).all():
        raise ValueError("ratings contain non-finite rating values")

    # One rating per (user, item)
    if df.duplicated(subset=["userId", "itemId"]).any():
        raise ValueError("ratings contain duplicate (userId, itemId) rows")


def ratings_table_from_frame(df: pd.DataFrame) -> Dict[str, Dict[str, float]]:
    """Build the user -> {item -> rating} mapping consumed by the predictor."""
    validate_ratings(df)
    table: Dict[str, Dict[str, float]] = {}
    for user_id, item_id, rating in zip(
        df["userId"].astype(str), df["itemId"].astype(str), df["rating"].astype("float64")
    ):
        table.setdefault(user_id, {})[item_id] = float(rating)
    return table


def ratings_table_to_frame(table: Dict[str, Dict[str, float]]) -> pd.DataFrame:
    """Flatten a ratings table into (userId, itemId, rating) rows."""
    rows = [
        (str(user_id), str(item_id), float(rating))
        for user_id, vector in table.items()
        for item_id, rating in vector.items()
    ]
    df = pd.DataFrame(rows, columns=list(REQUIRED_COLUMNS))
    df["userId"] = df["userId"].astype("string")
    df["itemId"] = df["itemId"].astype("string")
    df["rating"] = df["rating"].astype("float64")
    return df
