from __future__ import annotations

import pandas as pd
import pytest

from src.data import load_ratings, ratings_table_from_frame, ratings_table_to_frame, validate_ratings


def test_load_ratings_reads_ids_as_strings(ratings_csv) -> None:
    df = load_ratings(ratings_csv)

    assert list(df.columns) == ["userId", "itemId", "rating"]
    assert len(df) == 9
    assert pd.api.types.is_string_dtype(df["userId"])
    assert df["rating"].dtype == "float64"


def test_leading_zero_ids_are_preserved(tmp_path) -> None:
    path = tmp_path / "ratings.csv"
    path.write_text("userId,itemId,rating,timestamp\n007,0042,4.5,1\n")

    table = ratings_table_from_frame(load_ratings(path))

    assert table == {"007": {"0042": 4.5}}


def test_missing_file_raises(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        load_ratings(tmp_path / "missing.csv")


def test_table_matches_worked_example(ratings_csv, test_ratings) -> None:
    assert ratings_table_from_frame(load_ratings(ratings_csv)) == test_ratings


def test_table_to_frame_flattens_every_rating(test_ratings) -> None:
    df = ratings_table_to_frame(test_ratings)

    assert len(df) == 9
    assert ratings_table_from_frame(df) == test_ratings


@pytest.mark.parametrize(
    "frame, message",
    [
        (pd.DataFrame({"userId": ["u"], "rating": [1.0]}), "missing columns"),
        (pd.DataFrame({"userId": ["u", "u"], "itemId": ["i", "i"], "rating": [1.0, 2.0]}), "duplicate"),
        (pd.DataFrame({"userId": ["u"], "itemId": ["i"], "rating": [float("inf")]}), "non-finite"),
        (pd.DataFrame({"userId": ["u"], "itemId": ["i"], "rating": [None]}), "missing values"),
    ],
)
def test_validate_ratings_rejects_bad_frames(frame: pd.DataFrame, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        validate_ratings(frame)
