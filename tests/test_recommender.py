from __future__ import annotations

import pytest

from src.config import AppConfig
from src.rating_cf.recommender import UserCFRecommender
from src.rating_cf.similarity import PearsonSimilarity, pearson_correlation


def test_defaults_to_pearson(test_ratings) -> None:
    rec = UserCFRecommender(test_ratings)
    assert isinstance(rec.similarity, PearsonSimilarity)
    assert rec.has_user("user1")
    assert not rec.has_user("user9")


def test_predict_delegates_to_predictor(test_ratings) -> None:
    rec = UserCFRecommender(test_ratings, similarity=lambda a, b: 0.8)
    assert rec.predict("user1", "item1") == pytest.approx(3.5)
    assert rec.predict("nobody", "item1") == 0.0


def test_similar_users_ranked_and_filtered_by_overlap(test_ratings) -> None:
    rec = UserCFRecommender(test_ratings)

    sims = rec.similar_users("user1", top_n=10, min_common_rated=2)
    assert [s.userId for s in sims] == ["user2", "user3"]
    assert sims[0].similarity == pytest.approx(pearson_correlation(test_ratings["user1"], test_ratings["user2"]))
    assert sims[0].common_rated == 3
    assert sims[1].similarity == pytest.approx(-1.0)
    assert sims[1].common_rated == 2

    assert [s.userId for s in rec.similar_users("user1", min_common_rated=3)] == ["user2"]
    assert len(rec.similar_users("user1", top_n=1)) == 1


def test_similar_users_unknown_user_raises(test_ratings) -> None:
    with pytest.raises(KeyError):
        UserCFRecommender(test_ratings).similar_users("nobody")


def test_recommend_items_only_unrated_and_ranked() -> None:
    ratings = {
        "alice": {"a": 5.0},
        "bob": {"a": 4.0, "b": 2.0, "c": 5.0},
        "carol": {"a": 3.0, "c": 4.0, "d": 1.0},
    }
    rec = UserCFRecommender(ratings, similarity=lambda x, y: 1.0)

    recs = rec.recommend_items("alice", k=10)

    assert [r.itemId for r in recs] == ["c", "b", "d"]
    assert recs[0].score == pytest.approx(4.5)
    assert recs[0].support == 2
    assert "a" not in {r.itemId for r in recs}
    assert len(rec.recommend_items("alice", k=1)) == 1


def test_recommend_items_drops_no_signal_predictions(test_ratings) -> None:
    rec = UserCFRecommender(test_ratings, similarity=lambda a, b: 0.0)
    assert rec.recommend_items("user1") == []

    with pytest.raises(KeyError):
        rec.recommend_items("nobody")


def test_from_config_loads_ratings_csv(project_dir, test_ratings) -> None:
    cfg = AppConfig.from_yaml(project_dir / "config.yaml")
    rec = UserCFRecommender.from_config(cfg, repo_root=project_dir)

    assert rec.ratings == test_ratings
    assert isinstance(rec.similarity, PearsonSimilarity)


@pytest.mark.parametrize("top_n", [-1, -5])
def test_similar_users_rejects_negative_top_n(test_ratings, top_n: int) -> None:
    with pytest.raises(ValueError, match="top_n"):
        UserCFRecommender(test_ratings).similar_users("user1", top_n=top_n)


def test_recommend_items_rejects_negative_k(test_ratings) -> None:
    with pytest.raises(ValueError, match="k must be"):
        UserCFRecommender(test_ratings).recommend_items("user1", k=-1)


def test_zero_counts_return_empty_lists(test_ratings) -> None:
    rec = UserCFRecommender(test_ratings)
    assert rec.similar_users("user1", top_n=0) == []
    assert rec.recommend_items("user1", k=0) == []
