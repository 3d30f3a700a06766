from __future__ import annotations

import argparse
from pathlib import Path

import pandas as pd

from ..config import AppConfig
from ..paths import get_repo_root, resolve_path
from ..utils import setup_logging
from .recommender import UserCFRecommender


def _non_negative_int(raw: str) -> int:
    value = int(raw)
    if value < 0:
        raise argparse.ArgumentTypeError(f"expected a non-negative integer, got {raw}")
    return value


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="User-based collaborative filtering (Pearson-weighted neighbors)")
    p.add_argument("--user-id", type=str, required=True, help="userId as it appears in ratings.csv")
    p.add_argument("--item-id", type=str, default=None, help="Predict this single item instead of recommending")
    p.add_argument("--k", type=_non_negative_int, default=None, help="How many item recommendations to return")
    p.add_argument("--top-similar", type=_non_negative_int, default=None, help="How many similar users to show")
    p.add_argument("--config", type=Path, default=Path("config.yaml"), help="Path to config YAML.")
    p.add_argument("--log-level", type=str, default="WARNING", help="Logging level")
    return p


def main(argv: list[str] | None = None) -> None:
    args = build_arg_parser().parse_args(argv)
    setup_logging(args.log_level.upper())

    repo_root = get_repo_root()
    cfg = AppConfig.from_yaml(resolve_path(repo_root, args.config))
    rec = UserCFRecommender.from_config(cfg, repo_root=repo_root)

    if args.item_id is not None:
        rating = rec.predict(args.user_id, args.item_id)
        if rating == 0.0:
            print(f"Not enough data to predict userId={args.user_id} itemId={args.item_id}.")
        else:
            print(f"Predicted rating for userId={args.user_id} itemId={args.item_id}: {rating:.4f}")
        return

    if not rec.has_user(args.user_id):
        raise SystemExit(f"Unknown userId: {args.user_id}")

    top_similar = int(args.top_similar if args.top_similar is not None else cfg.recommend.top_n_similar)
    k = int(args.k if args.k is not None else cfg.recommend.k)

    sims = rec.similar_users(args.user_id, top_n=top_similar, min_common_rated=cfg.recommend.min_common_rated)
    recs = rec.recommend_items(args.user_id, k=k)

    print("\n=== Similar Users ===")
    if sims:
        df_s = pd.DataFrame([s.__dict__ for s in sims])
        print(df_s.to_string(index=False))
    else:
        print("No similar users found (try lowering recommend.min_common_rated).")

    print("\n=== Recommended Items ===")
    if recs:
        df_r = pd.DataFrame([r.__dict__ for r in recs])
        print(df_r.to_string(index=False))
    else:
        print("No recommendations found.")


if __name__ == "__main__":
    main()
