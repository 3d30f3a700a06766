from __future__ import annotations

import argparse
import json
import logging
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path

from ..config import AppConfig
from ..data import load_ratings
from ..paths import get_repo_root, resolve_path
from ..rating_cf.evaluate import evaluate_predictor
from ..rating_cf.similarity import get_similarity
from ..utils import ReproducibilityConfig, set_global_seed, setup_logging


logger = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Hold-out evaluation of the user-based CF rating predictor.")
    p.add_argument("--config", type=Path, default=Path("config.yaml"), help="Path to config YAML.")
    p.add_argument("--out-dir", type=Path, default=None, help="Output directory for the evaluation report")
    p.add_argument("--test-size", type=float, default=None, help="Override evaluation.test_size")
    p.add_argument("--max-queries", type=int, default=None, help="Override evaluation.max_queries")
    p.add_argument("--seed", type=int, default=None, help="Override evaluation.random_state")
    return p


def run_evaluation(
    *,
    config_path: Path,
    out_dir: Path | None = None,
    test_size: float | None = None,
    max_queries: int | None = None,
    seed: int | None = None,
) -> Path:
    """Run the evaluation described by `config_path` and write `evaluation_report.json`."""
    repo_root = get_repo_root()
    config_path = resolve_path(repo_root, config_path)
    cfg = AppConfig.from_yaml(config_path)

    eval_cfg = cfg.evaluation
    if test_size is not None:
        eval_cfg = replace(eval_cfg, test_size=float(test_size))
    if max_queries is not None:
        eval_cfg = replace(eval_cfg, max_queries=int(max_queries))
    if seed is not None:
        eval_cfg = replace(eval_cfg, random_state=int(seed))

    set_global_seed(ReproducibilityConfig(seed=eval_cfg.random_state))

    ratings_path = cfg.ratings_path(repo_root)
    logger.info("Loading ratings from %s", ratings_path)
    ratings = load_ratings(ratings_path)

    report = evaluate_predictor(ratings, similarity=get_similarity(cfg.predictor.similarity), cfg=eval_cfg)

    out_dir = resolve_path(repo_root, out_dir) if out_dir is not None else cfg.project_paths(repo_root).evaluation_dir
    out_dir.mkdir(parents=True, exist_ok=True)
    out_path = out_dir / "evaluation_report.json"

    payload = {
        "created_at": datetime.now(timezone.utc).isoformat(),
        "config_path": str(config_path),
        "ratings_path": str(ratings_path),
        "similarity": cfg.predictor.similarity,
        "evaluation_config": {
            "test_size": eval_cfg.test_size,
            "random_state": eval_cfg.random_state,
            "max_queries": eval_cfg.max_queries,
        },
        "metrics": report.to_dict(),
    }
    out_path.write_text(json.dumps(payload, indent=2, sort_keys=True) + "\n")
    logger.info("Wrote evaluation report to %s", out_path)
    return out_path


def main(argv: list[str] | None = None) -> None:
    setup_logging("INFO")
    args = build_arg_parser().parse_args(argv)
    run_evaluation(
        config_path=args.config,
        out_dir=args.out_dir,
        test_size=args.test_size,
        max_queries=args.max_queries,
        seed=args.seed,
    )


if __name__ == "__main__":
    main()
