"""YAML-backed project configuration (dataset, predictor, recommend, evaluation)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .paths import ProjectPaths


def _section(obj: dict[str, Any], name: str) -> dict[str, Any]:
    value = obj.get(name, {})
    return value if isinstance(value, dict) else {}


def load_yaml(path: Path) -> dict[str, Any]:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")
    obj = yaml.safe_load(path.read_text())
    if obj is None:
        return {}
    if not isinstance(obj, dict):
        raise ValueError(f"Expected YAML mapping at {path}, got {type(obj)}")
    return obj


@dataclass(frozen=True)
class DatasetConfig:
    raw_dir: str = "data/raw"
    ratings_file: str = "ratings.csv"


@dataclass(frozen=True)
class PredictorConfig:
    similarity: str = "pearson"


@dataclass(frozen=True)
class RecommendConfig:
    k: int = 10
    top_n_similar: int = 10
    min_common_rated: int = 2


@dataclass(frozen=True)
class EvaluationConfig:
    test_size: float = 0.2
    random_state: int = 42
    max_queries: int | None = None
    output_dir: str = "artifacts/evaluation"


@dataclass(frozen=True)
class AppConfig:
    dataset: DatasetConfig = field(default_factory=DatasetConfig)
    predictor: PredictorConfig = field(default_factory=PredictorConfig)
    recommend: RecommendConfig = field(default_factory=RecommendConfig)
    evaluation: EvaluationConfig = field(default_factory=EvaluationConfig)

    @classmethod
    def from_mapping(cls, obj: dict[str, Any]) -> "AppConfig":
        dataset = _section(obj, "dataset")
        predictor = _section(obj, "predictor")
        recommend = _section(obj, "recommend")
        evaluation = _section(obj, "evaluation")

        test_size = float(evaluation.get("test_size", 0.2))
        if not 0.0 < test_size < 1.0:
            raise ValueError(f"evaluation.test_size must be in (0, 1), got {test_size}")

        max_queries_raw = evaluation.get("max_queries")
        return cls(
            dataset=DatasetConfig(
                raw_dir=str(dataset.get("raw_dir", "data/raw")),
                ratings_file=str(dataset.get("ratings_file", "ratings.csv")),
            ),
            predictor=PredictorConfig(similarity=str(predictor.get("similarity", "pearson"))),
            recommend=RecommendConfig(
                k=int(recommend.get("k", 10)),
                top_n_similar=int(recommend.get("top_n_similar", 10)),
                min_common_rated=int(recommend.get("min_common_rated", 2)),
            ),
            evaluation=EvaluationConfig(
                test_size=test_size,
                random_state=int(evaluation.get("random_state", 42)),
                max_queries=(None if max_queries_raw is None else int(max_queries_raw)),
                output_dir=str(evaluation.get("output_dir", "artifacts/evaluation")),
            ),
        )

    @classmethod
    def from_yaml(cls, path: Path) -> "AppConfig":
        return cls.from_mapping(load_yaml(path))

    def project_paths(self, repo_root: Path) -> ProjectPaths:
        return ProjectPaths.from_repo_root(
            repo_root,
            raw_dir=self.dataset.raw_dir,
            evaluation_dir=self.evaluation.output_dir,
        )

    def ratings_path(self, repo_root: Path) -> Path:
        return self.project_paths(repo_root).raw_dir / self.dataset.ratings_file
