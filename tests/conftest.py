from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure `import src...` works when pytest uses importlib import mode.
REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))


class RecordingSimilarity:
    """Stub strategy that returns fixed scores and records every call."""

    def __init__(self, default: float = 0.0, by_neighbor: dict[int, float] | None = None) -> None:
        self.default = float(default)
        # id(neighbor_vector) -> score
        self.by_neighbor = dict(by_neighbor or {})
        self.calls: list[tuple[dict, dict]] = []

    def calculate_similarity(self, vector_a, vector_b) -> float:
        self.calls.append((vector_a, vector_b))
        return self.by_neighbor.get(id(vector_b), self.default)


@pytest.fixture()
def test_ratings() -> dict[str, dict[str, float]]:
    return {
        "user1": {"item1": 5.0, "item2": 3.0, "item3": 4.0},
        "user2": {"item1": 4.0, "item2": 2.0, "item3": 5.0},
        "user3": {"item1": 3.0, "item2": 4.0, "item4": 3.0},
    }


@pytest.fixture()
def ratings_csv(tmp_path: Path) -> Path:
    raw_dir = tmp_path / "data" / "raw"
    raw_dir.mkdir(parents=True)
    path = raw_dir / "ratings.csv"
    path.write_text(
        "userId,itemId,rating\n"
        "user1,item1,5.0\n"
        "user1,item2,3.0\n"
        "user1,item3,4.0\n"
        "user2,item1,4.0\n"
        "user2,item2,2.0\n"
        "user2,item3,5.0\n"
        "user3,item1,3.0\n"
        "user3,item2,4.0\n"
        "user3,item4,3.0\n"
    )
    return path


@pytest.fixture()
def project_dir(tmp_path: Path, ratings_csv: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A throwaway repo root (config.yaml + data/raw/ratings.csv) used as cwd."""
    (tmp_path / "config.yaml").write_text(
        "dataset:\n"
        "  raw_dir: data/raw\n"
        "  ratings_file: ratings.csv\n"
        "predictor:\n"
        "  similarity: pearson\n"
        "recommend:\n"
        "  k: 5\n"
        "  top_n_similar: 5\n"
        "  min_common_rated: 2\n"
        "evaluation:\n"
        "  test_size: 0.25\n"
        "  random_state: 7\n"
        "  output_dir: artifacts/evaluation\n"
    )
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("PYTHONHASHSEED", "0")
    return tmp_path


@pytest.fixture()
def recording_similarity() -> type[RecordingSimilarity]:
    return RecordingSimilarity
