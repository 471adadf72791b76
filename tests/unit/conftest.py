"""
Pytest fixtures for rssalg tests.

Provides temporary result folders, a small synthetic dataset, settings
factories, and a scripted algorithm whose results are fixed in advance.
"""
import pytest
import sys
import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Union

import numpy as np
import pandas as pd

# Add project root to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from rssalg.algorithms.base import Algorithm
from rssalg.config import (
    CVSettings,
    DatasetSettings,
    ExperimentSettings,
    GASettings,
    Settings,
)
from rssalg.data.dataset import CoTrainingData
from rssalg.data.folds import fold_dir
from rssalg.evaluation.result import ClassificationResult


FEATURES = ["f0", "f1", "f2", "f3", "f4", "f5"]


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


def make_frame(n: int, seed: int = 0, start_id: int = 0) -> pd.DataFrame:
    """Two well separated classes "a" and "b" with six numeric features."""
    rng = np.random.default_rng(seed)
    y = np.array(["a", "b"] * (n // 2) + ["a"] * (n % 2))
    offset = np.where(y == "a", 0.0, 4.0)[:, None]
    X = rng.normal(size=(n, len(FEATURES))) + offset
    df = pd.DataFrame(X, columns=FEATURES)
    df.insert(0, "id", [str(i) for i in range(start_id, start_id + n)])
    df["class"] = y
    return df


@pytest.fixture
def sample_df():
    """A 60-row dataset with id and class columns."""
    return make_frame(60)


@pytest.fixture
def dataset_csv(temp_dir, sample_df):
    """Sample dataset written to CSV without the id column."""
    path = temp_dir / "dataset.csv"
    sample_df.drop(columns=["id"]).to_csv(path, index=False)
    return path


def make_fold_data(seed: int = 0) -> CoTrainingData:
    """A small fold with 4 labeled, 10 unlabeled and 10 test rows."""
    df = make_frame(24, seed=seed)
    return CoTrainingData(
        labeled=df.iloc[:4].reset_index(drop=True),
        unlabeled=df.iloc[4:14].reset_index(drop=True),
        test=df.iloc[14:].reset_index(drop=True),
        class_attribute="class",
        id_attribute="id",
        views=[FEATURES[:3], FEATURES[3:]],
    )


@pytest.fixture
def fold_data():
    return make_fold_data()


def write_folds(result_folder: Path, n_folds: int) -> None:
    """Write ``n_folds`` fold directories under ``result_folder``."""
    for i in range(n_folds):
        make_fold_data(seed=i).save(fold_dir(result_folder, i))


@pytest.fixture
def make_settings(temp_dir):
    """Factory for Settings rooted in the temporary directory."""
    def _make(**experiment_kwargs) -> Settings:
        dataset_kwargs = experiment_kwargs.pop("dataset", {})
        return Settings(
            dataset=DatasetSettings(
                result_folder=str(temp_dir / "results"),
                no_views=2,
                load_preset_experiment=True,
                **dataset_kwargs,
            ),
            cv=CVSettings(no_folds=3),
            experiment=ExperimentSettings(**experiment_kwargs),
            ga=GASettings(opt_measure="accuracy"),
        )
    return _make


class ScriptedAlgorithm(Algorithm):
    """Algorithm returning results with a fixed number of correct predictions.

    Args:
        settings: Experiment settings.
        correct: Per fold, either a number of correct predictions (same for
            every split) or a list with one number per split.
        total: Test instances per result.
        name: Algorithm name.
        ensembles: Ensembles exposed after every run when recording.
    """

    def __init__(
        self,
        settings: Settings,
        correct: List[Union[int, List[int]]],
        total: int = 10,
        name: str = "Scripted",
        ensembles: Optional[Dict[str, list]] = None,
        on_run=None,
    ) -> None:
        super().__init__(settings)
        self.correct = correct
        self.total = total
        self._name = name
        self.ensembles = ensembles or {}
        self.on_run = on_run
        self.calls = []

    @property
    def name(self) -> str:
        return self._name

    def run(self, data, fold, split, record_classifiers=False):
        self.calls.append((fold, split, [list(v) for v in data.views]))
        if self.on_run is not None:
            self.on_run(fold, split)

        per_fold = self.correct[fold]
        n_correct = per_fold[split] if isinstance(per_fold, list) else per_fold

        if record_classifiers:
            self._classifiers = list(self.ensembles.get("train", []))
            self._classifiers_test = list(self.ensembles.get("test", []))

        y_true = ["a"] * self.total
        y_pred = ["a"] * n_correct + ["b"] * (self.total - n_correct)
        ids = [f"{fold}_{split}_{i}" for i in range(self.total)]
        return ClassificationResult.from_predictions(y_true, y_pred, labels=["a", "b"], ids=ids)


@pytest.fixture
def scripted_algorithm():
    """Factory for ScriptedAlgorithm."""
    return ScriptedAlgorithm


@pytest.fixture
def fold_writer():
    """Function writing fold directories: fold_writer(result_folder, n)."""
    return write_folds
