"""
Configuration management using pydantic.

All settings classes use pydantic for validation and YAML loading. One
model per settings category; the categories are aggregated into a single
Settings object that is built once and passed explicitly to the runner.

A properties folder contains data.yaml, cv.yaml, co-training.yaml and
GA.yaml, plus one experiment file named on the command line.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

import numpy as np
import yaml
from pydantic import BaseModel, Field

from rssalg.exceptions import SettingsError


DATA_FILE = "data.yaml"
CV_FILE = "cv.yaml"
CO_TRAINING_FILE = "co-training.yaml"
GA_FILE = "GA.yaml"


def load_yaml(path: Path | str) -> dict[str, Any]:
    """Load a YAML file and return as dict (empty files give {})."""
    with open(path) as f:
        return yaml.safe_load(f) or {}


class DatasetSettings(BaseModel):
    """Dataset and fold-storage settings."""

    dataset_file: Optional[str] = None  # CSV; only needed when creating folds
    class_attribute: str = "class"
    id_attribute: str = "id"
    result_folder: str = "results"
    no_views: int = Field(default=2, ge=1)
    views: Optional[List[List[str]]] = None  # natural split, if the data has one
    labeled_size: float = 0.1  # fraction (< 1) or count (>= 1) of training rows
    unlabeled_size: Optional[float] = None  # None = every remaining training row
    random_seed: int = 42
    load_preset_experiment: bool = False

    @classmethod
    def from_yaml(cls, path: Path | str) -> DatasetSettings:
        return cls(**load_yaml(path))

    def clone_random(self) -> np.random.Generator:
        """Return a fresh generator in the master generator's initial state.

        Every caller gets an identical, independent stream, so consumers that
        need per-split streams derive them from the clone.
        """
        return np.random.default_rng(self.random_seed)


class CVSettings(BaseModel):
    """Cross-validation settings."""

    no_folds: int = Field(default=10, ge=2)
    stratified: bool = True

    @classmethod
    def from_yaml(cls, path: Path | str) -> CVSettings:
        return cls(**load_yaml(path))


class XGBoostConfig(BaseModel):
    """Configuration for the XGBoost base classifier."""

    n_estimators: int = 100
    max_depth: int = 3
    learning_rate: float = 0.1
    subsample: float = 0.8
    colsample_bytree: float = 0.8
    early_stopping_rounds: int = 10
    validation_fraction: float = 0.2  # Fraction of training data for early stopping
    random_seed: int = 42


class CoTrainingSettings(BaseModel):
    """Co-training settings.

    The base classifier is shared by the supervised baselines; the remaining
    fields are consumed by co-training algorithms plugged into the runner and
    are part of the key the results document groups experiments by.
    """

    classifier: Literal["naive_bayes", "logistic_regression", "xgboost"] = "naive_bayes"
    iterations: int = 30
    pool_size: int = 75
    classifier_params: Dict[str, Any] = Field(default_factory=dict)
    growth_size: Dict[str, int] = Field(default_factory=dict)  # class -> labels added per iteration

    @classmethod
    def from_yaml(cls, path: Path | str) -> CoTrainingSettings:
        return cls(**load_yaml(path))


class ExperimentSettings(BaseModel):
    """Settings for a single experiment run."""

    algorithm: str = "L"
    measures: List[str] = Field(default_factory=lambda: ["accuracy"])
    splitter: Optional[str] = None
    no_splits: int = Field(default=1, ge=1)
    write_classifiers: bool = False
    # "last": the final split of a fold fills the macro table cell.
    # "mean": the fold's split values are averaged first.
    macro_split_policy: Literal["last", "mean"] = "last"

    @classmethod
    def from_yaml(cls, path: Path | str) -> ExperimentSettings:
        return cls(**load_yaml(path))

    @property
    def splitter_name(self) -> Optional[str]:
        """Configured splitter name, None when no splitter is configured."""
        if self.splitter is None or self.splitter.strip().lower() in ("", "none"):
            return None
        return self.splitter.strip()


class GASettings(BaseModel):
    """Genetic algorithm settings used by RSSalg-family algorithms."""

    opt_measure: str = "accuracy"
    population_size: int = 50
    no_generations: int = 30

    @classmethod
    def from_yaml(cls, path: Path | str) -> GASettings:
        return cls(**load_yaml(path))


class Settings(BaseModel):
    """All settings categories for one experiment."""

    dataset: DatasetSettings = Field(default_factory=DatasetSettings)
    cv: CVSettings = Field(default_factory=CVSettings)
    co_training: CoTrainingSettings = Field(default_factory=CoTrainingSettings)
    experiment: ExperimentSettings = Field(default_factory=ExperimentSettings)
    ga: GASettings = Field(default_factory=GASettings)

    @property
    def result_folder(self) -> Path:
        return Path(self.dataset.result_folder)

    def properties(self) -> Dict[str, str]:
        """Configuration properties that identify an experiment group.

        Experiments run on the same data with the same fold and co-training
        setup are stored together in the results document.
        """
        props = {
            "dataset": Path(self.dataset.dataset_file).name if self.dataset.dataset_file else "",
            "class_attribute": self.dataset.class_attribute,
            "no_views": self.dataset.no_views,
            "labeled_size": self.dataset.labeled_size,
            "unlabeled_size": self.dataset.unlabeled_size if self.dataset.unlabeled_size is not None else "all",
            "random_seed": self.dataset.random_seed,
            "no_folds": self.cv.no_folds,
            "classifier": self.co_training.classifier,
            "iterations": self.co_training.iterations,
            "pool_size": self.co_training.pool_size,
        }
        return {k: str(v) for k, v in props.items()}


def load_settings(properties_folder: Path | str, experiment_file: str) -> Settings:
    """Read every settings category from a properties folder.

    Args:
        properties_folder: Folder holding data.yaml, cv.yaml,
            co-training.yaml and GA.yaml.
        experiment_file: Experiment settings file name inside the folder.

    Returns:
        Aggregated Settings.

    Raises:
        SettingsError: If one of the files is missing or invalid. The
            message names the category; the original error is chained.
    """
    folder = Path(properties_folder)
    categories = [
        ("dataset", "data", DatasetSettings, DATA_FILE),
        ("cv", "cv", CVSettings, CV_FILE),
        ("co_training", "co-training", CoTrainingSettings, CO_TRAINING_FILE),
        ("experiment", "experiment", ExperimentSettings, experiment_file),
        ("ga", "GA", GASettings, GA_FILE),
    ]

    loaded = {}
    for field, label, model, file_name in categories:
        try:
            loaded[field] = model.from_yaml(folder / file_name)
        except Exception as err:
            raise SettingsError(f"ERROR: Cannot read {label} properties") from err

    return Settings(**loaded)
