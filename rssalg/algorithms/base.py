"""
Algorithm interface consumed by the cross-validation runner.

An algorithm is run once per fold and split on a working copy of the fold
data and returns the ClassificationResult on the fold's test set. When
asked to record classifiers, it also exposes the ensembles it built:
``classifiers`` with predictions on the training side (unlabeled data) and
``classifiers_test_data`` with predictions on the test set.
"""

from __future__ import annotations

import importlib
from abc import ABC, abstractmethod
from typing import Callable, Dict, List

from rssalg.config import Settings
from rssalg.data.dataset import CoTrainingData
from rssalg.evaluation.result import ClassificationResult
from rssalg.exceptions import SettingsError
from rssalg.results.classifiers import ClassifierEnsemble

# Algorithms whose name contains one of these build an ensemble or optimise
# over all splits internally, so the runner gives them a single split.
SPLIT_INSENSITIVE_MARKERS = ("RSSalg", "_of_Co-training_classifiers_on_test_set")


class Algorithm(ABC):
    """Abstract base class for experiment algorithms."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self._classifiers: List[ClassifierEnsemble] = []
        self._classifiers_test: List[ClassifierEnsemble] = []

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    def get_name(self) -> str:
        return self.name

    @abstractmethod
    def run(
        self,
        data: CoTrainingData,
        fold: int,
        split: int,
        record_classifiers: bool = False,
    ) -> ClassificationResult:
        """Run one experiment iteration.

        Args:
            data: Working copy of the fold data (views already assigned).
            fold: Fold index.
            split: Split index.
            record_classifiers: Keep the classifiers built during this run.

        Returns:
            Result on the fold's test set.
        """
        pass

    @property
    def classifiers(self) -> List[ClassifierEnsemble]:
        """Ensembles recorded by the last run (training side)."""
        return self._classifiers

    @property
    def classifiers_test_data(self) -> List[ClassifierEnsemble]:
        """Ensembles recorded by the last run (test side)."""
        return self._classifiers_test

    def is_split_insensitive(self) -> bool:
        return any(marker in self.name for marker in SPLIT_INSENSITIVE_MARKERS)


ALGORITHMS: Dict[str, Callable[[Settings], Algorithm]] = {}


def register_algorithm(name: str):
    """Class decorator registering an algorithm factory under ``name``."""
    def decorator(factory):
        ALGORITHMS[name] = factory
        return factory
    return decorator


def get_algorithm(name: str, settings: Settings) -> Algorithm:
    """Build the algorithm named in the experiment settings.

    ``name`` is either a registered name or a ``package.module:ClassName``
    path to an Algorithm subclass taking the settings as its only argument.

    Raises:
        SettingsError: If the name cannot be resolved.
    """
    if name in ALGORITHMS:
        return ALGORITHMS[name](settings)

    if ":" in name:
        module_name, _, class_name = name.partition(":")
        try:
            factory = getattr(importlib.import_module(module_name), class_name)
        except (ImportError, AttributeError) as err:
            raise SettingsError(f"Cannot load algorithm {name}") from err
        algorithm = factory(settings)
        if not isinstance(algorithm, Algorithm):
            raise SettingsError(f"{name} is not an Algorithm")
        return algorithm

    raise SettingsError(f"Unknown algorithm: {name}. Supported: {list(ALGORITHMS.keys())}")
