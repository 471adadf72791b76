"""
Supervised reference baselines for co-training experiments.

- L: base classifier trained on the labeled data only (lower bound)
- All: base classifier trained on labeled and unlabeled data with their
  true labels (upper bound for what co-training can reach)
"""

from __future__ import annotations

import numpy as np

from rssalg.algorithms.base import Algorithm, register_algorithm
from rssalg.config import Settings
from rssalg.data.dataset import CoTrainingData
from rssalg.evaluation.result import ClassificationResult
from rssalg.models import build_classifier
from rssalg.results.classifiers import ClassifierEnsemble, ClassifierRecord


class SupervisedBaseline(Algorithm):
    """Train one base classifier on all features and evaluate on the test set."""

    def __init__(self, settings: Settings, use_unlabeled: bool = False) -> None:
        super().__init__(settings)
        self.use_unlabeled = use_unlabeled

    @property
    def name(self) -> str:
        return "All" if self.use_unlabeled else "L"

    def run(
        self,
        data: CoTrainingData,
        fold: int,
        split: int,
        record_classifiers: bool = False,
    ) -> ClassificationResult:
        self._classifiers = []
        self._classifiers_test = []

        X_train = data.X("labeled")
        y_train = data.y("labeled")
        if self.use_unlabeled:
            X_train = np.vstack([X_train, data.X("unlabeled")])
            y_train = np.concatenate([y_train, data.y("unlabeled")])

        model = build_classifier(self.settings.co_training, self.settings.dataset.random_seed)
        model.fit(X_train, y_train)
        y_pred = model.predict(data.X("test"))

        if record_classifiers:
            self._record(model, data, fold, split, y_pred)

        return ClassificationResult.from_predictions(
            data.y("test"), y_pred, labels=data.classes, ids=data.ids("test")
        )

    def _record(self, model, data: CoTrainingData, fold: int, split: int, y_pred_test: np.ndarray) -> None:
        """Keep the model's predictions on the unlabeled and test data."""
        name = type(model).name
        if len(data.unlabeled):
            y_pred_unlabeled = model.predict(data.X("unlabeled"))
            self._classifiers = [ClassifierEnsemble([ClassifierRecord(
                name=name, fold=fold, split=split,
                predictions=dict(zip(map(str, data.ids("unlabeled")), map(str, y_pred_unlabeled))),
            )])]
        self._classifiers_test = [ClassifierEnsemble([ClassifierRecord(
            name=name, fold=fold, split=split,
            predictions=dict(zip(map(str, data.ids("test")), map(str, y_pred_test))),
        )])]


@register_algorithm("L")
def labeled_only(settings: Settings) -> SupervisedBaseline:
    return SupervisedBaseline(settings, use_unlabeled=False)


@register_algorithm("All")
def all_labeled(settings: Settings) -> SupervisedBaseline:
    return SupervisedBaseline(settings, use_unlabeled=True)
