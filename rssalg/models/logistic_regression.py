"""
Logistic Regression base classifier.

Features are standardized inside the pipeline, so views with very
different scales (word counts next to ratios) train the same way.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np
from sklearn.linear_model import LogisticRegression
from sklearn.pipeline import Pipeline, make_pipeline
from sklearn.preprocessing import StandardScaler


@dataclass
class LogisticRegressionConfig:
    """Configuration for Logistic Regression."""

    C: float = 1.0  # Inverse L2 regularization strength
    max_iter: int = 1000
    class_weight: Optional[str] = None  # "balanced" for skewed labeled sets
    standardize: bool = True
    random_seed: int = 42


class LogisticRegressionModel:
    """Multinomial Logistic Regression over arbitrary class labels.

    A labeled set with a single class cannot be fitted; the model then
    predicts that class for every instance.
    """

    name = "logistic_regression"

    def __init__(self, cfg: LogisticRegressionConfig | None = None):
        self.cfg = cfg or LogisticRegressionConfig()
        self._model: Pipeline | None = None
        self._classes: np.ndarray | None = None

    def _build(self) -> Pipeline:
        lr = LogisticRegression(
            C=self.cfg.C,
            max_iter=self.cfg.max_iter,
            class_weight=self.cfg.class_weight,
            random_state=self.cfg.random_seed,
        )
        if self.cfg.standardize:
            return make_pipeline(StandardScaler(), lr)
        return make_pipeline(lr)

    def fit(self, X: np.ndarray, y: np.ndarray) -> None:
        """Fit model on training data.

        Args:
            X: Feature matrix (n_samples, n_features).
            y: Class labels.
        """
        self._classes = np.unique(y)
        if len(self._classes) == 1:
            self._model = None
            return
        self._model = self._build()
        self._model.fit(X, y)

    def predict(self, X: np.ndarray) -> np.ndarray:
        if self._classes is None:
            raise RuntimeError("Model has not been fitted. Call fit() first.")
        if self._model is None:
            return np.repeat(self._classes, len(X))
        return self._model.predict(X)

    def predict_proba(self, X: np.ndarray) -> np.ndarray:
        """Class probabilities, columns ordered as ``classes_``."""
        if self._classes is None:
            raise RuntimeError("Model has not been fitted. Call fit() first.")
        if self._model is None:
            return np.ones((len(X), 1))
        return self._model.predict_proba(X)

    @property
    def classes_(self) -> np.ndarray:
        return self._classes
