"""
Naive Bayes base classifier, the default learner for co-training experiments.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from sklearn.naive_bayes import GaussianNB, MultinomialNB


@dataclass
class NaiveBayesConfig:
    """Configuration for Naive Bayes."""

    variant: str = "gaussian"  # "multinomial" for word counts
    alpha: float = 1.0  # Laplace smoothing, multinomial only


class NaiveBayesModel:
    """Gaussian or multinomial Naive Bayes."""

    name = "naive_bayes"

    def __init__(self, cfg: NaiveBayesConfig | None = None):
        self.cfg = cfg or NaiveBayesConfig()
        if self.cfg.variant == "gaussian":
            self._model = GaussianNB()
        elif self.cfg.variant == "multinomial":
            self._model = MultinomialNB(alpha=self.cfg.alpha)
        else:
            raise ValueError(f"Unknown Naive Bayes variant: {self.cfg.variant}")

    def fit(self, X: np.ndarray, y: np.ndarray) -> None:
        self._model.fit(X, y)

    def predict(self, X: np.ndarray) -> np.ndarray:
        return self._model.predict(X)

    def predict_proba(self, X: np.ndarray) -> np.ndarray:
        return self._model.predict_proba(X)

    @property
    def classes_(self) -> np.ndarray:
        return self._model.classes_
