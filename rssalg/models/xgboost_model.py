"""
XGBoost base classifier.

Wraps xgboost.XGBClassifier for arbitrary class labels: labels are encoded
to 0..K-1 for training and decoded on prediction.
"""

from __future__ import annotations

import numpy as np
import xgboost as xgb
from sklearn.model_selection import train_test_split
from sklearn.preprocessing import LabelEncoder

from rssalg.config import XGBoostConfig


class XGBoostModel:
    """XGBoost classifier wrapper.

    Uses early stopping with a validation split when there is enough
    training data; small labeled sets are trained without it.
    """

    name = "xgboost"

    def __init__(self, cfg: XGBoostConfig | None = None) -> None:
        self.cfg = cfg or XGBoostConfig()
        self._model: xgb.XGBClassifier | None = None
        self._encoder = LabelEncoder()
        self._constant: np.ndarray | None = None

    def fit(self, X: np.ndarray, y: np.ndarray) -> None:
        """Train the model on labeled data.

        Args:
            X: Feature matrix of shape (n_samples, n_features).
            y: Class labels of shape (n_samples,).
        """
        y_enc = self._encoder.fit_transform(y)
        n_classes = len(self._encoder.classes_)

        # XGBoost cannot train on a single class
        if n_classes == 1:
            self._model = None
            self._constant = self._encoder.classes_
            return
        self._constant = None

        objective = "binary:logistic" if n_classes == 2 else "multi:softprob"
        self._model = xgb.XGBClassifier(
            n_estimators=self.cfg.n_estimators,
            max_depth=self.cfg.max_depth,
            learning_rate=self.cfg.learning_rate,
            subsample=self.cfg.subsample,
            colsample_bytree=self.cfg.colsample_bytree,
            random_state=self.cfg.random_seed,
            objective=objective,
            early_stopping_rounds=self.cfg.early_stopping_rounds,
        )

        counts = np.bincount(y_enc)
        if len(X) > 50 and self.cfg.validation_fraction > 0 and counts.min() >= 2:
            X_train, X_val, y_train, y_val = train_test_split(
                X, y_enc,
                test_size=self.cfg.validation_fraction,
                random_state=self.cfg.random_seed,
                stratify=y_enc,
            )
            self._model.fit(
                X_train, y_train,
                eval_set=[(X_val, y_val)],
                verbose=False,
            )
        else:
            # Not enough data for split, train without early stopping
            self._model.set_params(early_stopping_rounds=None)
            self._model.fit(X, y_enc)

    def predict(self, X: np.ndarray) -> np.ndarray:
        """Predict class labels.

        Raises:
            RuntimeError: If model has not been fitted.
        """
        if self._constant is not None:
            return np.repeat(self._constant, len(X))
        if self._model is None:
            raise RuntimeError("Model has not been fitted. Call fit() first.")
        return self._encoder.inverse_transform(self._model.predict(X).astype(int))

    def predict_proba(self, X: np.ndarray) -> np.ndarray:
        """Class probabilities, columns ordered as ``classes_``."""
        if self._constant is not None:
            return np.ones((len(X), 1))
        if self._model is None:
            raise RuntimeError("Model has not been fitted. Call fit() first.")
        return self._model.predict_proba(X)

    @property
    def classes_(self) -> np.ndarray:
        return self._encoder.classes_
