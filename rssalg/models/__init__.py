"""Base classifiers used by the experiment algorithms."""

from __future__ import annotations

from rssalg.config import CoTrainingSettings, XGBoostConfig
from rssalg.models.logistic_regression import LogisticRegressionConfig, LogisticRegressionModel
from rssalg.models.naive_bayes import NaiveBayesConfig, NaiveBayesModel
from rssalg.models.xgboost_model import XGBoostModel


def build_classifier(cfg: CoTrainingSettings, random_seed: int = 42):
    """Create an untrained base classifier from the co-training settings.

    ``cfg.classifier_params`` overrides the chosen model's config defaults.
    """
    params = dict(cfg.classifier_params)
    if cfg.classifier == "naive_bayes":
        return NaiveBayesModel(NaiveBayesConfig(**params))
    if cfg.classifier == "logistic_regression":
        params.setdefault("random_seed", random_seed)
        return LogisticRegressionModel(LogisticRegressionConfig(**params))
    if cfg.classifier == "xgboost":
        params.setdefault("random_seed", random_seed)
        return XGBoostModel(XGBoostConfig(**params))
    raise ValueError(f"Unknown classifier: {cfg.classifier}")


__all__ = [
    "LogisticRegressionConfig",
    "LogisticRegressionModel",
    "NaiveBayesConfig",
    "NaiveBayesModel",
    "XGBoostConfig",
    "XGBoostModel",
    "build_classifier",
]
