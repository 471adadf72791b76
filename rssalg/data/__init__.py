"""
Fold datasets and cross-validation preparation.

This module provides:
- CoTrainingData: labeled/unlabeled/test partitions and views of one fold
- CrossValidationSeparator: builds and saves per-fold datasets
- count_folds / fold_dir: fold storage layout helpers
"""

from rssalg.data.dataset import CoTrainingData
from rssalg.data.folds import (
    CrossValidationSeparator,
    count_folds,
    create_kfold_splits,
    fold_dir,
)

__all__ = [
    "CoTrainingData",
    "CrossValidationSeparator",
    "count_folds",
    "create_kfold_splits",
    "fold_dir",
]
