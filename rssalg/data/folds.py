"""
Fold preparation for k-fold cross-validation.

Implements:
- KFold / StratifiedKFold splits on the full dataset
- Labeled/unlabeled partition of each training part
- Fold storage layout (one fold_<i> directory per fold) and fold discovery
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import List, Optional, Tuple

import numpy as np
import pandas as pd
from sklearn.model_selection import KFold, StratifiedKFold, train_test_split

from rssalg.config import Settings
from rssalg.data.dataset import CoTrainingData
from rssalg.exceptions import DatasetError

logger = logging.getLogger(__name__)

FOLD_PREFIX = "fold_"


def fold_dir(result_folder: Path | str, fold: int) -> Path:
    """Directory holding fold ``fold``."""
    return Path(result_folder) / f"{FOLD_PREFIX}{fold}"


def count_folds(result_folder: Path | str) -> int:
    """Count fold directories by probing fold_0, fold_1, ... until one is missing."""
    count = 0
    while fold_dir(result_folder, count).exists():
        count += 1
    return count


def create_kfold_splits(
    y: np.ndarray,
    n_folds: int = 10,
    stratified: bool = True,
    random_seed: int = 42,
) -> List[Tuple[np.ndarray, np.ndarray]]:
    """Create KFold train/test splits.

    Args:
        y: Class labels, used for stratification.
        n_folds: Number of folds.
        stratified: Keep class proportions in every fold.
        random_seed: Random seed for reproducibility.

    Returns:
        List of (train_indices, test_indices) tuples.
    """
    indices = np.arange(len(y))
    if stratified:
        kf = StratifiedKFold(n_splits=n_folds, shuffle=True, random_state=random_seed)
        return [(train_idx, test_idx) for train_idx, test_idx in kf.split(indices, y)]
    kf = KFold(n_splits=n_folds, shuffle=True, random_state=random_seed)
    return [(train_idx, test_idx) for train_idx, test_idx in kf.split(indices)]


def _resolve_size(size: Optional[float], n: int) -> Optional[int]:
    """Turn a fraction (< 1) or a count (>= 1) into a row count."""
    if size is None:
        return None
    if size < 1:
        return max(1, int(round(n * size)))
    return min(int(size), n)


def default_views(features: List[str], no_views: int) -> List[List[str]]:
    """Deal features round-robin into ``no_views`` views."""
    if no_views > len(features):
        raise DatasetError(
            f"Cannot build {no_views} views from {len(features)} features"
        )
    return [features[i::no_views] for i in range(no_views)]


class CrossValidationSeparator:
    """Builds per-fold co-training datasets from a single CSV dataset.

    For every fold, the held-out part becomes the test set and the rest is
    divided into labeled and unlabeled rows. The labeled sample is
    stratified whenever every class has enough rows.
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.cfg = settings.dataset

    def load_dataset(self) -> pd.DataFrame:
        """Load the configured CSV and make sure class and id columns exist."""
        if not self.cfg.dataset_file:
            raise DatasetError("No dataset_file configured; cannot create folds")

        path = Path(self.cfg.dataset_file)
        if not path.exists():
            raise DatasetError(f"Dataset file not found: {path}")

        df = pd.read_csv(path)

        if self.cfg.class_attribute not in df.columns:
            raise DatasetError(
                f"Class attribute '{self.cfg.class_attribute}' not found in {path}"
            )

        if self.cfg.id_attribute not in df.columns:
            df.insert(0, self.cfg.id_attribute, np.arange(len(df)))
        elif df[self.cfg.id_attribute].duplicated().any():
            raise DatasetError(f"Id attribute '{self.cfg.id_attribute}' is not unique")

        # Class and id are stored as text, matching how folds are read back
        df[self.cfg.class_attribute] = df[self.cfg.class_attribute].astype(str)
        df[self.cfg.id_attribute] = df[self.cfg.id_attribute].astype(str)
        return df

    def _views(self, features: List[str]) -> List[List[str]]:
        if self.cfg.views:
            if len(self.cfg.views) != self.cfg.no_views:
                raise DatasetError(
                    f"{len(self.cfg.views)} views configured, but no_views is {self.cfg.no_views}"
                )
            unknown = [c for view in self.cfg.views for c in view if c not in features]
            if unknown:
                raise DatasetError(f"Configured views reference unknown features: {unknown}")
            return [list(v) for v in self.cfg.views]
        return default_views(features, self.cfg.no_views)

    def _split_labeled(self, train: pd.DataFrame, fold: int) -> Tuple[pd.DataFrame, pd.DataFrame]:
        """Split one training part into labeled and unlabeled rows."""
        n = len(train)
        n_labeled = _resolve_size(self.cfg.labeled_size, n)
        if n_labeled >= n:
            raise DatasetError(
                f"labeled_size={self.cfg.labeled_size} leaves no unlabeled data in fold {fold}"
            )

        y = train[self.cfg.class_attribute]
        counts = y.value_counts()
        can_stratify = counts.min() >= 2 and len(counts) <= n_labeled <= n - len(counts)
        stratify = y if can_stratify else None

        labeled, unlabeled = train_test_split(
            train,
            train_size=n_labeled,
            stratify=stratify,
            random_state=self.cfg.random_seed + fold,
        )

        n_unlabeled = _resolve_size(self.cfg.unlabeled_size, len(unlabeled))
        if n_unlabeled is not None and n_unlabeled < len(unlabeled):
            unlabeled = unlabeled.sample(n=n_unlabeled, random_state=self.cfg.random_seed + fold)

        return labeled.reset_index(drop=True), unlabeled.reset_index(drop=True)

    def prepare(self) -> List[CoTrainingData]:
        """Create one CoTrainingData per fold.

        Raises:
            DatasetError: If the dataset is missing, lacks the class
                attribute, or cannot be divided as configured.
        """
        df = self.load_dataset()
        features = [
            c for c in df.columns
            if c not in (self.cfg.class_attribute, self.cfg.id_attribute)
        ]
        views = self._views(features)

        try:
            splits = create_kfold_splits(
                df[self.cfg.class_attribute].values,
                n_folds=self.settings.cv.no_folds,
                stratified=self.settings.cv.stratified,
                random_seed=self.cfg.random_seed,
            )
        except ValueError as err:
            raise DatasetError(f"Cannot create {self.settings.cv.no_folds} folds: {err}") from err

        folds = []
        for fold, (train_idx, test_idx) in enumerate(splits):
            labeled, unlabeled = self._split_labeled(df.iloc[train_idx], fold)
            folds.append(CoTrainingData(
                labeled=labeled,
                unlabeled=unlabeled,
                test=df.iloc[test_idx].reset_index(drop=True),
                class_attribute=self.cfg.class_attribute,
                id_attribute=self.cfg.id_attribute,
                views=views,
            ))
        return folds

    def prepare_and_save(self) -> int:
        """Create the folds and write them under the result folder.

        A fold that cannot be written is logged and skipped; fold discovery
        stops at the first gap, so later folds are not used either. Fold
        directories left over from an earlier run with more folds are
        removed.

        Returns:
            Number of folds created.
        """
        folds = self.prepare()
        result_folder = self.settings.result_folder
        for i, data in enumerate(folds):
            path = fold_dir(result_folder, i)
            try:
                data.save(path)
            except OSError:
                logger.exception(f"Cannot write fold {i} to {path}")

        stale = len(folds)
        while fold_dir(result_folder, stale).exists():
            logger.info(f"Removing stale fold directory {fold_dir(result_folder, stale)}")
            shutil.rmtree(fold_dir(result_folder, stale))
            stale += 1
        return len(folds)
