"""
Co-training dataset for a single fold.

A fold holds three partitions that share the same columns:
- labeled: training rows whose labels the learner may use
- unlabeled: training rows whose labels are hidden from the learner
  (kept on disk so that the "All" baseline and evaluation can use them)
- test: held-out rows of this fold

plus the feature views used by co-training. Folds are stored as CSV files
with a small JSON sidecar, one directory per fold.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

import numpy as np
import pandas as pd

from rssalg.exceptions import FoldLoadError

LABELED_FILE = "labeled.csv"
UNLABELED_FILE = "unlabeled.csv"
TEST_FILE = "test.csv"
META_FILE = "views.json"


@dataclass
class CoTrainingData:
    """Labeled/unlabeled/test partitions and feature views of one fold.

    Attributes:
        labeled: Labeled training rows (features, class and id columns).
        unlabeled: Unlabeled training rows (true class kept for baselines).
        test: Test rows.
        class_attribute: Name of the class column.
        id_attribute: Name of the instance id column.
        views: Feature column names per view.
    """

    labeled: pd.DataFrame
    unlabeled: pd.DataFrame
    test: pd.DataFrame
    class_attribute: str
    id_attribute: str = "id"
    views: List[List[str]] = field(default_factory=list)

    def __post_init__(self) -> None:
        for df, name in [(self.labeled, "labeled"),
                         (self.unlabeled, "unlabeled"),
                         (self.test, "test")]:
            for col in (self.class_attribute, self.id_attribute):
                if col not in df.columns:
                    raise ValueError(f"{name} partition is missing column '{col}'")

        if not self.views:
            self.views = [self.feature_names]

        unknown = [c for view in self.views for c in view if c not in self.feature_names]
        if unknown:
            raise ValueError(f"Views reference unknown features: {unknown}")

    @property
    def feature_names(self) -> List[str]:
        """All feature columns (every column except class and id)."""
        return [
            c for c in self.labeled.columns
            if c not in (self.class_attribute, self.id_attribute)
        ]

    @property
    def no_views(self) -> int:
        return len(self.views)

    @property
    def classes(self) -> List:
        """Sorted class labels seen in any partition."""
        values = pd.concat([
            self.labeled[self.class_attribute],
            self.unlabeled[self.class_attribute],
            self.test[self.class_attribute],
        ])
        return sorted(values.unique().tolist())

    def X(self, partition: str, view: int | None = None) -> np.ndarray:
        """Feature matrix of a partition, optionally restricted to one view."""
        df = self._partition(partition)
        cols = self.feature_names if view is None else self.views[view]
        return df[cols].values

    def y(self, partition: str) -> np.ndarray:
        """Class labels of a partition."""
        return self._partition(partition)[self.class_attribute].values

    def ids(self, partition: str) -> np.ndarray:
        """Instance ids of a partition."""
        return self._partition(partition)[self.id_attribute].values

    def _partition(self, partition: str) -> pd.DataFrame:
        if partition not in ("labeled", "unlabeled", "test"):
            raise ValueError(f"Unknown partition: {partition}")
        return getattr(self, partition)

    def copy(self) -> CoTrainingData:
        """Deep copy, so a split can change views without touching the fold."""
        return CoTrainingData(
            labeled=self.labeled.copy(),
            unlabeled=self.unlabeled.copy(),
            test=self.test.copy(),
            class_attribute=self.class_attribute,
            id_attribute=self.id_attribute,
            views=[list(v) for v in self.views],
        )

    def save(self, folder: Path | str) -> None:
        """Write the fold to ``folder`` (created if needed)."""
        folder = Path(folder)
        folder.mkdir(parents=True, exist_ok=True)

        self.labeled.to_csv(folder / LABELED_FILE, index=False)
        self.unlabeled.to_csv(folder / UNLABELED_FILE, index=False)
        self.test.to_csv(folder / TEST_FILE, index=False)

        meta = {
            "class_attribute": self.class_attribute,
            "id_attribute": self.id_attribute,
            "views": self.views,
        }
        with open(folder / META_FILE, "w") as f:
            json.dump(meta, f, indent=2)

    @classmethod
    def load(cls, folder: Path | str, no_views: int | None = None) -> CoTrainingData:
        """Load a fold previously written by save().

        Args:
            folder: Fold directory.
            no_views: Expected number of views; None skips the check.

        Raises:
            FoldLoadError: If the folder or one of its files is missing,
                unreadable, or holds a different number of views.
        """
        folder = Path(folder)
        if not folder.is_dir():
            raise FoldLoadError(f"Fold directory not found: {folder}")

        try:
            with open(folder / META_FILE) as f:
                meta = json.load(f)
            class_attribute = meta["class_attribute"]
            # Keep class and id as read, so labels like "1" and 1 don't mix
            dtypes = {class_attribute: str, meta.get("id_attribute", "id"): str}
            data = cls(
                labeled=pd.read_csv(folder / LABELED_FILE, dtype=dtypes),
                unlabeled=pd.read_csv(folder / UNLABELED_FILE, dtype=dtypes),
                test=pd.read_csv(folder / TEST_FILE, dtype=dtypes),
                class_attribute=class_attribute,
                id_attribute=meta.get("id_attribute", "id"),
                views=meta.get("views") or [],
            )
        except (OSError, KeyError, ValueError, pd.errors.ParserError) as err:
            raise FoldLoadError(f"Cannot load fold from {folder}: {err}") from err

        if no_views is not None and data.no_views != no_views:
            raise FoldLoadError(
                f"Fold {folder} has {data.no_views} views, expected {no_views}"
            )
        return data
