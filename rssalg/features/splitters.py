"""
Feature splitters that divide a dataset's features into co-training views.

A splitter rewrites ``data.views`` in place on a working copy of a fold.
The runner calls it once per split with a generator cloned from the master
generator and the split index, so split ``k`` always gets the same views.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Type

import numpy as np

from rssalg.config import Settings
from rssalg.data.dataset import CoTrainingData
from rssalg.exceptions import SettingsError


class DatasetSplitter(ABC):
    """Abstract base class for feature splitters."""

    name: str = ""

    def __init__(self, no_views: int = 2) -> None:
        self.no_views = no_views

    def get_name(self) -> str:
        return self.name

    @abstractmethod
    def split_datasets(
        self,
        view_spec: Optional[List[List[str]]],
        data: CoTrainingData,
        rng: np.random.Generator,
        split_index: int,
    ) -> None:
        """Assign views to ``data``.

        Args:
            view_spec: Explicit feature lists per view, if the caller has them.
            data: Working copy of a fold; its views are replaced.
            rng: Generator cloned from the master generator.
            split_index: Index of the current split.
        """
        pass


class RandomSplitter(DatasetSplitter):
    """Random split: shuffle the features and deal them into views."""

    name = "Random"

    def split_datasets(
        self,
        view_spec: Optional[List[List[str]]],
        data: CoTrainingData,
        rng: np.random.Generator,
        split_index: int,
    ) -> None:
        features = data.feature_names
        if len(features) < self.no_views:
            raise ValueError(
                f"Cannot split {len(features)} features into {self.no_views} views"
            )

        # Same clone state + split index -> same stream for this split
        base_seed = int(rng.integers(0, 2**63 - 1))
        split_rng = np.random.default_rng([base_seed, split_index])
        shuffled = [features[i] for i in split_rng.permutation(len(features))]
        data.views = [shuffled[i::self.no_views] for i in range(self.no_views)]


class NaturalSplitter(DatasetSplitter):
    """Natural split: views given by the dataset's own feature groups."""

    name = "Natural"

    def __init__(self, no_views: int = 2, views: Optional[List[List[str]]] = None) -> None:
        super().__init__(no_views)
        self.views = views

    def split_datasets(
        self,
        view_spec: Optional[List[List[str]]],
        data: CoTrainingData,
        rng: np.random.Generator,
        split_index: int,
    ) -> None:
        views = view_spec or self.views
        if not views:
            raise ValueError("Natural split requires views in the dataset settings")
        if len(views) != self.no_views:
            raise ValueError(f"Natural split has {len(views)} views, expected {self.no_views}")

        unknown = [c for view in views for c in view if c not in data.feature_names]
        if unknown:
            raise ValueError(f"Natural split references unknown features: {unknown}")
        data.views = [list(v) for v in views]


SPLITTERS: Dict[str, Type[DatasetSplitter]] = {
    RandomSplitter.name: RandomSplitter,
    NaturalSplitter.name: NaturalSplitter,
}


def get_splitter(name: Optional[str], settings: Settings) -> Optional[DatasetSplitter]:
    """Build the splitter named in the experiment settings.

    Returns:
        The splitter, or None when ``name`` is None.

    Raises:
        SettingsError: If no splitter is registered under ``name``.
    """
    if name is None:
        return None

    no_views = settings.dataset.no_views
    if name == NaturalSplitter.name:
        return NaturalSplitter(no_views, views=settings.dataset.views)
    if name in SPLITTERS:
        return SPLITTERS[name](no_views)
    raise SettingsError(f"Unknown splitter: {name}. Supported: {list(SPLITTERS.keys())}")
