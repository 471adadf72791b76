"""
Micro- and macro-averaged statistics across folds.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np

from rssalg.evaluation.measures import Measure
from rssalg.evaluation.result import ClassificationResult
from rssalg.exceptions import InsufficientFoldsError

logger = logging.getLogger(__name__)


@dataclass
class MeasureSummary:
    """Aggregated values of one measure.

    Attributes:
        name: Measure name.
        micro_averaged: Measure applied to the pooled result.
        macro_averaged: Mean of the per-fold values.
        std_dev: Sample standard deviation of the per-fold values
            (N-1 denominator), None when there is a single fold.
    """

    name: str
    micro_averaged: float
    macro_averaged: float
    std_dev: Optional[float]


def mean(values: Sequence[float]) -> float:
    if len(values) == 0:
        raise InsufficientFoldsError("Cannot average an empty list of values")
    return float(np.mean(values))


def sample_std(values: Sequence[float]) -> float:
    """Sample standard deviation with N-1 degrees of freedom.

    Raises:
        InsufficientFoldsError: If fewer than two values are given.
    """
    if len(values) < 2:
        raise InsufficientFoldsError(
            f"Sample standard deviation needs at least 2 values, got {len(values)}"
        )
    return float(np.std(values, ddof=1))


def macro_average(values: Sequence[float]) -> Tuple[float, float]:
    """Return (mean, sample standard deviation) of per-fold values."""
    return mean(values), sample_std(values)


def summarize(
    measure: Measure,
    micro_result: ClassificationResult,
    fold_values: Sequence[float],
) -> MeasureSummary:
    """Aggregate one measure over the pooled result and per-fold values."""
    avg = mean(fold_values)
    try:
        std = sample_std(fold_values)
    except InsufficientFoldsError:
        logger.warning(f"{measure.name}: standard deviation is undefined for a single fold")
        std = None

    return MeasureSummary(
        name=measure.name,
        micro_averaged=measure.get_measure(micro_result),
        macro_averaged=avg,
        std_dev=std,
    )


def format_value(value: Optional[float]) -> str:
    """One-decimal rendering used in logs and reports ("-" for missing/NaN)."""
    if value is None or math.isnan(value):
        return "-"
    return f"{value:.1f}"
