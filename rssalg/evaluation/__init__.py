"""Evaluation module: classification results, measures and statistics."""

from rssalg.evaluation.measures import Measure, get_measure, get_measures
from rssalg.evaluation.result import ClassificationResult
from rssalg.evaluation.statistics import (
    MeasureSummary,
    macro_average,
    sample_std,
    summarize,
)

__all__ = [
    "ClassificationResult",
    "Measure",
    "MeasureSummary",
    "get_measure",
    "get_measures",
    "macro_average",
    "sample_std",
    "summarize",
]
