"""Experiment algorithms and the algorithm registry."""

from rssalg.algorithms.base import (
    ALGORITHMS,
    SPLIT_INSENSITIVE_MARKERS,
    Algorithm,
    get_algorithm,
    register_algorithm,
)
from rssalg.algorithms.supervised import SupervisedBaseline

__all__ = [
    "ALGORITHMS",
    "SPLIT_INSENSITIVE_MARKERS",
    "Algorithm",
    "SupervisedBaseline",
    "get_algorithm",
    "register_algorithm",
]
