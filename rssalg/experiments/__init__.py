"""
Experiment runners.

This module provides:
- CrossValidationRunner: fold x split loop with micro/macro aggregation
- run_experiment: settings -> folds -> run -> Results.xml
"""

from rssalg.experiments.cross_validation import (
    CrossValidationRunner,
    ExperimentOutcome,
    run_experiment,
)

__all__ = [
    "CrossValidationRunner",
    "ExperimentOutcome",
    "run_experiment",
]
