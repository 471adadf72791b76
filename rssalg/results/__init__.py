"""Persistence of experiment results and recorded classifier ensembles."""

from rssalg.results.classifiers import (
    ClassifierEnsemble,
    ClassifierEnsembleList,
    ClassifierRecord,
)
from rssalg.results.store import (
    RESULTS_FILE,
    ExperimentRecord,
    ExperimentResults,
    Experiments,
    MeasureRecord,
)

__all__ = [
    "RESULTS_FILE",
    "ClassifierEnsemble",
    "ClassifierEnsembleList",
    "ClassifierRecord",
    "ExperimentRecord",
    "ExperimentResults",
    "Experiments",
    "MeasureRecord",
]
