"""
Performance measures over a ClassificationResult.

Implements:
- accuracy: share of correctly classified instances
- micro_f1: F1 from pooled per-class counts
- macro_f1: unweighted mean of per-class F1
- precision_<class>, recall_<class>, f1_<class>: per-class measures

All values are percentages in [0, 100]. A measure whose denominator is
zero evaluates to 0.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Dict, List

from rssalg.evaluation.result import ClassificationResult
from rssalg.exceptions import SettingsError


def _ratio(num: float, den: float) -> float:
    return 100.0 * num / den if den else 0.0


def _f1(precision: float, recall: float) -> float:
    return 2 * precision * recall / (precision + recall) if precision + recall else 0.0


def _precision(result: ClassificationResult, label) -> float:
    tp = result.true_positives(label)
    return _ratio(tp, tp + result.false_positives(label))


def _recall(result: ClassificationResult, label) -> float:
    tp = result.true_positives(label)
    return _ratio(tp, tp + result.false_negatives(label))


class Measure(ABC):
    """A named scalar function over a ClassificationResult."""

    name: str = ""

    def get_name(self) -> str:
        return self.name

    @abstractmethod
    def get_measure(self, result: ClassificationResult) -> float:
        pass

    def __call__(self, result: ClassificationResult) -> float:
        return self.get_measure(result)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class Accuracy(Measure):
    name = "accuracy"

    def get_measure(self, result: ClassificationResult) -> float:
        return _ratio(result.correct, result.total)


class MicroF1(Measure):
    name = "micro_f1"

    def get_measure(self, result: ClassificationResult) -> float:
        tp = sum(result.true_positives(l) for l in result.labels)
        fp = sum(result.false_positives(l) for l in result.labels)
        fn = sum(result.false_negatives(l) for l in result.labels)
        return _f1(_ratio(tp, tp + fp), _ratio(tp, tp + fn))


class MacroF1(Measure):
    name = "macro_f1"

    def get_measure(self, result: ClassificationResult) -> float:
        if not result.labels:
            return 0.0
        scores = [_f1(_precision(result, l), _recall(result, l)) for l in result.labels]
        return sum(scores) / len(scores)


class ClassMeasure(Measure):
    """Per-class precision, recall or F1 for one class label."""

    KINDS: Dict[str, Callable[[ClassificationResult, object], float]] = {
        "precision": _precision,
        "recall": _recall,
        "f1": lambda r, l: _f1(_precision(r, l), _recall(r, l)),
    }

    def __init__(self, kind: str, label: str) -> None:
        if kind not in self.KINDS:
            raise ValueError(f"Unknown class measure: {kind}")
        self.kind = kind
        self.label = label
        self.name = f"{kind}_{label}"

    def get_measure(self, result: ClassificationResult) -> float:
        # Labels may be stored as text or as numbers
        label = self.label
        if label not in result.labels:
            matches = [l for l in result.labels if str(l) == label]
            label = matches[0] if matches else label
        return self.KINDS[self.kind](result, label)


MEASURES: Dict[str, Callable[[], Measure]] = {
    Accuracy.name: Accuracy,
    MicroF1.name: MicroF1,
    MacroF1.name: MacroF1,
}


def get_measure(name: str) -> Measure:
    """Resolve a measure by name.

    Raises:
        SettingsError: If the name matches no measure.
    """
    key = name.strip()
    if key.lower() in MEASURES:
        return MEASURES[key.lower()]()

    kind, _, label = key.partition("_")
    if label and kind.lower() in ClassMeasure.KINDS:
        return ClassMeasure(kind.lower(), label)

    raise SettingsError(
        f"Unknown measure: {name}. Supported: {list(MEASURES.keys())} "
        f"and {[k + '_<class>' for k in ClassMeasure.KINDS]}"
    )


def get_measures(names: List[str]) -> List[Measure]:
    """Resolve a list of measure names, rejecting duplicates."""
    measures = [get_measure(n) for n in names]
    seen = set()
    for m in measures:
        if m.name in seen:
            raise SettingsError(f"Measure listed twice: {m.name}")
        seen.add(m.name)
    return measures
