"""
Classification result as a confusion matrix.

Results from different folds and splits are pooled by adding their
confusion matrices, which makes micro-averaging independent of the order
in which results arrive.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence

import numpy as np
from sklearn.metrics import confusion_matrix


class ClassificationResult:
    """Confusion matrix over class labels (rows: actual, columns: predicted).

    Args:
        labels: Known class labels. More are added as results are pooled.
        keep_predictions: Also keep per-instance (id, actual, predicted)
            records.
    """

    def __init__(self, labels: Iterable = (), keep_predictions: bool = False) -> None:
        self.labels: List = sorted(set(labels))
        self.matrix = np.zeros((len(self.labels), len(self.labels)), dtype=np.int64)
        self.keep_predictions = keep_predictions
        self.predictions: List[tuple] = []

    @classmethod
    def from_predictions(
        cls,
        y_true: Sequence,
        y_pred: Sequence,
        labels: Optional[Iterable] = None,
        ids: Optional[Sequence] = None,
    ) -> ClassificationResult:
        """Build a result from actual and predicted labels.

        Args:
            y_true: Actual class labels.
            y_pred: Predicted class labels.
            labels: Class labels to include even when absent from y_true/y_pred.
            ids: Instance ids; when given, predictions are kept.
        """
        y_true = np.asarray(y_true)
        y_pred = np.asarray(y_pred)
        if len(y_true) != len(y_pred):
            raise ValueError(
                f"Length mismatch: y_true={len(y_true)}, y_pred={len(y_pred)}"
            )

        all_labels = set(y_true.tolist()) | set(y_pred.tolist())
        if labels is not None:
            all_labels |= set(labels)

        result = cls(all_labels, keep_predictions=ids is not None)
        if len(y_true):
            result.matrix = confusion_matrix(y_true, y_pred, labels=result.labels).astype(np.int64)
        if ids is not None:
            result.predictions = list(zip(list(ids), y_true.tolist(), y_pred.tolist()))
        return result

    def _expand(self, labels: Iterable) -> None:
        """Grow the matrix so that it covers ``labels``."""
        new_labels = sorted(set(self.labels) | set(labels))
        if new_labels == self.labels:
            return
        matrix = np.zeros((len(new_labels), len(new_labels)), dtype=np.int64)
        pos = [new_labels.index(l) for l in self.labels]
        matrix[np.ix_(pos, pos)] = self.matrix
        self.labels = new_labels
        self.matrix = matrix

    def update(self, other: ClassificationResult) -> None:
        """Pool another result into this one."""
        self._expand(other.labels)
        pos = [self.labels.index(l) for l in other.labels]
        self.matrix[np.ix_(pos, pos)] += other.matrix
        if self.keep_predictions:
            self.predictions.extend(other.predictions)

    def count(self, actual, predicted) -> int:
        """Number of instances of class ``actual`` predicted as ``predicted``."""
        if actual not in self.labels or predicted not in self.labels:
            return 0
        return int(self.matrix[self.labels.index(actual), self.labels.index(predicted)])

    @property
    def total(self) -> int:
        return int(self.matrix.sum())

    @property
    def correct(self) -> int:
        return int(np.trace(self.matrix))

    def true_positives(self, label) -> int:
        return self.count(label, label)

    def false_positives(self, label) -> int:
        if label not in self.labels:
            return 0
        i = self.labels.index(label)
        return int(self.matrix[:, i].sum() - self.matrix[i, i])

    def false_negatives(self, label) -> int:
        if label not in self.labels:
            return 0
        i = self.labels.index(label)
        return int(self.matrix[i, :].sum() - self.matrix[i, i])

    def to_dict(self) -> Dict[str, Dict[str, int]]:
        """Nested {actual: {predicted: count}} mapping."""
        return {
            str(a): {str(p): self.count(a, p) for p in self.labels}
            for a in self.labels
        }

    def __repr__(self) -> str:
        return f"ClassificationResult(labels={self.labels}, total={self.total}, correct={self.correct})"
