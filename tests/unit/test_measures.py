"""
Unit tests for ClassificationResult and performance measures.
"""
import pytest

from rssalg.evaluation.measures import (
    Accuracy,
    ClassMeasure,
    MacroF1,
    MicroF1,
    get_measure,
    get_measures,
)
from rssalg.evaluation.result import ClassificationResult
from rssalg.exceptions import SettingsError


@pytest.fixture
def result():
    # actual a: 3 correct, 1 as b; actual b: 1 as a, 5 correct
    y_true = ["a"] * 4 + ["b"] * 6
    y_pred = ["a", "a", "a", "b", "a", "b", "b", "b", "b", "b"]
    return ClassificationResult.from_predictions(y_true, y_pred)


class TestClassificationResult:

    def test_counts(self, result):
        assert result.total == 10
        assert result.correct == 8
        assert result.true_positives("a") == 3
        assert result.false_positives("a") == 1
        assert result.false_negatives("a") == 1
        assert result.count("b", "a") == 1

    def test_unknown_label_counts_zero(self, result):
        assert result.count("c", "a") == 0
        assert result.false_positives("c") == 0

    def test_length_mismatch(self):
        with pytest.raises(ValueError, match="Length mismatch"):
            ClassificationResult.from_predictions(["a"], ["a", "b"])

    def test_update_expands_labels(self):
        pooled = ClassificationResult.from_predictions(["a", "b"], ["a", "a"])
        pooled.update(ClassificationResult.from_predictions(["c"], ["c"]))

        assert pooled.labels == ["a", "b", "c"]
        assert pooled.total == 3
        assert pooled.count("b", "a") == 1
        assert pooled.true_positives("c") == 1

    def test_pooling_is_order_independent(self):
        parts = [
            ClassificationResult.from_predictions(["a", "b", "b"], ["a", "a", "b"]),
            ClassificationResult.from_predictions(["c", "a"], ["a", "a"]),
            ClassificationResult.from_predictions(["b"], ["c"]),
        ]
        forward = ClassificationResult()
        for p in parts:
            forward.update(p)
        backward = ClassificationResult()
        for p in reversed(parts):
            backward.update(p)

        assert forward.to_dict() == backward.to_dict()
        for measure in (Accuracy(), MicroF1(), MacroF1()):
            assert measure(forward) == pytest.approx(measure(backward))

    def test_keeps_predictions_with_ids(self):
        result = ClassificationResult.from_predictions(["a"], ["b"], ids=["7"])

        assert result.predictions == [("7", "a", "b")]


class TestMeasures:

    def test_accuracy(self, result):
        assert Accuracy()(result) == pytest.approx(80.0)

    def test_class_measures(self, result):
        assert get_measure("precision_a")(result) == pytest.approx(75.0)
        assert get_measure("recall_b")(result) == pytest.approx(100 * 5 / 6)
        assert get_measure("f1_a")(result) == pytest.approx(75.0)

    def test_macro_f1(self, result):
        f1_b = 2 * (5 / 6) * (5 / 6) / (5 / 6 + 5 / 6) * 100
        assert MacroF1()(result) == pytest.approx((75.0 + f1_b) / 2)

    def test_micro_f1_equals_accuracy_single_label(self, result):
        assert MicroF1()(result) == pytest.approx(Accuracy()(result))

    def test_empty_result_is_zero(self):
        empty = ClassificationResult()
        assert Accuracy()(empty) == 0.0
        assert MacroF1()(empty) == 0.0

    def test_class_measure_matches_numeric_labels(self):
        result = ClassificationResult.from_predictions([1, 0], [1, 1])

        assert ClassMeasure("precision", "1")(result) == pytest.approx(50.0)


class TestMeasureLookup:

    @pytest.mark.parametrize("name,cls", [
        ("accuracy", Accuracy),
        ("Accuracy", Accuracy),
        ("micro_f1", MicroF1),
        ("macro_f1", MacroF1),
    ])
    def test_named_measures(self, name, cls):
        assert isinstance(get_measure(name), cls)

    def test_class_measure_name(self):
        measure = get_measure("recall_spam")

        assert isinstance(measure, ClassMeasure)
        assert measure.get_name() == "recall_spam"

    def test_unknown_measure(self):
        with pytest.raises(SettingsError, match="Unknown measure"):
            get_measure("auc")

    def test_duplicates_rejected(self):
        with pytest.raises(SettingsError, match="twice"):
            get_measures(["accuracy", "macro_f1", "accuracy"])

    def test_order_preserved(self):
        names = [m.name for m in get_measures(["macro_f1", "accuracy"])]
        assert names == ["macro_f1", "accuracy"]
