"""Tests for ranking-based evaluation and cross-validation."""

from __future__ import annotations

import pytest

from bayes_text.classifier import BayesClassifier, Classification
from bayes_text.evaluation import (
    EvaluationReport,
    RankedPrediction,
    accuracy_score,
    cross_validate,
    evaluate,
    fold_indices,
)
from bayes_text.exceptions import NotTrainedError


def _ranking(*pairs: tuple[str, float]) -> list[Classification]:
    return [Classification(label=label, value=value) for label, value in pairs]


class TestRankedPrediction:
    """Tests for a single document's ranking."""

    def test_predicted_is_top_label(self):
        p = RankedPrediction("b", _ranking(("a", 0.6), ("b", 0.3)))
        assert p.predicted == "a"
        assert not p.correct

    def test_true_rank_is_one_based(self):
        p = RankedPrediction("c", _ranking(("a", 0.5), ("b", 0.3), ("c", 0.1)))
        assert p.true_rank == 3

    def test_untrained_true_label_has_no_rank(self):
        p = RankedPrediction("zzz", _ranking(("a", 0.5), ("b", 0.3)))
        assert p.true_rank is None

    def test_margin_relative_to_best(self):
        p = RankedPrediction("a", _ranking(("a", 0.8), ("b", 0.2)))
        assert p.margin == pytest.approx(0.75)

    def test_tie_has_zero_margin(self):
        assert RankedPrediction("a", _ranking(("a", 0.4), ("b", 0.4))).margin == 0.0

    def test_underflowed_scores_have_zero_margin(self):
        assert RankedPrediction("a", _ranking(("a", 0.0), ("b", 0.0))).margin == 0.0

    def test_single_class_has_full_margin(self):
        assert RankedPrediction("a", _ranking(("a", 0.1))).margin == 1.0


class TestEvaluationReport:
    """Tests for aggregated report metrics."""

    @pytest.fixture
    def report(self) -> EvaluationReport:
        return EvaluationReport(
            predictions=[
                RankedPrediction("a", _ranking(("a", 0.8), ("b", 0.2), ("c", 0.1))),
                RankedPrediction("a", _ranking(("b", 0.5), ("a", 0.5), ("c", 0.1))),
                RankedPrediction("b", _ranking(("c", 0.4), ("a", 0.3), ("b", 0.2))),
                RankedPrediction("b", _ranking(("b", 0.9), ("a", 0.0), ("c", 0.0))),
            ],
            top_k=2,
        )

    def test_accuracy(self, report):
        assert report.accuracy == 0.5

    def test_top_k_accuracy(self, report):
        # the second document ranks its class second, the third only third
        assert report.top_k_accuracy == 0.75

    def test_top_one_equals_accuracy(self, report):
        report.top_k = 1
        assert report.top_k_accuracy == report.accuracy

    def test_mean_margin(self, report):
        assert report.mean_margin == pytest.approx((0.75 + 0.0 + 0.25 + 1.0) / 4)

    def test_confusion_and_recall(self, report):
        assert report.confusion == {"a": {"a": 1, "b": 1}, "b": {"c": 1, "b": 1}}
        assert report.recall == {"a": 0.5, "b": 0.5}

    def test_empty_report(self):
        report = EvaluationReport()
        assert len(report) == 0
        assert report.accuracy == 0.0
        assert report.top_k_accuracy == 0.0
        assert report.mean_margin == 0.0
        assert report.recall == {}

    def test_to_dict_and_summary(self, report):
        d = report.to_dict()
        assert d["documents"] == 4
        assert d["accuracy"] == 0.5
        assert d["top_k"] == 2
        assert d["top_k_accuracy"] == 0.75
        summary = report.summary()
        assert "Accuracy: 50.00%" in summary
        assert "Top-2 accuracy: 75.00%" in summary
        assert "recall[a]" in summary


class TestEvaluate:
    """Tests for evaluate() on a trained classifier."""

    def test_rankings_come_from_classifier(self, pets_classifier):
        report = evaluate(pets_classifier, ["love", "hate"], ["pos", "neg"])
        assert report.accuracy == 1.0
        assert [p.ranking for p in report.predictions] == [
            pets_classifier.get_classifications("love"),
            pets_classifier.get_classifications("hate"),
        ]

    def test_margin_of_distinctive_word(self, pets_classifier):
        # pos: 3/5 * 3/3, neg: 3/5 * 1/3
        report = evaluate(pets_classifier, ["love"], ["pos"])
        assert report.mean_margin == pytest.approx(2 / 3)

    def test_shared_word_ties(self, pets_classifier):
        report = evaluate(pets_classifier, ["cats"], ["neg"])
        assert report.predictions[0].margin == 0.0
        assert report.predictions[0].true_rank == 2
        assert report.top_k_accuracy == 1.0

    def test_unknown_label_never_hits(self, pets_classifier):
        report = evaluate(pets_classifier, ["love"], ["meh"], top_k=5)
        assert report.top_k_accuracy == 0.0

    def test_untrained_raises(self):
        with pytest.raises(NotTrainedError):
            evaluate(BayesClassifier(), ["x"], ["y"])

    def test_mismatched_lengths_raises(self, pets_classifier):
        with pytest.raises(ValueError, match="same length"):
            evaluate(pets_classifier, ["love"], ["pos", "neg"])

    def test_top_k_below_one_raises(self, pets_classifier):
        with pytest.raises(ValueError, match="top_k"):
            evaluate(pets_classifier, ["love"], ["pos"], top_k=0)


class TestFoldIndices:
    """Tests for label-stratified fold assignment."""

    def test_fold_count(self):
        assert len(fold_indices(["a"] * 10 + ["b"] * 10, k=5)) == 5

    def test_partitions_every_index(self):
        labels = ["a"] * 7 + ["b"] * 5
        all_test: list[int] = []
        for train_idx, test_idx in fold_indices(labels, k=3):
            assert not set(train_idx) & set(test_idx)
            assert sorted(train_idx + test_idx) == list(range(len(labels)))
            all_test.extend(test_idx)
        assert sorted(all_test) == list(range(len(labels)))

    def test_labels_spread_evenly(self):
        labels = ["a", "b"] * 20
        for _, test_idx in fold_indices(labels, k=5):
            test_labels = [labels[i] for i in test_idx]
            assert test_labels.count("a") == test_labels.count("b") == 4

    def test_reproducible_with_seed(self):
        labels = ["a"] * 10 + ["b"] * 10
        assert fold_indices(labels, k=5, seed=7) == fold_indices(labels, k=5, seed=7)

    def test_seed_changes_assignment(self):
        labels = ["a"] * 10 + ["b"] * 10
        folds1 = fold_indices(labels, k=5, seed=42)
        folds2 = fold_indices(labels, k=5, seed=99)
        assert any(t1 != t2 for (_, t1), (_, t2) in zip(folds1, folds2))

    def test_more_folds_than_documents_leaves_empty_folds(self):
        folds = fold_indices(["a", "b"], k=3)
        assert [len(test) for _, test in folds] == [1, 1, 0]

    def test_k_below_two_raises(self):
        with pytest.raises(ValueError, match="at least 2"):
            fold_indices(["a", "b"], k=1)


class TestCrossValidate:
    """Tests for cross_validate with the Bayes classifier."""

    def test_returns_one_report_per_fold(self, topic_corpus):
        docs, labels = topic_corpus
        reports = cross_validate(docs, labels, k=4)
        assert len(reports) == 4
        assert all(isinstance(r, EvaluationReport) for r in reports)
        assert sum(len(r) for r in reports) == len(docs)

    def test_reasonable_accuracy(self, topic_corpus):
        docs, labels = topic_corpus
        reports = cross_validate(docs, labels, k=4)
        avg = sum(r.accuracy for r in reports) / len(reports)
        assert avg > 0.6, f"Average CV accuracy should be > 60%, got {avg:.2%}"

    def test_two_classes_are_always_top_two(self, topic_corpus):
        docs, labels = topic_corpus
        reports = cross_validate(docs, labels, k=4, top_k=2)
        assert all(r.top_k == 2 and r.top_k_accuracy == 1.0 for r in reports)

    def test_classifier_kwargs_are_used(self, topic_corpus):
        docs, labels = topic_corpus
        reports = cross_validate(docs, labels, k=2, classifier_kwargs={"smoothing": 0.5})
        assert len(reports) == 2

    def test_folds_without_test_documents_are_skipped(self):
        reports = cross_validate(
            ["good", "bad"], ["pos", "neg"], k=3, classifier_kwargs={"tokenizer": str.split},
        )
        assert len(reports) == 2

    def test_empty_training_split_cannot_train(self):
        # k=2 with one document leaves the other fold's training split empty
        with pytest.raises(NotTrainedError):
            cross_validate(["only"], ["x"], k=2, classifier_kwargs={"tokenizer": str.split})

    def test_mismatched_lengths_raises(self):
        with pytest.raises(ValueError, match="same length"):
            cross_validate(["a"], ["x", "y"], k=2)


class TestAccuracyScore:
    def test_training_accuracy(self, pets_classifier):
        assert accuracy_score(pets_classifier, ["love", "hate"], ["pos", "neg"]) == 1.0

    def test_untrained_raises(self):
        with pytest.raises(NotTrainedError):
            accuracy_score(BayesClassifier(), ["x"], ["y"])
