"""Evaluation of a Bayes classifier from its ranked classifications.

Every held-out document is scored with ``get_classifications``, so a report
sees the whole ranking rather than only the top label:

- accuracy of the top-ranked class
- top-k accuracy (true class anywhere in the first ``k`` places)
- margin between the two best scores, relative to the best one
- per-class recall and the confusion of true vs. top-ranked labels

Cross-validation deals documents into label-stratified folds and trains a
fresh classifier per fold.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Optional, Sequence

from .classifier import BayesClassifier, Classification, Doc
from .exceptions import NotTrainedError

logger = logging.getLogger(__name__)


@dataclass
class RankedPrediction:
    """The true label of a document next to the classifier's ranking of it."""

    true_label: str
    ranking: list[Classification]

    @property
    def predicted(self) -> str:
        return self.ranking[0].label

    @property
    def correct(self) -> bool:
        return self.predicted == self.true_label

    @property
    def true_rank(self) -> Optional[int]:
        """1-based position of the true label, or None if it was never trained."""
        for position, classification in enumerate(self.ranking, 1):
            if classification.label == self.true_label:
                return position
        return None

    @property
    def margin(self) -> float:
        """How far the best score leads the runner-up, as a fraction of the best.

        1.0 with a single trained class; 0.0 on a tie or when every score
        underflowed to zero.
        """
        if len(self.ranking) < 2:
            return 1.0
        best, runner_up = self.ranking[0].value, self.ranking[1].value
        if best <= 0:
            return 0.0
        return (best - runner_up) / best


@dataclass
class EvaluationReport:
    """Ranking-based metrics over a set of labeled documents."""

    predictions: list[RankedPrediction] = field(default_factory=list)
    top_k: int = 2

    def __len__(self) -> int:
        return len(self.predictions)

    @property
    def accuracy(self) -> float:
        if not self.predictions:
            return 0.0
        return sum(p.correct for p in self.predictions) / len(self.predictions)

    @property
    def top_k_accuracy(self) -> float:
        if not self.predictions:
            return 0.0
        hits = sum(
            1 for p in self.predictions
            if p.true_rank is not None and p.true_rank <= self.top_k
        )
        return hits / len(self.predictions)

    @property
    def mean_margin(self) -> float:
        if not self.predictions:
            return 0.0
        return sum(p.margin for p in self.predictions) / len(self.predictions)

    @property
    def confusion(self) -> dict[str, dict[str, int]]:
        """Counts of ``{true_label: {top_ranked_label: n}}``."""
        table: dict[str, dict[str, int]] = {}
        for p in self.predictions:
            row = table.setdefault(p.true_label, {})
            row[p.predicted] = row.get(p.predicted, 0) + 1
        return table

    @property
    def recall(self) -> dict[str, float]:
        """Share of each true label's documents ranked first correctly."""
        return {
            label: row.get(label, 0) / sum(row.values())
            for label, row in self.confusion.items()
        }

    def to_dict(self) -> dict:
        return {
            "documents": len(self.predictions),
            "accuracy": round(self.accuracy, 4),
            "top_k": self.top_k,
            "top_k_accuracy": round(self.top_k_accuracy, 4),
            "mean_margin": round(self.mean_margin, 4),
            "recall": {label: round(r, 4) for label, r in self.recall.items()},
            "confusion": self.confusion,
        }

    def summary(self) -> str:
        """Plain-text summary of the report."""
        lines = [
            f"Documents: {len(self.predictions)}",
            f"Accuracy: {self.accuracy:.2%}",
            f"Top-{self.top_k} accuracy: {self.top_k_accuracy:.2%}",
            f"Mean margin: {self.mean_margin:.4f}",
        ]
        for label, r in sorted(self.recall.items()):
            lines.append(f"  recall[{label}]: {r:.2%}")
        return "\n".join(lines)


def evaluate(
    classifier: BayesClassifier,
    documents: Sequence[Doc],
    labels: Sequence[str],
    top_k: int = 2,
) -> EvaluationReport:
    """Rank every document with a trained classifier and report the results.

    Raises:
        ValueError: If documents and labels differ in length, or ``top_k < 1``.
        NotTrainedError: If the classifier has no trained classes.
    """
    if len(documents) != len(labels):
        raise ValueError(
            f"documents ({len(documents)}) and labels ({len(labels)}) must have same length"
        )
    if top_k < 1:
        raise ValueError(f"top_k must be at least 1, got {top_k}")
    if not classifier.is_trained:
        raise NotTrainedError()

    predictions = [
        RankedPrediction(true_label=label, ranking=classifier.get_classifications(doc))
        for doc, label in zip(documents, labels)
    ]
    return EvaluationReport(predictions=predictions, top_k=top_k)


def accuracy_score(
    classifier: BayesClassifier,
    documents: Sequence[Doc],
    labels: Sequence[str],
) -> float:
    """Fraction of ``documents`` whose top-ranked class is the true label."""
    return evaluate(classifier, documents, labels).accuracy


# ---------------------------------------------------------------------------
# Cross-Validation
# ---------------------------------------------------------------------------

def fold_indices(
    labels: Sequence[str],
    k: int = 5,
    seed: int = 42,
) -> list[tuple[list[int], list[int]]]:
    """Split document indices into ``k`` label-stratified train/test folds.

    Indices are shuffled, grouped by label (first-seen label order) and then
    dealt to the folds in turn, so each label is spread evenly.

    Raises:
        ValueError: If ``k`` is less than 2.
    """
    if k < 2:
        raise ValueError(f"k must be at least 2, got {k}")

    order = list(range(len(labels)))
    random.Random(seed).shuffle(order)

    label_rank: dict[str, int] = {}
    for label in labels:
        label_rank.setdefault(label, len(label_rank))
    order.sort(key=lambda i: label_rank[labels[i]])

    test_sets: list[list[int]] = [[] for _ in range(k)]
    for position, idx in enumerate(order):
        test_sets[position % k].append(idx)

    folds = []
    for test in test_sets:
        held_out = set(test)
        train = [i for i in range(len(labels)) if i not in held_out]
        folds.append((train, sorted(test)))
    return folds


def cross_validate(
    documents: Sequence[Doc],
    labels: Sequence[str],
    k: int = 5,
    classifier_kwargs: Optional[dict] = None,
    seed: int = 42,
    top_k: int = 2,
) -> list[EvaluationReport]:
    """Run stratified k-fold cross-validation.

    Every fold gets a fresh classifier built from ``classifier_kwargs``; the
    training documents are added one by one and trained in a single pass.
    Folds with no held-out documents are skipped.

    Returns:
        One EvaluationReport per evaluated fold.

    Raises:
        ValueError: If documents and labels differ in length.
        NotTrainedError: If a fold has no training documents.
    """
    if len(documents) != len(labels):
        raise ValueError(
            f"documents ({len(documents)}) and labels ({len(labels)}) must have same length"
        )

    cls_kwargs = classifier_kwargs or {}
    reports: list[EvaluationReport] = []

    for fold_idx, (train_idx, test_idx) in enumerate(fold_indices(labels, k=k, seed=seed)):
        if not test_idx:
            continue

        classifier = BayesClassifier(**cls_kwargs)
        for i in train_idx:
            classifier.add_document(documents[i], labels[i])
        classifier.train()

        report = evaluate(
            classifier,
            [documents[i] for i in test_idx],
            [labels[i] for i in test_idx],
            top_k=top_k,
        )
        logger.debug("Fold %d: accuracy %.4f on %d documents", fold_idx, report.accuracy, len(report))
        reports.append(report)

    return reports
