"""Naive Bayes text classifier over bag-of-words presence features.

Documents are stemmed into ordered word stems and every stem joins a
vocabulary that only ever grows. Training folds each not-yet-trained
document into per-class feature counts, using the document's presence
vector against the vocabulary *as it stands at training time*; vectors are
never recomputed for documents that were already trained.

Scoring follows Bayes' rule with the evidence term dropped, since it is the
same for every class and does not change the ranking::

    P(c|d) ~ P(c) * P(d|c)

``P(d|c)`` is accumulated in log space to avoid arithmetic underflow and is
converted back with ``exp`` before multiplying by the prior ``P(c)``.

Example::

    classifier = BayesClassifier()
    classifier.add_documents(["i love cats", "i love dogs"], "pos")
    classifier.add_documents(["i hate cats", "i hate dogs"], "neg")
    classifier.train()

    classifier.classify("i love parrots")   # "pos"
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Hashable, Mapping, Sequence
from dataclasses import dataclass
from typing import Optional, Union

from .exceptions import NotTrainedError
from .stemmer import Stemmer

logger = logging.getLogger(__name__)

Tokenizer = Callable[[str], Sequence[str]]

# A document is raw text or an already stemmed, ordered sequence of stems.
Doc = Union[str, Sequence[str]]

# Positional 0/1 vector aligned to the vocabulary, or a keyed mapping whose
# values name the features that are present.
Features = Union[Sequence[int], Mapping[Hashable, Hashable]]


def _is_document(doc: object) -> bool:
    """True for non-empty text or a non-empty sequence of string stems."""
    if isinstance(doc, str):
        return bool(doc)
    if isinstance(doc, (bytes, bytearray)) or not isinstance(doc, Sequence):
        return False
    return bool(doc) and all(isinstance(stem, str) for stem in doc)


@dataclass(frozen=True)
class Document:
    """A labeled training document, stored as its ordered stems."""

    label: str
    stems: tuple[str, ...]


@dataclass(frozen=True)
class Classification:
    """Unnormalized posterior score of one class for a document."""

    label: str
    value: float

    def to_dict(self) -> dict:
        return {"label": self.label, "value": self.value}


class BayesClassifier:
    """Incrementally trained Naive Bayes classifier with additive smoothing.

    Args:
        tokenizer: Callable mapping raw text to an ordered sequence of
            stems. Defaults to an English :class:`Stemmer`.
        smoothing: Additive smoothing constant, fixed for the lifetime of
            the model. Unseen features are counted with this value.

    Raises:
        ValueError: If ``smoothing`` is not positive.
    """

    def __init__(
        self,
        tokenizer: Optional[Tokenizer] = None,
        smoothing: float = 1.0,
    ) -> None:
        if smoothing <= 0:
            raise ValueError(f"smoothing must be positive, got {smoothing}")

        self._tokenizer: Tokenizer = tokenizer or Stemmer()
        self._smoothing = smoothing

        self._documents: list[Document] = []
        # Dict keys keep insertion order; the value is the feature index.
        self._vocabulary: dict[str, int] = {}
        self._class_features: dict[str, dict[Hashable, float]] = {}
        self._class_totals: dict[str, float] = {}
        self._total_examples = 1
        self._last_trained = 0

    def __repr__(self) -> str:
        return (
            f"BayesClassifier(documents={len(self._documents)}, "
            f"vocabulary={len(self._vocabulary)}, classes={self.classes})"
        )

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def smoothing(self) -> float:
        return self._smoothing

    @property
    def documents(self) -> tuple[Document, ...]:
        return tuple(self._documents)

    @property
    def vocabulary(self) -> tuple[str, ...]:
        """Known stems in feature-index order."""
        return tuple(self._vocabulary)

    @property
    def classes(self) -> list[str]:
        """Trained class labels in the order they were first seen."""
        return list(self._class_totals)

    @property
    def class_totals(self) -> dict[str, float]:
        return dict(self._class_totals)

    @property
    def class_features(self) -> dict[str, dict[Hashable, float]]:
        return {label: dict(counts) for label, counts in self._class_features.items()}

    @property
    def total_examples(self) -> int:
        return self._total_examples

    @property
    def last_trained(self) -> int:
        """Index of the first document not yet folded into the counts."""
        return self._last_trained

    @property
    def is_trained(self) -> bool:
        return bool(self._class_totals)

    # ------------------------------------------------------------------
    # Documents and vocabulary
    # ------------------------------------------------------------------

    def add_document(self, doc: Doc, label: str) -> None:
        """Add a labeled document and grow the vocabulary with its stems.

        Empty or malformed documents are skipped without error. Strings are
        stemmed with the configured tokenizer; sequences of strings are taken
        as stems already. Bytes and sequences holding non-strings are skipped.
        """
        if not _is_document(doc):
            logger.debug("Skipping empty or malformed document for label %r", label)
            return

        stems = self._to_stems(doc)
        self._documents.append(Document(label=label, stems=stems))

        for stem in stems:
            if stem not in self._vocabulary:
                self._vocabulary[stem] = len(self._vocabulary)

        logger.debug(
            "Added document %d (%r, %d stems); vocabulary size %d",
            len(self._documents) - 1, label, len(stems), len(self._vocabulary),
        )

    def add_documents(self, docs: Sequence[Doc], label: str) -> None:
        """Add every document in ``docs`` under the same label."""
        for doc in docs:
            self.add_document(doc, label)

    def doc_to_features(self, doc: Doc) -> list[int]:
        """Return the presence vector of ``doc`` over the current vocabulary.

        Entry ``i`` is 1 if the document contains vocabulary stem ``i``,
        otherwise 0. Stems the vocabulary has never seen are ignored.
        """
        present = set(self._to_stems(doc))
        return [1 if stem in present else 0 for stem in self._vocabulary]

    def _to_stems(self, doc: Doc) -> tuple[str, ...]:
        if isinstance(doc, str):
            return tuple(self._tokenizer(doc))
        return tuple(doc)

    # ------------------------------------------------------------------
    # Training
    # ------------------------------------------------------------------

    def train(self) -> None:
        """Fold every document added since the last call into the counts."""
        start = self._last_trained
        for document in self._documents[start:]:
            features = self.doc_to_features(document.stems)
            self.add_example(features, document.label)
            self._last_trained += 1

        if self._last_trained > start:
            logger.debug(
                "Trained %d document(s); %d classes, vocabulary size %d",
                self._last_trained - start, len(self._class_totals), len(self._vocabulary),
            )

    def add_example(self, features: Features, label: str) -> None:
        """Increment the class counts for one example.

        ``features`` is either a positional 0/1 vector, in which case every
        nonzero index is counted, or a mapping, in which case each of its
        values is counted as a feature key. A feature seen for the first
        time in a class starts at ``1 + smoothing``.
        """
        if label not in self._class_features:
            self._class_features[label] = {}
            self._class_totals[label] = 1

        self._total_examples += 1
        counts = self._class_features[label]

        if isinstance(features, Mapping):
            for key in features.values():
                self._increment(counts, key)
        else:
            self._class_totals[label] += 1
            for index, value in enumerate(features):
                if value:
                    self._increment(counts, index)

    def _increment(self, counts: dict[Hashable, float], key: Hashable) -> None:
        if key in counts:
            counts[key] += 1
        else:
            counts[key] = 1 + self._smoothing

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------

    def probability_of_class(self, features: Features, label: str) -> float:
        """Unnormalized posterior ``P(c) * P(d|c)`` of ``label`` for the features.

        Features never seen for the class are counted with the smoothing
        constant. A label that was never trained is scored as a class with
        no counts and the baseline total of 1.
        """
        counts = self._class_features.get(label, {})
        class_total = self._class_totals.get(label, 1)

        if isinstance(features, Mapping):
            present: Sequence[Hashable] = list(features.values())
        else:
            present = [index for index, value in enumerate(features) if value]

        log_likelihood = 0.0
        for key in present:
            count = counts.get(key, self._smoothing)
            log_likelihood += math.log(count / class_total)

        class_ratio = class_total / self._total_examples
        return class_ratio * math.exp(log_likelihood)

    def get_classifications(self, doc: Doc) -> list[Classification]:
        """Score every trained class for ``doc``, best first."""
        features = self.doc_to_features(doc)
        scores = [
            Classification(label=label, value=self.probability_of_class(features, label))
            for label in self._class_features
        ]
        return sorted(scores, key=lambda c: c.value, reverse=True)

    def classify(self, doc: Doc) -> str:
        """Return the most probable class label for ``doc``.

        Raises:
            NotTrainedError: If no class has been trained yet.
        """
        classifications = self.get_classifications(doc)
        if not classifications:
            raise NotTrainedError()

        best = classifications[0]
        logger.debug("Classified document as %r (%.6g)", best.label, best.value)
        return best.label

    def classify_batch(self, docs: Sequence[Doc]) -> list[str]:
        """Classify several documents, preserving input order."""
        if not self.is_trained:
            raise NotTrainedError()
        return [self.classify(doc) for doc in docs]
