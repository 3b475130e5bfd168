"""Loading labeled document corpora from disk.

Supported formats:

- ``.json``: either an object mapping each label to a list of documents,
  or a list of ``{"label": ..., "text": ...}`` objects.
- ``.tsv`` / ``.txt``: one ``label<TAB>text`` pair per line. Blank lines and
  lines starting with ``#`` are skipped.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from .classifier import BayesClassifier
from .exceptions import CorpusFormatError

logger = logging.getLogger(__name__)

JSON_EXTENSIONS: tuple[str, ...] = (".json",)
TABULAR_EXTENSIONS: tuple[str, ...] = (".tsv", ".txt")


@dataclass
class LabeledCorpus:
    """Parallel lists of documents and their labels."""

    documents: list[str] = field(default_factory=list)
    labels: list[str] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.documents)

    def add(self, text: str, label: str) -> None:
        self.documents.append(text)
        self.labels.append(label)

    @property
    def labels_set(self) -> set[str]:
        return set(self.labels)

    def by_label(self) -> dict[str, list[str]]:
        """Group documents by label, keeping first-seen label order."""
        grouped: dict[str, list[str]] = {}
        for text, label in zip(self.documents, self.labels):
            grouped.setdefault(label, []).append(text)
        return grouped


def load_corpus(path: str | Path) -> LabeledCorpus:
    """Read a labeled corpus from a JSON or tab-separated file.

    Raises:
        FileNotFoundError: If the file does not exist.
        CorpusFormatError: If the extension is unsupported or the content
            is malformed.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    suffix = path.suffix.lower()
    text = path.read_text(encoding="utf-8")

    if suffix in JSON_EXTENSIONS:
        corpus = _parse_json(text, path)
    elif suffix in TABULAR_EXTENSIONS:
        corpus = _parse_tabular(text, path)
    else:
        raise CorpusFormatError(
            f"Unsupported corpus extension '{path.suffix}'. "
            f"Supported: {JSON_EXTENSIONS + TABULAR_EXTENSIONS}"
        )

    logger.debug("Loaded %d documents (%d labels) from %s", len(corpus), len(corpus.labels_set), path)
    return corpus


def _parse_json(text: str, path: Path) -> LabeledCorpus:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise CorpusFormatError(f"Invalid JSON in {path}: {e}") from e

    corpus = LabeledCorpus()
    if isinstance(data, dict):
        for label, docs in data.items():
            if not isinstance(docs, list) or not all(isinstance(d, str) for d in docs):
                raise CorpusFormatError(f"Label {label!r} in {path} must map to a list of strings")
            for doc in docs:
                corpus.add(doc, label)
    elif isinstance(data, list):
        for i, item in enumerate(data):
            if not isinstance(item, dict) or "label" not in item or "text" not in item:
                raise CorpusFormatError(f"Entry {i} in {path} needs 'label' and 'text' keys")
            corpus.add(str(item["text"]), str(item["label"]))
    else:
        raise CorpusFormatError(f"{path} must contain a JSON object or list")
    return corpus


def _parse_tabular(text: str, path: Path) -> LabeledCorpus:
    corpus = LabeledCorpus()
    for line_no, line in enumerate(text.splitlines(), 1):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        label, sep, doc = stripped.partition("\t")
        if not sep or not label.strip():
            raise CorpusFormatError(f"{path}:{line_no}: expected 'label<TAB>text'")
        corpus.add(doc.strip(), label.strip())
    return corpus


def feed(classifier: BayesClassifier, corpus: LabeledCorpus) -> None:
    """Add every corpus document to the classifier without training it."""
    for text, label in zip(corpus.documents, corpus.labels):
        classifier.add_document(text, label)
