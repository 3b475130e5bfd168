"""Shared test fixtures for bayes-text-classifier tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from bayes_text.classifier import BayesClassifier
from bayes_text.config import KEEP_STOPS_ENV, LANGUAGE_ENV, SMOOTHING_ENV

SPORT_DOCS = [
    "The football team won the match with a late goal",
    "Our team scored a goal in the final minute of the match",
    "The coach praised the football players after the match",
    "A penalty goal decided the football championship",
    "The players trained hard before the championship match",
    "Fans cheered as the team lifted the championship trophy",
    "The striker scored twice and the team celebrated the goal",
    "The referee stopped the match after a football injury",
]

POLITICS_DOCS = [
    "The minister announced a new election date",
    "Parliament voted on the budget proposed by the minister",
    "Voters went to the polls in the national election",
    "The opposition party criticised the government budget",
    "The government minister resigned before the election",
    "Parliament passed the law after a long vote",
    "The election campaign focused on the government budget",
    "Party leaders debated in parliament about the vote",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep BAYES_TEXT_* settings from the host environment out of tests."""
    for name in (LANGUAGE_ENV, SMOOTHING_ENV, KEEP_STOPS_ENV):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def split_classifier() -> BayesClassifier:
    """Classifier that tokenizes on whitespace only, for exact arithmetic."""
    return BayesClassifier(tokenizer=str.split)


@pytest.fixture
def pets_classifier(split_classifier: BayesClassifier) -> BayesClassifier:
    """Trained on two positive and two negative pet sentences."""
    split_classifier.add_documents(["love cats", "love dogs"], "pos")
    split_classifier.add_documents(["hate cats", "hate dogs"], "neg")
    split_classifier.train()
    return split_classifier


@pytest.fixture
def topic_corpus() -> tuple[list[str], list[str]]:
    """Two-topic English corpus with distinctive vocabulary."""
    docs = SPORT_DOCS + POLITICS_DOCS
    labels = ["sport"] * len(SPORT_DOCS) + ["politics"] * len(POLITICS_DOCS)
    return docs, labels


@pytest.fixture
def corpus_json(tmp_path: Path) -> Path:
    """JSON corpus file mapping labels to documents."""
    path = tmp_path / "corpus.json"
    path.write_text(json.dumps({
        "pos": ["i love cats", "i love dogs"],
        "neg": ["i hate cats", "i hate dogs"],
    }), encoding="utf-8")
    return path


@pytest.fixture
def corpus_tsv(tmp_path: Path) -> Path:
    """Tab-separated corpus file with the two-topic corpus."""
    path = tmp_path / "corpus.tsv"
    lines = ["# label\ttext"]
    lines += [f"sport\t{doc}" for doc in SPORT_DOCS]
    lines += [f"politics\t{doc}" for doc in POLITICS_DOCS]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path
