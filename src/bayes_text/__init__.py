"""Bayes Text Classifier -- Naive Bayes over stemmed bag-of-words features."""

__version__ = "0.1.0"

from .classifier import BayesClassifier, Classification, Document
from .config import Settings
from .corpus import LabeledCorpus, feed, load_corpus
from .evaluation import (
    EvaluationReport,
    RankedPrediction,
    accuracy_score,
    cross_validate,
    evaluate,
    fold_indices,
)
from .exceptions import BayesTextError, CorpusFormatError, NotTrainedError
from .stemmer import Stemmer, tokenize_and_stem

__all__ = [
    # Core
    "BayesClassifier",
    "Classification",
    "Document",
    # Tokenization
    "Stemmer",
    "tokenize_and_stem",
    # Configuration
    "Settings",
    # Corpora
    "LabeledCorpus",
    "load_corpus",
    "feed",
    # Evaluation
    "RankedPrediction",
    "EvaluationReport",
    "evaluate",
    "accuracy_score",
    "fold_indices",
    "cross_validate",
    # Errors
    "BayesTextError",
    "NotTrainedError",
    "CorpusFormatError",
]
