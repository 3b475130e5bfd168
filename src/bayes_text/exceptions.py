"""Exceptions raised by the bayes_text package."""

from __future__ import annotations


class BayesTextError(Exception):
    """Base class for all bayes_text errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class NotTrainedError(BayesTextError, RuntimeError):
    """Raised when classifying with a model that has no trained classes."""

    def __init__(self, message: str = "Classifier not trained. Call train() first.") -> None:
        super().__init__(message)


class CorpusFormatError(BayesTextError, ValueError):
    """Raised when a labeled corpus file cannot be parsed."""
