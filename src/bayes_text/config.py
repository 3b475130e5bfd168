"""Runtime settings read from the environment (and an optional ``.env``)."""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from .classifier import BayesClassifier
from .stemmer import Stemmer

LANGUAGE_ENV = "BAYES_TEXT_LANGUAGE"
SMOOTHING_ENV = "BAYES_TEXT_SMOOTHING"
KEEP_STOPS_ENV = "BAYES_TEXT_KEEP_STOPS"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})


@dataclass
class Settings:
    """Classifier configuration.

    Attributes:
        language: Snowball stemmer language.
        smoothing: Additive smoothing constant (must be positive).
        keep_stops: Keep stop words when tokenizing.
    """

    language: str = "english"
    smoothing: float = 1.0
    keep_stops: bool = False

    def __post_init__(self) -> None:
        if self.smoothing <= 0:
            raise ValueError(f"smoothing must be positive, got {self.smoothing}")

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from ``BAYES_TEXT_*`` environment variables.

        Raises:
            ValueError: If a variable holds an unparseable value.
        """
        load_dotenv()

        language = os.getenv(LANGUAGE_ENV) or cls.language

        raw_smoothing = os.getenv(SMOOTHING_ENV)
        try:
            smoothing = float(raw_smoothing) if raw_smoothing else cls.smoothing
        except ValueError:
            raise ValueError(f"{SMOOTHING_ENV} must be a number, got {raw_smoothing!r}") from None

        raw_keep = (os.getenv(KEEP_STOPS_ENV) or "").strip().lower()
        if raw_keep in _TRUE_VALUES:
            keep_stops = True
        elif raw_keep in _FALSE_VALUES:
            keep_stops = False
        else:
            raise ValueError(f"{KEEP_STOPS_ENV} must be a boolean, got {raw_keep!r}")

        return cls(language=language.lower(), smoothing=smoothing, keep_stops=keep_stops)

    def build_stemmer(self) -> Stemmer:
        return Stemmer(self.language, keep_stops=self.keep_stops)

    def build_classifier(self) -> BayesClassifier:
        """Return an empty classifier configured from these settings."""
        return BayesClassifier(tokenizer=self.build_stemmer(), smoothing=self.smoothing)

    def classifier_kwargs(self) -> dict:
        return {"tokenizer": self.build_stemmer(), "smoothing": self.smoothing}
