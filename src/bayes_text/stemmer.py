"""Tokenization and stemming of raw text into ordered word stems.

The classifier consumes text only through ``tokenize_and_stem``: raw text in,
an ordered list of normalized stems out. Stemming is delegated to the
Snowball stemmers shipped with NLTK, so any Snowball language works; stop
word lists are built in for English and Russian.

Example::

    stemmer = Stemmer("english")
    stemmer.tokenize_and_stem("I loved the cats")   # ['love', 'cat']
"""

from __future__ import annotations

import re
import unicodedata
from functools import lru_cache
from typing import Iterable, Optional

from nltk.stem.snowball import SnowballStemmer

# ---------------------------------------------------------------------------
# Stop words
# ---------------------------------------------------------------------------

ENGLISH_STOP_WORDS: frozenset[str] = frozenset({
    "a", "an", "the", "and", "or", "but", "in", "on", "at", "to", "for",
    "of", "with", "by", "from", "as", "is", "was", "are", "were", "be",
    "been", "being", "have", "has", "had", "do", "does", "did", "will",
    "would", "could", "should", "may", "might", "shall", "can", "must",
    "so", "if", "then", "than", "that", "this", "these", "those", "it",
    "its", "he", "she", "they", "them", "their", "his", "her", "our",
    "your", "we", "you", "i", "me", "my", "who", "whom", "which", "what",
    "where", "when", "how", "all", "each", "both", "some", "such", "any",
    "own", "same", "just", "about", "into", "up", "out", "here", "there",
})

RUSSIAN_STOP_WORDS: frozenset[str] = frozenset({
    "и", "в", "во", "не", "что", "он", "на", "я", "с", "со", "как", "а",
    "то", "все", "она", "так", "его", "но", "да", "ты", "к", "у", "же",
    "вы", "за", "бы", "по", "ее", "её", "мне", "есть", "от", "меня", "еще",
    "ещё", "о", "из", "ему", "уже", "или", "ни", "быть", "был", "была",
    "было", "были", "будет", "до", "вас", "ли", "если", "нибудь",
    "опять", "уж", "вам", "там", "потом", "себя", "ничего", "ей", "они",
    "тут", "где", "надо", "ней", "для", "мы", "тебя", "их", "чем",
    "сам", "чтоб", "без", "будто", "чего", "раз", "тоже", "себе", "под",
    "ж", "тогда", "кто", "этот", "того", "потому", "этого", "какой",
    "совсем", "ним", "здесь", "этом", "один", "почти", "мой", "тем",
    "чтобы", "нее", "куда", "зачем", "всех", "можно", "при",
    "об", "другой", "после", "над", "больше", "тот", "через", "эти",
    "нас", "про", "всего", "них", "какая", "много", "разве", "три",
    "эту", "моя", "впрочем", "свою", "этой", "перед", "иногда", "лучше",
    "чуть", "том", "нельзя", "такой", "им", "более", "всегда", "конечно",
    "всю", "между", "это", "также",
})

_STOP_WORDS_BY_LANGUAGE: dict[str, frozenset[str]] = {
    "english": ENGLISH_STOP_WORDS,
    "russian": RUSSIAN_STOP_WORDS,
}

# Runs of letters and digits; underscores and punctuation split tokens.
_TOKEN_RE = re.compile(r"[^\W_]+")

_CHAR_FOLDS: dict[str, str] = {
    "“": '"',
    "”": '"',
    "«": '"',
    "»": '"',
    "‘": "'",
    "’": "'",
    "–": "-",
    "—": "-",
    "…": "...",
    "\xa0": " ",
}


# ---------------------------------------------------------------------------
# Stemmer
# ---------------------------------------------------------------------------

class Stemmer:
    """Tokenizer and Snowball stemmer for a single language.

    Instances are callable, so they can be passed anywhere a
    ``Callable[[str], list[str]]`` tokenizer is expected.

    Args:
        language: Snowball language name (``"english"``, ``"russian"``, ...).
        keep_stops: Keep stop words instead of dropping them.
        stop_words: Explicit stop word collection; overrides the built-in
            list for the language.

    Raises:
        ValueError: If NLTK has no Snowball stemmer for ``language``.
    """

    def __init__(
        self,
        language: str = "english",
        keep_stops: bool = False,
        stop_words: Optional[Iterable[str]] = None,
    ) -> None:
        self.language = language.lower()
        self.keep_stops = keep_stops
        self._stemmer = SnowballStemmer(self.language)
        if stop_words is not None:
            self.stop_words = frozenset(w.lower() for w in stop_words)
        else:
            self.stop_words = _STOP_WORDS_BY_LANGUAGE.get(self.language, frozenset())

    def __repr__(self) -> str:
        return f"Stemmer(language={self.language!r}, keep_stops={self.keep_stops!r})"

    def __call__(self, text: str) -> list[str]:
        return self.tokenize_and_stem(text)

    @staticmethod
    def normalize(text: str) -> str:
        """NFC-normalize text and fold typographic punctuation to ASCII."""
        text = unicodedata.normalize("NFC", text)
        for char, replacement in _CHAR_FOLDS.items():
            text = text.replace(char, replacement)
        return text

    def tokenize(self, text: str) -> list[str]:
        """Split text into lowercase word tokens, preserving order."""
        if not text:
            return []
        return [m.group().lower() for m in _TOKEN_RE.finditer(self.normalize(text))]

    def stem(self, word: str) -> str:
        """Return the stem of a single word."""
        return self._stemmer.stem(word)

    def tokenize_and_stem(self, text: str) -> list[str]:
        """Tokenize text, drop stop words (unless kept) and stem each token."""
        tokens = self.tokenize(text)
        if not self.keep_stops:
            tokens = [t for t in tokens if t not in self.stop_words]
        return [self.stem(t) for t in tokens]


@lru_cache(maxsize=None)
def _default_stemmer(language: str) -> Stemmer:
    return Stemmer(language)


def tokenize_and_stem(text: str, language: str = "english") -> list[str]:
    """Tokenize and stem text with the default stemmer for ``language``."""
    return _default_stemmer(language.lower()).tokenize_and_stem(text)


def supported_languages() -> tuple[str, ...]:
    """Languages with a Snowball stemmer available."""
    return tuple(SnowballStemmer.languages)
