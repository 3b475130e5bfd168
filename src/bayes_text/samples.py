"""Built-in Russian sentiment samples used by the ``demo`` command."""

from __future__ import annotations

POSITIVE = "positive"
NEGATIVE = "negative"

SENTIMENT_SAMPLES: dict[str, list[str]] = {
    POSITIVE: [
        "Я люблю играть.",
        "Тебе и мне интересно вместе гулять",
        "Собака лучший друг человека",
        "Мне нравиться наука",
    ],
    NEGATIVE: [
        "Ты плохой друг",
        "мне ужасно больно",
        "На меня кричала учительница",
        "Мой брат ругал меня сильно",
    ],
}

# Verdicts shown for each class
VERDICTS: dict[str, str] = {
    POSITIVE: "Предложение позитивное",
    NEGATIVE: "Предложение негативное",
}
