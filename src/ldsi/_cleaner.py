"""Deterministic text cleaning: normalize, filter stop words, optional stemming."""

from __future__ import annotations

import math
import re
import unicodedata
from collections import Counter
from dataclasses import dataclass
from enum import Enum

import Stemmer

from ._errors import LdsiConfigError
from ._stop_words import ENGLISH_STOP_WORDS, FRENCH_STOP_WORDS

_NUMBER_RE = re.compile(r"\d+")


class Language(str, Enum):
    FRENCH = "french"
    ENGLISH = "english"
    BOTH = "both"


_STOP_WORDS_BY_LANGUAGE = {
    Language.FRENCH: FRENCH_STOP_WORDS,
    Language.ENGLISH: ENGLISH_STOP_WORDS,
    Language.BOTH: FRENCH_STOP_WORDS | ENGLISH_STOP_WORDS,
}


@dataclass(slots=True, frozen=True)
class CleanerConfig:
    remove_stopwords: bool = True
    lowercase: bool = True
    remove_punctuation: bool = True
    remove_numbers: bool = True
    normalize_unicode: bool = True
    language: Language = Language.BOTH
    min_word_length: int = 2
    # Zipf filter: drop words whose count >= max(3, ceil(total * threshold))
    dynamic_stopwords: bool = False
    dynamic_stopwords_threshold: float = 0.01
    stemmer: str | None = None   # Snowball algorithm name, e.g. "english"

    def __post_init__(self) -> None:
        try:
            Language(self.language)
        except ValueError:
            raise LdsiConfigError(f"unknown cleaner language {self.language!r}") from None
        if (
            isinstance(self.min_word_length, bool)
            or not isinstance(self.min_word_length, int)
            or self.min_word_length < 1
        ):
            raise LdsiConfigError(
                f"min_word_length must be an integer >= 1, got {self.min_word_length!r}"
            )
        threshold = self.dynamic_stopwords_threshold
        if (
            isinstance(threshold, bool)
            or not isinstance(threshold, (int, float))
            or not math.isfinite(threshold)
            or not 0.0 < threshold <= 1.0
        ):
            raise LdsiConfigError(
                f"dynamic_stopwords_threshold must be in (0, 1], got {threshold!r}"
            )
        if self.stemmer is not None:
            algorithms = Stemmer.algorithms()
            if self.stemmer not in algorithms:
                choices = ", ".join(sorted(algorithms))
                raise LdsiConfigError(
                    f"unknown stemmer {self.stemmer!r} (expected one of {choices})"
                )


class Cleaner:
    __slots__ = ("_config", "_stop_words", "_stemmer")

    def __init__(self, config: CleanerConfig | None = None) -> None:
        self._config = config if config is not None else CleanerConfig()
        self._stop_words = _STOP_WORDS_BY_LANGUAGE[Language(self._config.language)]
        self._stemmer = (
            Stemmer.Stemmer(self._config.stemmer)
            if self._config.stemmer else None
        )

    @property
    def config(self) -> CleanerConfig:
        return self._config

    def normalize(self, text: str) -> str:
        """Phase 1: Unicode NFC, lowercase, strip numbers and punctuation."""
        cfg = self._config
        if cfg.normalize_unicode:
            text = unicodedata.normalize("NFC", text)
        if cfg.lowercase:
            text = text.lower()
        if cfg.remove_numbers:
            text = _NUMBER_RE.sub(" ", text)
        if cfg.remove_punctuation:
            text = "".join(
                c if c.isalpha() or c.isspace() else " " for c in text
            )
        return text

    def _dynamic_stop_words(self, words: list[str]) -> set[str]:
        total = len(words)
        if total == 0:
            return set()
        min_count = max(
            math.ceil(total * self._config.dynamic_stopwords_threshold), 3,
        )
        return {w for w, count in Counter(words).items() if count >= min_count}

    def tokens(self, text: str) -> list[str]:
        """Phase 2: split normalized text and filter it into a token sequence."""
        cfg = self._config
        words = [
            w for w in self.normalize(text).split()
            if len(w) >= cfg.min_word_length
        ]

        dynamic = self._dynamic_stop_words(words) if cfg.dynamic_stopwords else set()
        kept = [
            w for w in words
            if not (cfg.remove_stopwords and w in self._stop_words)
            and w not in dynamic
        ]

        if self._stemmer is not None:
            kept = self._stemmer.stemWords(kept)
        return kept

    def clean(self, text: str) -> str:
        """Run the full pipeline and rejoin tokens with single spaces."""
        return " ".join(self.tokens(text))


def clean_text(text: str, config: CleanerConfig | None = None) -> str:
    return Cleaner(config).clean(text)


def clean_tokens(text: str, config: CleanerConfig | None = None) -> list[str]:
    return Cleaner(config).tokens(text)


def extract_semantic_core(text: str) -> str:
    """Keep only longer, content-bearing words (length >= 4)."""
    return clean_text(text, CleanerConfig(min_word_length=4))
