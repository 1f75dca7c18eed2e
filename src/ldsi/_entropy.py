"""Shannon entropy and lexical diversity of a token sequence."""

from __future__ import annotations

import math
import re
from collections import Counter
from typing import Iterable

from ._types import EntropyMeasurement, TextSample

# Runs of letters in any script; digits, underscores and punctuation split.
_WORD_RE = re.compile(r"[^\W\d_]+")

# Ratio reported when H(A) == 0 but H(B) > 0: B gained information that A
# never had. Yields an entropy term of +1.
ZERO_REFERENCE_RATIO: float = 2.0

ENTROPY_TERM_MIN: float = -1.0
ENTROPY_TERM_MAX: float = 2.0


def tokenize(text: str | bytes | TextSample) -> list[str]:
    """Lowercase, split on non-letters, drop single-letter fragments."""
    sample = TextSample.coerce(text)
    return [w for w in _WORD_RE.findall(sample.text.lower()) if len(w) > 1]


def shannon_entropy(counts: Iterable[int], total: int) -> float:
    """H = -sum(p * log2 p) in bits; 0 for an empty distribution."""
    if total <= 0:
        return 0.0
    terms = []
    for count in counts:
        if count > 0:
            p = count / total
            terms.append(-p * math.log2(p))
    # fsum is exactly rounded, so the result does not depend on term order
    return math.fsum(terms)


def entropy_from_tokens(tokens: list[str]) -> EntropyMeasurement:
    total = len(tokens)
    frequencies = Counter(tokens)
    unique = len(frequencies)
    hapax = sum(1 for c in frequencies.values() if c == 1)

    return EntropyMeasurement(
        h=shannon_entropy(frequencies.values(), total),
        ttr=unique / total if total > 0 else 0.0,
        hapax_ratio=hapax / unique if unique > 0 else 0.0,
        total_tokens=total,
        unique_tokens=unique,
        hapax_count=hapax,
    )


def compute_entropy(text: str | bytes | TextSample) -> EntropyMeasurement:
    """Tokenize text and measure its lexical diversity."""
    return entropy_from_tokens(tokenize(text))


def compute_ngram_entropy(text: str | bytes | TextSample, n: int = 2) -> float:
    """Shannon entropy over the n-gram distribution of text's tokens."""
    if n < 1:
        raise ValueError(f"n must be >= 1, got {n}")
    tokens = tokenize(text)
    if len(tokens) < n:
        return 0.0
    ngrams = Counter(
        tuple(tokens[i:i + n]) for i in range(len(tokens) - n + 1)
    )
    return shannon_entropy(ngrams.values(), len(tokens) - n + 1)


def entropy_ratio(h_a: float, h_b: float) -> float:
    """H(B) / H(A), total over H(A) == 0.

    Both zero gives 1.0 (no change); only H(A) zero gives
    ZERO_REFERENCE_RATIO.
    """
    if h_a > 0.0:
        return h_b / h_a
    if h_b > 0.0:
        return ZERO_REFERENCE_RATIO
    return 1.0


def entropy_term(ratio: float) -> float:
    """Centered entropy signal: clamp(ratio - 1, -1, 2)."""
    return min(max(ratio - 1.0, ENTROPY_TERM_MIN), ENTROPY_TERM_MAX)
