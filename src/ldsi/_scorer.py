"""LdsiScorer: configured entry point for single and batch scoring."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, Sequence

from ._cleaner import Cleaner
from ._config import DEFAULT_CONFIG, LdsiConfig
from ._entropy import entropy_from_tokens, tokenize
from ._errors import LdsiError, LdsiInputError
from ._formula import compute_ldsi
from ._ncd import compute_ncd
from ._topology import build_graph_and_metrics
from ._types import (
    BatchOutcome,
    CompressionMeasurement,
    EntropyMeasurement,
    LdsiResult,
    TextSample,
    TopologyMetrics,
)

logger = logging.getLogger(__name__)

TextInput = str | bytes | TextSample


class LdsiScorer:
    """Holds one configuration and scores text pairs with it.

    Scoring is pure: the scorer keeps no state between calls, so one
    instance may be shared across threads.
    """

    __slots__ = ("_config", "_cleaner")

    def __init__(self, config: LdsiConfig | None = None) -> None:
        self._config = config if config is not None else DEFAULT_CONFIG
        self._cleaner = Cleaner(self._config.cleaner) if self._config.clean else None

    @property
    def config(self) -> LdsiConfig:
        return self._config

    def tokens(self, text: TextInput) -> list[str]:
        """Token sequence fed to entropy and topology for this config."""
        if self._cleaner is None:
            return tokenize(text)
        return self._cleaner.tokens(TextSample.coerce(text).text)

    # -- Public scoring API --

    def score(self, text_a: TextInput, text_b: TextInput) -> LdsiResult:
        """Score test text B against reference text A."""
        cfg = self._config
        return compute_ldsi(
            text_a, text_b, cfg.coefficients,
            thresholds=cfg.thresholds,
            strategy=cfg.strategy,
            tokens_a=self.tokens(text_a),
            tokens_b=self.tokens(text_b),
        )

    def _score_one(self, index: int, pair: tuple[TextInput, TextInput]) -> BatchOutcome:
        try:
            if not isinstance(pair, (tuple, list)) or len(pair) != 2:
                raise LdsiInputError(f"item {index} is not an (A, B) pair")
            return BatchOutcome(index=index, result=self.score(pair[0], pair[1]))
        except LdsiError as exc:
            logger.warning("Batch item %d failed: %s", index, exc)
            return BatchOutcome(index=index, error=exc)

    def score_batch(
        self,
        pairs: Iterable[tuple[TextInput, TextInput]],
        *,
        workers: int = 1,
    ) -> list[BatchOutcome]:
        """Score many pairs; a failing pair never aborts the batch.

        Outcomes come back in input order. With workers > 1 pairs are
        dispatched to a thread pool; results match the sequential run.
        """
        items: Sequence[tuple[TextInput, TextInput]] = list(pairs)
        if workers <= 1 or len(items) <= 1:
            outcomes = [self._score_one(i, p) for i, p in enumerate(items)]
        else:
            with ThreadPoolExecutor(max_workers=workers) as pool:
                outcomes = list(pool.map(
                    self._score_one, range(len(items)), items,
                ))
        failed = sum(1 for o in outcomes if not o.ok)
        logger.info("Scored batch of %d pairs (%d failed)", len(outcomes), failed)
        return outcomes

    # -- Single-signal API --

    def ncd(self, text_a: TextInput, text_b: TextInput) -> CompressionMeasurement:
        return compute_ncd(text_a, text_b)

    def entropy(self, text: TextInput) -> EntropyMeasurement:
        return entropy_from_tokens(self.tokens(text))

    def topology(self, text: TextInput) -> TopologyMetrics:
        return build_graph_and_metrics(self.tokens(text))
