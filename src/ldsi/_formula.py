"""Composite lambda formula and verdict classification.

lambda = max(0, alpha * ncd + beta * entropy_term + gamma * topology_score)

Evaluation order is fixed: the three products are formed first, then
summed left to right ((alpha*ncd + beta*entropy_term) + gamma*topology),
then floored at 0. Every intermediate is an IEEE-754 double, so identical
inputs on the same platform give bit-identical output.
"""

from __future__ import annotations

import logging
from typing import Sequence

from ._config import (
    DEFAULT_COEFFICIENTS,
    DEFAULT_STRATEGY,
    DEFAULT_THRESHOLDS,
    LdsiCoefficients,
    TopologyStrategy,
    VerdictThresholds,
    parse_strategy,
)
from ._entropy import entropy_from_tokens, entropy_ratio, entropy_term, tokenize
from ._ncd import compute_ncd
from ._quality import topology_delta, topology_score
from ._topology import build_graph_and_metrics
from ._types import LdsiResult, LdsiSignals, TextSample, Verdict

logger = logging.getLogger(__name__)


def classify(
    lambda_: float, thresholds: VerdictThresholds = DEFAULT_THRESHOLDS,
) -> Verdict:
    """Map a lambda score onto its verdict band (lower bounds inclusive)."""
    if lambda_ < thresholds.zombie:
        return Verdict.ZOMBIE
    if lambda_ < thresholds.rebel:
        return Verdict.REBEL
    if lambda_ < thresholds.architect:
        return Verdict.ARCHITECT
    return Verdict.FOOL


def combine(
    signals: LdsiSignals, coefficients: LdsiCoefficients = DEFAULT_COEFFICIENTS,
) -> float:
    """Fuse the three signals into lambda, floored at 0."""
    ncd_part = coefficients.alpha * signals.ncd
    entropy_part = coefficients.beta * signals.entropy_term
    topology_part = coefficients.gamma * signals.topology_score
    lambda_ = (ncd_part + entropy_part) + topology_part
    return max(lambda_, 0.0)


def compute_ldsi(
    text_a: str | bytes | TextSample,
    text_b: str | bytes | TextSample,
    coefficients: LdsiCoefficients | None = None,
    *,
    thresholds: VerdictThresholds | None = None,
    strategy: TopologyStrategy | str | None = None,
    tokens_a: Sequence[str] | None = None,
    tokens_b: Sequence[str] | None = None,
) -> LdsiResult:
    """Score the divergence of test text B from reference text A.

    Args:
        text_a: Reference text (str or UTF-8 bytes).
        text_b: Test text (str or UTF-8 bytes).
        coefficients: Formula weights. Defaults to DEFAULT_COEFFICIENTS.
        thresholds: Verdict band bounds. Defaults to DEFAULT_THRESHOLDS.
        strategy: Topology signal for the gamma term. Defaults to
            absolute-v2 (structural quality of B).
        tokens_a: Pre-cleaned token sequence for A. When None, A is
            tokenized with the default tokenizer.
        tokens_b: Same for B.

    NCD always runs on the raw bytes, independent of tokenization.

    Raises:
        LdsiInputError: If either text is not str or UTF-8 bytes.
    """
    coef = coefficients if coefficients is not None else DEFAULT_COEFFICIENTS
    bands = thresholds if thresholds is not None else DEFAULT_THRESHOLDS
    chosen = parse_strategy(strategy) if strategy is not None else DEFAULT_STRATEGY

    sample_a = TextSample.coerce(text_a)
    sample_b = TextSample.coerce(text_b)
    toks_a = list(tokens_a) if tokens_a is not None else tokenize(sample_a)
    toks_b = list(tokens_b) if tokens_b is not None else tokenize(sample_b)

    # 1. Compression distance on raw bytes (already damped)
    ncd = compute_ncd(sample_a, sample_b)

    # 2. Lexical diversity
    ent_a = entropy_from_tokens(toks_a)
    ent_b = entropy_from_tokens(toks_b)
    ratio = entropy_ratio(ent_a.h, ent_b.h)
    term = entropy_term(ratio)

    # 3. Topology; both variants are measured, the strategy picks one
    topo_a = build_graph_and_metrics(toks_a)
    topo_b = build_graph_and_metrics(toks_b)
    delta = topology_delta(topo_a, topo_b)

    signals = LdsiSignals(
        ncd=ncd.corrected,
        entropy_term=term,
        topology_score=topology_score(chosen, topo_a, topo_b),
    )
    lambda_ = combine(signals, coef)
    verdict = classify(lambda_, bands)

    logger.debug(
        "ldsi lambda=%.6f verdict=%s ncd=%.6f entropy_term=%.6f "
        "topology=%.6f strategy=%s",
        lambda_, verdict.value, signals.ncd, signals.entropy_term,
        signals.topology_score, chosen.value,
    )

    return LdsiResult(
        lambda_=lambda_,
        verdict=verdict,
        ncd=ncd,
        entropy_a=ent_a,
        entropy_b=ent_b,
        entropy_ratio=ratio,
        entropy_term=term,
        topology_a=topo_a,
        topology_b=topo_b,
        structural_quality=topo_b.structural_quality,
        topology_delta=delta,
        strategy=chosen,
        signals=signals,
        coefficients=coef,
        thresholds=bands,
    )


def compute_signals(
    text_a: str | bytes | TextSample,
    text_b: str | bytes | TextSample,
    *,
    strategy: TopologyStrategy | str | None = None,
    tokens_a: Sequence[str] | None = None,
    tokens_b: Sequence[str] | None = None,
) -> LdsiSignals:
    """Coefficient-independent signals of a pair, for recombination."""
    return compute_ldsi(
        text_a, text_b,
        strategy=strategy, tokens_a=tokens_a, tokens_b=tokens_b,
    ).signals
