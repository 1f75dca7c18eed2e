"""Tests for the composite lambda formula and verdict bands."""

import math

import pytest

from ldsi import (
    LdsiCoefficients,
    LdsiConfigError,
    LdsiInputError,
    LdsiSignals,
    TopologyStrategy,
    Verdict,
    VerdictThresholds,
    classify,
    combine,
    compute_ldsi,
    compute_signals,
)

SENTENCE_A = "La temperature est de vingt-cinq degres aujourd'hui."
SENTENCE_B = "La temperature est de 25 degres ce jour."


def test_identical_texts_are_zombie():
    """Identical texts score as ZOMBIE."""
    result = compute_ldsi(SENTENCE_A, SENTENCE_A)
    assert result.ncd.corrected == 0.0
    assert result.entropy_term == 0.0
    assert result.lambda_ < 0.1
    assert result.verdict is Verdict.ZOMBIE


def test_identical_texts_lambda_from_structure_only():
    """With no NCD or entropy change, lambda comes from structure alone."""
    # nine distinct tokens: complete graph, density 0.5, small-world index 1
    result = compute_ldsi(SENTENCE_A, SENTENCE_A)
    expected_sq = math.exp(-1.0) * 0.6
    assert result.structural_quality == pytest.approx(expected_sq)
    assert result.lambda_ == pytest.approx(0.2 * expected_sq)


def test_tiny_response_has_zero_structure():
    """A one-word response has zero structural quality."""
    result = compute_ldsi(SENTENCE_A, "Hi.")
    assert result.structural_quality == 0.0
    assert result.topology_b.node_count < 3
    assert math.isfinite(result.lambda_)


def test_deterministic():
    """Same input, same output."""
    first = compute_ldsi(SENTENCE_A, SENTENCE_B)
    for _ in range(5):
        assert compute_ldsi(SENTENCE_A, SENTENCE_B) == first


def test_lambda_non_negative():
    """A negative weighted sum is floored at 0."""
    coefficients = LdsiCoefficients(alpha=0.0, beta=1.0, gamma=0.0)
    # B much poorer than A drives the entropy term to its floor
    result = compute_ldsi(
        "many different words appear in this rich reference sentence",
        "word",
        coefficients,
    )
    assert result.entropy_term < 0.0
    assert result.lambda_ == 0.0


def test_zero_coefficients():
    """All-zero coefficients give lambda 0."""
    result = compute_ldsi(
        SENTENCE_A, SENTENCE_B, LdsiCoefficients(alpha=0.0, beta=0.0, gamma=0.0),
    )
    assert result.lambda_ == 0.0
    assert result.verdict is Verdict.ZOMBIE


def test_empty_inputs():
    """Two empty inputs are fully damped."""
    result = compute_ldsi("", "")
    assert result.lambda_ == 0.0
    assert result.entropy_ratio == 1.0


def test_signals_match_result():
    """The result exposes the signals lambda was computed from."""
    result = compute_ldsi(SENTENCE_A, SENTENCE_B)
    assert result.signals == compute_signals(SENTENCE_A, SENTENCE_B)
    assert result.signals.ncd == result.ncd.corrected
    assert result.signals.topology_score == result.structural_quality
    assert result.lambda_ == combine(result.signals, result.coefficients)


def test_delta_strategy():
    """delta-v1 feeds the topology delta into the gamma term."""
    result = compute_ldsi(SENTENCE_A, SENTENCE_B, strategy="delta-v1")
    assert result.strategy is TopologyStrategy.DELTA_V1
    assert result.signals.topology_score == result.topology_delta
    # both variants are always reported
    absolute = compute_ldsi(SENTENCE_A, SENTENCE_B)
    assert result.structural_quality == absolute.structural_quality
    assert result.topology_delta == absolute.topology_delta


def test_unknown_strategy():
    """An unknown strategy tag is a config error."""
    with pytest.raises(LdsiConfigError):
        compute_ldsi(SENTENCE_A, SENTENCE_B, strategy="v3")


def test_rejects_none():
    """None is not text."""
    with pytest.raises(LdsiInputError):
        compute_ldsi(None, SENTENCE_B)


def test_combine_order():
    """combine sums the weighted terms in a fixed order."""
    signals = LdsiSignals(ncd=0.4, entropy_term=0.5, topology_score=0.25)
    coefficients = LdsiCoefficients(alpha=0.5, beta=0.3, gamma=0.2)
    assert combine(signals, coefficients) == (0.5 * 0.4 + 0.3 * 0.5) + 0.2 * 0.25


@pytest.mark.parametrize("value, verdict", [
    (0.0, Verdict.ZOMBIE),
    (0.29, Verdict.ZOMBIE),
    (0.3, Verdict.REBEL),
    (0.69, Verdict.REBEL),
    (0.7, Verdict.ARCHITECT),
    (1.19, Verdict.ARCHITECT),
    (1.2, Verdict.FOOL),
    (5.0, Verdict.FOOL),
])
def test_verdict_bands(value, verdict):
    """Band lower bounds are inclusive."""
    assert classify(value) is verdict


def test_custom_thresholds():
    """Custom thresholds move the band edges."""
    bands = VerdictThresholds(zombie=0.1, rebel=0.2, architect=0.3)
    assert classify(0.15, bands) is Verdict.REBEL
    assert classify(0.3, bands) is Verdict.FOOL


def test_verdict_description():
    """Each verdict has a readable description."""
    assert Verdict.ARCHITECT.description.startswith("ARCHITECT")
