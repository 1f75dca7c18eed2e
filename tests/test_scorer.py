"""Tests for LdsiScorer single and batch scoring."""

import ldsi
from ldsi import LdsiConfig, LdsiInputError, LdsiScorer, TopologyStrategy, compute_ldsi

SENTENCE_A = "La temperature est de vingt-cinq degres aujourd'hui."
SENTENCE_B = "La temperature est de 25 degres ce jour."


def test_score_matches_function(scorer):
    """The scorer matches compute_ldsi with default config."""
    assert scorer.score(SENTENCE_A, SENTENCE_B) == compute_ldsi(SENTENCE_A, SENTENCE_B)


def test_default_config(scorer):
    """ldsi.load() uses the library defaults."""
    assert scorer.config is ldsi.DEFAULT_CONFIG


def test_single_signals(scorer, paragraph):
    """The single-signal methods run on their own."""
    assert scorer.ncd(SENTENCE_A, SENTENCE_A).corrected == 0.0
    assert scorer.entropy(paragraph).total_tokens > 20
    assert scorer.topology(paragraph).node_count > 3


def test_score_batch_order(scorer):
    """Batch outcomes come back in input order."""
    pairs = [(SENTENCE_A, SENTENCE_B), (SENTENCE_A, SENTENCE_A), ("", "")]
    outcomes = scorer.score_batch(pairs)
    assert [o.index for o in outcomes] == [0, 1, 2]
    assert all(o.ok for o in outcomes)
    assert outcomes[1].result.ncd.corrected == 0.0


def test_score_batch_isolates_failures(scorer):
    """A bad pair fails alone."""
    pairs = [(SENTENCE_A, SENTENCE_B), (None, SENTENCE_B), "not a pair", (SENTENCE_B, SENTENCE_A)]
    outcomes = scorer.score_batch(pairs)
    assert len(outcomes) == 4
    assert outcomes[0].ok and outcomes[3].ok
    assert isinstance(outcomes[1].error, LdsiInputError)
    assert isinstance(outcomes[2].error, LdsiInputError)
    assert outcomes[1].result is None


def test_score_batch_parallel_matches_sequential(scorer, paragraph):
    """A thread pool gives the same outcomes as a sequential run."""
    pairs = [(SENTENCE_A, SENTENCE_B), (paragraph, SENTENCE_A), (SENTENCE_B, paragraph)] * 3
    assert scorer.score_batch(pairs, workers=4) == scorer.score_batch(pairs)


def test_empty_batch(scorer):
    """An empty batch gives no outcomes."""
    assert scorer.score_batch([]) == []


def test_cleaning_config():
    """clean=True feeds cleaned tokens to entropy and topology."""
    scorer = LdsiScorer(LdsiConfig(clean=True))
    assert scorer.tokens("The cats are running!") == ["cats", "running"]
    result = scorer.score("The cats are running!", "The cats are running!")
    assert result.entropy_a.total_tokens == 2


def test_cleaning_leaves_ncd_on_raw_text():
    """Cleaning never changes the NCD."""
    cleaned = LdsiScorer(LdsiConfig(clean=True)).score(SENTENCE_A, SENTENCE_B)
    assert cleaned.ncd == compute_ldsi(SENTENCE_A, SENTENCE_B).ncd


def test_strategy_from_config():
    """The configured strategy drives the gamma term."""
    scorer = LdsiScorer(LdsiConfig(strategy=TopologyStrategy.DELTA_V1))
    result = scorer.score(SENTENCE_A, SENTENCE_B)
    assert result.signals.topology_score == result.topology_delta
