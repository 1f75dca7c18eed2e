"""LDSI: deterministic divergence index between two language-model responses."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ._audit import (
    SCHEMA_VERSION,
    AuditEntry,
    AuditLogger,
    AuditMetadata,
    create_entry,
    load_entries,
    result_to_dict,
)
from ._calibrate import (
    GOLDEN_CASES,
    CalibrationCase,
    CalibrationResult,
    grid_search,
    load_cases,
)
from ._cleaner import (
    Cleaner,
    CleanerConfig,
    Language,
    clean_text,
    clean_tokens,
    extract_semantic_core,
)
from ._config import (
    DEFAULT_COEFFICIENTS,
    DEFAULT_CONFIG,
    DEFAULT_THRESHOLDS,
    LdsiCoefficients,
    LdsiConfig,
    TopologyStrategy,
    VerdictThresholds,
    load_config,
)
from ._entropy import (
    compute_entropy,
    compute_ngram_entropy,
    entropy_ratio,
    entropy_term,
    tokenize,
)
from ._errors import (
    LdsiChecksumError,
    LdsiCompressionError,
    LdsiConfigError,
    LdsiError,
    LdsiInputError,
    LdsiVersionError,
)
from ._formula import classify, combine, compute_ldsi, compute_signals
from ._ncd import compute_ncd, damping_factor
from ._quality import structural_quality, topology_delta, topology_score
from ._stop_words import ENGLISH_STOP_WORDS, FRENCH_STOP_WORDS
from ._topology import build_graph, build_graph_and_metrics, topology
from ._types import (
    BatchOutcome,
    CompressionMeasurement,
    EntropyMeasurement,
    LdsiResult,
    LdsiSignals,
    TextSample,
    TopologyMetrics,
    Verdict,
)

if TYPE_CHECKING:
    from pathlib import Path

__version__ = "0.3.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    "load",
    "AuditEntry",
    "AuditLogger",
    "AuditMetadata",
    "BatchOutcome",
    "CalibrationCase",
    "CalibrationResult",
    "Cleaner",
    "CleanerConfig",
    "CompressionMeasurement",
    "DEFAULT_COEFFICIENTS",
    "DEFAULT_CONFIG",
    "DEFAULT_THRESHOLDS",
    "ENGLISH_STOP_WORDS",
    "EntropyMeasurement",
    "FRENCH_STOP_WORDS",
    "GOLDEN_CASES",
    "Language",
    "LdsiChecksumError",
    "LdsiCoefficients",
    "LdsiCompressionError",
    "LdsiConfig",
    "LdsiConfigError",
    "LdsiError",
    "LdsiInputError",
    "LdsiResult",
    "LdsiScorer",
    "LdsiSignals",
    "LdsiVersionError",
    "SCHEMA_VERSION",
    "TextSample",
    "TopologyMetrics",
    "TopologyStrategy",
    "Verdict",
    "VerdictThresholds",
    "build_graph",
    "build_graph_and_metrics",
    "classify",
    "clean_text",
    "clean_tokens",
    "combine",
    "compute_entropy",
    "compute_ldsi",
    "compute_ncd",
    "compute_ngram_entropy",
    "compute_signals",
    "create_entry",
    "damping_factor",
    "entropy_ratio",
    "entropy_term",
    "extract_semantic_core",
    "grid_search",
    "load_cases",
    "load_config",
    "load_entries",
    "result_to_dict",
    "structural_quality",
    "tokenize",
    "topology",
    "topology_delta",
    "topology_score",
]


def load(config_path: Path | str | None = None) -> "LdsiScorer":
    """Load configuration and return a ready-to-use LdsiScorer.

    Args:
        config_path: JSON config file. If None, uses the library defaults.
    """
    from ._scorer import LdsiScorer

    return LdsiScorer(load_config(config_path))


# Deferred import so LdsiScorer is available as ldsi.LdsiScorer
# without pulling the thread pool machinery in at module load time.
def __getattr__(name: str):
    if name == "LdsiScorer":
        from ._scorer import LdsiScorer
        return LdsiScorer
    raise AttributeError(f"module 'ldsi' has no attribute {name!r}")
