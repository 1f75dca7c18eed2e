"""Data structures for ldsi."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from ._errors import LdsiInputError

if TYPE_CHECKING:
    from ._config import LdsiCoefficients, TopologyStrategy, VerdictThresholds


@dataclass(slots=True, frozen=True)
class TextSample:
    text: str
    data: bytes   # UTF-8 encoding of text, fed to the compressor

    @classmethod
    def coerce(cls, value: str | bytes | TextSample) -> TextSample:
        """Build a sample from str or UTF-8 bytes, rejecting anything else."""
        if isinstance(value, TextSample):
            return value
        if isinstance(value, str):
            try:
                return cls(text=value, data=value.encode("utf-8"))
            except UnicodeEncodeError as exc:
                # lone surrogates cannot be encoded
                raise LdsiInputError(f"text is not encodable as UTF-8: {exc}") from exc
        if isinstance(value, (bytes, bytearray, memoryview)):
            data = bytes(value)
            try:
                text = data.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise LdsiInputError(f"bytes are not valid UTF-8: {exc}") from exc
            return cls(text=text, data=data)
        raise LdsiInputError(
            f"expected str or bytes, got {type(value).__name__}"
        )


@dataclass(slots=True, frozen=True)
class CompressionMeasurement:
    size_a: int          # compressed bytes of A
    size_b: int          # compressed bytes of B
    size_combined: int   # compressed bytes of A||B
    raw_len_a: int
    raw_len_b: int
    window_log: int
    raw: float
    damping_factor: float
    corrected: float     # in [0, 1]


@dataclass(slots=True, frozen=True)
class EntropyMeasurement:
    h: float             # Shannon entropy, bits
    ttr: float
    hapax_ratio: float   # hapax count / unique tokens
    total_tokens: int
    unique_tokens: int
    hapax_count: int


@dataclass(slots=True, frozen=True)
class TopologyMetrics:
    node_count: int
    edge_count: int
    density: float
    components: int
    lcc_size: int
    lcc_ratio: float
    clustering: float
    avg_path_length: float
    small_world_index: float
    avg_degree: float
    structural_quality: float


class Verdict(str, Enum):
    ZOMBIE = "ZOMBIE"
    REBEL = "REBEL"
    ARCHITECT = "ARCHITECT"
    FOOL = "FOOL"

    @property
    def description(self) -> str:
        return _VERDICT_DESCRIPTIONS[self]


_VERDICT_DESCRIPTIONS = {
    Verdict.ZOMBIE: "ZOMBIE - the model recites, total smoothing",
    Verdict.REBEL: "REBEL - notable divergence, enriched vocabulary",
    Verdict.ARCHITECT: "ARCHITECT - optimal divergence, structure preserved",
    Verdict.FOOL: "FOOL - maximal chaos, structure collapsed",
}


@dataclass(slots=True, frozen=True)
class LdsiSignals:
    """The three coefficient-independent inputs of the lambda formula."""

    ncd: float
    entropy_term: float
    topology_score: float


@dataclass(slots=True, frozen=True)
class LdsiResult:
    lambda_: float
    verdict: Verdict
    ncd: CompressionMeasurement
    entropy_a: EntropyMeasurement
    entropy_b: EntropyMeasurement
    entropy_ratio: float
    entropy_term: float
    topology_a: TopologyMetrics
    topology_b: TopologyMetrics
    structural_quality: float
    topology_delta: float
    strategy: TopologyStrategy
    signals: LdsiSignals
    coefficients: LdsiCoefficients
    thresholds: VerdictThresholds


@dataclass(slots=True, frozen=True)
class BatchOutcome:
    index: int
    result: LdsiResult | None = None
    error: Exception | None = field(default=None, compare=False)

    @property
    def ok(self) -> bool:
        return self.error is None
