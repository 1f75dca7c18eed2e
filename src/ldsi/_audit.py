"""Audit trail: stable result schema, SHA-256 digests, JSON/msgpack archives."""

from __future__ import annotations

import hashlib
import json
import logging
import uuid
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import msgpack

from ._errors import LdsiChecksumError, LdsiError, LdsiVersionError
from ._types import LdsiResult

logger = logging.getLogger(__name__)

# 1.x carried only the reference-relative topology delta. 2.0 adds the
# absolute structural quality and emits both alongside the strategy tag.
SCHEMA_VERSION = "2.0"
_SUPPORTED_SCHEMAS = frozenset({SCHEMA_VERSION})

_MSGPACK_SUFFIXES = frozenset({".msgpack", ".mpk", ".bin"})


def sha256_text(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def result_to_dict(result: LdsiResult) -> dict[str, Any]:
    """Serialize a result to the stable, versioned audit schema."""
    return {
        "schema_version": SCHEMA_VERSION,
        "lambda": result.lambda_,
        "verdict": result.verdict.value,
        "entropy_ratio": result.entropy_ratio,
        "structural_quality": result.structural_quality,
        "ncd": asdict(result.ncd),
        "entropy": {
            "a": asdict(result.entropy_a),
            "b": asdict(result.entropy_b),
            "ratio": result.entropy_ratio,
            "term": result.entropy_term,
        },
        "topology": {
            "strategy": result.strategy.value,
            "score": result.signals.topology_score,
            "structural_quality": result.structural_quality,
            "delta": result.topology_delta,
            "a": asdict(result.topology_a),
            "b": asdict(result.topology_b),
        },
        "coefficients": asdict(result.coefficients),
        "thresholds": asdict(result.thresholds),
    }


@dataclass(slots=True, frozen=True)
class AuditMetadata:
    ldsi_version: str
    duration_ms: int
    hash_response_a: str   # SHA-256 hex of response_a
    hash_response_b: str


@dataclass(slots=True, frozen=True)
class AuditEntry:
    timestamp: str         # ISO 8601, UTC
    test_id: str
    model_target: str
    prompt_a: str
    prompt_b: str
    response_a: str
    response_b: str
    result: dict[str, Any]
    metadata: AuditMetadata


def generate_test_id(now: datetime | None = None) -> str:
    now = now if now is not None else datetime.now(timezone.utc)
    return f"LDSI_{now:%Y%m%d_%H%M%S}_{uuid.uuid4().hex[:8].upper()}"


def create_entry(
    model: str,
    prompt_a: str,
    prompt_b: str,
    response_a: str,
    response_b: str,
    result: LdsiResult,
    duration_ms: int,
) -> AuditEntry:
    """Build an audit entry for one scored pair of responses."""
    from . import __version__

    now = datetime.now(timezone.utc)
    return AuditEntry(
        timestamp=now.isoformat(),
        test_id=generate_test_id(now),
        model_target=model,
        prompt_a=prompt_a,
        prompt_b=prompt_b,
        response_a=response_a,
        response_b=response_b,
        result=result_to_dict(result),
        metadata=AuditMetadata(
            ldsi_version=__version__,
            duration_ms=int(duration_ms),
            hash_response_a=sha256_text(response_a),
            hash_response_b=sha256_text(response_b),
        ),
    )


def entry_to_dict(entry: AuditEntry) -> dict[str, Any]:
    return asdict(entry)


def entry_from_dict(raw: dict[str, Any]) -> AuditEntry:
    """Rebuild an entry, validating its schema version and digests."""
    try:
        result = raw["result"]
        schema = result.get("schema_version")
        meta = raw["metadata"]
        entry = AuditEntry(
            timestamp=raw["timestamp"],
            test_id=raw["test_id"],
            model_target=raw["model_target"],
            prompt_a=raw["prompt_a"],
            prompt_b=raw["prompt_b"],
            response_a=raw["response_a"],
            response_b=raw["response_b"],
            result=result,
            metadata=AuditMetadata(
                ldsi_version=meta["ldsi_version"],
                duration_ms=meta["duration_ms"],
                hash_response_a=meta["hash_response_a"],
                hash_response_b=meta["hash_response_b"],
            ),
        )
    except (KeyError, TypeError, AttributeError) as exc:
        raise LdsiError(f"Malformed audit entry: {exc!r}") from exc

    if schema not in _SUPPORTED_SCHEMAS:
        raise LdsiVersionError(
            f"Expected result schema {SCHEMA_VERSION!r}, got {schema!r} "
            f"in entry {entry.test_id}"
        )
    verify_entry(entry)
    return entry


def verify_entry(entry: AuditEntry) -> None:
    """Check the stored response digests against the stored responses."""
    for label, text, expected in (
        ("response_a", entry.response_a, entry.metadata.hash_response_a),
        ("response_b", entry.response_b, entry.metadata.hash_response_b),
    ):
        actual = sha256_text(text)
        if actual != expected:
            raise LdsiChecksumError(
                f"Checksum mismatch for {label} of {entry.test_id}: "
                f"expected {expected[:16]}..., got {actual[:16]}..."
            )


def _is_msgpack(path: Path) -> bool:
    return path.suffix.lower() in _MSGPACK_SUFFIXES


class AuditLogger:
    """Buffers audit entries and writes them as one JSON or msgpack array.

    The format follows the file suffix: .msgpack/.mpk/.bin use msgpack,
    anything else JSON.
    """

    __slots__ = ("_path", "_entries")

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)
        self._entries: list[AuditEntry] = []

    @property
    def path(self) -> Path:
        return self._path

    @property
    def entries(self) -> list[AuditEntry]:
        return list(self._entries)

    def log(self, entry: AuditEntry) -> None:
        self._entries.append(entry)

    def flush(self) -> None:
        """Write all buffered entries, replacing the file."""
        payload = [entry_to_dict(e) for e in self._entries]
        if _is_msgpack(self._path):
            with open(self._path, "wb") as f:
                f.write(msgpack.packb(payload, use_bin_type=True))
        else:
            with open(self._path, "w", encoding="utf-8") as f:
                json.dump(payload, f, ensure_ascii=False, indent=2)
        logger.info("Wrote %d audit entries to %s", len(payload), self._path)


def load_entries(path: Path | str) -> list[AuditEntry]:
    """Load and validate every entry of a JSON or msgpack audit archive."""
    path = Path(path)
    if not path.exists():
        raise LdsiError(f"audit file not found: {path}")
    if _is_msgpack(path):
        with open(path, "rb") as f:
            raw = msgpack.unpackb(f.read(), raw=False)
    else:
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
    if not isinstance(raw, list):
        raise LdsiError(f"audit file {path} must hold an array of entries")
    return [entry_from_dict(item) for item in raw]
