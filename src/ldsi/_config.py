"""Library-owned defaults, config validation and JSON config loading."""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from ._cleaner import CleanerConfig, Language
from ._errors import LdsiConfigError, LdsiVersionError

_EXPECTED_VERSION = "1.0"


class TopologyStrategy(str, Enum):
    """Which topology signal feeds the gamma term."""

    DELTA_V1 = "delta-v1"        # reference-relative delta, topology(B) vs topology(A)
    ABSOLUTE_V2 = "absolute-v2"  # structural quality of B alone


@dataclass(slots=True, frozen=True)
class LdsiCoefficients:
    alpha: float = 0.50   # NCD
    beta: float = 0.30    # entropy term
    gamma: float = 0.20   # topology

    def __post_init__(self) -> None:
        for name in ("alpha", "beta", "gamma"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise LdsiConfigError(f"{name} must be a number, got {value!r}")
            if not math.isfinite(value):
                raise LdsiConfigError(f"{name} must be finite, got {value!r}")


@dataclass(slots=True, frozen=True)
class VerdictThresholds:
    """Upper bounds (exclusive) of the ZOMBIE, REBEL and ARCHITECT bands."""

    zombie: float = 0.3
    rebel: float = 0.7
    architect: float = 1.2

    def __post_init__(self) -> None:
        bounds = (self.zombie, self.rebel, self.architect)
        for value in bounds:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise LdsiConfigError(f"threshold must be a number, got {value!r}")
            if not math.isfinite(value):
                raise LdsiConfigError(f"threshold must be finite, got {value!r}")
        if not 0.0 <= self.zombie < self.rebel < self.architect:
            raise LdsiConfigError(
                "thresholds must satisfy 0 <= zombie < rebel < architect, "
                f"got {bounds}"
            )


@dataclass(slots=True, frozen=True)
class LdsiConfig:
    coefficients: LdsiCoefficients = field(default_factory=LdsiCoefficients)
    thresholds: VerdictThresholds = field(default_factory=VerdictThresholds)
    strategy: TopologyStrategy = TopologyStrategy.ABSOLUTE_V2
    clean: bool = False
    cleaner: CleanerConfig = field(default_factory=CleanerConfig)


DEFAULT_COEFFICIENTS = LdsiCoefficients()
DEFAULT_THRESHOLDS = VerdictThresholds()
DEFAULT_STRATEGY = TopologyStrategy.ABSOLUTE_V2
DEFAULT_CONFIG = LdsiConfig(
    coefficients=DEFAULT_COEFFICIENTS,
    thresholds=DEFAULT_THRESHOLDS,
    strategy=DEFAULT_STRATEGY,
)


def parse_strategy(value: str | TopologyStrategy) -> TopologyStrategy:
    try:
        return TopologyStrategy(value)
    except ValueError:
        choices = ", ".join(s.value for s in TopologyStrategy)
        raise LdsiConfigError(
            f"unknown topology strategy {value!r} (expected one of {choices})"
        ) from None


def _section(doc: dict[str, Any], key: str) -> dict[str, Any]:
    value = doc.get(key, {})
    if not isinstance(value, dict):
        raise LdsiConfigError(f"config section {key!r} must be an object")
    return value


def _build(cls: type, values: dict[str, Any], section: str) -> Any:
    try:
        return cls(**values)
    except TypeError as exc:
        raise LdsiConfigError(f"invalid {section!r} section: {exc}") from exc


def config_from_dict(doc: dict[str, Any]) -> LdsiConfig:
    """Validate a parsed config document and build an LdsiConfig."""
    version = doc.get("version")
    if version != _EXPECTED_VERSION:
        raise LdsiVersionError(
            f"Expected config version {_EXPECTED_VERSION!r}, got {version!r}"
        )

    coefficients = _build(
        LdsiCoefficients, _section(doc, "coefficients"), "coefficients",
    )
    thresholds = _build(
        VerdictThresholds, _section(doc, "thresholds"), "thresholds",
    )
    strategy = parse_strategy(doc.get("strategy", DEFAULT_STRATEGY))

    cleaner_values = dict(_section(doc, "cleaner"))
    if "language" in cleaner_values:
        try:
            cleaner_values["language"] = Language(cleaner_values["language"])
        except ValueError:
            raise LdsiConfigError(
                f"unknown cleaner language {cleaner_values['language']!r}"
            ) from None
    cleaner = _build(CleanerConfig, cleaner_values, "cleaner")

    clean = doc.get("clean", False)
    if not isinstance(clean, bool):
        raise LdsiConfigError(f"'clean' must be a boolean, got {clean!r}")

    return LdsiConfig(
        coefficients=coefficients,
        thresholds=thresholds,
        strategy=strategy,
        clean=clean,
        cleaner=cleaner,
    )


def load_config(path: Path | str | None = None) -> LdsiConfig:
    """Load a JSON config file, or return DEFAULT_CONFIG when path is None."""
    if path is None:
        return DEFAULT_CONFIG
    path = Path(path)
    if not path.exists():
        raise LdsiConfigError(f"config file not found: {path}")
    with open(path, encoding="utf-8") as f:
        try:
            doc = json.load(f)
        except json.JSONDecodeError as exc:
            raise LdsiConfigError(f"config file {path} is not valid JSON: {exc}") from exc
    if not isinstance(doc, dict):
        raise LdsiConfigError(f"config file {path} must hold a JSON object")
    return config_from_dict(doc)
