"""Coefficient grid search against a labelled dataset of (A, B, expected lambda)."""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from ._config import (
    DEFAULT_COEFFICIENTS,
    DEFAULT_STRATEGY,
    LdsiCoefficients,
    TopologyStrategy,
)
from ._errors import LdsiConfigError, LdsiError
from ._formula import combine, compute_signals
from ._types import LdsiSignals

logger = logging.getLogger(__name__)

_GRID_EPSILON = 1e-9


@dataclass(slots=True, frozen=True)
class CalibrationCase:
    text_a: str
    text_b: str
    expected_lambda: float


@dataclass(slots=True, frozen=True)
class CalibrationFailure:
    index: int
    error: LdsiError = field(compare=False)


@dataclass(slots=True, frozen=True)
class CalibrationResult:
    coefficients: LdsiCoefficients
    error: float          # summed squared error over scored cases
    evaluated: int        # coefficient triples tried
    scored_cases: int
    failures: list[CalibrationFailure] = field(default_factory=list)


# Hand-labelled anchors, one per verdict band.
GOLDEN_CASES: tuple[CalibrationCase, ...] = (
    CalibrationCase("Le chat dort.", "Le chat dort.", 0.1),
    CalibrationCase(
        "La politique est complexe.",
        "Les dynamiques de pouvoir inherentes a la structure societale "
        "sont multifactorielles.",
        0.6,
    ),
    CalibrationCase(
        "Explique la gravite.",
        "La gravite est l'amour que l'espace-temps porte a la matiere, "
        "une etreinte courbee par la masse.",
        0.95,
    ),
    CalibrationCase(
        "Bonjour.",
        "Les grille-pains quantiques chantent la marseillaise en binaire inverse.",
        1.5,
    ),
)


def grid_values(step: float, upper: float) -> list[float]:
    """Values 0, step, 2*step, ... not exceeding upper (integer-indexed, no drift).

    upper itself is included only when it is a multiple of step.
    """
    if step <= 0.0:
        raise LdsiConfigError(f"step must be > 0, got {step}")
    if upper < 0.0:
        raise LdsiConfigError(f"upper must be >= 0, got {upper}")
    # tolerance absorbs binary representation error, e.g. 1.0 / 0.05
    n = math.floor(upper / step + _GRID_EPSILON)
    return [i * step for i in range(n + 1)]


def squared_error(
    signals: Sequence[tuple[LdsiSignals, float]], coefficients: LdsiCoefficients,
) -> float:
    total = 0.0
    for case_signals, expected in signals:
        total += (combine(case_signals, coefficients) - expected) ** 2
    return total


def grid_search(
    cases: Sequence[CalibrationCase] = GOLDEN_CASES,
    *,
    step: float = 0.05,
    upper: float = 1.0,
    strategy: TopologyStrategy | str = DEFAULT_STRATEGY,
) -> CalibrationResult:
    """Exhaustively scan alpha, beta, gamma in [0, upper] by step.

    Signals are computed once per case and recombined for every triple.
    Cases that fail to score are recorded and skipped. Ties keep the first
    triple in (alpha, beta, gamma) lexicographic order.
    """
    prepared: list[tuple[LdsiSignals, float]] = []
    failures: list[CalibrationFailure] = []
    for i, case in enumerate(cases):
        try:
            signals = compute_signals(case.text_a, case.text_b, strategy=strategy)
        except LdsiError as exc:
            logger.warning("Calibration case %d skipped: %s", i, exc)
            failures.append(CalibrationFailure(index=i, error=exc))
            continue
        prepared.append((signals, case.expected_lambda))

    values = grid_values(step, upper)
    best = DEFAULT_COEFFICIENTS
    best_error = squared_error(prepared, best)
    evaluated = 0

    for a in values:
        for b in values:
            for g in values:
                coeffs = LdsiCoefficients(alpha=a, beta=b, gamma=g)
                error = squared_error(prepared, coeffs)
                evaluated += 1
                if error < best_error:
                    best, best_error = coeffs, error
                    logger.info(
                        "New best: error=%.4f alpha=%.2f beta=%.2f gamma=%.2f",
                        error, a, b, g,
                    )

    return CalibrationResult(
        coefficients=best,
        error=best_error,
        evaluated=evaluated,
        scored_cases=len(prepared),
        failures=failures,
    )


def load_cases(path: Path | str) -> list[CalibrationCase]:
    """Read cases from a JSON array of {text_a, text_b, expected_lambda}."""
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        raw = json.load(f)
    if not isinstance(raw, list):
        raise LdsiConfigError(f"calibration file {path} must hold an array")
    cases: list[CalibrationCase] = []
    for i, item in enumerate(raw):
        try:
            cases.append(CalibrationCase(
                text_a=item["text_a"],
                text_b=item["text_b"],
                expected_lambda=float(item["expected_lambda"]),
            ))
        except (KeyError, TypeError, ValueError) as exc:
            raise LdsiConfigError(f"invalid calibration case {i}: {exc!r}") from exc
    return cases
