"""Command-line interface: analyze, ncd, entropy, topology, calibrate, info."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from dataclasses import asdict, replace
from pathlib import Path
from typing import Any, Sequence

from ._audit import AuditLogger, create_entry, result_to_dict
from ._calibrate import GOLDEN_CASES, grid_search, load_cases
from ._config import (
    DEFAULT_STRATEGY,
    LdsiCoefficients,
    TopologyStrategy,
    load_config,
    parse_strategy,
)
from ._errors import LdsiError
from ._scorer import LdsiScorer

_BANDS = """\
lambda bands:
  0.0 - 0.3   ZOMBIE     the model recites
  0.3 - 0.7   REBEL      notable divergence
  0.7 - 1.2   ARCHITECT  optimal divergence
  >= 1.2      FOOL       structure collapsed
"""


def load_text(path_or_text: str) -> str:
    """Read the argument as a file when it names one, else use it verbatim."""
    path = Path(path_or_text)
    try:
        if path.is_file():
            return path.read_text(encoding="utf-8")
    except OSError:
        # too long or otherwise invalid as a path: literal text
        pass
    return path_or_text


def _emit(payload: Any) -> None:
    json.dump(payload, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")


def _scorer_from_args(args: argparse.Namespace) -> LdsiScorer:
    config = load_config(args.config)
    coef = config.coefficients
    overrides = {
        k: v for k, v in
        (("alpha", args.alpha), ("beta", args.beta), ("gamma", args.gamma))
        if v is not None
    }
    if overrides:
        config = replace(config, coefficients=LdsiCoefficients(**{**asdict(coef), **overrides}))
    if args.strategy is not None:
        config = replace(config, strategy=parse_strategy(args.strategy))
    if getattr(args, "clean", False):
        config = replace(config, clean=True)
    return LdsiScorer(config)


def _cmd_analyze(args: argparse.Namespace) -> int:
    scorer = _scorer_from_args(args)
    text_a = load_text(args.text_a)
    text_b = load_text(args.text_b)

    start = time.perf_counter()
    result = scorer.score(text_a, text_b)
    duration_ms = int((time.perf_counter() - start) * 1000)

    if args.output:
        audit = AuditLogger(args.output)
        audit.log(create_entry(
            args.model, args.prompt_a, args.prompt_b, text_a, text_b,
            result, duration_ms,
        ))
        audit.flush()

    payload = result_to_dict(result)
    payload["description"] = result.verdict.description
    _emit(payload)
    return 0


def _cmd_ncd(args: argparse.Namespace) -> int:
    scorer = _scorer_from_args(args)
    _emit(asdict(scorer.ncd(load_text(args.text_a), load_text(args.text_b))))
    return 0


def _cmd_entropy(args: argparse.Namespace) -> int:
    scorer = _scorer_from_args(args)
    _emit(asdict(scorer.entropy(load_text(args.text))))
    return 0


def _cmd_topology(args: argparse.Namespace) -> int:
    scorer = _scorer_from_args(args)
    _emit(asdict(scorer.topology(load_text(args.text))))
    return 0


def _cmd_calibrate(args: argparse.Namespace) -> int:
    cases = load_cases(args.dataset) if args.dataset else list(GOLDEN_CASES)
    result = grid_search(
        cases, step=args.step, upper=args.upper,
        strategy=args.strategy or DEFAULT_STRATEGY,
    )
    _emit({
        "coefficients": asdict(result.coefficients),
        "error": result.error,
        "evaluated": result.evaluated,
        "scored_cases": result.scored_cases,
        "failures": [
            {"index": f.index, "error": str(f.error)} for f in result.failures
        ],
    })
    return 0


def _cmd_info(args: argparse.Namespace) -> int:
    from . import __version__
    from ._audit import SCHEMA_VERSION
    from ._config import DEFAULT_CONFIG

    _emit({
        "version": __version__,
        "schema_version": SCHEMA_VERSION,
        "coefficients": asdict(DEFAULT_CONFIG.coefficients),
        "thresholds": asdict(DEFAULT_CONFIG.thresholds),
        "strategy": DEFAULT_CONFIG.strategy.value,
    })
    return 0


def _add_scoring_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", help="JSON config file")
    parser.add_argument("--alpha", type=float, help="NCD weight")
    parser.add_argument("--beta", type=float, help="entropy weight")
    parser.add_argument("--gamma", type=float, help="topology weight")
    parser.add_argument(
        "--strategy", choices=[s.value for s in TopologyStrategy],
        help="topology signal for the gamma term",
    )
    parser.add_argument(
        "-c", "--clean", action="store_true",
        help="clean texts (stop words, numbers, punctuation) before analysis",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ldsi",
        description="Deterministic divergence index between two LLM responses.",
        epilog=_BANDS,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-v", "--verbose", action="count", default=0)
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("analyze", help="score text B against reference text A")
    p.add_argument("-a", "--text-a", required=True, help="reference text or file")
    p.add_argument("-b", "--text-b", required=True, help="test text or file")
    p.add_argument("-o", "--output", help="audit file (.json or .msgpack)")
    p.add_argument("-m", "--model", default="local", help="model label for the audit")
    p.add_argument("--prompt-a", default="", help="prompt that produced A, for the audit")
    p.add_argument("--prompt-b", default="", help="prompt that produced B, for the audit")
    _add_scoring_options(p)
    p.set_defaults(func=_cmd_analyze)

    p = sub.add_parser("ncd", help="compression distance only")
    p.add_argument("text_a")
    p.add_argument("text_b")
    _add_scoring_options(p)
    p.set_defaults(func=_cmd_ncd)

    p = sub.add_parser("entropy", help="lexical diversity of one text")
    p.add_argument("text")
    _add_scoring_options(p)
    p.set_defaults(func=_cmd_entropy)

    p = sub.add_parser("topology", help="co-occurrence graph metrics of one text")
    p.add_argument("text")
    _add_scoring_options(p)
    p.set_defaults(func=_cmd_topology)

    p = sub.add_parser("calibrate", help="grid-search the formula coefficients")
    p.add_argument("dataset", nargs="?", help="JSON cases file (default: built-in)")
    p.add_argument("--step", type=float, default=0.05)
    p.add_argument("--upper", type=float, default=1.0)
    p.add_argument("--strategy", choices=[s.value for s in TopologyStrategy])
    p.set_defaults(func=_cmd_calibrate)

    p = sub.add_parser("info", help="version and default configuration")
    p.set_defaults(func=_cmd_info)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    level = logging.WARNING - 10 * min(args.verbose, 2)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    try:
        return args.func(args)
    except LdsiError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
