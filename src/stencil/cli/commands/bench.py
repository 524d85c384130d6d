"""
Stencil bench command.

SUMMARY: Compare template rendering against plain string building

Defaults come from the ``bench`` config section; flags override them.
"""

from __future__ import annotations

import argparse
import sys

from stencil.cli import OutputFormatter, add_standard_flags, get_config
from stencil.core.bench import run_comparison
from stencil.core.exceptions import ConfigError

SUMMARY = "Compare template rendering against plain string building"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--placeholders", type=int, help="Number of reserved keywords")
    parser.add_argument("--iterations", type=int, help="Timed calls per strategy")
    parser.add_argument("--warmup", type=int, help="Untimed calls before measuring")
    parser.add_argument("--value-length", type=int, dest="value_length", help="Length of random values")
    parser.add_argument("--seed", type=int, help="Random seed")
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    try:
        bench_cfg = get_config(args).get("bench", {}) or {}
    except ConfigError as e:
        formatter.error(e, error_code="bench_error")
        return 1

    def pick(flag: str, key: str, fallback: int | None) -> int | None:
        value = getattr(args, flag, None)
        return value if value is not None else bench_cfg.get(key, fallback)

    try:
        report = run_comparison(
            placeholders=pick("placeholders", "placeholders", 2),
            iterations=pick("iterations", "iterations", 100_000),
            warmup=pick("warmup", "warmup", 10_000),
            value_length=pick("value_length", "valueLength", 10),
            seed=pick("seed", "seed", None),
        )
    except ValueError as e:
        formatter.error(e, error_code="bench_error")
        return 1

    if formatter.json_mode:
        formatter.json_output(report.to_dict())
        return 0

    formatter.text(
        f"{report.placeholders} placeholder(s), {report.iterations} iterations, {report.warmup} warm-up"
    )
    slowest = report.slowest
    for result in report.results:
        marker = " (slowest)" if slowest is not None and result.name == slowest.name else ""
        formatter.text(f"  {result.name:<16} {result.per_call_ns:>10.1f} ns/call{marker}")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
