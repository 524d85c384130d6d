"""Compare compiled-template rendering against plain string building.

The comparison renders the same lorem-ipsum sentence with N substituted
words using:

- ``template``: ``Template.process`` on a pre-built Template
- ``join``: appending the parts to a list and joining it
- ``format``: ``str.format`` on a pre-built format string
- ``string.Template``: ``string.Template.substitute``

Timings are per-call averages in nanoseconds after a warm-up phase.
"""
from __future__ import annotations

import logging
import random
import string
from dataclasses import asdict, dataclass, field
from time import perf_counter_ns
from typing import Any, Callable, Dict, List, Optional, Tuple

from stencil.core.template import Template
from stencil.core.utils.profiling import span

logger = logging.getLogger(__name__)

_ALPHABET = string.ascii_letters + string.digits

_LOREM = (
    "dolor", "consectetur", "sed", "eiusmod", "incididunt",
    "labore", "dolore", "magna", "aliqua", "veniam",
)
_FILLERS = (
    " amet, ", " elit, ", " do ", " tempor ", " ut ",
    " et ", " minim ", " quis ", " nostrud ", " ullamco ",
)


@dataclass(frozen=True)
class BenchmarkResult:
    name: str
    per_call_ns: float


@dataclass
class BenchmarkReport:
    placeholders: int
    iterations: int
    warmup: int
    results: List[BenchmarkResult] = field(default_factory=list)

    @property
    def slowest(self) -> Optional[BenchmarkResult]:
        return max(self.results, key=lambda r: r.per_call_ns, default=None)

    def get(self, name: str) -> Optional[BenchmarkResult]:
        return next((r for r in self.results if r.name == name), None)

    def to_dict(self) -> Dict[str, Any]:
        slowest = self.slowest
        return {
            "placeholders": self.placeholders,
            "iterations": self.iterations,
            "warmup": self.warmup,
            "results": [asdict(r) for r in self.results],
            "slowest": slowest.name if slowest else None,
        }


def random_value(rng: random.Random, length: int) -> str:
    return "".join(rng.choice(_ALPHABET) for _ in range(length))


def keyword_names(count: int) -> List[str]:
    """Return ``count`` distinct keywords, suffixing repeats of the word list."""
    names = []
    for i in range(count):
        base = _LOREM[i % len(_LOREM)]
        names.append(base if i < len(_LOREM) else f"{base}{i // len(_LOREM)}")
    return names


def build_lorem_parts(keywords: List[str]) -> Tuple[str, List[str], str]:
    """Return (prefix, fillers following each keyword except the last, suffix)."""
    fillers = [_FILLERS[i % len(_FILLERS)] for i in range(max(len(keywords) - 1, 0))]
    return "Lorem ipsum ", fillers, " magna aliqua."


def build_lorem_template(keywords: List[str], defaults: List[str]) -> Template:
    prefix, fillers, suffix = build_lorem_parts(keywords)
    builder = Template.builder().append(prefix)
    for i, (keyword, default) in enumerate(zip(keywords, defaults)):
        builder.reserve(keyword, default)
        builder.append(fillers[i] if i < len(fillers) else suffix)
    return builder.build()


def measure(task: Callable[[], Any], *, iterations: int, warmup: int) -> float:
    """Run ``task`` ``warmup`` times, then return mean ns per call over ``iterations``."""
    for _ in range(warmup):
        task()
    start = perf_counter_ns()
    for _ in range(iterations):
        task()
    return (perf_counter_ns() - start) / iterations


def run_comparison(
    placeholders: int = 2,
    iterations: int = 100_000,
    warmup: int = 10_000,
    value_length: int = 10,
    seed: Optional[int] = None,
) -> BenchmarkReport:
    """Time Template.process against the plain string-building baselines.

    Every strategy draws fresh random values on each call, so the cost of
    generating values is included uniformly.
    """
    if placeholders < 1:
        raise ValueError("placeholders must be >= 1")
    if iterations < 1:
        raise ValueError("iterations must be >= 1")

    rng = random.Random(seed)
    keywords = keyword_names(placeholders)
    prefix, fillers, suffix = build_lorem_parts(keywords)
    template = build_lorem_template(keywords, [random_value(rng, value_length) for _ in keywords])

    format_string = prefix + "".join(
        "{}" + (fillers[i] if i < len(fillers) else suffix) for i in range(len(keywords))
    )
    stdlib_template = string.Template(
        prefix
        + "".join(
            "${" + k + "}" + (fillers[i] if i < len(fillers) else suffix)
            for i, k in enumerate(keywords)
        )
    )

    def values() -> List[str]:
        return [random_value(rng, value_length) for _ in keywords]

    def run_template() -> str:
        return template.process(dict(zip(keywords, values())))

    def run_join() -> str:
        parts = [prefix]
        for i, value in enumerate(values()):
            parts.append(value)
            parts.append(fillers[i] if i < len(fillers) else suffix)
        return "".join(parts)

    def run_format() -> str:
        return format_string.format(*values())

    def run_stdlib_template() -> str:
        return stdlib_template.substitute(dict(zip(keywords, values())))

    report = BenchmarkReport(placeholders=placeholders, iterations=iterations, warmup=warmup)
    for name, task in (
        ("template", run_template),
        ("join", run_join),
        ("format", run_format),
        ("string.Template", run_stdlib_template),
    ):
        with span("bench.measure", strategy=name):
            per_call = measure(task, iterations=iterations, warmup=warmup)
        logger.info("bench %s: %.1f ns/call", name, per_call)
        report.results.append(BenchmarkResult(name=name, per_call_ns=per_call))
    return report


__all__ = [
    "BenchmarkReport",
    "BenchmarkResult",
    "build_lorem_template",
    "keyword_names",
    "measure",
    "random_value",
    "run_comparison",
]
