"""pipeline.regression

Compare a run's artifacts against the artifacts of an earlier run of the same
sweep (the baseline).

* Evaluate runs: the ``.trec_eval`` output is deterministic for a fixed index
  and query set, so any byte difference is a regression.
* Benchmark runs: a timing metric regresses when
  ``current - baseline * (1 + margin) > 0``. A combination counts once no
  matter how many of its metrics regress.

A detected regression is a result, not an error. Failing to *read* either side
raises :class:`~stdbench.errors.ComparisonError`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Tuple

from stdbench.domain import Combination, Run, RunKind
from stdbench.errors import ComparisonError
from stdbench.io import ArtifactKind, artifact_path, baseline_artifact_path, read_text

from .results import BenchmarkResult, parse_benchmark_results

logger = logging.getLogger(__name__)

DEFAULT_MARGIN = 0.05


@dataclass(frozen=True)
class RegressionReport:
    """``regressions == 0`` is success.

    ``details`` holds one human readable line per offending file pair or
    metric and does not take part in equality.
    """

    regressions: int = 0
    details: Tuple[str, ...] = field(default=(), compare=False)

    @classmethod
    def success(cls) -> "RegressionReport":
        return cls(0)

    @classmethod
    def regression(cls, count: int, details: Tuple[str, ...] = ()) -> "RegressionReport":
        return cls(count, tuple(details))

    @property
    def is_success(self) -> bool:
        return self.regressions == 0

    def __str__(self) -> str:
        if self.is_success:
            return "Success"
        return f"Regression({self.regressions})"


def _read_artifact(path: Path) -> str:
    try:
        return read_text(path)
    except (OSError, UnicodeDecodeError) as exc:
        raise ComparisonError(f"Failed to read artifact: {path}") from exc


def _read_artifact_bytes(path: Path) -> bytes:
    try:
        return Path(path).read_bytes()
    except OSError as exc:
        raise ComparisonError(f"Failed to read artifact: {path}") from exc


def _artifact_pair(run: Run, combo: Combination, baseline_dir: Path, kind: ArtifactKind) -> Tuple[Path, Path]:
    current = artifact_path(run.output, combo.algorithm, combo.encoding, combo.topic_index, kind)
    return current, baseline_artifact_path(baseline_dir, current)


def exceeds_margin(current: float, baseline: float, margin: float) -> bool:
    return current - baseline * (1.0 + margin) > 0


def compare_evaluation(current: Path, baseline: Path) -> List[str]:
    if _read_artifact_bytes(current) == _read_artifact_bytes(baseline):
        return []
    return [f"evaluation differs: {current} vs {baseline}"]


def compare_benchmark_records(
    current: List[BenchmarkResult],
    baseline: List[BenchmarkResult],
    margin: float,
) -> List[str]:
    """Diagnostics for every metric of *current* that exceeds the allowed bound."""

    if len(current) != len(baseline):
        raise ComparisonError(
            f"benchmark record count mismatch: {len(current)} current vs {len(baseline)} baseline"
        )

    problems: List[str] = []
    for cur, base in zip(current, baseline):
        for metric in BenchmarkResult.METRICS:
            value, reference = cur.metric(metric), base.metric(metric)
            if exceeds_margin(value, reference, margin):
                problems.append(
                    f"{cur.encoding}/{cur.algorithm} {metric}: {value} > {reference * (1.0 + margin):.6g} "
                    f"(baseline {reference}, margin {margin})"
                )
    return problems


def compare_benchmark(current: Path, baseline: Path, margin: float) -> List[str]:
    try:
        cur = parse_benchmark_results(_read_artifact(current))
        base = parse_benchmark_results(_read_artifact(baseline))
        problems = compare_benchmark_records(cur, base, margin)
    except ComparisonError as exc:
        raise ComparisonError(f"Failed to compare {current} with {baseline}") from exc
    return [f"{current}: {p}" for p in problems]


def compare_with_baseline(run: Run, baseline_dir: Path, margin: float = DEFAULT_MARGIN) -> RegressionReport:
    """Compare every combination of *run*, in sweep order, against *baseline_dir*."""

    baseline_dir = Path(baseline_dir)
    regressions = 0
    details: List[str] = []

    for combo in run.combinations():
        if run.kind is RunKind.EVALUATE:
            current, baseline = _artifact_pair(run, combo, baseline_dir, ArtifactKind.TREC_EVAL)
            problems = compare_evaluation(current, baseline)
        else:
            current, baseline = _artifact_pair(run, combo, baseline_dir, ArtifactKind.BENCH)
            problems = compare_benchmark(current, baseline, margin)

        if problems:
            regressions += 1
            for line in problems:
                logger.warning("[regression] %s", line)
            details.extend(problems)

    if regressions:
        return RegressionReport.regression(regressions, tuple(details))
    return RegressionReport.success()
