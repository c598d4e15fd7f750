"""pipeline.results

Structured views of the text the query tools print.

* ``evaluate_queries`` prints TREC run lines::

      <qid> <iter> <docid> <rank> <score> <run_id>

  Records are re-sorted into a canonical order before they are persisted so
  that two runs over the same index produce byte-identical files.

* ``queries`` (the benchmark tool) prints one JSON object per line with the
  timing quantiles of one (encoding, algorithm) pair.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Iterable, List, Tuple

from stdbench.errors import ComparisonError, InputError


@dataclass(frozen=True)
class TrecResult:
    qid: str
    iteration: str
    docid: str
    rank: str
    score: str
    run_id: str

    @property
    def score_value(self) -> float:
        return float(self.score)

    def sort_key(self) -> Tuple[str, str, str, float, str]:
        return (self.run_id, self.iteration, self.qid, -self.score_value, self.docid)

    def to_line(self) -> str:
        return " ".join((self.qid, self.iteration, self.docid, self.rank, self.score, self.run_id))


def parse_trec_line(line: str) -> TrecResult:
    fields = line.split()
    if len(fields) != 6:
        raise InputError(f"malformed result line (expected 6 fields): {line!r}")
    try:
        float(fields[4])
    except ValueError as exc:
        raise InputError(f"malformed score in result line: {line!r}") from exc
    return TrecResult(*fields)


def parse_trec_results(text: str) -> List[TrecResult]:
    return [parse_trec_line(line) for line in text.splitlines() if line.strip()]


def sort_results(results: Iterable[TrecResult]) -> List[TrecResult]:
    """Canonical order: run id, iteration, qid, score descending, docid ascending.

    Only the score compares numerically. Identifiers compare as strings, so
    docid ``"10"`` sorts before ``"9"``.
    """

    return sorted(results, key=TrecResult.sort_key)


def format_trec_results(results: Iterable[TrecResult]) -> str:
    return "".join(f"{r.to_line()}\n" for r in results)


@dataclass(frozen=True)
class BenchmarkResult:
    encoding: str
    algorithm: str
    avg: float
    q50: float
    q90: float
    q95: float

    METRICS = ("avg", "q50", "q90", "q95")

    def metric(self, name: str) -> float:
        return float(getattr(self, name))


def parse_benchmark_line(line: str) -> BenchmarkResult:
    try:
        raw = json.loads(line)
    except json.JSONDecodeError as exc:
        raise ComparisonError(f"invalid benchmark record: {line!r}") from exc
    if not isinstance(raw, dict):
        raise ComparisonError(f"benchmark record is not an object: {line!r}")
    try:
        return BenchmarkResult(
            encoding=str(raw["type"]),
            algorithm=str(raw["query"]),
            avg=float(raw["avg"]),
            q50=float(raw["q50"]),
            q90=float(raw["q90"]),
            q95=float(raw["q95"]),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise ComparisonError(f"incomplete benchmark record: {line!r}") from exc


def parse_benchmark_results(text: str) -> List[BenchmarkResult]:
    return [parse_benchmark_line(line) for line in text.splitlines() if line.strip()]
