"""pipeline.orchestrator

End-to-end entry point: build every collection, process every run and,
optionally, compare the results with a baseline.

The CLI stays thin: it parses flags, loads configuration and hands a
:class:`BenchRequest` to :func:`run_stdbench`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from stdbench.config import Config
from toolchain.executor import Executor

from .build import build_collection
from .regression import DEFAULT_MARGIN, RegressionReport, compare_with_baseline
from .run import process_run

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_REGRESSION = 2


@dataclass(frozen=True)
class BenchRequest:
    config: Config
    executor: Executor
    baseline_dir: Optional[Path] = None
    margin: float = DEFAULT_MARGIN


@dataclass(frozen=True)
class BenchOutcome:
    artifacts: List[Path]
    reports: List[RegressionReport]

    @property
    def regressions(self) -> int:
        return sum(r.regressions for r in self.reports)

    @property
    def exit_code(self) -> int:
        return EXIT_REGRESSION if self.regressions else EXIT_OK


def execute(req: BenchRequest) -> BenchOutcome:
    config = req.config
    for collection in config.collections:
        build_collection(req.executor, collection, config.stages)

    artifacts: List[Path] = []
    for run in config.runs:
        artifacts.extend(process_run(req.executor, run, trec_eval=config.trec_eval))

    reports: List[RegressionReport] = []
    if req.baseline_dir is not None:
        for run in config.runs:
            report = compare_with_baseline(run, req.baseline_dir, req.margin)
            logger.info("[%s] [compare] %s", run.collection.name, report)
            reports.append(report)
    return BenchOutcome(artifacts=artifacts, reports=reports)


def run_stdbench(req: BenchRequest) -> int:
    """Return ``0`` on success and ``2`` when a regression was detected.

    Errors propagate to the caller.
    """

    outcome = execute(req)
    if outcome.regressions:
        logger.warning("Detected %d regression(s)", outcome.regressions)
    return outcome.exit_code
