"""pipeline.run

Execute the algorithm x encoding x topics sweep of one configured run.

Iteration order is algorithm (outer), encoding, topic index (inner). It fixes
artifact names, so a baseline produced by an earlier run lines up file by file:

    <output>.<algorithm>.<encoding>.<topic_index>.results
    <output>.<algorithm>.<encoding>.<topic_index>.trec_eval
    <output>.<algorithm>.<encoding>.<topic_index>.bench

The first failing tool aborts the run. Artifacts written for earlier
combinations stay on disk.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from stdbench.domain import Combination, Run, RunKind, Topics
from stdbench.errors import StdbenchError
from stdbench.io import ArtifactKind, artifact_path, ensure_parent_exists, write_text_atomic
from stdbench.io import layout
from toolchain.command import CommandPipeline
from toolchain.executor import Executor, output_checked

from .results import format_trec_results, parse_trec_results, sort_results

logger = logging.getLogger(__name__)


def resolve_queries(executor: Executor, topics: Topics) -> Path:
    """Return a query file usable by the tools, extracting TREC topics if needed."""

    if not topics.needs_extraction:
        return topics.path
    executor.extract_topics(topics.path, topics.path)
    return layout.extracted_topics(topics.path, topics.trec_field)


def relevance_command(trec_eval: str, qrels: Path, results: Path) -> CommandPipeline:
    return CommandPipeline(trec_eval).args(["-q", "-a", qrels, results])


def _evaluate(
    executor: Executor,
    run: Run,
    combo: Combination,
    queries: Path,
    trec_eval: str,
) -> List[Path]:
    text = executor.evaluate_queries(run.collection, combo.encoding, combo.algorithm, queries, run.scorer)
    results = sort_results(parse_trec_results(text))

    results_path = artifact_path(run.output, combo.algorithm, combo.encoding, combo.topic_index, ArtifactKind.RESULTS)
    write_text_atomic(results_path, format_trec_results(results))

    res = output_checked(
        relevance_command(trec_eval, run.qrels, results_path),
        program=trec_eval,
        error_message="Failed to evaluate results",
    )
    eval_path = artifact_path(run.output, combo.algorithm, combo.encoding, combo.topic_index, ArtifactKind.TREC_EVAL)
    write_text_atomic(eval_path, res.stdout)
    return [results_path, eval_path]


def _benchmark(executor: Executor, run: Run, combo: Combination, queries: Path) -> List[Path]:
    text = executor.benchmark(run.collection, combo.encoding, combo.algorithm, queries, run.scorer)
    bench_path = artifact_path(run.output, combo.algorithm, combo.encoding, combo.topic_index, ArtifactKind.BENCH)
    write_text_atomic(bench_path, text)
    return [bench_path]


def process_run(executor: Executor, run: Run, *, trec_eval: str = "trec_eval") -> List[Path]:
    """Run the whole sweep; return the written artifacts in sweep order."""

    logger.info("[%s] [run] Processing %s run -> %s", run.collection.name, run.run_type, run.output)
    try:
        ensure_parent_exists(run.output)
    except OSError as exc:
        raise StdbenchError(f"Failed to create output directory for {run.output}") from exc

    queries = [resolve_queries(executor, t) for t in run.topics]

    written: List[Path] = []
    for combo in run.combinations():
        logger.info(
            "[%s] [run] algorithm=%s encoding=%s topics=%d",
            run.collection.name,
            combo.algorithm,
            combo.encoding,
            combo.topic_index,
        )
        if run.kind is RunKind.EVALUATE:
            written.extend(_evaluate(executor, run, combo, queries[combo.topic_index], trec_eval))
        else:
            written.extend(_benchmark(executor, run, combo, queries[combo.topic_index]))
    return written
