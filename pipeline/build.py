"""pipeline.build

Build a queryable index from a raw collection.

The build is a fixed sequence of external tool invocations::

    parse  ->  lexicon x2  ->  invert  ->  compress x N  ->  WAND data

Stages can be suppressed to re-enter a partially built index:

* ``build``                  - skip everything.
* ``parse``                  - reuse an existing forward index.
* ``parse`` + ``parse_batches`` - merge partial batches left by an earlier,
  interrupted parse, then continue.
* ``invert``                 - reuse an existing inverted index.

Compression and WAND data always run when the build is not suppressed. The
first failure aborts the build; files already written are left in place.
"""

from __future__ import annotations

import glob
import logging
from pathlib import Path
from typing import List

from stdbench.domain import Collection, Stage, StageController
from stdbench.errors import InputError, StdbenchError, ToolError
from stdbench.io import ensure_parent_exists, sum_line_counts
from stdbench.io import layout
from toolchain.command import CommandPipeline
from toolchain.executor import Executor, run_checked

logger = logging.getLogger(__name__)


def resolve_files(pattern: Path) -> List[Path]:
    """Sorted glob matches; an empty match is an error."""

    files = sorted(Path(p) for p in glob.glob(str(pattern), recursive=True))
    if not files:
        raise InputError(f"could not resolve any files for pattern: {pattern}")
    return files


def parse_command(executor: Executor, collection: Collection) -> CommandPipeline:
    """``<decompress> <inputs> | parse_collection ...`` for the collection's kind."""

    spec = collection.kind.parser
    input_files = resolve_files(collection.input_pattern)
    return (
        CommandPipeline(spec.decompressor)
        .args(input_files)
        .pipe(executor.command("parse_collection"))
        .args(
            [
                "-o", collection.forward_index,
                "-f", spec.format,
                "--stemmer", "porter2",
                "--content-parser", "html",
                "--batch-size", spec.batch_size,
            ]
        )
    )


def term_count(collection: Collection) -> int:
    """Number of terms in an already parsed forward index (``wc -l <fwd>.terms``)."""

    terms = layout.terms_file(collection.forward_index)
    cmd = CommandPipeline("wc").args(["-l", terms])
    try:
        res = cmd.output()
    except OSError as exc:
        raise ToolError("Failed to count terms") from exc
    if not res.success:
        raise ToolError("Failed to count terms")

    first_line = res.stdout.splitlines()[0] if res.stdout else ""
    tokens = [t for t in first_line.split() if t]
    try:
        return int(tokens[0])
    except (IndexError, ValueError):
        cause = InputError(f"could not parse output of `wc -l`: {res.stdout!r}")
        raise InputError("Failed to count terms") from cause


def merge_batches(executor: Executor, collection: Collection) -> None:
    pattern = layout.batch_documents_pattern(collection.forward_index)
    try:
        batches = resolve_files(Path(pattern))
    except InputError as exc:
        raise InputError("Failed to merge collection batches") from exc
    document_count = sum_line_counts(batches)
    logger.info(
        "[%s] [build] [merge] Merging %d batches (%d documents)",
        collection.name,
        len(batches),
        document_count,
    )
    executor.merge(collection.forward_index, len(batches), document_count)


def parse_collection(executor: Executor, collection: Collection) -> None:
    cmd = parse_command(executor, collection)
    run_checked(cmd, program="parse_collection", error_message="Failed to parse")

    fwd = collection.forward_index
    executor.build_lexicon(layout.terms_file(fwd), layout.termmap_file(fwd))
    executor.build_lexicon(layout.documents_file(fwd), layout.docmap_file(fwd))


def build_collection(
    executor: Executor,
    collection: Collection,
    stages: StageController,
) -> List[Stage]:
    """Build *collection*; return the stages that actually ran, in order."""

    name = collection.name
    stages_run: List[Stage] = []
    logger.info("Processing collection: %s", name)

    if stages.is_suppressed(Stage.BUILD_INDEX):
        logger.warning("[%s] [build] Suppressed", name)
        return stages_run

    stages_run.append(Stage.BUILD_INDEX)
    logger.info("[%s] [build] Building index", name)
    try:
        ensure_parent_exists(collection.forward_index)
        ensure_parent_exists(collection.inverted_index)
    except OSError as exc:
        raise StdbenchError(f"Failed to create index directories for {name}") from exc

    if stages.is_suppressed(Stage.PARSE_COLLECTION):
        if stages.is_suppressed(Stage.PARSE_BATCHES):
            logger.warning("[%s] [build] [parse] Suppressed; merging existing batches", name)
            merge_batches(executor, collection)
        else:
            logger.warning("[%s] [build] [parse] Suppressed", name)
    else:
        stages_run.append(Stage.PARSE_COLLECTION)
        logger.info("[%s] [build] [parse] Parsing collection", name)
        parse_collection(executor, collection)

    if stages.is_suppressed(Stage.INVERT):
        logger.warning("[%s] [build] [invert] Suppressed", name)
    else:
        stages_run.append(Stage.INVERT)
        logger.info("[%s] [build] [invert] Inverting index", name)
        executor.invert(collection.forward_index, collection.inverted_index, term_count(collection))

    logger.info("[%s] [build] [compress] Compressing index", name)
    for encoding in collection.encodings:
        executor.compress(collection.inverted_index, encoding)

    logger.info("[%s] [build] [wand] Creating WAND data", name)
    executor.create_wand_data(collection.inverted_index)
    return stages_run
