"""toolchain/executor.py

Executors resolve the index toolchain's programs and run them.

Two interchangeable backends, chosen once from configuration:

* :class:`SystemPathExecutor` - programs are looked up on ``PATH``.
* :class:`CustomPathExecutor` - programs live in one build directory
  (``<dir>/<program>``), e.g. a freshly compiled checkout.

The high-level operations (``invert``, ``compress``, ...) are shared by both
backends and differ only in how a program name becomes a path. Each operation
fails with a fixed message so a log line says which step broke.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Union

from stdbench.domain import Algorithm, Collection, Encoding
from stdbench.errors import StdbenchError, ToolError
from stdbench.io import layout

from .command import CmdResult, CommandPipeline

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

STEMMER = "porter2"

# Number of results retrieved per query.
RESULT_DEPTH = 1000


def run_checked(cmd: CommandPipeline, *, program: str, error_message: str) -> None:
    """Run *cmd* with inherited output; raise :class:`ToolError` on failure."""

    try:
        status = cmd.execute()
    except OSError as exc:
        raise ToolError(f"Failed to execute: {program}") from exc
    if status != 0:
        raise ToolError(error_message)


def output_checked(cmd: CommandPipeline, *, program: str, error_message: str) -> CmdResult:
    """Run *cmd* capturing output; raise :class:`ToolError` carrying stderr on failure."""

    try:
        res = cmd.output()
    except OSError as exc:
        raise ToolError(f"Failed to execute: {program}") from exc
    if not res.success:
        detail = res.stderr.strip()
        raise ToolError(f"{error_message}: {detail}" if detail else error_message)
    return res


class Executor(ABC):
    """Contract consumed by the build and run orchestrators."""

    @abstractmethod
    def resolve(self, program: str) -> str:
        """Return the invocable path (or name) of a toolchain program."""

    def command(self, program: str, *args: object) -> CommandPipeline:
        """Single-stage pipeline for an ad hoc toolchain invocation."""

        return CommandPipeline(self.resolve(program)).args(args)

    def invert(self, forward_index: PathLike, inverted_index: PathLike, term_count: int) -> None:
        cmd = self.command(
            "invert",
            "-i", forward_index,
            "-o", inverted_index,
            "--term-count", int(term_count),
        )
        run_checked(cmd, program="invert", error_message="Failed to invert index")

    def compress(self, inverted_index: PathLike, encoding: Encoding) -> None:
        cmd = self.command(
            "create_freq_index",
            "-t", encoding,
            "-c", inverted_index,
            "-o", layout.compressed_index(inverted_index, encoding),
            "--check",
        )
        run_checked(cmd, program="create_freq_index", error_message="Failed to compress index")

    def create_wand_data(self, inverted_index: PathLike) -> None:
        cmd = self.command(
            "create_wand_data",
            "-c", inverted_index,
            "-o", layout.wand_data(inverted_index),
        )
        run_checked(cmd, program="create_wand_data", error_message="Failed to create WAND data")

    def build_lexicon(self, input_path: PathLike, output_path: PathLike) -> None:
        cmd = self.command("lexicon", "build", input_path, output_path)
        run_checked(cmd, program="lexicon", error_message="Failed to build lexicon")

    def extract_topics(self, input_path: PathLike, output_prefix: PathLike) -> None:
        cmd = self.command("extract_topics", "-i", input_path, "-o", output_prefix)
        run_checked(cmd, program="extract_topics", error_message="Failed to extract topics")

    def merge(self, forward_index: PathLike, batch_count: int, document_count: int) -> None:
        """Merge partial forward-index batches left by an earlier parse."""

        cmd = self.command(
            "parse_collection",
            "-o", forward_index,
            "merge",
            "--batch-count", int(batch_count),
            "--document-count", int(document_count),
        )
        run_checked(cmd, program="parse_collection", error_message="Failed to merge collection batches")

    def evaluate_queries(
        self,
        collection: Collection,
        encoding: Encoding,
        algorithm: Algorithm,
        queries: PathLike,
        scorer: Optional[str] = None,
    ) -> str:
        """Run retrieval for *queries*; return the TREC-formatted results text."""

        fwd, inv = collection.forward_index, collection.inverted_index
        cmd = self.command(
            "evaluate_queries",
            "-t", encoding,
            "-i", layout.compressed_index(inv, encoding),
            "-w", layout.wand_data(inv),
            "-a", algorithm,
            "-q", queries,
            "--terms", layout.termmap_file(fwd),
            "--documents", layout.docmap_file(fwd),
            "--stemmer", STEMMER,
            "-k", RESULT_DEPTH,
        )
        if scorer:
            cmd.args(["--scorer", scorer])
        res = output_checked(cmd, program="evaluate_queries", error_message="Failed to evaluate queries")
        return res.stdout

    def benchmark(
        self,
        collection: Collection,
        encoding: Encoding,
        algorithm: Algorithm,
        queries: PathLike,
        scorer: Optional[str] = None,
    ) -> str:
        """Time query processing; return the tool's raw (JSON lines) output."""

        fwd, inv = collection.forward_index, collection.inverted_index
        cmd = self.command(
            "queries",
            "-t", encoding,
            "-i", layout.compressed_index(inv, encoding),
            "-w", layout.wand_data(inv),
            "-a", algorithm,
            "-q", queries,
            "--terms", layout.termmap_file(fwd),
            "--stemmer", STEMMER,
            "-k", RESULT_DEPTH,
        )
        if scorer:
            cmd.args(["--scorer", scorer])
        res = output_checked(cmd, program="queries", error_message="Failed to run benchmark")
        return res.stdout


class SystemPathExecutor(Executor):
    """Runs programs by name, as found on ``PATH``."""

    def resolve(self, program: str) -> str:
        return program

    def __repr__(self) -> str:
        return "SystemPathExecutor()"


class CustomPathExecutor(Executor):
    """Runs programs from a single bin directory."""

    def __init__(self, bin_dir: PathLike) -> None:
        p = Path(bin_dir)
        if not p.is_dir():
            raise StdbenchError(f"Failed to construct executor: not a directory: {p}")
        self._bin = p

    @property
    def path(self) -> Path:
        return self._bin

    def resolve(self, program: str) -> str:
        return str(self._bin / program)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CustomPathExecutor):
            return NotImplemented
        return self._bin == other._bin

    def __hash__(self) -> int:
        return hash(self._bin)

    def __repr__(self) -> str:
        return f"CustomPathExecutor({str(self._bin)!r})"
