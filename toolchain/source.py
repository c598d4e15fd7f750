"""toolchain/source.py

Where the index toolchain comes from.

* ``system`` - programs already on ``PATH``.
* ``path``   - a directory of prebuilt binaries.
* ``git``    - clone ``<workdir>/pisa``, check out a branch, build it with
  cmake, and use ``<workdir>/pisa/build/bin``.

Each source turns into an :class:`~toolchain.executor.Executor`. Compilation
is skipped when :attr:`Stage.COMPILE` is suppressed (the build directory is
still expected to exist).
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from stdbench.domain import Stage, StageController

from .command import CommandPipeline
from .executor import CustomPathExecutor, Executor, SystemPathExecutor, run_checked

logger = logging.getLogger(__name__)


class ToolchainSource(ABC):
    @abstractmethod
    def executor(self, workdir: Path, stages: StageController) -> Executor:
        """Prepare the toolchain (if needed) and return an executor for it."""


@dataclass(frozen=True)
class SystemSource(ToolchainSource):
    def executor(self, workdir: Path, stages: StageController) -> Executor:
        return SystemPathExecutor()


@dataclass(frozen=True)
class PathSource(ToolchainSource):
    bin: Path

    def executor(self, workdir: Path, stages: StageController) -> Executor:
        bin_dir = self.bin if self.bin.is_absolute() else Path(workdir) / self.bin
        return CustomPathExecutor(bin_dir)


@dataclass(frozen=True)
class GitSource(ToolchainSource):
    url: str
    branch: str

    def executor(self, workdir: Path, stages: StageController) -> Executor:
        clone_dir = Path(workdir) / "pisa"
        if not clone_dir.exists():
            run_checked(
                CommandPipeline("git").args(["clone", self.url, clone_dir]),
                program="git",
                error_message="cloning failed",
            )

        build_dir = clone_dir / "build"
        build_dir.mkdir(parents=True, exist_ok=True)

        if stages.is_suppressed(Stage.COMPILE):
            logger.warning("Compilation has been suppressed")
        else:
            run_checked(
                CommandPipeline("git").args(["checkout", self.branch]).current_dir(clone_dir),
                program="git",
                error_message="checkout failed",
            )
            run_checked(
                CommandPipeline("cmake").args(["-DCMAKE_BUILD_TYPE=Release", ".."]).current_dir(build_dir),
                program="cmake",
                error_message="cmake failed",
            )
            run_checked(
                CommandPipeline("cmake").args(["--build", "."]).current_dir(build_dir),
                program="cmake",
                error_message="build failed",
            )

        return CustomPathExecutor(build_dir / "bin")
