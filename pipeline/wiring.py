"""pipeline.wiring

Composition root for the harness.

This is the single place where the running application is assembled from its
building blocks:

- load environment variables from ``.env``
- configure logging
- turn the configured toolchain source into an :class:`~toolchain.executor.Executor`

Entry points (CLI, scripts, CI jobs) call into here instead of duplicating the
setup.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from stdbench.config import Config
from toolchain.executor import Executor

ROOT_DIR: Path = Path(__file__).resolve().parents[1]
ENV_PATH: Path = ROOT_DIR / ".env"

LOG_LEVEL_ENV = "STDBENCH_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def load_environment(dotenv_path: Optional[Path] = None) -> None:
    """Load ``.env`` from the repo root and the current directory.

    Variables already present in the environment win.
    """

    if dotenv_path is not None:
        load_dotenv(dotenv_path, override=False)
        return
    load_dotenv(ENV_PATH, override=False)
    cwd_env = Path.cwd() / ".env"
    if cwd_env.resolve() != ENV_PATH.resolve():
        load_dotenv(cwd_env, override=False)


def level_for_verbosity(verbosity: int) -> int:
    if verbosity <= 0:
        return logging.WARNING
    if verbosity == 1:
        return logging.INFO
    return logging.DEBUG


def configure_logging(verbosity: int = 0) -> int:
    """Configure root logging on stderr and return the effective level."""

    level = level_for_verbosity(verbosity)
    override = (os.environ.get(LOG_LEVEL_ENV) or "").strip().upper()
    if override:
        named = logging.getLevelName(override)
        if isinstance(named, int):
            level = named
    logging.basicConfig(level=level, format=LOG_FORMAT, force=True)
    return level


def build_executor(config: Config) -> Executor:
    """Construct the executor for *config*, compiling the toolchain if configured so."""

    return config.source.executor(config.workdir, config.stages)
