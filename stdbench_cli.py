#!/usr/bin/env python3
"""
Command line entry point for the stdbench regression harness.

Builds the configured collections, runs the configured evaluation/benchmark
sweeps and, with --baseline, compares the artifacts with an earlier run.

Usage:
  python stdbench_cli.py --print-stages
  python stdbench_cli.py --config-file stdbench.yml
  python stdbench_cli.py --config-file stdbench.yml --suppress compile parse -v
  python stdbench_cli.py --config-file stdbench.yml --baseline gold/ --margin 0.1

Exit status: 0 success, 1 error, 2 regression detected.
"""

from __future__ import annotations

import argparse
from typing import List, Optional

from cli.args.base import add_base_args
from cli.args.compare import add_compare_args
from cli.args.stages import add_stage_args
from cli.dispatch import run_from_args
from pipeline.wiring import configure_logging, load_environment


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stdbench",
        description="Build indexes, run retrieval sweeps and detect regressions against a baseline.",
    )
    add_base_args(parser)
    add_stage_args(parser)
    add_compare_args(parser)
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    # .env first so STDBENCH_LOG_LEVEL / STDBENCH_WORKDIR are visible below
    load_environment()
    args = parse_args(argv)
    configure_logging(args.verbose)
    raise SystemExit(run_from_args(args))


if __name__ == "__main__":
    main()
