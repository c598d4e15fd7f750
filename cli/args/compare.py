from __future__ import annotations

import argparse

from pipeline.regression import DEFAULT_MARGIN


def add_compare_args(parser: argparse.ArgumentParser) -> None:
    """Register baseline comparison flags."""

    parser.add_argument(
        "--baseline",
        default=None,
        help="Directory holding the artifacts of an earlier run to compare against.",
    )
    parser.add_argument(
        "--margin",
        type=float,
        default=DEFAULT_MARGIN,
        help=f"Relative tolerance for benchmark timings (default: {DEFAULT_MARGIN}).",
    )
