from __future__ import annotations

import argparse


def add_base_args(parser: argparse.ArgumentParser) -> None:
    """Register configuration, selection and verbosity flags."""

    parser.add_argument(
        "--config-file",
        dest="config_file",
        help="YAML configuration file (required unless --print-stages is given).",
    )
    parser.add_argument(
        "--collections",
        nargs="+",
        metavar="NAME",
        default=None,
        help="Only build these collections and only process the runs that target them.",
    )
    parser.add_argument(
        "--no-scorer",
        dest="no_scorer",
        action="store_true",
        help="Do not pass --scorer to the query tools (older toolchains do not accept it).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-v info, -vv debug). STDBENCH_LOG_LEVEL overrides.",
    )
