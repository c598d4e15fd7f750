from __future__ import annotations

import argparse

from stdbench.domain import Stage


def add_stage_args(parser: argparse.ArgumentParser) -> None:
    """Register stage inspection/suppression flags."""

    names = ", ".join(str(s) for s in Stage)
    parser.add_argument(
        "--print-stages",
        dest="print_stages",
        action="store_true",
        help="Print the names of all stages and exit.",
    )
    parser.add_argument(
        "--suppress",
        nargs="+",
        metavar="STAGE",
        default=[],
        help=f"Skip these stages ({names}). Unknown names are ignored with a warning.",
    )
