from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Iterable

from cli import ui
from pipeline.orchestrator import EXIT_ERROR, EXIT_OK, BenchRequest, execute
from pipeline.wiring import build_executor
from stdbench.config import Config, load_config
from stdbench.domain import Stage, StageController
from stdbench.errors import StdbenchError

logger = logging.getLogger(__name__)


def stage_controller_from_names(names: Iterable[str]) -> StageController:
    """Parse ``--suppress`` values; unknown names are logged and ignored."""

    controller = StageController()
    for name in names:
        try:
            controller.suppress(Stage.parse(name))
        except ValueError as exc:
            logger.warning("%s (ignored)", exc)
            ui.print_warning(f"Ignoring unknown stage: {name}")
    return controller


def resolve_config(args: argparse.Namespace) -> Config:
    stages = stage_controller_from_names(args.suppress or [])
    config = load_config(Path(args.config_file), stages=stages)
    if args.collections:
        config = config.filter_collections(args.collections)
    if args.no_scorer:
        config = config.without_scorer()
    return config


def run_from_args(args: argparse.Namespace) -> int:
    """Execute one CLI invocation and return the process exit status."""

    if args.print_stages:
        ui.print_stages()
        return EXIT_OK

    if not args.config_file:
        ui.print_error("--config-file is required")
        return EXIT_ERROR

    try:
        config = resolve_config(args)
        ui.print_plan(config)
        executor = build_executor(config)
        req = BenchRequest(
            config=config,
            executor=executor,
            baseline_dir=Path(args.baseline) if args.baseline else None,
            margin=args.margin,
        )
        outcome = execute(req)
    except StdbenchError as exc:
        logger.error("%s", exc)
        ui.print_error(str(exc))
        return EXIT_ERROR

    ui.print_summary(outcome.artifacts, outcome.regressions, compared=req.baseline_dir is not None)
    return outcome.exit_code
