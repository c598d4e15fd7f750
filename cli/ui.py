"""Human-facing console output.

Logging goes to stderr through :mod:`logging`; these helpers print the short
progress and summary lines a person running the harness reads on stdout.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Sequence

from stdbench.config import Config
from stdbench.domain import Stage


def print_stages(stages: Iterable[Stage] = tuple(Stage)) -> None:
    for stage in stages:
        print(stage)


def print_plan(config: Config) -> None:
    print("\n🚀 Running stdbench")
    print(f"  Workdir     : {config.workdir}")
    print(f"  Collections : {', '.join(c.name for c in config.collections) or '(none)'}")
    print(f"  Runs        : {len(config.runs)}")
    suppressed = sorted(str(s) for s in config.stages.suppressed)
    if suppressed:
        print(f"  Suppressed  : {', '.join(suppressed)}")


def print_summary(artifacts: Sequence[Path], regressions: int, compared: bool) -> None:
    print("\n" + "=" * 72)
    print(f"📦 Artifacts written: {len(artifacts)}")
    if not compared:
        print("✅ Done (no baseline comparison)")
    elif regressions:
        print(f"❌ Regressions detected: {regressions}")
    else:
        print("✅ No regressions")


def print_error(message: str) -> None:
    print(f"❌ {message}")


def print_warning(message: str) -> None:
    print(f"⚠️  {message}")
