"""CLI argument builder modules.

The top-level :mod:`stdbench_cli` is kept thin. Groups of flags are registered
by small "arg builder" functions housed here:

- :func:`cli.args.base.add_base_args`
- :func:`cli.args.stages.add_stage_args`
- :func:`cli.args.compare.add_compare_args`
"""

from __future__ import annotations

__all__ = [
    "base",
    "stages",
    "compare",
]
