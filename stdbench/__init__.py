"""stdbench

Core package for the index regression benchmark.

The package owns the pieces every entrypoint agrees on:

* domain types (stages, collections, runs, sweep combinations)
* IO/layout rules (where build and run artifacts live on disk)
* configuration loading

Execution lives elsewhere: ``toolchain`` wraps the external programs and
``pipeline`` sequences them. The CLI is a thin composition root on top.
"""

from __future__ import annotations

__version__ = "0.3.0"
