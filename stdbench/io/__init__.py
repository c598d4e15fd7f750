"""stdbench.io

Filesystem contracts and IO helpers.

The artifact layout is a public contract: baselines produced by one version of
the harness are compared against runs of another. Keep naming rules in
:mod:`stdbench.io.layout` and writes in :mod:`stdbench.io.fs`.
"""

from __future__ import annotations

from .fs import count_lines, ensure_parent_exists, read_text, sum_line_counts, write_text_atomic
from .layout import ArtifactKind, artifact_path, baseline_artifact_path

__all__ = [
    "ArtifactKind",
    "artifact_path",
    "baseline_artifact_path",
    "count_lines",
    "ensure_parent_exists",
    "read_text",
    "sum_line_counts",
    "write_text_atomic",
]
