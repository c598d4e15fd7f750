"""stdbench.io.fs

Atomic text writers and small readers for run artifacts.

Run artifacts are compared byte-for-byte against a baseline, so a half
written file left behind by an interrupted run must never look like a real
one. Writes go to a temp file in the same directory and are moved into place
with :func:`os.replace`.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Iterable


def write_text_atomic(path: Path, text: str, *, encoding: str = "utf-8") -> None:
    """Write text atomically, creating parent directories as needed."""

    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f"{p.name}.", suffix=".tmp", dir=str(p.parent))
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, p)
    finally:
        tmp_path.unlink(missing_ok=True)


def read_text(path: Path, *, encoding: str = "utf-8") -> str:
    with Path(path).open("r", encoding=encoding, newline="") as f:
        return f.read()


def count_lines(path: Path) -> int:
    """Number of newline-terminated lines, like ``wc -l``."""

    n = 0
    with Path(path).open("rb") as f:
        for chunk in iter(lambda: f.read(1 << 20), b""):
            n += chunk.count(b"\n")
    return n


def ensure_parent_exists(path: Path) -> None:
    """Create the parent directory of *path* (recursively) if missing."""

    parent = Path(path).parent
    if str(parent) == str(path):
        raise OSError(f"cannot access parent of path: {path}")
    parent.mkdir(parents=True, exist_ok=True)


def sum_line_counts(paths: Iterable[Path]) -> int:
    return sum(count_lines(p) for p in paths)
