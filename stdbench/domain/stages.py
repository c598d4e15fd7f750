"""stdbench.domain.stages

Build stages and the suppression set that controls which of them run.

Stage names are lowercase on the command line and in logs::

    compile, build, parse, parse_batches, invert
"""

from __future__ import annotations

from enum import Enum
from typing import FrozenSet, Iterable


class Stage(Enum):
    """A named, independently suppressible phase of the benchmark."""

    # Fetching, configuring and compiling the toolchain (git sources only).
    COMPILE = "compile"
    # The whole index build: parse, invert, compress, WAND data.
    BUILD_INDEX = "build"
    # Parsing the raw collection into a forward index.
    PARSE_COLLECTION = "parse"
    # Parsing into partial batches. Suppressed together with PARSE_COLLECTION
    # it means: merge batches left over from an earlier, interrupted parse.
    PARSE_BATCHES = "parse_batches"
    # Inverting the forward index; compression still runs.
    INVERT = "invert"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, name: str) -> "Stage":
        key = (name or "").strip().lower()
        for stage in cls:
            if stage.value == key:
                return stage
        raise ValueError(f"invalid stage: {name}")


class StageController:
    """Set of suppressed stages.

    Suppression is an idempotent insert; two controllers are equal when they
    suppress the same stages.
    """

    def __init__(self, suppressed: Iterable[Stage] = ()) -> None:
        self._suppressed = set(suppressed)

    def suppress(self, stage: Stage) -> None:
        self._suppressed.add(stage)

    def is_suppressed(self, stage: Stage) -> bool:
        return stage in self._suppressed

    @property
    def suppressed(self) -> FrozenSet[Stage]:
        return frozenset(self._suppressed)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StageController):
            return NotImplemented
        return self._suppressed == other._suppressed

    def __repr__(self) -> str:
        names = ", ".join(sorted(s.value for s in self._suppressed))
        return f"StageController({{{names}}})"
