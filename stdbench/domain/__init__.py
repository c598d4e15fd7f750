"""stdbench.domain

Canonical, immutable data contracts shared by configuration, orchestration
and comparison.
"""

from __future__ import annotations

from .collection import (
    PARSER_SPECS,
    Algorithm,
    Collection,
    CollectionKind,
    Encoding,
    ParserSpec,
)
from .run import Combination, Run, RunKind, Topics, TrecTopicField
from .stages import Stage, StageController

__all__ = [
    "PARSER_SPECS",
    "Algorithm",
    "Collection",
    "CollectionKind",
    "Combination",
    "Encoding",
    "ParserSpec",
    "Run",
    "RunKind",
    "Stage",
    "StageController",
    "Topics",
    "TrecTopicField",
]
