"""stdbench.domain.run

Experimental runs and the sweep they expand into.

A run targets one collection and sweeps every
``(algorithm, encoding, topic file)`` combination. The iteration order is part
of the artifact contract (it determines file names and the order in which
tools are invoked), so it lives here, in one place:

    algorithm (outer) -> encoding -> topic index (innermost)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterator, Optional, Tuple

from .collection import Algorithm, Collection, Encoding


class RunKind(Enum):
    # Relevance evaluation: results are scored against qrels.
    EVALUATE = "evaluate"
    # Query timing: quantiles are compared within a tolerance margin.
    BENCHMARK = "benchmark"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, name: str) -> "RunKind":
        for kind in cls:
            if kind.value == (name or "").strip().lower():
                return kind
        raise ValueError(f"unknown run type: {name}")


class TrecTopicField(Enum):
    """Which field of a TREC topic becomes the query text."""

    TITLE = "title"
    DESCRIPTION = "desc"
    NARRATIVE = "narr"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, name: str) -> "TrecTopicField":
        for field in cls:
            if field.value == (name or "").strip().lower():
                return field
        raise ValueError(f"failed to parse trec topic field: {name}")


@dataclass(frozen=True)
class Topics:
    """One topic source.

    ``trec_field=None`` means the file already holds one ``qid:query terms``
    line per query and can be passed to the tools as is. Otherwise the file is
    in TREC format and must be extracted first.
    """

    path: Path
    trec_field: Optional[TrecTopicField] = TrecTopicField.TITLE

    @property
    def needs_extraction(self) -> bool:
        return self.trec_field is not None


@dataclass(frozen=True)
class Combination:
    algorithm: Algorithm
    encoding: Encoding
    topic_index: int


@dataclass(frozen=True)
class Run:
    """A configured run.

    ``output`` is a path *template*: every artifact of the run is named
    ``<output>.<algorithm>.<encoding>.<topic_index>.<suffix>``.
    """

    kind: RunKind
    collection: Collection
    topics: Tuple[Topics, ...]
    output: Path
    algorithms: Tuple[Algorithm, ...]
    encodings: Tuple[Encoding, ...]
    qrels: Optional[Path] = None
    scorer: Optional[str] = None

    def __post_init__(self) -> None:
        if self.kind is RunKind.EVALUATE and self.qrels is None:
            raise ValueError("evaluate run requires qrels")

    @property
    def run_type(self) -> str:
        return self.kind.value

    def combinations(self) -> Iterator[Combination]:
        for algorithm in self.algorithms:
            for encoding in self.encodings:
                for topic_index in range(len(self.topics)):
                    yield Combination(algorithm, encoding, topic_index)
