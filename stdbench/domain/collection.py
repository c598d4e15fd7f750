"""stdbench.domain.collection

Document collections and the identifiers used to index and query them.

A collection's *kind* is a closed set. Each kind fixes how its raw input is
found and fed to the parser:

============== ================== ============ ========= ==========
kind           input glob         decompress   format    batch size
============== ================== ============ ========= ==========
wapo           ``data/*.jl``      ``cat``      wapo      1000
trecweb        ``GX*/*.gz``       ``zcat``     trecweb   10000
warc           ``**/*.warc.gz``   ``zcat``     warc      10000
============== ================== ============ ========= ==========
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, NewType, Tuple

# Identifier of an index compression codec, e.g. "block_simdbp".
Encoding = NewType("Encoding", str)

# Identifier of a query processing strategy, e.g. "wand" or "maxscore".
Algorithm = NewType("Algorithm", str)


class CollectionKind(Enum):
    WASHINGTON_POST = "wapo"
    TREC_WEB = "trecweb"
    WARC = "warc"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, name: str) -> "CollectionKind":
        key = (name or "").strip().lower()
        key = _KIND_ALIASES.get(key, key)
        for kind in cls:
            if kind.value == key:
                return kind
        raise ValueError(f"Unknown collection type: {name}")

    @property
    def parser(self) -> "ParserSpec":
        return PARSER_SPECS[self]


_KIND_ALIASES = {
    "washington-post": "wapo",
    "washington_post": "wapo",
}


@dataclass(frozen=True)
class ParserSpec:
    """How raw files of one collection kind reach ``parse_collection``."""

    input_glob: str
    decompressor: str
    format: str
    batch_size: int


PARSER_SPECS: Dict[CollectionKind, ParserSpec] = {
    CollectionKind.WASHINGTON_POST: ParserSpec(
        input_glob="data/*.jl",
        decompressor="cat",
        format="wapo",
        batch_size=1000,
    ),
    CollectionKind.TREC_WEB: ParserSpec(
        input_glob="GX*/*.gz",
        decompressor="zcat",
        format="trecweb",
        batch_size=10000,
    ),
    CollectionKind.WARC: ParserSpec(
        input_glob="**/*.warc.gz",
        decompressor="zcat",
        format="warc",
        batch_size=10000,
    ),
}


@dataclass(frozen=True)
class Collection:
    """A configured collection and the index paths built from it."""

    name: str
    kind: CollectionKind
    collection_dir: Path
    forward_index: Path
    inverted_index: Path
    encodings: Tuple[Encoding, ...] = ()

    @property
    def input_pattern(self) -> Path:
        return self.collection_dir / self.kind.parser.input_glob
