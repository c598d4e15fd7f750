"""stdbench.config.loader

Load the YAML experiment configuration into immutable domain objects.

Example::

    workdir: /data/bench
    source:
      type: git
      url: https://github.com/pisa-engine/pisa.git
      branch: master
    collections:
      - name: wapo
        kind: wapo
        collection_dir: /data/wapo
        encodings: [block_simdbp, block_qmx]
    runs:
      - collection: wapo
        type: evaluate
        topics: {path: /data/topics.wapo.txt, format: trec, field: title}
        qrels: /data/qrels.wapo.txt
        output: out/wapo
        algorithms: [wand, maxscore]

A malformed *collection* entry is logged and skipped; everything else that is
wrong raises :class:`~stdbench.errors.ConfigError`.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import yaml

from stdbench.domain import (
    Algorithm,
    Collection,
    CollectionKind,
    Encoding,
    Run,
    RunKind,
    StageController,
    Topics,
    TrecTopicField,
)
from stdbench.errors import ConfigError
from toolchain.source import GitSource, PathSource, SystemSource, ToolchainSource

logger = logging.getLogger(__name__)

WORKDIR_ENV = "STDBENCH_WORKDIR"

DEFAULT_ALGORITHMS: Tuple[Algorithm, ...] = (Algorithm("wand"),)
DEFAULT_TREC_EVAL = "trec_eval"


@dataclass(frozen=True)
class Config:
    workdir: Path
    source: ToolchainSource = field(default_factory=SystemSource)
    collections: Tuple[Collection, ...] = ()
    runs: Tuple[Run, ...] = ()
    stages: StageController = field(default_factory=StageController, compare=False)
    trec_eval: str = DEFAULT_TREC_EVAL

    def filter_collections(self, names: Iterable[str]) -> "Config":
        """Keep only the named collections and the runs that target them."""

        keep = set(names)
        return replace(
            self,
            collections=tuple(c for c in self.collections if c.name in keep),
            runs=tuple(r for r in self.runs if r.collection.name in keep),
        )

    def without_scorer(self) -> "Config":
        """Drop every run's scorer so no ``--scorer`` flag reaches the query tools."""

        return replace(
            self,
            runs=tuple(replace(r, scorer=None) for r in self.runs),
        )


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------


def require_string(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key) if isinstance(data, Mapping) else None
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"field {key} missing or not string")
    return value


def optional_string(data: Mapping[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigError(f"field {key} is not a string")
    return value


def _under(workdir: Path, raw: str) -> Path:
    p = Path(raw)
    return p if p.is_absolute() else workdir / p


def _string_list(value: Any, key: str) -> List[str]:
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list):
        raise ConfigError(f"field {key} is not a list")
    out = []
    for item in value:
        if not isinstance(item, str):
            raise ConfigError(f"field {key} contains a non-string entry: {item!r}")
        out.append(item)
    return out


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------


def parse_source(data: Any) -> ToolchainSource:
    if data is None:
        return SystemSource()
    if not isinstance(data, Mapping):
        raise ConfigError("missing or corrupted source")
    typ = data.get("type")
    if typ == "system":
        return SystemSource()
    if typ == "path":
        path = data.get("path")
        if not isinstance(path, str):
            raise ConfigError("missing source.path")
        return PathSource(Path(path))
    if typ == "git":
        url, branch = data.get("url"), data.get("branch")
        if not isinstance(url, str):
            raise ConfigError("missing source.url")
        if not isinstance(branch, str):
            raise ConfigError("missing source.branch")
        return GitSource(url, branch)
    if typ is None:
        raise ConfigError("missing or corrupted source.type")
    raise ConfigError(f"unknown source type: {typ}")


def parse_encodings(value: Any) -> Tuple[Encoding, ...]:
    if not isinstance(value, list):
        raise ConfigError("missing or corrupted encoding list")
    encodings: List[Encoding] = []
    for enc in value:
        if isinstance(enc, str) and enc.strip():
            encodings.append(Encoding(enc.strip()))
        else:
            logger.error("could not parse encoding: %r", enc)
    if not encodings:
        raise ConfigError("no valid encoding entries")
    return tuple(encodings)


def parse_collection(data: Any, workdir: Path) -> Collection:
    if not isinstance(data, Mapping):
        raise ConfigError("collection entry is not a mapping")
    name = require_string(data, "name")
    try:
        kind = CollectionKind.parse(require_string(data, "kind"))
        collection_dir = Path(require_string(data, "collection_dir"))
        fwd = optional_string(data, "forward_index") or f"fwd/{name}"
        inv = optional_string(data, "inverted_index") or f"inv/{name}"
        encodings = parse_encodings(data.get("encodings"))
    except (ConfigError, ValueError) as exc:
        raise ConfigError(f"failed to parse collection {name}") from exc
    return Collection(
        name=name,
        kind=kind,
        collection_dir=collection_dir,
        forward_index=_under(workdir, fwd),
        inverted_index=_under(workdir, inv),
        encodings=encodings,
    )


def parse_collections(data: Any, workdir: Path) -> Tuple[Collection, ...]:
    if not isinstance(data, list):
        raise ConfigError("missing or corrupted collections config")
    collections: List[Collection] = []
    for entry in data:
        try:
            collections.append(parse_collection(entry, workdir))
        except ConfigError as exc:
            logger.error("Unable to parse collection config: %s", exc)
    if not collections:
        raise ConfigError("no correct collection configurations found")
    return tuple(collections)


def parse_topics(data: Any) -> Tuple[Topics, ...]:
    entries = data if isinstance(data, list) else [data]
    topics: List[Topics] = []
    for entry in entries:
        if isinstance(entry, str):
            topics.append(Topics(Path(entry)))
            continue
        if not isinstance(entry, Mapping):
            raise ConfigError("topics entry is neither a path nor a mapping")
        path = Path(require_string(entry, "path"))
        fmt = (optional_string(entry, "format") or "trec").lower()
        if fmt == "simple":
            topics.append(Topics(path, trec_field=None))
        elif fmt == "trec":
            try:
                trec_field = TrecTopicField.parse(optional_string(entry, "field") or "title")
            except ValueError as exc:
                raise ConfigError(str(exc)) from exc
            topics.append(Topics(path, trec_field=trec_field))
        else:
            raise ConfigError(f"invalid topics format: {fmt}")
    if not topics:
        raise ConfigError("run has no topics")
    return tuple(topics)


def parse_run(data: Any, collections: Mapping[str, Collection], workdir: Path) -> Run:
    if not isinstance(data, Mapping):
        raise ConfigError("run entry is not a mapping")
    collection_name = require_string(data, "collection")
    collection = collections.get(collection_name)
    if collection is None:
        raise ConfigError(f"collection {collection_name} not found in config")
    try:
        kind = RunKind.parse(require_string(data, "type"))
    except ValueError as exc:
        raise ConfigError(str(exc)) from exc

    topics = parse_topics(data.get("topics"))
    output = _under(workdir, require_string(data, "output"))

    raw_algorithms = data.get("algorithms")
    algorithms = (
        tuple(Algorithm(a) for a in _string_list(raw_algorithms, "algorithms"))
        if raw_algorithms is not None
        else DEFAULT_ALGORITHMS
    )
    raw_encodings = data.get("encodings")
    encodings = (
        tuple(Encoding(e) for e in _string_list(raw_encodings, "encodings"))
        if raw_encodings is not None
        else collection.encodings
    )

    qrels: Optional[Path] = None
    if kind is RunKind.EVALUATE:
        qrels = Path(require_string(data, "qrels"))

    return Run(
        kind=kind,
        collection=collection,
        topics=topics,
        output=output,
        algorithms=algorithms,
        encodings=encodings,
        qrels=qrels,
        scorer=optional_string(data, "scorer"),
    )


def parse_config(data: Any, *, stages: Optional[StageController] = None) -> Config:
    if not isinstance(data, Mapping):
        raise ConfigError("could not parse YAML file")

    raw_workdir = data.get("workdir") or os.environ.get(WORKDIR_ENV)
    if not isinstance(raw_workdir, str) or not raw_workdir.strip():
        raise ConfigError("missing or corrupted workdir")
    workdir = Path(raw_workdir)

    source = parse_source(data.get("source"))
    collections = parse_collections(data.get("collections"), workdir)
    by_name: Dict[str, Collection] = {c.name: c for c in collections}

    raw_runs = data.get("runs") or []
    if not isinstance(raw_runs, list):
        raise ConfigError("missing or corrupted runs config")
    runs = tuple(parse_run(r, by_name, workdir) for r in raw_runs)

    trec_eval = optional_string(data, "trec_eval") or DEFAULT_TREC_EVAL

    return Config(
        workdir=workdir,
        source=source,
        collections=collections,
        runs=runs,
        stages=stages if stages is not None else StageController(),
        trec_eval=trec_eval,
    )


def load_config(path: Path, *, stages: Optional[StageController] = None) -> Config:
    """Read and parse a YAML configuration file."""

    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError("Failed to read config file") from exc
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError("could not parse YAML file") from exc
    return parse_config(data, stages=stages)
