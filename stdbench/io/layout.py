"""stdbench.io.layout

On-disk naming contract for build and run artifacts.

Every path here is a pure function of its inputs. External tools, the run
orchestrator and the regression detector all rely on these names, so they
must not drift:

Build artifacts::

    <fwd>.terms  <fwd>.documents  <fwd>.termmap  <fwd>.docmap
    <fwd>.batch.<n>.documents         (partial batches, merge mode)
    <inv>.<encoding>  <inv>.wand

Run artifacts::

    <template>.<algorithm>.<encoding>.<topic_index>.results
    <template>.<algorithm>.<encoding>.<topic_index>.trec_eval
    <template>.<algorithm>.<encoding>.<topic_index>.bench
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Union

PathLike = Union[str, Path]


class ArtifactKind(Enum):
    RESULTS = "results"
    TREC_EVAL = "trec_eval"
    BENCH = "bench"


def with_suffix(path: PathLike, suffix: str) -> Path:
    """Append ``.<suffix>`` to the full path (``Path.with_suffix`` replaces)."""

    return Path(f"{path}.{suffix}")


def terms_file(forward_index: PathLike) -> Path:
    return with_suffix(forward_index, "terms")


def documents_file(forward_index: PathLike) -> Path:
    return with_suffix(forward_index, "documents")


def termmap_file(forward_index: PathLike) -> Path:
    return with_suffix(forward_index, "termmap")


def docmap_file(forward_index: PathLike) -> Path:
    return with_suffix(forward_index, "docmap")


def batch_documents_pattern(forward_index: PathLike) -> str:
    return f"{forward_index}.batch.*.documents"


def compressed_index(inverted_index: PathLike, encoding: str) -> Path:
    return with_suffix(inverted_index, str(encoding))


def wand_data(inverted_index: PathLike) -> Path:
    return with_suffix(inverted_index, "wand")


def extracted_topics(topics: PathLike, field: object) -> Path:
    return with_suffix(topics, str(field))


def artifact_path(
    template: PathLike,
    algorithm: str,
    encoding: str,
    topic_index: int,
    kind: ArtifactKind,
) -> Path:
    return Path(f"{template}.{algorithm}.{encoding}.{int(topic_index)}.{kind.value}")


def baseline_artifact_path(baseline_dir: PathLike, current: PathLike) -> Path:
    """The baseline twin of a current artifact: same file name, other dir."""

    return Path(baseline_dir) / Path(current).name
