import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from stdbench.config import load_config, parse_config
from stdbench.domain import CollectionKind, RunKind, Stage, StageController, TrecTopicField
from stdbench.errors import ConfigError
from toolchain.source import GitSource, PathSource, SystemSource

CONFIG_YAML = """\
workdir: /bench
trec_eval: /opt/trec_eval
source:
  type: git
  url: https://example.com/pisa.git
  branch: main
collections:
  - name: wapo
    kind: washington-post
    collection_dir: /data/wapo
    encodings: [block_simdbp, block_qmx]
  - name: gov2
    kind: trecweb
    collection_dir: /data/gov2
    forward_index: /idx/gov2.fwd
    inverted_index: idx/gov2.inv
    encodings:
      - block_simdbp
      - 17
runs:
  - collection: wapo
    type: evaluate
    topics:
      - path: /topics/wapo.txt
        field: desc
      - path: /topics/simple.txt
        format: simple
    qrels: /qrels/wapo.txt
    output: out/wapo
    algorithms: [wand, maxscore]
    scorer: bm25
  - collection: gov2
    type: benchmark
    topics: {path: /topics/gov2.txt}
    output: /abs/gov2
"""


class TestLoadConfig(unittest.TestCase):
    def _load(self, text: str, **kwargs):
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "stdbench.yml"
            path.write_text(text, encoding="utf-8")
            return load_config(path, **kwargs)

    def test_full_config(self) -> None:
        with self.assertLogs("stdbench.config.loader", level="ERROR"):
            config = self._load(CONFIG_YAML)

        self.assertEqual(Path("/bench"), config.workdir)
        self.assertEqual("/opt/trec_eval", config.trec_eval)
        self.assertEqual(GitSource("https://example.com/pisa.git", "main"), config.source)

        wapo, gov2 = config.collections
        self.assertIs(CollectionKind.WASHINGTON_POST, wapo.kind)
        self.assertEqual(Path("/bench/fwd/wapo"), wapo.forward_index)
        self.assertEqual(Path("/bench/inv/wapo"), wapo.inverted_index)
        self.assertEqual(("block_simdbp", "block_qmx"), wapo.encodings)
        self.assertEqual(Path("/idx/gov2.fwd"), gov2.forward_index)
        self.assertEqual(Path("/bench/idx/gov2.inv"), gov2.inverted_index)
        self.assertEqual(("block_simdbp",), gov2.encodings)

        evaluate, benchmark = config.runs
        self.assertIs(RunKind.EVALUATE, evaluate.kind)
        self.assertEqual(Path("/bench/out/wapo"), evaluate.output)
        self.assertEqual(("wand", "maxscore"), evaluate.algorithms)
        self.assertEqual(wapo.encodings, evaluate.encodings)
        self.assertEqual(TrecTopicField.DESCRIPTION, evaluate.topics[0].trec_field)
        self.assertFalse(evaluate.topics[1].needs_extraction)
        self.assertEqual("bm25", evaluate.scorer)
        self.assertIs(RunKind.BENCHMARK, benchmark.kind)
        self.assertEqual(("wand",), benchmark.algorithms)
        self.assertEqual(TrecTopicField.TITLE, benchmark.topics[0].trec_field)
        self.assertIsNone(benchmark.qrels)

    def test_stages_are_attached(self) -> None:
        stages = StageController([Stage.COMPILE])
        with self.assertLogs("stdbench.config.loader", level="ERROR"):
            config = self._load(CONFIG_YAML, stages=stages)
        self.assertTrue(config.stages.is_suppressed(Stage.COMPILE))

    def test_malformed_collection_is_skipped(self) -> None:
        text = (
            "workdir: /w\n"
            "collections:\n"
            "  - name: ok\n    kind: warc\n    collection_dir: /c\n    encodings: [block_qmx]\n"
            "  - name: broken\n    kind: nonsense\n    collection_dir: /c\n    encodings: [block_qmx]\n"
        )
        with self.assertLogs("stdbench.config.loader", level="ERROR") as logs:
            config = self._load(text)
        self.assertEqual(["ok"], [c.name for c in config.collections])
        self.assertIn("failed to parse collection broken", "\n".join(logs.output))

    def test_no_valid_collection(self) -> None:
        text = "workdir: /w\ncollections:\n  - name: x\n    kind: wapo\n"
        with self.assertLogs("stdbench.config.loader", level="ERROR"):
            with self.assertRaisesRegex(ConfigError, "no correct collection configurations found"):
                self._load(text)

    def test_unknown_collection_in_run(self) -> None:
        text = CONFIG_YAML.replace("- collection: gov2", "- collection: robust")
        with self.assertLogs("stdbench.config.loader", level="ERROR"):
            with self.assertRaisesRegex(ConfigError, "collection robust not found in config"):
                self._load(text)

    def test_evaluate_requires_qrels(self) -> None:
        text = CONFIG_YAML.replace("    qrels: /qrels/wapo.txt\n", "")
        with self.assertLogs("stdbench.config.loader", level="ERROR"):
            with self.assertRaisesRegex(ConfigError, "field qrels missing or not string"):
                self._load(text)

    def test_invalid_yaml(self) -> None:
        with self.assertRaisesRegex(ConfigError, "could not parse YAML file"):
            self._load("workdir: [unclosed\n")

    def test_missing_file(self) -> None:
        with self.assertRaisesRegex(ConfigError, "Failed to read config file"):
            load_config(Path("/nonexistent/stdbench.yml"))


class TestParseConfig(unittest.TestCase):
    BASE = {
        "collections": [
            {"name": "c", "kind": "warc", "collection_dir": "/c", "encodings": ["block_qmx"]},
        ],
    }

    def test_workdir_falls_back_to_environment(self) -> None:
        with mock.patch.dict(os.environ, {"STDBENCH_WORKDIR": "/from/env"}):
            config = parse_config(dict(self.BASE))
        self.assertEqual(Path("/from/env"), config.workdir)

    def test_missing_workdir(self) -> None:
        with mock.patch.dict(os.environ, {}, clear=True):
            with self.assertRaisesRegex(ConfigError, "missing or corrupted workdir"):
                parse_config(dict(self.BASE))

    def test_sources(self) -> None:
        base = dict(self.BASE, workdir="/w")
        self.assertEqual(SystemSource(), parse_config(base).source)
        self.assertEqual(SystemSource(), parse_config(dict(base, source={"type": "system"})).source)
        self.assertEqual(
            PathSource(Path("bin")),
            parse_config(dict(base, source={"type": "path", "path": "bin"})).source,
        )
        with self.assertRaisesRegex(ConfigError, "missing source.branch"):
            parse_config(dict(base, source={"type": "git", "url": "u"}))

    def test_filters_and_scorer(self) -> None:
        data = dict(
            self.BASE,
            workdir="/w",
            collections=self.BASE["collections"]
            + [{"name": "d", "kind": "wapo", "collection_dir": "/d", "encodings": ["x"]}],
            runs=[
                {"collection": "c", "type": "benchmark", "topics": "/t", "output": "o1", "scorer": "bm25"},
                {"collection": "d", "type": "benchmark", "topics": "/t", "output": "o2"},
            ],
        )
        config = parse_config(data)
        only_d = config.filter_collections(["d"])
        self.assertEqual(["d"], [c.name for c in only_d.collections])
        self.assertEqual(["d"], [r.collection.name for r in only_d.runs])

        plain = config.without_scorer()
        self.assertEqual([None, None], [r.scorer for r in plain.runs])
        self.assertEqual("bm25", config.runs[0].scorer)


if __name__ == "__main__":
    unittest.main()
