import unittest

from pipeline.results import (
    format_trec_results,
    parse_benchmark_results,
    parse_trec_results,
    sort_results,
)
from stdbench.errors import ComparisonError, InputError


class TestTrecResults(unittest.TestCase):
    def test_equal_scores_sort_by_ascending_docid(self) -> None:
        results = parse_trec_results("1 Q0 5 1 1.0 R0\n1 Q0 2 2 1.0 R0\n")
        self.assertEqual(["2", "5"], [r.docid for r in sort_results(results)])

    def test_higher_score_sorts_first(self) -> None:
        results = parse_trec_results("1 Q0 d1 1 1.5 R0\n1 Q0 d2 2 2.0 R0\n")
        self.assertEqual(["2.0", "1.5"], [r.score for r in sort_results(results)])

    def test_scores_compare_numerically(self) -> None:
        results = parse_trec_results("1 Q0 a 1 9.5 R0\n1 Q0 b 2 10.25 R0\n")
        self.assertEqual(["b", "a"], [r.docid for r in sort_results(results)])

    def test_queries_are_grouped_before_scores(self) -> None:
        text = "2 Q0 x 1 9.0 R0\n1 Q0 y 1 1.0 R0\n1 Q0 z 2 3.0 R0\n"
        ordered = sort_results(parse_trec_results(text))
        self.assertEqual([("1", "z"), ("1", "y"), ("2", "x")], [(r.qid, r.docid) for r in ordered])

    def test_docids_compare_as_strings(self) -> None:
        results = parse_trec_results("1 Q0 9 1 1.0 R0\n1 Q0 10 2 1.0 R0\n")
        self.assertEqual(["10", "9"], [r.docid for r in sort_results(results)])

    def test_format_keeps_original_fields(self) -> None:
        results = parse_trec_results("301 Q0 doc-7 1 12.500000 wand\n\n")
        self.assertEqual("301 Q0 doc-7 1 12.500000 wand\n", format_trec_results(results))

    def test_malformed_lines_are_rejected(self) -> None:
        with self.assertRaises(InputError):
            parse_trec_results("1 Q0 d1 1 2.0\n")
        with self.assertRaises(InputError):
            parse_trec_results("1 Q0 d1 1 high R0\n")


class TestBenchmarkResults(unittest.TestCase):
    def test_parses_json_lines(self) -> None:
        text = (
            '{"type": "block_simdbp", "query": "wand", "avg": 1.5, "q50": 1.0, "q90": 2.0, "q95": 3.0}\n'
            "\n"
            '{"type": "block_qmx", "query": "wand", "avg": 2, "q50": 1, "q90": 3, "q95": 4}\n'
        )
        records = parse_benchmark_results(text)
        self.assertEqual(2, len(records))
        self.assertEqual("block_simdbp", records[0].encoding)
        self.assertEqual("wand", records[0].algorithm)
        self.assertEqual(3.0, records[0].metric("q95"))
        self.assertEqual(4.0, records[1].q95)

    def test_missing_metric_is_a_comparison_error(self) -> None:
        with self.assertRaises(ComparisonError):
            parse_benchmark_results('{"type": "x", "query": "wand", "avg": 1}\n')

    def test_invalid_json_is_a_comparison_error(self) -> None:
        with self.assertRaises(ComparisonError):
            parse_benchmark_results("not json\n")


if __name__ == "__main__":
    unittest.main()
