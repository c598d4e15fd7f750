import unittest

from stdbench.domain import Stage, StageController


class TestStage(unittest.TestCase):
    def test_names_round_trip(self) -> None:
        names = [str(s) for s in Stage]
        self.assertEqual(["compile", "build", "parse", "parse_batches", "invert"], names)
        for stage in Stage:
            self.assertIs(stage, Stage.parse(str(stage)))

    def test_parse_is_case_insensitive(self) -> None:
        self.assertIs(Stage.INVERT, Stage.parse(" Invert "))

    def test_parse_rejects_unknown(self) -> None:
        with self.assertRaisesRegex(ValueError, "invalid stage: nope"):
            Stage.parse("nope")


class TestStageController(unittest.TestCase):
    def test_suppress_is_idempotent(self) -> None:
        stages = StageController()
        stages.suppress(Stage.PARSE_COLLECTION)
        stages.suppress(Stage.PARSE_COLLECTION)
        self.assertEqual(frozenset({Stage.PARSE_COLLECTION}), stages.suppressed)

    def test_is_suppressed(self) -> None:
        stages = StageController([Stage.INVERT])
        self.assertTrue(stages.is_suppressed(Stage.INVERT))
        self.assertFalse(stages.is_suppressed(Stage.BUILD_INDEX))

    def test_equality_is_value_based(self) -> None:
        a = StageController([Stage.INVERT, Stage.COMPILE])
        b = StageController()
        b.suppress(Stage.COMPILE)
        b.suppress(Stage.INVERT)
        self.assertEqual(a, b)
        self.assertNotEqual(a, StageController())


if __name__ == "__main__":
    unittest.main()
