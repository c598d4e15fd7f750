import unittest

from stdbench.errors import InputError, StdbenchError, ToolError


class TestErrorChain(unittest.TestCase):
    def test_str_includes_chained_causes(self) -> None:
        try:
            try:
                try:
                    raise FileNotFoundError(2, "No such file or directory")
                except OSError as exc:
                    raise InputError("could not read terms") from exc
            except InputError as exc:
                raise ToolError("Failed to count terms") from exc
        except ToolError as err:
            text = str(err)

        self.assertEqual(
            "Failed to count terms: could not read terms: [Errno 2] No such file or directory",
            text,
        )

    def test_str_without_cause(self) -> None:
        self.assertEqual("boom", str(StdbenchError("boom")))


if __name__ == "__main__":
    unittest.main()
