import tempfile
import unittest
from pathlib import Path

from toolchain.command import CommandPipeline, ProcessSpec


class TestCommandPipelineDisplay(unittest.TestCase):
    def test_single_stage_renders_program_and_args(self) -> None:
        cmd = CommandPipeline("invert").args(["-i", "fwd", "-o", "inv"])
        self.assertEqual("invert -i fwd -o inv", str(cmd))

    def test_piped_stages_render_on_new_lines(self) -> None:
        cmd = (
            CommandPipeline("zcat")
            .args(["a.gz", "b.gz"])
            .pipe("parse_collection")
            .args(["-o", "fwd"])
            .pipe("tee")
            .arg("log")
        )
        expected = "zcat a.gz b.gz\n    | parse_collection -o fwd\n    | tee log"
        self.assertEqual(expected, str(cmd))

    def test_args_after_pipe_only_touch_last_stage(self) -> None:
        cmd = CommandPipeline("cat").arg("x").pipe("wc").arg("-l")
        first, second = cmd.stages
        self.assertEqual(["x"], first.args)
        self.assertEqual(["-l"], second.args)

    def test_pipe_accepts_spec_and_pipeline(self) -> None:
        spec = ProcessSpec("sort", ["-u"])
        other = CommandPipeline("head").arg("-n").arg(1)
        cmd = CommandPipeline("cat").pipe(spec).pipe(other).arg("extra")

        self.assertEqual(["cat", "sort", "head"], [s.program for s in cmd.stages])
        self.assertEqual(["-n", "1", "extra"], cmd.stages[2].args)
        # The piped-in objects are copied, not aliased.
        self.assertEqual(["-u"], spec.args)
        self.assertEqual(["-n", "1"], other.stages[0].args)

    def test_current_dir_applies_to_last_stage(self) -> None:
        cmd = CommandPipeline("ls").pipe("cat").current_dir("/tmp")
        self.assertIsNone(cmd.stages[0].cwd)
        self.assertEqual(Path("/tmp"), cmd.stages[1].cwd)

    def test_mute_disables_logging(self) -> None:
        cmd = CommandPipeline("true")
        self.assertTrue(cmd.verbose)
        self.assertFalse(cmd.mute().verbose)


class TestCommandPipelineExecution(unittest.TestCase):
    def test_execute_returns_exit_status(self) -> None:
        self.assertEqual(0, CommandPipeline("true").execute())
        self.assertNotEqual(0, CommandPipeline("false").execute())

    def test_output_captures_terminal_stage(self) -> None:
        res = CommandPipeline("printf").arg("a\\nb\\nc\\n").pipe("wc").arg("-l").output()
        self.assertTrue(res.success)
        self.assertEqual("3", res.stdout.strip())
        self.assertEqual("printf a\\nb\\nc\\n\n    | wc -l", res.command_str)

    def test_output_captures_stderr(self) -> None:
        res = CommandPipeline("sh").args(["-c", "echo oops >&2; exit 3"]).output()
        self.assertEqual(3, res.exit_code)
        self.assertFalse(res.success)
        self.assertEqual("oops", res.stderr.strip())

    def test_current_dir_is_used(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            res = CommandPipeline("pwd").current_dir(td).output()
            self.assertEqual(Path(td).resolve(), Path(res.stdout.strip()).resolve())

    def test_missing_program_raises_oserror(self) -> None:
        with self.assertRaises(OSError):
            CommandPipeline("definitely-not-a-real-program-xyz").execute()

    def test_missing_program_in_later_stage_raises_oserror(self) -> None:
        cmd = CommandPipeline("printf").arg("x").pipe("definitely-not-a-real-program-xyz")
        with self.assertRaises(OSError):
            cmd.output()

    def test_only_terminal_status_is_reported(self) -> None:
        with self.assertLogs("toolchain.command", level="WARNING") as logs:
            status = CommandPipeline("false").pipe("cat").execute()
        self.assertEqual(0, status)
        self.assertIn("upstream stage 1 (false)", "\n".join(logs.output))

    def test_terminal_failure_is_reported(self) -> None:
        self.assertNotEqual(0, CommandPipeline("true").pipe("false").execute())


if __name__ == "__main__":
    unittest.main()
