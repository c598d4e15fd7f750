"""toolchain/command.py

Composable external-process pipelines.

:class:`CommandPipeline` builds one logical command out of one or more OS
processes connected by pipes (``stdout`` of stage *i* feeds ``stdin`` of stage
*i+1*). Arguments and working directory always apply to the stage added last::

    CommandPipeline("zcat").args(files).pipe("parse_collection").arg("-o").arg(fwd)

renders (and is logged) as::

    zcat a.gz b.gz
        | parse_collection -o fwd

Execution never uses ``shell=True``. Spawn failures propagate as
:class:`OSError`; exit statuses are returned, never raised.

Known limitation
----------------
Only the *terminal* stage's status and output are reported. A failing
upstream stage is reaped and logged at WARNING, but it does not change the
result unless it also makes the terminal stage fail (for example
``false | cat`` reports success). Callers rely on this behaviour, so it is
kept as is.
"""

from __future__ import annotations

import copy
import logging
import subprocess
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Iterable, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

PIPE_PREFIX = "\n    | "


@dataclass
class ProcessSpec:
    """One stage of a pipeline: program, arguments, optional working dir."""

    program: str
    args: List[str] = field(default_factory=list)
    cwd: Optional[Path] = None

    def argv(self) -> List[str]:
        return [self.program, *self.args]

    def render(self) -> str:
        return " ".join(self.argv())


@dataclass(frozen=True)
class CmdResult:
    exit_code: int
    elapsed_seconds: float
    command_str: str
    stdout: str
    stderr: str

    @property
    def success(self) -> bool:
        return self.exit_code == 0


class CommandPipeline:
    """Builder and runner for chained OS processes.

    Stages are kept as an explicit list plus the index of the stage that
    ``arg``/``args``/``current_dir`` modify. ``pipe`` appends and moves that
    index to the new last stage.
    """

    def __init__(self, program: Union[str, Path], *, verbose: bool = True) -> None:
        self._stages: List[ProcessSpec] = [ProcessSpec(str(program))]
        self._current = 0
        self._verbose = verbose

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------

    def arg(self, value: object) -> "CommandPipeline":
        self._stages[self._current].args.append(str(value))
        return self

    def args(self, values: Iterable[object]) -> "CommandPipeline":
        for value in values:
            self.arg(value)
        return self

    def current_dir(self, path: Union[str, Path]) -> "CommandPipeline":
        self._stages[self._current].cwd = Path(path)
        return self

    def pipe(self, program: Union[str, Path, ProcessSpec, "CommandPipeline"]) -> "CommandPipeline":
        """Append a stage (or every stage of another pipeline) fed by the current output."""

        if isinstance(program, CommandPipeline):
            new_stages = [copy.deepcopy(s) for s in program._stages]
        elif isinstance(program, ProcessSpec):
            new_stages = [copy.deepcopy(program)]
        else:
            new_stages = [ProcessSpec(str(program))]
        self._stages.extend(new_stages)
        self._current = len(self._stages) - 1
        return self

    def mute(self) -> "CommandPipeline":
        """Do not log this pipeline when it runs."""

        self._verbose = False
        return self

    @property
    def stages(self) -> Tuple[ProcessSpec, ...]:
        return tuple(self._stages)

    @property
    def verbose(self) -> bool:
        return self._verbose

    def __str__(self) -> str:
        first, rest = self._stages[0], self._stages[1:]
        return first.render() + "".join(PIPE_PREFIX + s.render() for s in rest)

    def __repr__(self) -> str:
        return f"CommandPipeline({str(self)!r})"

    # ------------------------------------------------------------------
    # Running
    # ------------------------------------------------------------------

    def execute(self) -> int:
        """Run with inherited stdout/stderr; return the terminal exit status."""

        return self._run(capture=False).exit_code

    def output(self) -> CmdResult:
        """Run capturing the terminal stage's stdout/stderr."""

        return self._run(capture=True)

    def _run(self, *, capture: bool) -> CmdResult:
        if self._verbose:
            logger.debug("[EXEC] %s", self)

        t0 = time.time()
        procs = self._spawn(capture=capture)
        terminal = procs[-1]
        if capture:
            out, err = terminal.communicate()
        else:
            terminal.wait()
            out, err = b"", b""
        self._reap_upstream(procs[:-1])
        elapsed = time.time() - t0

        return CmdResult(
            exit_code=int(terminal.returncode),
            elapsed_seconds=elapsed,
            command_str=str(self),
            stdout=(out or b"").decode("utf-8", errors="replace"),
            stderr=(err or b"").decode("utf-8", errors="replace"),
        )

    def _spawn(self, *, capture: bool) -> List[subprocess.Popen]:
        procs: List[subprocess.Popen] = []
        upstream: Optional[IO[bytes]] = None
        last = len(self._stages) - 1
        try:
            for i, spec in enumerate(self._stages):
                is_last = i == last
                proc = subprocess.Popen(
                    spec.argv(),
                    cwd=str(spec.cwd) if spec.cwd else None,
                    stdin=upstream,
                    stdout=subprocess.PIPE if (capture or not is_last) else None,
                    stderr=subprocess.PIPE if (capture and is_last) else None,
                )
                # The child holds its own copy; dropping ours lets the
                # producer see a broken pipe when the consumer exits.
                if upstream is not None:
                    upstream.close()
                upstream = None if is_last else proc.stdout
                procs.append(proc)
        except OSError:
            if upstream is not None:
                upstream.close()
            for proc in procs:
                proc.kill()
                proc.wait()
            raise
        return procs

    def _reap_upstream(self, procs: List[subprocess.Popen]) -> None:
        for i, proc in enumerate(procs):
            code = proc.wait()
            if code != 0:
                logger.warning(
                    "upstream stage %d (%s) exited with status %d; only the terminal status is reported",
                    i + 1,
                    self._stages[i].program,
                    code,
                )
