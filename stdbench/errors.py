"""stdbench.errors

Error taxonomy shared by the toolchain and pipeline layers.

Every error raised by the harness derives from :class:`StdbenchError`. The
string form includes the whole ``raise ... from`` chain so a single log line
tells the full story::

    Failed to execute: invert: [Errno 2] No such file or directory: 'invert'

A detected regression is *not* an error; see
:class:`pipeline.regression.RegressionReport`.
"""

from __future__ import annotations


class StdbenchError(RuntimeError):
    """Base error; renders the outer message followed by chained causes."""

    def __str__(self) -> str:
        parts = [super().__str__()]
        cause = self.__cause__
        while cause is not None:
            if isinstance(cause, StdbenchError):
                parts.append(RuntimeError.__str__(cause))
            else:
                parts.append(str(cause))
            cause = cause.__cause__
        return ": ".join(p for p in parts if p)


class ToolError(StdbenchError):
    """An external tool could not be spawned or exited with a nonzero status."""


class InputError(StdbenchError):
    """Missing or malformed input (empty glob, unparsable tool output...)."""


class ComparisonError(StdbenchError):
    """Current or baseline artifacts could not be read or parsed."""


class ConfigError(StdbenchError):
    """Invalid configuration file or value."""
