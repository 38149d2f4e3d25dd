"""
Running external tools (git, npx).

All child processes go through ToolRunner so the installer never deals
with platform quirks: on Windows, script shims such as ``npx.cmd`` must be
started through ``cmd /c``, which is decided here and nowhere else.

Every call is blocking, captures stdout/stderr, and is bounded by a
timeout. subprocess.run kills the child when the timeout expires.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import logging as _logging
import os as _os
import pathlib as _pathlib
import shutil as _shutil
import subprocess as _subprocess
import typing as _typing

import skillhub.constants as constants
import skillhub.errors as errors

_logger = _logging.getLogger(__name__)

_WINDOWS_SCRIPT_SUFFIXES = (".cmd", ".bat")


@_dataclasses.dataclass
class ToolResult:
    """Outcome of one external tool invocation."""

    tool: str
    args: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def raise_for_status(self) -> None:
        """Raise ToolFailedError if the tool exited non-zero."""
        if not self.ok:
            raise errors.ToolFailedError(
                self.tool, self.args, self.returncode, self.stdout, self.stderr
            )


class ToolRunner:
    """
    Runs external tools as child processes.

    Subclass or replace in tests to script tool behavior.
    """

    def __init__(self, timeout: float | None = constants.DEFAULT_TOOL_TIMEOUT) -> None:
        """
        Initialize the runner.

        Args:
            timeout: Seconds before a child process is killed. None disables it.
        """
        self.timeout = timeout

    def which(self, tool: str) -> str | None:
        """Resolve a tool name to an executable path, or None if not found."""
        return _shutil.which(tool)

    def is_available(self, tool: str) -> bool:
        """Whether the tool is installed and on PATH."""
        return self.which(tool) is not None

    def command_line(self, tool: str, args: _typing.Sequence[str]) -> list[str]:
        """
        Build the argv for a tool invocation.

        On Windows, batch-script shims cannot be executed directly and are
        wrapped in ``cmd /c``.
        """
        if _os.name == "nt":
            resolved = self.which(tool)
            if resolved is not None and resolved.lower().endswith(_WINDOWS_SCRIPT_SUFFIXES):
                return ["cmd", "/c", resolved, *args]
        return [tool, *args]

    def run(
        self,
        tool: str,
        args: _typing.Sequence[str],
        *,
        cwd: _pathlib.Path | None = None,
        env: _typing.Mapping[str, str] | None = None,
        check: bool = True,
        timeout: float | None = None,
    ) -> ToolResult:
        """
        Run a tool and capture its output.

        Args:
            tool: Executable name (e.g., 'git').
            args: Arguments after the executable.
            cwd: Working directory for the child.
            env: Extra environment variables (merged over os.environ).
            check: Raise ToolFailedError on non-zero exit.
            timeout: Override the runner's default timeout.

        Returns:
            ToolResult with exit code and captured output.

        Raises:
            ToolUnavailableError: If the executable cannot be started or the
                arguments cannot be passed to it (e.g., an embedded NUL).
            ToolTimeoutError: If the child outlives the timeout.
            ToolFailedError: If check is True and the exit code is non-zero.
        """
        args = list(args)
        argv = self.command_line(tool, args)
        child_env = None
        if env:
            child_env = _os.environ.copy()
            child_env.update(env)
        limit = self.timeout if timeout is None else timeout

        _logger.debug("Running %s (cwd=%s)", " ".join(argv), cwd)
        try:
            completed = _subprocess.run(
                argv,
                cwd=str(cwd) if cwd is not None else None,
                env=child_env,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=limit,
            )
        except _subprocess.TimeoutExpired as e:
            raise errors.ToolTimeoutError(tool, args, limit or 0.0) from e
        except (OSError, ValueError) as e:
            raise errors.ToolUnavailableError(tool, str(e)) from e

        result = ToolResult(
            tool=tool,
            args=args,
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )
        _logger.debug("%s exited with %d", tool, result.returncode)
        if check:
            result.raise_for_status()
        return result

    def probe(self, tool: str, args: _typing.Sequence[str] = ("--version",)) -> bool:
        """
        Check that a tool is installed and actually runs.

        Returns:
            True if the tool exits 0 for the probe arguments.
        """
        if not self.is_available(tool):
            return False
        try:
            return self.run(tool, args, check=False, timeout=30).ok
        except errors.ExternalToolError as e:
            _logger.debug("Probe of %s failed: %s", tool, e)
            return False
