"""Process runner used by every command-based probe.

Commands run through asyncio so an evaluation can suspend while an external
tool is working. Failures surface as ProcessError; callers decide whether a
failure means "absent" or "unknown".
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Sequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessResult:
    """Outcome of a finished external command.

    Attributes:
        exit_code: Process return code.
        stdout: Decoded standard output.
        stderr: Decoded standard error.
    """

    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        """True if the command exited with status zero."""
        return self.exit_code == 0


class ProcessError(Exception):
    """The command could not be started."""

    def __init__(self, message: str, command: str):
        super().__init__(message)
        self.command = command


class ProcessExitError(ProcessError):
    """The command ran but exited with a non-zero status."""

    def __init__(self, command: str, result: ProcessResult):
        super().__init__(
            f"Command '{command}' exited with code {result.exit_code}", command
        )
        self.result = result


def _decode(data: bytes | None) -> str:
    return data.decode("utf-8", errors="replace") if data else ""


class ProcessRunner:
    """Runs external commands and captures their output.

    By default a non-zero exit raises ProcessExitError. Pass
    ``ignore_error=True`` to get the ProcessResult back regardless of the
    exit status (some tools, e.g. ``android -h``, exit 1 on success).
    """

    async def run(
        self,
        command: str,
        args: Sequence[str] = (),
        *,
        ignore_error: bool = False,
        cwd: str | None = None,
    ) -> ProcessResult:
        """Spawn ``command`` with ``args`` directly, without a shell.

        Args:
            command: Executable name or path.
            args: Command arguments.
            ignore_error: Return non-zero results instead of raising.
            cwd: Working directory override.

        Returns:
            ProcessResult of the finished command.

        Raises:
            ProcessError: If the executable cannot be spawned.
            ProcessExitError: On non-zero exit unless ignore_error is set.
        """
        display = " ".join([command, *args])
        try:
            proc = await asyncio.create_subprocess_exec(
                command,
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=cwd,
            )
        except OSError as e:
            raise ProcessError(f"Failed to start '{display}': {e}", display) from e

        return await self._collect(proc, display, ignore_error)

    async def exec(
        self,
        command_line: str,
        *,
        ignore_error: bool = False,
        cwd: str | None = None,
    ) -> ProcessResult:
        """Run a full command line through the system shell.

        Shell execution resolves wrappers such as ``npm.cmd`` on Windows.
        A missing executable shows up as a non-zero shell exit code.
        """
        try:
            proc = await asyncio.create_subprocess_shell(
                command_line,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=cwd,
            )
        except OSError as e:
            raise ProcessError(
                f"Failed to start '{command_line}': {e}", command_line
            ) from e

        return await self._collect(proc, command_line, ignore_error)

    async def _collect(
        self,
        proc: asyncio.subprocess.Process,
        display: str,
        ignore_error: bool,
    ) -> ProcessResult:
        stdout, stderr = await proc.communicate()
        result = ProcessResult(
            exit_code=proc.returncode if proc.returncode is not None else -1,
            stdout=_decode(stdout),
            stderr=_decode(stderr),
        )
        logger.debug(f"'{display}' exited with {result.exit_code}")

        if not result.ok and not ignore_error:
            raise ProcessExitError(display, result)
        return result
