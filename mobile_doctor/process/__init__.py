"""Asynchronous external command execution.

Example:
    >>> from mobile_doctor.process import ProcessRunner
    >>> result = await ProcessRunner().run("git", ["--version"])
    >>> result.stdout
    'git version 2.43.0\\n'
"""

from .lib import ProcessError, ProcessExitError, ProcessResult, ProcessRunner

__all__ = [
    "ProcessRunner",
    "ProcessResult",
    "ProcessError",
    "ProcessExitError",
]
