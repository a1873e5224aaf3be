"""Tests for the process runner.

These run the current Python interpreter as the child process so they work
on every host.
"""

import sys

import pytest

from .lib import ProcessError, ProcessExitError, ProcessResult, ProcessRunner


@pytest.mark.unit
class TestProcessResult:
    """Tests for ProcessResult."""

    def test_ok_for_zero_exit(self):
        assert ProcessResult(exit_code=0).ok is True

    def test_not_ok_for_nonzero_exit(self):
        assert ProcessResult(exit_code=2, stderr="boom").ok is False


@pytest.mark.integration
class TestProcessRunner:
    """Tests running real child processes."""

    @pytest.mark.asyncio
    async def test_run_captures_stdout_and_stderr(self):
        result = await ProcessRunner().run(
            sys.executable,
            ["-c", "import sys; print('out'); print('err', file=sys.stderr)"],
        )
        assert result.exit_code == 0
        assert result.stdout.strip() == "out"
        assert result.stderr.strip() == "err"

    @pytest.mark.asyncio
    async def test_nonzero_exit_raises(self):
        with pytest.raises(ProcessExitError) as exc_info:
            await ProcessRunner().run(sys.executable, ["-c", "raise SystemExit(3)"])
        assert exc_info.value.result.exit_code == 3

    @pytest.mark.asyncio
    async def test_ignore_error_returns_result(self):
        result = await ProcessRunner().run(
            sys.executable, ["-c", "raise SystemExit(1)"], ignore_error=True
        )
        assert result.exit_code == 1

    @pytest.mark.asyncio
    async def test_missing_executable_raises_process_error(self):
        with pytest.raises(ProcessError) as exc_info:
            await ProcessRunner().run("definitely-not-a-real-tool-42", ["-v"])
        assert not isinstance(exc_info.value, ProcessExitError)

    @pytest.mark.asyncio
    async def test_cwd_override(self, tmp_path):
        result = await ProcessRunner().run(
            sys.executable, ["-c", "import os; print(os.getcwd())"], cwd=str(tmp_path)
        )
        assert result.stdout.strip() == str(tmp_path.resolve())

    @pytest.mark.asyncio
    async def test_exec_runs_through_shell(self):
        result = await ProcessRunner().exec(f'"{sys.executable}" -c "print(42)"')
        assert result.stdout.strip() == "42"
