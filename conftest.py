"""Root pytest configuration and fixtures.

This module provides:
- Environment setup (loads .env, isolates toolchain variables)
- In-memory fakes for the process runner, filesystem and registry
- A factory for SystemProbe instances on any host family
"""

from __future__ import annotations

import os
from typing import Callable, Union

import pytest
from dotenv import load_dotenv

from mobile_doctor.host import HostFamily, HostInfo
from mobile_doctor.probes import ProbeCache, SystemProbe
from mobile_doctor.process import ProcessError, ProcessExitError, ProcessResult
from mobile_doctor.registry import RegistryHive

# Load environment variables from .env file
load_dotenv()

_PLATFORM_FOR_FAMILY = {
    HostFamily.WINDOWS: "win32",
    HostFamily.DARWIN: "darwin",
    HostFamily.LINUX: "linux",
}

Response = Union[ProcessResult, Exception, Callable[[Union[str, None]], ProcessResult]]


# =============================================================================
# Fakes
# =============================================================================


class FakeProcessRunner:
    """ProcessRunner stand-in answering from a table of canned responses.

    Commands are keyed by their full command line ("git --version").
    Unknown commands behave like a missing executable.
    """

    def __init__(self):
        self.responses: dict[str, Response] = {}
        self.calls: list[str] = []
        self.cwds: dict[str, str | None] = {}

    def respond(self, command: str, stdout: str = "", stderr: str = "", exit_code: int = 0) -> None:
        self.responses[command] = ProcessResult(exit_code=exit_code, stdout=stdout, stderr=stderr)

    def count(self, command: str) -> int:
        return self.calls.count(command)

    async def run(self, command, args=(), *, ignore_error=False, cwd=None) -> ProcessResult:
        return self._dispatch(" ".join([command, *args]), ignore_error, cwd)

    async def exec(self, command_line, *, ignore_error=False, cwd=None) -> ProcessResult:
        return self._dispatch(command_line, ignore_error, cwd)

    def _dispatch(self, command: str, ignore_error: bool, cwd: str | None) -> ProcessResult:
        self.calls.append(command)
        self.cwds[command] = cwd

        response = self.responses.get(command)
        if response is None:
            raise ProcessError(f"Failed to start '{command}': not found", command)
        if isinstance(response, Exception):
            raise response
        if callable(response):
            response = response(cwd)
        if not response.ok and not ignore_error:
            raise ProcessExitError(command, response)
        return response


class FakeFileSystem:
    """FileSystem stand-in backed by a set of normalized paths."""

    def __init__(self):
        self.paths: set[str] = set()
        self.extracted: list[tuple[str, str]] = []

    def add(self, *paths: str) -> None:
        """Mark paths, and every parent directory, as existing."""
        for path in paths:
            current = os.path.normpath(path)
            while current and current not in self.paths:
                self.paths.add(current)
                parent = os.path.dirname(current)
                if parent == current:
                    break
                current = parent

    def add_dir(self, path: str, entries: list[str]) -> None:
        self.add(path)
        for entry in entries:
            self.add(os.path.join(path, entry))

    def exists(self, path) -> bool:
        return bool(path) and os.path.normpath(path) in self.paths

    def list_directory(self, path) -> list[str]:
        directory = os.path.normpath(path)
        if directory not in self.paths:
            raise FileNotFoundError(directory)
        return sorted(
            os.path.basename(p)
            for p in self.paths
            if os.path.dirname(p) == directory and p != directory
        )

    async def extract_archive(self, archive_path, dest_dir) -> None:
        self.extracted.append((str(archive_path), str(dest_dir)))


class FakeRegistry:
    """RegistryReader stand-in keyed by (value name, key path)."""

    def __init__(self):
        self.values: dict[tuple[str, str], str] = {}
        self.reads: list[tuple[str, RegistryHive, str]] = []

    async def read_value(self, name: str, hive: RegistryHive, key_path: str) -> str | None:
        self.reads.append((name, hive, key_path))
        return self.values.get((name, key_path))


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's own toolchain variables out of every test."""
    for name in ("ANDROID_HOME", "JAVA_HOME", "MOBILE_DOCTOR_CACHE"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fake_runner() -> FakeProcessRunner:
    return FakeProcessRunner()


@pytest.fixture
def fake_fs() -> FakeFileSystem:
    return FakeFileSystem()


@pytest.fixture
def fake_registry() -> FakeRegistry:
    return FakeRegistry()


@pytest.fixture
def make_probe(
    fake_runner: FakeProcessRunner,
    fake_fs: FakeFileSystem,
    fake_registry: FakeRegistry,
) -> Callable[..., SystemProbe]:
    """Factory for SystemProbe wired to the fakes.

    Args:
        family: Host family to simulate.
        caching: Whether probe results are cached.
        is_64bit: Host bitness.

    Returns:
        Function building a SystemProbe.
    """

    def _make(
        family: HostFamily = HostFamily.LINUX,
        caching: bool = True,
        is_64bit: bool = True,
    ) -> SystemProbe:
        host = HostInfo(
            family=family,
            is_64bit=is_64bit,
            arch="x86_64",
            platform=_PLATFORM_FOR_FAMILY[family],
        )
        return SystemProbe(
            host=host,
            runner=fake_runner,
            fs=fake_fs,
            registry=fake_registry,
            cache=ProbeCache(enabled=caching),
        )

    return _make
