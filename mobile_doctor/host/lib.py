"""Host family detection implementation."""

from __future__ import annotations

import platform as _platform
import sys
from dataclasses import dataclass
from enum import Enum


class HostFamily(str, Enum):
    """Operating system families the doctor distinguishes."""

    WINDOWS = "windows"
    DARWIN = "darwin"
    LINUX = "linux"


@dataclass(frozen=True)
class HostInfo:
    """Host platform description.

    Attributes:
        family: Operating system family.
        is_64bit: True on 64-bit hosts. Selects the Windows common program
            files variant.
        arch: Machine architecture as reported by the interpreter.
        platform: Raw sys.platform value.
    """

    family: HostFamily
    is_64bit: bool = True
    arch: str = ""
    platform: str = ""

    @property
    def is_windows(self) -> bool:
        return self.family is HostFamily.WINDOWS

    @property
    def is_darwin(self) -> bool:
        return self.family is HostFamily.DARWIN

    @property
    def is_linux(self) -> bool:
        return self.family is HostFamily.LINUX

    @property
    def summary(self) -> str:
        """Human-readable host summary."""
        name = {
            HostFamily.WINDOWS: "Windows",
            HostFamily.DARWIN: "macOS",
            HostFamily.LINUX: "Linux",
        }[self.family]
        bits = "64-bit" if self.is_64bit else "32-bit"
        return f"{name} ({bits})"


def _family_for(platform: str) -> HostFamily:
    if platform == "win32" or platform == "cygwin":
        return HostFamily.WINDOWS
    if platform == "darwin":
        return HostFamily.DARWIN
    # Other Unix flavours behave like Linux for every probe
    return HostFamily.LINUX


def detect_host() -> HostInfo:
    """Describe the host this interpreter is running on.

    Returns:
        HostInfo for the current process.
    """
    platform = sys.platform
    machine = _platform.machine()
    is_64bit = sys.maxsize > 2**32 or machine.endswith("64")

    return HostInfo(
        family=_family_for(platform),
        is_64bit=is_64bit,
        arch=machine,
        platform=platform,
    )
