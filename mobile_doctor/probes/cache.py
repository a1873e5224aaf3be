"""Memoization of probe results.

Every probe has an explicit ProbeKey. A key is either absent from the cache
(not yet computed) or present with whatever the probe produced, including
None and False. A stored None is a finished probe that found nothing and is
never re-run while caching stays enabled.

The cache takes no locks. Interleaved evaluations may both miss and run the
same probe; use from several threads needs external synchronization around
get_or_compute.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Awaitable, Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ProbeKey(str, Enum):
    """Identity of each cached probe."""

    JAVA_VERSION = "java_version"
    JAVA_COMPILER_VERSION = "java_compiler_version"
    XCODE_VERSION = "xcode_version"
    NODE_VERSION = "node_version"
    NPM_VERSION = "npm_version"
    NODE_GYP_VERSION = "node_gyp_version"
    XCODEPROJ_GEM_LOCATION = "xcodeproj_gem_location"
    ITUNES_INSTALLED = "itunes_installed"
    COCOAPODS_VERSION = "cocoapods_version"
    OS = "os"
    ADB_VERSION = "adb_version"
    ANDROID_INSTALLED = "android_installed"
    MONO_VERSION = "mono_version"
    GIT_VERSION = "git_version"
    GRADLE_VERSION = "gradle_version"
    DOTNET_VERSION = "dotnet_version"
    COCOAPODS_WORKING_CORRECTLY = "cocoapods_working_correctly"
    NATIVESCRIPT_CLI_VERSION = "nativescript_cli_version"
    XCPROJ_INFO = "xcproj_info"
    COCOAPODS_UPDATE_REQUIRED = "cocoapods_update_required"


class ProbeCache:
    """Process-lifetime store of probe results keyed by ProbeKey.

    Attributes:
        enabled: When False, every lookup runs its probe and nothing is stored.
    """

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self._values: dict[ProbeKey, Any] = {}

    def __contains__(self, key: ProbeKey) -> bool:
        return key in self._values

    def get(self, key: ProbeKey) -> Any:
        """Stored result for ``key``.

        Raises:
            KeyError: If the probe has not been computed.
        """
        return self._values[key]

    def clear(self) -> None:
        """Forget every stored result."""
        self._values.clear()

    async def get_or_compute(
        self, key: ProbeKey, probe: Callable[[], Awaitable[T]]
    ) -> T:
        """Return the stored result for ``key``, running ``probe`` on a miss.

        Args:
            key: Probe identity.
            probe: Coroutine function performing the detection.

        Returns:
            The cached or freshly computed result.
        """
        if not self.enabled:
            return await probe()

        if key in self._values:
            return self._values[key]

        result = await probe()
        self._values[key] = result
        logger.debug(f"Probe {key.value} -> {result!r}")
        return result
