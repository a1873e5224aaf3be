"""Windows registry reader.

Only Windows hosts have a registry; everywhere else every read is absent.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from enum import Enum

logger = logging.getLogger(__name__)


class RegistryHive(str, Enum):
    """Registry root keys the probes read from."""

    HKLM = "HKEY_LOCAL_MACHINE"
    HKCU = "HKEY_CURRENT_USER"


class RegistryReader:
    """Reads string values from the Windows registry."""

    async def read_value(
        self, name: str, hive: RegistryHive, key_path: str
    ) -> str | None:
        """Read value ``name`` under ``hive\\key_path``.

        Returns:
            The value as a string, or None if the key or value is missing
            or the host has no registry.
        """
        if sys.platform != "win32":
            return None
        return await asyncio.to_thread(self._read, name, hive, key_path)

    @staticmethod
    def _read(name: str, hive: RegistryHive, key_path: str) -> str | None:
        import winreg

        root = getattr(winreg, hive.value)
        try:
            with winreg.OpenKey(root, key_path.strip("\\")) as key:
                value, _ = winreg.QueryValueEx(key, name)
        except OSError as e:
            logger.debug(f"Registry value {hive.name}\\{key_path}\\{name} unavailable: {e}")
            return None
        return str(value)
