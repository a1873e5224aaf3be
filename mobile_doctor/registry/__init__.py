"""Windows registry reads for host and toolchain detection."""

from .lib import RegistryHive, RegistryReader

__all__ = ["RegistryHive", "RegistryReader"]
