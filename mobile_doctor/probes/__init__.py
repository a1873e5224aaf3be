"""Cached detection of installed tools and SDK versions.

Example:
    >>> from mobile_doctor.probes import SystemProbe
    >>> probe = SystemProbe()
    >>> snapshot = await probe.get_environment_snapshot()
    >>> snapshot.java_ver
    '11.0.2'
"""

from .cache import ProbeCache, ProbeKey
from .lib import SystemProbe
from .models import EnvironmentSnapshot, XcprojInfo

__all__ = [
    "EnvironmentSnapshot",
    "ProbeCache",
    "ProbeKey",
    "SystemProbe",
    "XcprojInfo",
]
