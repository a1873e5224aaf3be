"""Host family detection.

The engine never queries the running platform ad hoc; it receives a
HostInfo so tests can substitute any host family.

Example:
    >>> from mobile_doctor.host import HostFamily, HostInfo, detect_host
    >>> detect_host().family
    <HostFamily.LINUX: 'linux'>
    >>> HostInfo(family=HostFamily.DARWIN).is_darwin
    True
"""

from .lib import HostFamily, HostInfo, detect_host

__all__ = ["HostFamily", "HostInfo", "detect_host"]
