"""mobile-doctor: mobile development environment diagnostics.

Ready-made instances wired to the current host:

    >>> from mobile_doctor import doctor, sys_info
    >>> await doctor.can_build_locally("android")
    >>> snapshot = await sys_info.get_sys_info()
"""

from mobile_doctor.android import SdkCapabilityData, SdkCapabilityResolver
from mobile_doctor.diagnostics import (
    ANDROID_PLATFORM_NAME,
    IOS_PLATFORM_NAME,
    SUPPORTED_PLATFORMS,
    DoctorWarning,
    ValidationError,
)
from mobile_doctor.doctor import Doctor, create_doctor
from mobile_doctor.probes import EnvironmentSnapshot, SystemProbe

doctor = create_doctor()
sys_info: SystemProbe = doctor.probe


def set_caching_enabled(enabled: bool) -> None:
    """Turn result caching on or off for the default instances."""
    doctor.set_caching_enabled(enabled)


__all__ = [
    # Default instances
    "doctor",
    "sys_info",
    "set_caching_enabled",
    # Types
    "Doctor",
    "DoctorWarning",
    "EnvironmentSnapshot",
    "SdkCapabilityData",
    "SdkCapabilityResolver",
    "SystemProbe",
    "ValidationError",
    "create_doctor",
    # Platforms
    "ANDROID_PLATFORM_NAME",
    "IOS_PLATFORM_NAME",
    "SUPPORTED_PLATFORMS",
]
