"""Android SDK capability resolution.

Example:
    >>> from mobile_doctor.android import SdkCapabilityResolver
    >>> resolver = SdkCapabilityResolver()
    >>> resolver.has_required_components()
    True
"""

from .lib import (
    EXPECTED_SDK_DIRECTORIES,
    MIN_JAVA_VERSION,
    MIN_REQUIRED_COMPILE_TARGET,
    SUPPORTED_TARGETS,
    SdkCapabilityData,
    SdkCapabilityResolver,
    max_supported_target_number,
    parse_target_number,
)

__all__ = [
    "EXPECTED_SDK_DIRECTORIES",
    "MIN_JAVA_VERSION",
    "MIN_REQUIRED_COMPILE_TARGET",
    "SUPPORTED_TARGETS",
    "SdkCapabilityData",
    "SdkCapabilityResolver",
    "max_supported_target_number",
    "parse_target_number",
]
