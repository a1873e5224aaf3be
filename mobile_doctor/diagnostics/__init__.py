"""Diagnostic records and supported platform names."""

from .lib import (
    ANDROID_PLATFORM_NAME,
    IOS_PLATFORM_NAME,
    SUPPORTED_PLATFORMS,
    DoctorWarning,
    ValidationError,
    validate_platform,
)

__all__ = [
    "ANDROID_PLATFORM_NAME",
    "IOS_PLATFORM_NAME",
    "SUPPORTED_PLATFORMS",
    "DoctorWarning",
    "ValidationError",
    "validate_platform",
]
