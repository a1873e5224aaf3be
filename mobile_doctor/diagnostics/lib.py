"""Diagnostic warning records and platform name validation."""

from __future__ import annotations

from dataclasses import dataclass, field

ANDROID_PLATFORM_NAME = "Android"
IOS_PLATFORM_NAME = "iOS"
SUPPORTED_PLATFORMS: tuple[str, ...] = (ANDROID_PLATFORM_NAME, IOS_PLATFORM_NAME)


class ValidationError(ValueError):
    """A caller passed a platform name the doctor does not support."""


@dataclass(frozen=True)
class DoctorWarning:
    """A problem found in the development environment.

    Attributes:
        message: What is wrong.
        remediation: What the user can do about it.
        platforms: Platforms the warning concerns. Empty means every platform.
    """

    message: str
    remediation: str = ""
    platforms: frozenset[str] = field(default_factory=frozenset)

    def applies_to(self, platform: str) -> bool:
        """True if this warning affects builds for ``platform``."""
        if not self.platforms:
            return True
        return platform.lower() in {p.lower() for p in self.platforms}

    def to_dict(self) -> dict:
        """Serialize to dictionary for JSON output."""
        return {
            "message": self.message,
            "remediation": self.remediation,
            "platforms": sorted(self.platforms),
        }


def validate_platform(platform: str | None) -> str:
    """Resolve ``platform`` to its canonical spelling.

    Matching is case-insensitive, so "ANDROID" resolves to "Android".

    Raises:
        ValidationError: If the name is empty or not supported.
    """
    if not platform:
        raise ValidationError("You must specify a platform.")

    for supported in SUPPORTED_PLATFORMS:
        if supported.lower() == platform.lower():
            return supported

    raise ValidationError(
        f"Platform {platform} is not supported. "
        f"The supported platforms are: {', '.join(SUPPORTED_PLATFORMS)}"
    )
