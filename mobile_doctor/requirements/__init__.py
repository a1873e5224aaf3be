"""Local build requirement checks for Android and iOS."""

from .lib import AndroidLocalBuildRequirements, IosLocalBuildRequirements

__all__ = [
    "AndroidLocalBuildRequirements",
    "IosLocalBuildRequirements",
]
