"""Platform build readiness evaluation.

The doctor answers two questions: can a local build run for a platform, and
what is wrong with the development environment. Warnings come from a fixed,
ordered list of checks run against one environment snapshot; the order of
the returned warnings follows that list.
"""

from __future__ import annotations

import logging
from typing import Callable

from mobile_doctor.android import SdkCapabilityResolver
from mobile_doctor.diagnostics import (
    ANDROID_PLATFORM_NAME,
    IOS_PLATFORM_NAME,
    DoctorWarning,
    validate_platform,
)
from mobile_doctor.host import HostInfo
from mobile_doctor.probes import EnvironmentSnapshot, SystemProbe
from mobile_doctor.requirements import AndroidLocalBuildRequirements, IosLocalBuildRequirements
from mobile_doctor.version import is_valid_version, version_lt

logger = logging.getLogger(__name__)

MIN_SUPPORTED_POD_VERSION = "0.38.2"
MIN_SUPPORTED_MONO_VERSION = "3.12.0"

ANDROID_ONLY = frozenset({ANDROID_PLATFORM_NAME})
IOS_ONLY = frozenset({IOS_PLATFORM_NAME})

Check = Callable[[EnvironmentSnapshot], DoctorWarning | None]


# =============================================================================
# Checks
# =============================================================================


def check_adb(snapshot: EnvironmentSnapshot) -> DoctorWarning | None:
    if snapshot.adb_ver:
        return None
    return DoctorWarning(
        message="WARNING: adb from the Android SDK is not installed or is not configured properly. ",
        remediation=(
            "For Android-related operations, the AppBuilder CLI will use a built-in version of adb.\n"
            "To avoid possible issues with the native Android emulator, Genymotion or connected\n"
            "Android devices, verify that you have installed the latest Android SDK and\n"
            "its dependencies as described in http://developer.android.com/sdk/index.html#Requirements\n"
        ),
        platforms=ANDROID_ONLY,
    )


def check_android_sdk(snapshot: EnvironmentSnapshot) -> DoctorWarning | None:
    if snapshot.android_installed:
        return None
    return DoctorWarning(
        message="WARNING: The Android SDK is not installed or is not configured properly.",
        remediation=(
            "You will not be able to run your apps in the native emulator. To be able to run apps\n"
            "in the native Android emulator, verify that you have installed the latest Android SDK \n"
            "and its dependencies as described in http://developer.android.com/sdk/index.html#Requirements\n"
        ),
        platforms=ANDROID_ONLY,
    )


def check_xcode(snapshot: EnvironmentSnapshot) -> DoctorWarning | None:
    if snapshot.xcode_ver:
        return None
    return DoctorWarning(
        message="WARNING: Xcode is not installed or is not configured properly.",
        remediation=(
            "You will not be able to build your projects for iOS or run them in the iOS Simulator.\n"
            "To be able to build for iOS and run apps in the native emulator, verify that you have installed Xcode.\n"
        ),
        platforms=IOS_ONLY,
    )


def check_xcodeproj(snapshot: EnvironmentSnapshot) -> DoctorWarning | None:
    if snapshot.xcodeproj_gem_location:
        return None
    return DoctorWarning(
        message="WARNING: xcodeproj gem is not installed or is not configured properly.",
        remediation=(
            "You will not be able to build your projects for iOS.\n"
            "To be able to build for iOS and run apps in the native emulator, verify that you have installed xcodeproj.\n"
        ),
        platforms=IOS_ONLY,
    )


def check_cocoapods(snapshot: EnvironmentSnapshot) -> DoctorWarning | None:
    if snapshot.cocoapods_ver:
        return None
    return DoctorWarning(
        message="WARNING: CocoaPods is not installed or is not configured properly.",
        remediation=(
            "You will not be able to build your projects for iOS if they contain plugin with CocoaPod file.\n"
            "To be able to build such projects, verify that you have installed CocoaPods."
        ),
        platforms=IOS_ONLY,
    )


def check_cocoapods_working(snapshot: EnvironmentSnapshot) -> DoctorWarning | None:
    """Only judged when both Xcode and CocoaPods were found."""
    if not (snapshot.xcode_ver and snapshot.cocoapods_ver):
        return None
    if snapshot.is_cocoapods_working_correctly:
        return None
    return DoctorWarning(
        message="WARNING: There was a problem with CocoaPods",
        remediation="Verify that CocoaPods are configured properly.",
        platforms=IOS_ONLY,
    )


def check_cocoapods_version(snapshot: EnvironmentSnapshot) -> DoctorWarning | None:
    version = snapshot.cocoapods_ver
    if not (is_valid_version(version) and version_lt(version, MIN_SUPPORTED_POD_VERSION)):
        return None
    return DoctorWarning(
        message=f"WARNING: Your current CocoaPods version is earlier than {MIN_SUPPORTED_POD_VERSION}.",
        remediation=(
            "You will not be able to build your projects for iOS if they contain plugin with CocoaPod file.\n"
            f"To be able to build such projects, verify that you have at least {MIN_SUPPORTED_POD_VERSION} "
            "version installed."
        ),
        platforms=IOS_ONLY,
    )


def check_mono(snapshot: EnvironmentSnapshot) -> DoctorWarning | None:
    version = snapshot.mono_ver
    if version and not version_lt(version, MIN_SUPPORTED_MONO_VERSION):
        return None
    return DoctorWarning(
        message="WARNING: Mono 3.12 or later is not installed or not configured properly.",
        remediation=(
            "You will not be able to work with Android devices in the device simulator or debug on "
            "connected Android devices.\n"
            "To be able to work with Android in the device simulator and debug on connected Android devices,\n"
            "download and install Mono 3.12 or later from http://www.mono-project.com/download/\n"
        ),
        platforms=ANDROID_ONLY,
    )


def ios_host_note(snapshot: EnvironmentSnapshot) -> DoctorWarning:
    return DoctorWarning(
        message="NOTE: You can develop for iOS only on Mac OS X systems.",
        remediation="To be able to work with iOS devices and projects, you need Mac OS X Mavericks or later.\n",
        platforms=IOS_ONLY,
    )


def check_itunes(snapshot: EnvironmentSnapshot) -> DoctorWarning | None:
    if snapshot.itunes_installed:
        return None
    return DoctorWarning(
        message="WARNING: iTunes is not installed.",
        remediation=(
            "You will not be able to work with iOS devices via cable connection.\n"
            "To be able to work with connected iOS devices,\n"
            "download and install iTunes from http://www.apple.com\n"
        ),
    )


def check_jdk(snapshot: EnvironmentSnapshot) -> DoctorWarning | None:
    if snapshot.java_ver:
        return None
    return DoctorWarning(
        message="WARNING: The Java Development Kit (JDK) is not installed or is not configured properly.",
        remediation=(
            "You will not be able to work with the Android SDK and you might not be able\n"
            "to perform some Android-related operations. To ensure that you can develop and\n"
            "test your apps for Android, verify that you have installed the JDK as\n"
            "described in http://docs.oracle.com/javase/8/docs/technotes/guides/install/install_overview.html (for JDK 8)\n"
            "or http://docs.oracle.com/javase/7/docs/webnotes/install/ (for JDK 7).\n"
        ),
        platforms=ANDROID_ONLY,
    )


def check_git(snapshot: EnvironmentSnapshot) -> DoctorWarning | None:
    if snapshot.git_ver:
        return None
    return DoctorWarning(
        message="WARNING: Git is not installed or not configured properly.",
        remediation=(
            "You will not be able to create and work with Screen Builder projects.\n"
            "To be able to work with Screen Builder projects, download and install Git as described\n"
            "in https://git-scm.com/downloads and add the git executable to your PATH.\n"
        ),
    )


ANDROID_CHECKS: tuple[Check, ...] = (check_adb, check_android_sdk)
MACOS_CHECKS: tuple[Check, ...] = (
    check_xcode,
    check_xcodeproj,
    check_cocoapods,
    check_cocoapods_working,
    check_cocoapods_version,
    check_mono,
)
COMMON_CHECKS: tuple[Check, ...] = (check_itunes, check_jdk, check_git)


# =============================================================================
# Doctor
# =============================================================================


class Doctor:
    """Build readiness and environment diagnostics.

    Example:
        >>> doctor = Doctor(probe, resolver)
        >>> await doctor.can_build_locally("android")
        True
        >>> for warning in await doctor.get_warnings():
        ...     print(warning.message)
    """

    def __init__(
        self,
        probe: SystemProbe,
        resolver: SdkCapabilityResolver,
        host: HostInfo | None = None,
    ):
        self.probe = probe
        self.resolver = resolver
        self.host = host or probe.host
        self.android_requirements = AndroidLocalBuildRequirements(resolver)
        self.ios_requirements = IosLocalBuildRequirements(probe, self.host)

    def set_caching_enabled(self, enabled: bool) -> None:
        """Turn caching on or off for both tool probes and SDK resolution."""
        self.probe.set_caching_enabled(enabled)
        self.resolver.set_caching_enabled(enabled)

    async def can_build_locally(self, platform: str | None) -> bool:
        """Whether a local build for ``platform`` can run on this host.

        Args:
            platform: Platform name, matched case-insensitively.

        Raises:
            ValidationError: If the platform is empty or not supported.
        """
        canonical = validate_platform(platform)
        if canonical == ANDROID_PLATFORM_NAME:
            return await self.android_requirements.check_requirements()
        return await self.ios_requirements.check_requirements()

    def get_checks(self) -> list[Check]:
        """The checks get_warnings runs on this host, in order."""
        checks = list(ANDROID_CHECKS)
        if self.host.is_darwin:
            checks.extend(MACOS_CHECKS)
        else:
            checks.append(ios_host_note)
        checks.extend(COMMON_CHECKS)
        return checks

    async def get_warnings(self) -> list[DoctorWarning]:
        """Diagnose the environment from one snapshot, in check order."""
        snapshot = await self.probe.get_environment_snapshot()
        warnings = []
        for check in self.get_checks():
            warning = check(snapshot)
            if warning is not None:
                warnings.append(warning)

        logger.info(f"Doctor found {len(warnings)} warning(s)")
        return warnings

    async def get_sys_info(self) -> EnvironmentSnapshot:
        return await self.probe.get_environment_snapshot()


def create_doctor(caching: bool | None = None) -> Doctor:
    """Build a Doctor wired to the real host.

    Args:
        caching: Initial caching flag for probes and SDK resolution. None
            reads MOBILE_DOCTOR_CACHE.
    """
    probe = SystemProbe()
    if caching is not None:
        probe.set_caching_enabled(caching)
    resolver = SdkCapabilityResolver(
        host=probe.host, fs=probe.fs, runner=probe.runner, caching=probe.cache.enabled
    )
    return Doctor(probe, resolver)
