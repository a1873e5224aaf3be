"""Android SDK capability resolution.

Matches the components installed under the Android SDK root against the
versions a local build needs:

- compile target: highest supported ``platforms/android-N`` at or above the
  minimum target
- build tools: highest ``build-tools/<x.y.z>`` between 23 and the highest
  supported target
- support library: ``appcompat-v7`` whose major version equals the compile
  target

Directory names are matched by the first ``x.y.z`` token they contain.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from mobile_doctor.config import get_android_home, is_caching_enabled_by_default
from mobile_doctor.diagnostics import ANDROID_PLATFORM_NAME, DoctorWarning
from mobile_doctor.filesystem import FileSystem
from mobile_doctor.host import HostFamily, HostInfo, detect_host
from mobile_doctor.process import ProcessError, ProcessRunner
from mobile_doctor.version import VersionRange, extract_version_triplet, max_satisfying, version_lt

logger = logging.getLogger(__name__)

ANDROID_TARGET_PREFIX = "android"
SUPPORTED_TARGETS: tuple[str, ...] = tuple(
    sorted(
        [
            "android-17",
            "android-18",
            "android-19",
            "android-21",
            "android-22",
            "android-23",
            "android-24",
            "android-25",
        ]
    )
)
MIN_REQUIRED_COMPILE_TARGET = 22
MIN_BUILD_TOOLS_VERSION = "23"
MIN_JAVA_VERSION = "1.8.0"

EXPECTED_SDK_DIRECTORIES: tuple[str, ...] = ("build-tools", "tools", "platform-tools", "extras")
SUPPORT_LIBRARY_PATH: tuple[str, ...] = (
    "extras",
    "android",
    "m2repository",
    "com",
    "android",
    "support",
    "appcompat-v7",
)

SYSTEM_REQUIREMENTS_LINKS: dict[HostFamily, str] = {
    HostFamily.LINUX: "http://docs.nativescript.org/setup/ns-cli-setup/ns-setup-linux.html#system-requirements",
    HostFamily.WINDOWS: "http://docs.nativescript.org/setup/ns-cli-setup/ns-setup-win.html#system-requirements",
    HostFamily.DARWIN: "http://docs.nativescript.org/setup/ns-cli-setup/ns-setup-os-x.html#system-requirements",
}


@dataclass(frozen=True)
class SdkCapabilityData:
    """Resolved Android SDK components.

    Attributes:
        sdk_home_path: Value of ANDROID_HOME, or None when unset.
        compile_version: Highest usable compile target, e.g. 25.
        build_tools_version: Name of the selected build-tools directory.
        support_library_version: Name of the selected appcompat-v7 directory.
    """

    sdk_home_path: str | None = None
    compile_version: int | None = None
    build_tools_version: str | None = None
    support_library_version: str | None = None

    @property
    def is_complete(self) -> bool:
        """True if every component needed for a local build was resolved."""
        return bool(
            self.compile_version and self.build_tools_version and self.support_library_version
        )


def parse_target_number(target: str) -> int | None:
    """Numeric API level of a target name, e.g. "android-25" -> 25."""
    suffix = target.replace(f"{ANDROID_TARGET_PREFIX}-", "", 1)
    digits = ""
    for char in suffix:
        if not char.isdigit():
            break
        digits += char
    return int(digits) if digits else None


def max_supported_target_number() -> int:
    return parse_target_number(SUPPORTED_TARGETS[-1])


class SdkCapabilityResolver:
    """Resolves Android SDK components installed under ANDROID_HOME.

    The SDK root is read once at construction. Resolved data is computed on
    first access and kept until caching is disabled with
    ``set_caching_enabled(False)``, after which every call resolves again.

    Example:
        >>> resolver = SdkCapabilityResolver()
        >>> data = resolver.get_sdk_capability_data()
        >>> data.compile_version
        25
        >>> for warning in resolver.validate_sdk_capability():
        ...     print(warning.message)
    """

    def __init__(
        self,
        host: HostInfo | None = None,
        fs: FileSystem | None = None,
        runner: ProcessRunner | None = None,
        android_home: str | None = None,
        caching: bool | None = None,
    ):
        self.host = host or detect_host()
        self.fs = fs or FileSystem()
        self.runner = runner or ProcessRunner()
        self.android_home = android_home if android_home is not None else get_android_home()
        self._data: SdkCapabilityData | None = None
        self._emulator_path: str | None = None
        self.caching = is_caching_enabled_by_default() if caching is None else caching

    def set_caching_enabled(self, enabled: bool) -> None:
        """Turn memoization of resolved SDK data on or off."""
        self.caching = enabled
        if not enabled:
            self._data = None
            self._emulator_path = None

    # =========================================================================
    # Resolution
    # =========================================================================

    def get_sdk_capability_data(self) -> SdkCapabilityData:
        """Resolve all SDK components, memoized while caching is enabled."""
        if self._data is not None:
            return self._data

        compile_version = self.resolve_compile_target()
        data = SdkCapabilityData(
            sdk_home_path=self.android_home,
            compile_version=compile_version,
            build_tools_version=self.resolve_build_tools(),
            support_library_version=self.resolve_support_library(compile_version),
        )
        logger.debug(f"Resolved Android SDK data: {data}")
        if self.caching:
            self._data = data
        return data

    def has_required_components(self) -> bool:
        return self.get_sdk_capability_data().is_complete

    def resolve_compile_target(self) -> int | None:
        """Highest supported installed target at or above the minimum.

        Returns:
            API level of the target, or None when no installed supported
            target meets MIN_REQUIRED_COMPILE_TARGET.
        """
        installed = set(self._get_installed_targets())
        latest = None
        for target in SUPPORTED_TARGETS:
            if target in installed:
                latest = target

        if latest is None:
            return None
        version = parse_target_number(latest)
        if version and version >= MIN_REQUIRED_COMPILE_TARGET:
            return version
        return None

    def get_build_tools_range(self) -> VersionRange:
        return VersionRange(lower=MIN_BUILD_TOOLS_VERSION, upper=str(max_supported_target_number()))

    def resolve_build_tools(self) -> str | None:
        """Directory name of the best build-tools release, or None."""
        if not self.android_home:
            return None
        path = os.path.join(self.android_home, "build-tools")
        return self._get_matching_dir(path, self.get_build_tools_range())

    def get_support_library_range(self, compile_version: int | None = None) -> VersionRange | None:
        """Range ``[compile, compile + 1)`` for the support library.

        Returns None when no compile target is resolved.
        """
        if compile_version is None:
            compile_version = self.resolve_compile_target()
        if not compile_version:
            return None
        return VersionRange(
            lower=str(compile_version),
            upper=str(compile_version + 1),
            upper_inclusive=False,
        )

    def resolve_support_library(self, compile_version: int | None = None) -> str | None:
        """Directory name of the matching appcompat-v7 release, or None."""
        version_range = self.get_support_library_range(compile_version)
        if not self.android_home or version_range is None:
            return None
        path = os.path.join(self.android_home, *SUPPORT_LIBRARY_PATH)
        return self._get_matching_dir(path, version_range)

    def _get_installed_targets(self) -> list[str]:
        if not self.android_home:
            return []
        path = os.path.join(self.android_home, "platforms")
        if not self.fs.exists(path):
            logger.debug(f"No Android targets installed in {path}")
            return []
        try:
            return self.fs.list_directory(path)
        except OSError as e:
            logger.debug(f"Cannot list Android targets: {e}")
            return []

    def _get_matching_dir(self, path: str, version_range: VersionRange) -> str | None:
        if not self.fs.exists(path):
            return None
        try:
            sub_dirs = self.fs.list_directory(path)
        except OSError as e:
            logger.debug(f"Cannot list {path}: {e}")
            return None

        versions = [v for v in (extract_version_triplet(d) for d in sub_dirs) if v]
        version = max_satisfying(versions, version_range)
        if version is None:
            return None
        return next((d for d in sub_dirs if extract_version_triplet(d) == version), None)

    # =========================================================================
    # Validation
    # =========================================================================

    def validate_sdk_capability(self) -> list[DoctorWarning]:
        """Warnings for every missing SDK component."""
        warnings: list[DoctorWarning] = []
        data = self.get_sdk_capability_data()
        is_sdk_root_valid = self.is_sdk_root_valid()
        sdk_tool = self.get_path_to_sdk_management_tool()

        if not data.compile_version:
            warnings.append(
                DoctorWarning(
                    message=(
                        "Cannot find a compatible Android SDK for compilation. To be able to build "
                        f"for Android, install Android SDK {MIN_REQUIRED_COMPILE_TARGET} or later."
                    ),
                    remediation=f"Run `$ {sdk_tool}` to manage your Android SDK versions.",
                    platforms=frozenset({ANDROID_PLATFORM_NAME}),
                )
            )

        if not data.build_tools_version:
            build_tools_range = self.get_build_tools_range()
            exact = build_tools_range.exact_version
            if exact:
                detail = f"You have to install version {exact}."
            else:
                detail = f"You can install any version in the following range: '{build_tools_range}'."

            remediation = (
                f"Run `$ {sdk_tool}` from your command-line to install required `Android Build Tools`."
            )
            if not is_sdk_root_valid:
                remediation += (
                    " In case you already have them installed, make sure `ANDROID_HOME` "
                    "environment variable is set correctly."
                )
            warnings.append(
                DoctorWarning(
                    message="You need to have the Android SDK Build-tools installed on your system. " + detail,
                    remediation=remediation,
                    platforms=frozenset({ANDROID_PLATFORM_NAME}),
                )
            )

        if not data.support_library_version:
            remediation = f"Run `$ {sdk_tool}` to manage the Android Support Repository."
            if not is_sdk_root_valid:
                remediation += (
                    " In case you already have it installed, make sure `ANDROID_HOME` "
                    "environment variable is set correctly."
                )
            warnings.append(
                DoctorWarning(
                    message=(
                        f"You need to have Android SDK {MIN_REQUIRED_COMPILE_TARGET} or later and the "
                        "latest Android Support Repository installed on your system."
                    ),
                    remediation=remediation,
                    platforms=frozenset({ANDROID_PLATFORM_NAME}),
                )
            )

        return warnings

    def validate_compiler_version(self, installed_version: str | None) -> list[DoctorWarning]:
        """Check raw javac output against MIN_JAVA_VERSION.

        Args:
            installed_version: javac version as reported, e.g. "1.8.0_211".

        Returns:
            A single warning when the version is unparsable or too old,
            otherwise an empty list.
        """
        remediation = (
            "You will not be able to build your projects for Android.\n"
            "To be able to build for Android, verify that you have installed The Java Development "
            "Kit (JDK) and configured it according to system requirements as\n"
            f" described in {self.get_system_requirements_link()}"
        )
        version = extract_version_triplet(installed_version)
        if version is None:
            return [
                DoctorWarning(
                    message=(
                        "Error executing command 'javac'. Make sure you have installed The Java "
                        "Development Kit (JDK) and set JAVA_HOME environment variable."
                    ),
                    remediation=remediation,
                    platforms=frozenset({ANDROID_PLATFORM_NAME}),
                )
            ]

        if version_lt(version, MIN_JAVA_VERSION):
            return [
                DoctorWarning(
                    message=(
                        f"Javac version {installed_version} is not supported. "
                        f"You have to install at least {MIN_JAVA_VERSION}."
                    ),
                    remediation=remediation,
                    platforms=frozenset({ANDROID_PLATFORM_NAME}),
                )
            ]
        return []

    def validate_sdk_root_variable(self) -> list[DoctorWarning]:
        """Check that ANDROID_HOME points at an SDK root.

        A root counts as an SDK when at least one of EXPECTED_SDK_DIRECTORIES
        exists inside it.
        """
        home = self.android_home
        if not home or not self.fs.exists(home):
            return [
                DoctorWarning(
                    message=(
                        "The ANDROID_HOME environment variable is not set or it points to a "
                        "non-existent directory. You will not be able to perform any build-related "
                        "operations for Android."
                    ),
                    remediation=(
                        "To be able to perform Android build-related operations, set the "
                        "`ANDROID_HOME` variable to point to the root of your Android SDK "
                        "installation directory."
                    ),
                    platforms=frozenset({ANDROID_PLATFORM_NAME}),
                )
            ]

        if not any(self.fs.exists(os.path.join(home, d)) for d in EXPECTED_SDK_DIRECTORIES):
            return [
                DoctorWarning(
                    message=(
                        "The ANDROID_HOME environment variable points to incorrect directory. You "
                        "will not be able to perform any build-related operations for Android."
                    ),
                    remediation=(
                        "To be able to perform Android build-related operations, set the "
                        "`ANDROID_HOME` variable to point to the root of your Android SDK "
                        "installation directory, where you will find `tools` and "
                        "`platform-tools` directories."
                    ),
                    platforms=frozenset({ANDROID_PLATFORM_NAME}),
                )
            ]
        return []

    def is_sdk_root_valid(self) -> bool:
        return not self.validate_sdk_root_variable()

    # =========================================================================
    # Tool paths
    # =========================================================================

    def get_path_to_sdk_management_tool(self) -> str:
        """Command to show in remediation text for managing the SDK.

        With a valid SDK root this is ``tools/bin/sdkmanager`` when present,
        else the legacy ``tools/android``, with the root replaced by an
        ANDROID_HOME reference in the host's shell syntax.
        """
        if not self.is_sdk_root_valid():
            return "sdkmanager"

        home = self.android_home
        sdkmanager = os.path.join(home, "tools", "bin", "sdkmanager")
        android = os.path.join(home, "tools", "android")
        path = sdkmanager if self.fs.exists(sdkmanager) else android
        variable = "%ANDROID_HOME%" if self.host.is_windows else "$ANDROID_HOME"
        return path.replace(home, variable, 1)

    async def get_path_to_adb_from_android_home(self) -> str | None:
        """Path of ``adb`` inside the SDK if it runs, else None."""
        if not self.android_home:
            return None
        adb = os.path.join(self.android_home, "platform-tools", "adb")
        try:
            await self.runner.run(adb, ["help"])
        except ProcessError as e:
            logger.debug(f"adb from ANDROID_HOME is not usable: {e}")
            return None
        return adb

    def get_path_to_emulator_executable(self) -> str:
        """Emulator executable, preferring the standalone emulator package."""
        if self._emulator_path is not None:
            return self._emulator_path

        name = "emulator"
        path = name
        if self.android_home:
            standalone = os.path.join(self.android_home, name, name)
            on_disk = f"{standalone}.exe" if self.host.is_windows else standalone
            if self.fs.exists(on_disk):
                path = standalone
            else:
                path = os.path.join(self.android_home, "tools", name)
        if self.caching:
            self._emulator_path = path
        return path

    def get_system_requirements_link(self) -> str:
        return SYSTEM_REQUIREMENTS_LINKS.get(self.host.family, "")
