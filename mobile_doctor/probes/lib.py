"""System probes: one cached accessor per detectable tool.

Each accessor runs a single detection strategy (an external command, a
registry read or a filesystem check) and returns a normalized value. Any
failure along the way yields None; probes never raise.
"""

from __future__ import annotations

import logging
import os
import re
import tempfile
import zipfile
from pathlib import Path

from mobile_doctor.config import (
    get_common_program_files,
    get_java_home,
    get_user_shell,
    is_caching_enabled_by_default,
)
from mobile_doctor.filesystem import COCOAPODS_FIXTURE_ARCHIVE, FileSystem
from mobile_doctor.host import HostInfo, detect_host
from mobile_doctor.process import ProcessError, ProcessResult, ProcessRunner
from mobile_doctor.registry import RegistryHive, RegistryReader
from mobile_doctor.version import (
    VERSION_REGEXP,
    get_version_from_string,
    version_gte,
    version_lt,
)

from .cache import ProbeCache, ProbeKey
from .models import EnvironmentSnapshot, XcprojInfo

logger = logging.getLogger(__name__)

# `java -version` wording differs between vendors
JAVA_VERSION_REGEXP = re.compile(r"(?:openjdk|java) version \"((?:\d+\.)+\d+)", re.IGNORECASE)
JAVA_COMPILER_VERSION_REGEXP = re.compile(r"^javac (.*)", re.IGNORECASE | re.MULTILINE)
XCODE_VERSION_REGEXP = re.compile(r"Xcode (.*)")
GIT_VERSION_REGEXP = re.compile(r"^git version (.*)")
GRADLE_VERSION_REGEXP = re.compile(r"Gradle (.*)", re.IGNORECASE)
MONO_VERSION_REGEXP = re.compile(r"version (\d+[.]\d+[.]\d+) ", re.MULTILINE)

WINDOWS_VERSION_KEY = r"\Software\Microsoft\Windows NT\CurrentVersion"
DOTNET_VERSION_KEY = r"\SOFTWARE\Microsoft\NET Framework Setup\NDP\v4\Full"

DARWIN_CORE_FOUNDATION = "/System/Library/Frameworks/CoreFoundation.framework/CoreFoundation"
DARWIN_MOBILE_DEVICE = "/System/Library/PrivateFrameworks/MobileDevice.framework/MobileDevice"

# CocoaPods before 1.0.0 rewrites projects of Xcode 7.3+ into XML plists
XCPROJ_MAX_COCOAPODS_VERSION = "1.0.0"
XCPROJ_MIN_XCODE_VERSION = "7.3.0"


class SystemProbe:
    """Cached accessors for every tool the doctor inspects.

    Results live for the lifetime of the instance. Disable caching with
    ``set_caching_enabled(False)`` to make every accessor probe again.

    Example:
        >>> probe = SystemProbe()
        >>> await probe.get_git_version()
        '2.43.0'
        >>> snapshot = await probe.get_environment_snapshot()
    """

    def __init__(
        self,
        host: HostInfo | None = None,
        runner: ProcessRunner | None = None,
        fs: FileSystem | None = None,
        registry: RegistryReader | None = None,
        cache: ProbeCache | None = None,
        fixture_archive: Path = COCOAPODS_FIXTURE_ARCHIVE,
    ):
        self.host = host or detect_host()
        self.runner = runner or ProcessRunner()
        self.fs = fs or FileSystem()
        self.registry = registry or RegistryReader()
        self.cache = cache or ProbeCache(enabled=is_caching_enabled_by_default())
        self.fixture_archive = fixture_archive

    def set_caching_enabled(self, enabled: bool) -> None:
        """Turn result caching on or off for subsequent accessor calls.

        Disabling also forgets stored results, so re-enabling starts fresh.
        """
        self.cache.enabled = enabled
        if not enabled:
            self.cache.clear()

    # =========================================================================
    # Java
    # =========================================================================

    async def get_java_version(self) -> str | None:
        return await self.cache.get_or_compute(ProbeKey.JAVA_VERSION, self._probe_java_version)

    async def _probe_java_version(self) -> str | None:
        result = await self._run("java", ["-version"])
        if result is None:
            return None
        match = JAVA_VERSION_REGEXP.search(result.stderr) or JAVA_VERSION_REGEXP.search(result.stdout)
        return match.group(1) if match else None

    async def get_java_compiler_version(self) -> str | None:
        """Raw javac version, e.g. "1.8.0_211" or "11.0.2"."""
        return await self.cache.get_or_compute(
            ProbeKey.JAVA_COMPILER_VERSION, self._probe_java_compiler_version
        )

    async def _probe_java_compiler_version(self) -> str | None:
        java_home = get_java_home()
        javac = os.path.join(java_home, "bin", "javac") if java_home else "javac"
        result = await self._run(javac, ["-version"])
        if result is None:
            return None
        # JDK 8 prints to stderr, later releases to stdout
        match = JAVA_COMPILER_VERSION_REGEXP.search(result.stderr) or JAVA_COMPILER_VERSION_REGEXP.search(
            result.stdout
        )
        return match.group(1).strip() if match else None

    # =========================================================================
    # Apple toolchain
    # =========================================================================

    async def get_xcode_version(self) -> str | None:
        return await self.cache.get_or_compute(ProbeKey.XCODE_VERSION, self._probe_xcode_version)

    async def _probe_xcode_version(self) -> str | None:
        if not self.host.is_darwin:
            return None
        output = await self._exec_command("xcodebuild -version")
        if output and XCODE_VERSION_REGEXP.search(output):
            return get_version_from_string(output)
        return None

    async def get_xcodeproj_gem_location(self) -> str | None:
        return await self.cache.get_or_compute(
            ProbeKey.XCODEPROJ_GEM_LOCATION, self._probe_xcodeproj_gem_location
        )

    async def _probe_xcodeproj_gem_location(self) -> str | None:
        output = await self._exec_command("gem which xcodeproj")
        return _first_line(output)

    async def get_cocoapods_version(self) -> str | None:
        return await self.cache.get_or_compute(
            ProbeKey.COCOAPODS_VERSION, self._probe_cocoapods_version
        )

    async def _probe_cocoapods_version(self) -> str | None:
        if not self.host.is_darwin:
            return None
        output = await self._exec_command("pod --version")
        # Output may start with Ruby or gem warnings
        match = VERSION_REGEXP.search(output) if output else None
        return match.group(0).strip() if match else None

    async def is_cocoapods_working_correctly(self) -> bool | None:
        """Run ``pod install`` on a bundled sample project.

        Returns:
            True if the install succeeds and writes the workspace, False if
            it fails cleanly (or the host is not macOS), None if CocoaPods
            could not be executed at all.
        """
        return await self.cache.get_or_compute(
            ProbeKey.COCOAPODS_WORKING_CORRECTLY, self._probe_cocoapods_working_correctly
        )

    async def _probe_cocoapods_working_correctly(self) -> bool | None:
        if not self.host.is_darwin:
            return False

        with tempfile.TemporaryDirectory(prefix="mobile-doctor-check-cocoapods-") as temp_dir:
            try:
                await self.fs.extract_archive(self.fixture_archive, temp_dir)
            except (OSError, zipfile.BadZipFile) as e:
                logger.debug(f"Cannot extract CocoaPods fixture project: {e}")
                return None

            project_dir = os.path.join(temp_dir, "cocoapods")
            try:
                result = await self.runner.run(
                    "pod", ["install"], ignore_error=True, cwd=project_dir
                )
            except ProcessError as e:
                logger.debug(f"CocoaPods check could not run: {e}")
                return None

            if not result.ok:
                return False
            return self.fs.exists(os.path.join(project_dir, "cocoapods.xcworkspace"))

    async def get_xcproj_info(self) -> XcprojInfo:
        return await self.cache.get_or_compute(ProbeKey.XCPROJ_INFO, self._probe_xcproj_info)

    async def _probe_xcproj_info(self) -> XcprojInfo:
        cocoapods_version = await self.get_cocoapods_version()
        xcode_version = await self.get_xcode_version()

        should_use_xcproj = bool(
            cocoapods_version
            and xcode_version
            and version_lt(cocoapods_version, XCPROJ_MAX_COCOAPODS_VERSION)
            and version_gte(xcode_version, XCPROJ_MIN_XCODE_VERSION)
        )
        xcproj_available = None
        if should_use_xcproj:
            xcproj_available = await self._exec("xcproj --version") is not None

        return XcprojInfo(should_use_xcproj=should_use_xcproj, xcproj_available=xcproj_available)

    async def is_cocoapods_update_required(self) -> bool:
        return await self.cache.get_or_compute(
            ProbeKey.COCOAPODS_UPDATE_REQUIRED, self._probe_cocoapods_update_required
        )

    async def _probe_cocoapods_update_required(self) -> bool:
        info = await self.get_xcproj_info()
        return info.should_use_xcproj and not info.xcproj_available

    async def is_itunes_installed(self) -> bool:
        return await self.cache.get_or_compute(ProbeKey.ITUNES_INSTALLED, self._probe_itunes_installed)

    async def _probe_itunes_installed(self) -> bool:
        if self.host.is_linux:
            return False

        if self.host.is_windows:
            common_program_files = get_common_program_files(self.host.is_64bit)
            if not common_program_files:
                return False
            core_foundation_dir = os.path.join(common_program_files, "Apple", "Apple Application Support")
            mobile_device_dir = os.path.join(common_program_files, "Apple", "Mobile Device Support")
        else:
            core_foundation_dir = DARWIN_CORE_FOUNDATION
            mobile_device_dir = DARWIN_MOBILE_DEVICE

        return self.fs.exists(core_foundation_dir) and self.fs.exists(mobile_device_dir)

    # =========================================================================
    # Host
    # =========================================================================

    async def get_os(self) -> str | None:
        return await self.cache.get_or_compute(ProbeKey.OS, self._probe_os)

    async def _probe_os(self) -> str | None:
        if self.host.is_windows:
            return await self._windows_version()
        output = await self._exec_command("uname -a")
        return output.strip() if output else None

    async def _windows_version(self) -> str | None:
        hive = RegistryHive.HKLM
        product_name = await self.registry.read_value("ProductName", hive, WINDOWS_VERSION_KEY)
        current_version = await self.registry.read_value("CurrentVersion", hive, WINDOWS_VERSION_KEY)
        current_build = await self.registry.read_value("CurrentBuild", hive, WINDOWS_VERSION_KEY)
        if product_name is None:
            return None
        return f"{product_name} {current_version}.{current_build}"

    async def get_dotnet_version(self) -> str | None:
        return await self.cache.get_or_compute(ProbeKey.DOTNET_VERSION, self._probe_dotnet_version)

    async def _probe_dotnet_version(self) -> str | None:
        if not self.host.is_windows:
            return None
        return await self.registry.read_value("Version", RegistryHive.HKLM, DOTNET_VERSION_KEY)

    # =========================================================================
    # JavaScript toolchain
    # =========================================================================

    async def get_node_version(self) -> str | None:
        return await self.cache.get_or_compute(ProbeKey.NODE_VERSION, self._probe_node_version)

    async def _probe_node_version(self) -> str | None:
        output = await self._exec_command("node --version")
        return get_version_from_string(output)

    async def get_npm_version(self) -> str | None:
        return await self.cache.get_or_compute(ProbeKey.NPM_VERSION, self._probe_npm_version)

    async def _probe_npm_version(self) -> str | None:
        return _first_line(await self._exec_command("npm -v"))

    async def get_node_gyp_version(self) -> str | None:
        return await self.cache.get_or_compute(ProbeKey.NODE_GYP_VERSION, self._probe_node_gyp_version)

    async def _probe_node_gyp_version(self) -> str | None:
        return get_version_from_string(await self._exec_command("node-gyp -v"))

    async def get_nativescript_cli_version(self) -> str | None:
        return await self.cache.get_or_compute(
            ProbeKey.NATIVESCRIPT_CLI_VERSION, self._probe_nativescript_cli_version
        )

    async def _probe_nativescript_cli_version(self) -> str | None:
        return _first_line(await self._exec_command("tns --version"))

    # =========================================================================
    # Android and other tools
    # =========================================================================

    async def get_adb_version(self) -> str | None:
        return await self.cache.get_or_compute(ProbeKey.ADB_VERSION, self._probe_adb_version)

    async def _probe_adb_version(self) -> str | None:
        return get_version_from_string(await self._exec_command("adb version"))

    async def is_android_installed(self) -> bool | None:
        """Whether the legacy ``android`` SDK tool answers ``-h``."""
        return await self.cache.get_or_compute(
            ProbeKey.ANDROID_INSTALLED, self._probe_android_installed
        )

    async def _probe_android_installed(self) -> bool | None:
        android = "android.bat" if self.host.is_windows else "android"
        try:
            # `android -h` exits 1 on success on some hosts
            result = await self.runner.run(android, ["-h"], ignore_error=True)
        except ProcessError as e:
            logger.debug(f"android tool unavailable: {e}")
            return None
        return "android" in result.stdout

    async def get_mono_version(self) -> str | None:
        return await self.cache.get_or_compute(ProbeKey.MONO_VERSION, self._probe_mono_version)

    async def _probe_mono_version(self) -> str | None:
        output = await self._exec_command("mono --version")
        match = MONO_VERSION_REGEXP.search(output) if output else None
        return match.group(1) if match else None

    async def get_git_version(self) -> str | None:
        return await self.cache.get_or_compute(ProbeKey.GIT_VERSION, self._probe_git_version)

    async def _probe_git_version(self) -> str | None:
        output = await self._exec_command("git --version")
        match = GIT_VERSION_REGEXP.search(output) if output else None
        return match.group(1).strip() if match else None

    async def get_gradle_version(self) -> str | None:
        return await self.cache.get_or_compute(ProbeKey.GRADLE_VERSION, self._probe_gradle_version)

    async def _probe_gradle_version(self) -> str | None:
        output = await self._exec_command("gradle -v")
        match = GRADLE_VERSION_REGEXP.search(output) if output else None
        return match.group(1).strip() if match else None

    # =========================================================================
    # Snapshot
    # =========================================================================

    async def get_environment_snapshot(self) -> EnvironmentSnapshot:
        """Collect every probe, one after another, into a single snapshot.

        The CocoaPods smoke test only runs when both Xcode and CocoaPods were
        detected; otherwise it is reported as unknown.
        """
        platform = self.host.platform or self.host.family.value
        shell = get_user_shell(self.host.is_windows)
        os_name = await self.get_os()

        node_ver = await self.get_node_version()
        npm_ver = await self.get_npm_version()
        node_gyp_ver = await self.get_node_gyp_version()

        dotnet_ver = await self.get_dotnet_version()
        java_ver = await self.get_java_version()
        javac_version = await self.get_java_compiler_version()
        xcode_ver = await self.get_xcode_version()
        xcodeproj_gem_location = await self.get_xcodeproj_gem_location()
        itunes_installed = await self.is_itunes_installed()
        cocoapods_ver = await self.get_cocoapods_version()
        adb_ver = await self.get_adb_version()
        android_installed = await self.is_android_installed()
        mono_ver = await self.get_mono_version()
        git_ver = await self.get_git_version()
        gradle_ver = await self.get_gradle_version()

        is_cocoapods_working_correctly = None
        if xcode_ver and cocoapods_ver:
            is_cocoapods_working_correctly = await self.is_cocoapods_working_correctly()

        nativescript_cli_version = await self.get_nativescript_cli_version()
        is_cocoapods_update_required = await self.is_cocoapods_update_required()

        return EnvironmentSnapshot(
            platform=platform,
            shell=shell,
            os_name=os_name,
            proc_arch=self.host.arch or None,
            node_ver=node_ver,
            npm_ver=npm_ver,
            node_gyp_ver=node_gyp_ver,
            dotnet_ver=dotnet_ver,
            java_ver=java_ver,
            javac_version=javac_version,
            xcode_ver=xcode_ver,
            xcodeproj_gem_location=xcodeproj_gem_location,
            itunes_installed=itunes_installed,
            cocoapods_ver=cocoapods_ver,
            adb_ver=adb_ver,
            android_installed=android_installed,
            mono_ver=mono_ver,
            git_ver=git_ver,
            gradle_ver=gradle_ver,
            is_cocoapods_working_correctly=is_cocoapods_working_correctly,
            nativescript_cli_version=nativescript_cli_version,
            is_cocoapods_update_required=is_cocoapods_update_required,
        )

    async def get_sys_info(self) -> EnvironmentSnapshot:
        """Alias of get_environment_snapshot."""
        return await self.get_environment_snapshot()

    # =========================================================================
    # Command helpers
    # =========================================================================

    async def _run(self, command: str, args: list[str]) -> ProcessResult | None:
        try:
            return await self.runner.run(command, args)
        except ProcessError as e:
            logger.debug(f"Probe command failed: {e}")
            return None

    async def _exec(self, command_line: str) -> ProcessResult | None:
        try:
            return await self.runner.exec(command_line)
        except ProcessError as e:
            logger.debug(f"Probe command failed: {e}")
            return None

    async def _exec_command(self, command_line: str) -> str | None:
        result = await self._exec(command_line)
        return result.stdout if result else None



def _first_line(output: str | None) -> str | None:
    """First non-blank line of command output, stripped."""
    if not output:
        return None
    for line in output.splitlines():
        if line.strip():
            return line.strip()
    return None
