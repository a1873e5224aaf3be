"""Tests for the build readiness doctor."""

import os

import pytest

from mobile_doctor.android import SdkCapabilityResolver
from mobile_doctor.diagnostics import ValidationError
from mobile_doctor.host import HostFamily
from mobile_doctor.probes import EnvironmentSnapshot
from mobile_doctor.probes.lib import DARWIN_CORE_FOUNDATION, DARWIN_MOBILE_DEVICE
from mobile_doctor.process import ProcessResult

from .lib import (
    Doctor,
    check_cocoapods_version,
    check_cocoapods_working,
    check_mono,
)

SDK = "/sdk"
APPCOMPAT = os.path.join(SDK, "extras", "android", "m2repository", "com", "android", "support", "appcompat-v7")


@pytest.fixture
def make_doctor(make_probe, fake_fs, fake_runner):
    """Factory for a Doctor over the fakes on a given host family."""

    def _make(family=HostFamily.LINUX, caching=True):
        probe = make_probe(family, caching=caching)
        resolver = SdkCapabilityResolver(
            host=probe.host, fs=fake_fs, runner=fake_runner, android_home=SDK, caching=caching
        )
        return Doctor(probe, resolver)

    return _make


def healthy_common_tools(fake_runner):
    fake_runner.respond("adb version", stdout="Android Debug Bridge version 1.0.41\n")
    fake_runner.respond("android -h", stdout="Usage:\n  android [global options]\n", exit_code=1)
    fake_runner.respond("java -version", stderr='openjdk version "11.0.2" 2019-01-15\n')
    fake_runner.respond("git --version", stdout="git version 2.43.0\n")


def healthy_mac_tools(fake_runner, fake_fs):
    fake_runner.respond("xcodebuild -version", stdout="Xcode 14.2\nBuild version 14C18\n")
    fake_runner.respond("gem which xcodeproj", stdout="/gems/xcodeproj.rb\n")
    fake_runner.respond("pod --version", stdout="1.11.3\n")
    fake_runner.respond("mono --version", stdout="Mono JIT compiler version 6.12.0 (tarball)\n")
    fake_fs.add(DARWIN_CORE_FOUNDATION, DARWIN_MOBILE_DEVICE)

    def pod_install(cwd):
        fake_fs.add(os.path.join(cwd, "cocoapods.xcworkspace"))
        return ProcessResult(exit_code=0)

    fake_runner.responses["pod install"] = pod_install


def messages(warnings):
    return [w.message for w in warnings]


# =============================================================================
# can_build_locally
# =============================================================================


class TestCanBuildLocally:
    """Tests for platform validation and requirement delegation."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    @pytest.mark.parametrize("platform", ["", None])
    async def test_empty_platform(self, make_doctor, platform):
        with pytest.raises(ValidationError, match="You must specify a platform."):
            await make_doctor().can_build_locally(platform)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unsupported_platform(self, make_doctor):
        with pytest.raises(ValidationError) as exc_info:
            await make_doctor().can_build_locally("blackberry")
        assert str(exc_info.value) == (
            "Platform blackberry is not supported. The supported platforms are: Android, iOS"
        )

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_android_case_insensitive(self, make_doctor, fake_fs):
        fake_fs.add(
            os.path.join(SDK, "platforms", "android-25"),
            os.path.join(SDK, "build-tools", "25.0.2"),
            os.path.join(APPCOMPAT, "25.3.1"),
        )
        assert await make_doctor().can_build_locally("ANDROID") is True

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_android_without_sdk(self, make_doctor):
        assert await make_doctor().can_build_locally("android") is False

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_sdk_installed_after_caching_disabled(self, make_doctor, fake_fs):
        doctor = make_doctor()
        assert await doctor.can_build_locally("android") is False

        fake_fs.add(
            os.path.join(SDK, "platforms", "android-25"),
            os.path.join(SDK, "build-tools", "25.0.2"),
            os.path.join(APPCOMPAT, "25.3.1"),
        )
        assert await doctor.can_build_locally("android") is False

        doctor.set_caching_enabled(False)
        assert await doctor.can_build_locally("android") is True

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_ios_on_mac(self, make_doctor, fake_runner, fake_fs):
        healthy_mac_tools(fake_runner, fake_fs)
        assert await make_doctor(HostFamily.DARWIN).can_build_locally("iOS") is True

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_ios_off_mac(self, make_doctor, fake_runner, fake_fs):
        healthy_mac_tools(fake_runner, fake_fs)
        assert await make_doctor(HostFamily.LINUX).can_build_locally("ios") is False


# =============================================================================
# get_warnings
# =============================================================================


class TestGetWarnings:
    """Tests for the ordered warning list."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_healthy_mac(self, make_doctor, fake_runner, fake_fs):
        healthy_common_tools(fake_runner)
        healthy_mac_tools(fake_runner, fake_fs)
        assert await make_doctor(HostFamily.DARWIN).get_warnings() == []

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_empty_mac_order(self, make_doctor):
        warnings = await make_doctor(HostFamily.DARWIN).get_warnings()

        assert messages(warnings) == [
            "WARNING: adb from the Android SDK is not installed or is not configured properly. ",
            "WARNING: The Android SDK is not installed or is not configured properly.",
            "WARNING: Xcode is not installed or is not configured properly.",
            "WARNING: xcodeproj gem is not installed or is not configured properly.",
            "WARNING: CocoaPods is not installed or is not configured properly.",
            "WARNING: Mono 3.12 or later is not installed or not configured properly.",
            "WARNING: iTunes is not installed.",
            "WARNING: The Java Development Kit (JDK) is not installed or is not configured properly.",
            "WARNING: Git is not installed or not configured properly.",
        ]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_non_mac_gets_single_ios_note(self, make_doctor, fake_runner):
        healthy_common_tools(fake_runner)
        warnings = await make_doctor(HostFamily.LINUX).get_warnings()

        ios_warnings = [w for w in warnings if w.applies_to("iOS") and w.platforms]
        assert messages(ios_warnings) == ["NOTE: You can develop for iOS only on Mac OS X systems."]
        assert messages(warnings) == [
            "NOTE: You can develop for iOS only on Mac OS X systems.",
            "WARNING: iTunes is not installed.",
        ]
        assert fake_runner.count("pod install") == 0

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_windows_with_itunes(self, make_doctor, fake_runner, fake_fs, monkeypatch):
        monkeypatch.setenv("CommonProgramFiles(x86)", "/cpf86")
        fake_fs.add(
            os.path.join("/cpf86", "Apple", "Apple Application Support"),
            os.path.join("/cpf86", "Apple", "Mobile Device Support"),
        )
        fake_runner.respond("android.bat -h", stdout="android")
        fake_runner.respond("adb version", stdout="Android Debug Bridge version 1.0.41\n")
        fake_runner.respond("java -version", stderr='java version "1.8.0_211"\n')
        fake_runner.respond("git --version", stdout="git version 2.43.0.windows.1\n")

        warnings = await make_doctor(HostFamily.WINDOWS).get_warnings()
        assert messages(warnings) == ["NOTE: You can develop for iOS only on Mac OS X systems."]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_broken_cocoapods(self, make_doctor, fake_runner, fake_fs):
        healthy_common_tools(fake_runner)
        healthy_mac_tools(fake_runner, fake_fs)
        fake_runner.respond("pod install", stderr="[!] Unable to find a specification", exit_code=1)

        warnings = await make_doctor(HostFamily.DARWIN).get_warnings()
        assert messages(warnings) == ["WARNING: There was a problem with CocoaPods"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_old_cocoapods(self, make_doctor, fake_runner, fake_fs):
        healthy_common_tools(fake_runner)
        healthy_mac_tools(fake_runner, fake_fs)
        fake_runner.respond("pod --version", stdout="0.38.0\n")

        warnings = await make_doctor(HostFamily.DARWIN).get_warnings()
        assert messages(warnings) == ["WARNING: Your current CocoaPods version is earlier than 0.38.2."]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_one_snapshot_per_call(self, make_doctor, fake_runner):
        doctor = make_doctor(caching=False)
        await doctor.get_warnings()
        assert fake_runner.count("git --version") == 1

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_caching_toggle(self, make_doctor, fake_runner):
        doctor = make_doctor()
        await doctor.get_warnings()
        await doctor.get_warnings()
        assert fake_runner.count("git --version") == 1

        doctor.set_caching_enabled(False)
        await doctor.get_warnings()
        assert fake_runner.count("git --version") == 2

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_sys_info(self, make_doctor, fake_runner):
        fake_runner.respond("git --version", stdout="git version 2.43.0\n")
        snapshot = await make_doctor().get_sys_info()
        assert snapshot.git_ver == "2.43.0"

    @pytest.mark.unit
    def test_checks_for_host(self, make_doctor):
        assert len(make_doctor(HostFamily.DARWIN).get_checks()) == 11
        assert len(make_doctor(HostFamily.LINUX).get_checks()) == 6


class TestIndividualChecks:
    """Edge cases of single checks."""

    @pytest.mark.unit
    def test_cocoapods_working_skipped_without_xcode(self):
        snapshot = EnvironmentSnapshot(platform="darwin", shell="zsh", cocoapods_ver="1.11.3")
        assert check_cocoapods_working(snapshot) is None

    @pytest.mark.unit
    def test_cocoapods_unknown_result_warns(self):
        snapshot = EnvironmentSnapshot(
            platform="darwin", shell="zsh", xcode_ver="14.2.0", cocoapods_ver="1.11.3"
        )
        assert check_cocoapods_working(snapshot) is not None

    @pytest.mark.unit
    def test_cocoapods_version_ignores_unparsable(self):
        snapshot = EnvironmentSnapshot(platform="darwin", shell="zsh", cocoapods_ver="0.38")
        assert check_cocoapods_version(snapshot) is None

    @pytest.mark.unit
    @pytest.mark.parametrize("version, warns", [(None, True), ("3.10.0", True), ("3.12.0", False)])
    def test_mono_minimum(self, version, warns):
        snapshot = EnvironmentSnapshot(platform="darwin", shell="zsh", mono_ver=version)
        assert (check_mono(snapshot) is not None) is warns


class TestDefaultInstances:
    """Tests for the package-level caching switch."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_set_caching_enabled_reaches_resolver(self, make_doctor, fake_fs, monkeypatch):
        import mobile_doctor

        doctor = make_doctor()
        monkeypatch.setattr(mobile_doctor, "doctor", doctor)
        assert await doctor.can_build_locally("android") is False

        fake_fs.add(
            os.path.join(SDK, "platforms", "android-25"),
            os.path.join(SDK, "build-tools", "25.0.2"),
            os.path.join(APPCOMPAT, "25.3.1"),
        )
        mobile_doctor.set_caching_enabled(False)
        assert doctor.resolver.caching is False
        assert doctor.probe.cache.enabled is False
        assert await doctor.can_build_locally("android") is True
