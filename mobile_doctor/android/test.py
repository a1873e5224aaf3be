"""Tests for Android SDK capability resolution."""

import os

import pytest

from mobile_doctor.host import HostFamily, HostInfo

from .lib import (
    SUPPORT_LIBRARY_PATH,
    SdkCapabilityData,
    SdkCapabilityResolver,
    max_supported_target_number,
    parse_target_number,
)

SDK = "/opt/android-sdk"


@pytest.fixture
def make_resolver(fake_fs, fake_runner):
    """Factory for a resolver over the in-memory filesystem."""

    def _make(family=HostFamily.LINUX, android_home=SDK, caching=True):
        return SdkCapabilityResolver(
            host=HostInfo(family=family),
            fs=fake_fs,
            runner=fake_runner,
            android_home=android_home,
            caching=caching,
        )

    return _make


def install_sdk(fake_fs, platforms=(), build_tools=(), support=()):
    """Lay out an SDK root with the given component directories."""
    fake_fs.add_dir(SDK, ["tools", "platform-tools"])
    fake_fs.add_dir(os.path.join(SDK, "platforms"), list(platforms))
    fake_fs.add_dir(os.path.join(SDK, "build-tools"), list(build_tools))
    fake_fs.add_dir(os.path.join(SDK, *SUPPORT_LIBRARY_PATH), list(support))


class TestTargetNames:
    """Tests for target name helpers."""

    @pytest.mark.unit
    def test_parse_target_number(self):
        assert parse_target_number("android-25") == 25
        assert parse_target_number("android-N") is None

    @pytest.mark.unit
    def test_max_supported_target(self):
        assert max_supported_target_number() == 25


class TestCompileTarget:
    """Tests for resolve_compile_target."""

    @pytest.mark.unit
    def test_highest_supported_installed_target(self, make_resolver, fake_fs):
        install_sdk(fake_fs, platforms=["android-19", "android-22"])
        assert make_resolver().resolve_compile_target() == 22

    @pytest.mark.unit
    def test_unsupported_targets_ignored(self, make_resolver, fake_fs):
        install_sdk(fake_fs, platforms=["android-23", "android-30", "android-P"])
        assert make_resolver().resolve_compile_target() == 23

    @pytest.mark.unit
    def test_below_minimum(self, make_resolver, fake_fs):
        install_sdk(fake_fs, platforms=["android-17"])
        assert make_resolver().resolve_compile_target() is None

    @pytest.mark.unit
    def test_no_platforms_directory(self, make_resolver, fake_fs):
        fake_fs.add(SDK)
        assert make_resolver().resolve_compile_target() is None

    @pytest.mark.unit
    def test_sdk_root_unset(self, make_resolver):
        resolver = make_resolver(android_home=None)
        assert resolver.android_home is None
        assert resolver.resolve_compile_target() is None

    @pytest.mark.unit
    def test_sdk_root_from_environment(self, make_resolver, monkeypatch):
        monkeypatch.setenv("ANDROID_HOME", "/env/sdk")
        assert make_resolver(android_home=None).android_home == "/env/sdk"


class TestBuildTools:
    """Tests for resolve_build_tools."""

    @pytest.mark.unit
    def test_range(self, make_resolver):
        assert str(make_resolver().get_build_tools_range()) == ">=23 <=25"

    @pytest.mark.unit
    def test_selects_max_satisfying(self, make_resolver, fake_fs):
        install_sdk(fake_fs, build_tools=["23.0.1", "23.0.2", "24.0.0"])
        assert make_resolver().resolve_build_tools() == "24.0.0"

    @pytest.mark.unit
    def test_upper_bound_admits_patch_releases(self, make_resolver, fake_fs):
        install_sdk(fake_fs, build_tools=["25.0.3", "26.0.1"])
        assert make_resolver().resolve_build_tools() == "25.0.3"

    @pytest.mark.unit
    def test_nothing_in_range(self, make_resolver, fake_fs):
        install_sdk(fake_fs, build_tools=["21.0.0"])
        assert make_resolver().resolve_build_tools() is None

    @pytest.mark.unit
    def test_returns_directory_name(self, make_resolver, fake_fs):
        install_sdk(fake_fs, build_tools=["android-24.0.1", "docs"])
        assert make_resolver().resolve_build_tools() == "android-24.0.1"

    @pytest.mark.unit
    def test_first_matching_directory_wins(self, make_resolver, fake_fs):
        install_sdk(fake_fs, build_tools=["24.0.0", "24.0.0-rc1"])
        assert make_resolver().resolve_build_tools() == "24.0.0"

    @pytest.mark.unit
    def test_selected_version_matched_exactly(self, make_resolver, fake_fs):
        install_sdk(fake_fs, build_tools=["124.0.0", "24.0.0"])
        assert make_resolver().resolve_build_tools() == "24.0.0"


class TestSupportLibrary:
    """Tests for resolve_support_library."""

    @pytest.mark.unit
    def test_range_collapses_to_compile_target(self, make_resolver, fake_fs):
        install_sdk(fake_fs, platforms=["android-25"])
        assert str(make_resolver().get_support_library_range()) == ">=25 <26"

    @pytest.mark.unit
    def test_major_must_match_compile_target(self, make_resolver, fake_fs):
        install_sdk(fake_fs, platforms=["android-25"], support=["24.2.1", "25.1.0", "26.0.0"])
        assert make_resolver().resolve_support_library() == "25.1.0"

    @pytest.mark.unit
    def test_older_major_rejected(self, make_resolver, fake_fs):
        install_sdk(fake_fs, platforms=["android-25"], support=["24.2.1"])
        assert make_resolver().resolve_support_library() is None

    @pytest.mark.unit
    def test_requires_compile_target(self, make_resolver, fake_fs):
        install_sdk(fake_fs, support=["25.1.0"])
        resolver = make_resolver()
        assert resolver.get_support_library_range() is None
        assert resolver.resolve_support_library() is None


class TestCapabilityData:
    """Tests for the aggregate data."""

    @pytest.mark.unit
    def test_complete_sdk(self, make_resolver, fake_fs):
        install_sdk(
            fake_fs,
            platforms=["android-24", "android-25"],
            build_tools=["25.0.2"],
            support=["25.3.1"],
        )
        resolver = make_resolver()

        assert resolver.get_sdk_capability_data() == SdkCapabilityData(
            sdk_home_path=SDK,
            compile_version=25,
            build_tools_version="25.0.2",
            support_library_version="25.3.1",
        )
        assert resolver.has_required_components() is True

    @pytest.mark.unit
    def test_memoized_while_caching(self, make_resolver, fake_fs):
        install_sdk(fake_fs, platforms=["android-25"], support=["25.3.1"])
        resolver = make_resolver()
        first = resolver.get_sdk_capability_data()

        fake_fs.add(os.path.join(SDK, "build-tools", "25.0.2"))
        assert resolver.get_sdk_capability_data() is first
        assert resolver.has_required_components() is False

    @pytest.mark.unit
    def test_resolved_again_without_caching(self, make_resolver, fake_fs):
        install_sdk(fake_fs, platforms=["android-25"], support=["25.3.1"])
        resolver = make_resolver(caching=False)
        assert resolver.has_required_components() is False

        fake_fs.add(os.path.join(SDK, "build-tools", "25.0.2"))
        assert resolver.get_sdk_capability_data().build_tools_version == "25.0.2"
        assert resolver.has_required_components() is True

    @pytest.mark.unit
    def test_disabling_caching_drops_stored_data(self, make_resolver, fake_fs):
        install_sdk(fake_fs, platforms=["android-25"], support=["25.3.1"])
        resolver = make_resolver()
        assert resolver.has_required_components() is False

        fake_fs.add(os.path.join(SDK, "build-tools", "25.0.2"))
        resolver.set_caching_enabled(False)
        assert resolver.has_required_components() is True


class TestValidation:
    """Tests for validate_sdk_capability and validate_sdk_root_variable."""

    @pytest.mark.unit
    def test_complete_sdk_has_no_warnings(self, make_resolver, fake_fs):
        install_sdk(fake_fs, platforms=["android-25"], build_tools=["25.0.2"], support=["25.3.1"])
        assert make_resolver().validate_sdk_capability() == []

    @pytest.mark.unit
    def test_missing_compile_target(self, make_resolver, fake_fs):
        install_sdk(fake_fs, platforms=["android-17"], build_tools=["25.0.2"])
        warnings = make_resolver().validate_sdk_capability()

        assert warnings[0].message.startswith("Cannot find a compatible Android SDK for compilation.")
        assert "install Android SDK 22 or later" in warnings[0].message
        assert warnings[0].platforms == frozenset({"Android"})
        # Without a compile target the support library cannot be resolved either
        assert len(warnings) == 2

    @pytest.mark.unit
    def test_legacy_android_tool_in_remediation(self, make_resolver, fake_fs):
        install_sdk(fake_fs)
        warnings = make_resolver().validate_sdk_capability()
        assert warnings[0].remediation == "Run `$ $ANDROID_HOME/tools/android` to manage your Android SDK versions."

    @pytest.mark.unit
    def test_sdkmanager_preferred_on_windows(self, make_resolver, fake_fs):
        install_sdk(fake_fs)
        fake_fs.add(os.path.join(SDK, "tools", "bin", "sdkmanager"))
        resolver = make_resolver(HostFamily.WINDOWS)
        expected = os.path.join("%ANDROID_HOME%", "tools", "bin", "sdkmanager")
        assert resolver.get_path_to_sdk_management_tool() == expected

    @pytest.mark.unit
    def test_build_tools_range_message(self, make_resolver, fake_fs):
        install_sdk(fake_fs, platforms=["android-25"], support=["25.3.1"])
        warnings = make_resolver().validate_sdk_capability()

        assert len(warnings) == 1
        assert warnings[0].message == (
            "You need to have the Android SDK Build-tools installed on your system. "
            "You can install any version in the following range: '>=23 <=25'."
        )
        assert "make sure `ANDROID_HOME`" not in warnings[0].remediation

    @pytest.mark.unit
    def test_unset_root_everything_missing(self, make_resolver):
        warnings = make_resolver(android_home="").validate_sdk_capability()

        assert len(warnings) == 3
        assert warnings[0].remediation == "Run `$ sdkmanager` to manage your Android SDK versions."
        assert warnings[1].remediation.endswith("environment variable is set correctly.")
        assert warnings[2].remediation.endswith("environment variable is set correctly.")

    @pytest.mark.unit
    def test_root_unset(self, make_resolver):
        warnings = make_resolver(android_home="").validate_sdk_root_variable()
        assert len(warnings) == 1
        assert "is not set or it points to a non-existent directory" in warnings[0].message

    @pytest.mark.unit
    def test_root_missing_on_disk(self, make_resolver):
        warnings = make_resolver().validate_sdk_root_variable()
        assert "non-existent directory" in warnings[0].message

    @pytest.mark.unit
    def test_root_without_sdk_directories(self, make_resolver, fake_fs):
        fake_fs.add_dir(SDK, ["Documents"])
        resolver = make_resolver()
        warnings = resolver.validate_sdk_root_variable()

        assert len(warnings) == 1
        assert "points to incorrect directory" in warnings[0].message
        assert resolver.is_sdk_root_valid() is False

    @pytest.mark.unit
    @pytest.mark.parametrize("directory", ["build-tools", "tools", "platform-tools", "extras"])
    def test_any_sdk_directory_is_enough(self, make_resolver, fake_fs, directory):
        fake_fs.add_dir(SDK, [directory])
        assert make_resolver().validate_sdk_root_variable() == []


class TestCompilerVersion:
    """Tests for validate_compiler_version."""

    @pytest.mark.unit
    @pytest.mark.parametrize("version", ["1.8.0_211", "11.0.2", "17.0.8"])
    def test_supported(self, make_resolver, version):
        assert make_resolver().validate_compiler_version(version) == []

    @pytest.mark.unit
    def test_too_old(self, make_resolver):
        warnings = make_resolver().validate_compiler_version("1.7.0_80")
        assert warnings[0].message == (
            "Javac version 1.7.0_80 is not supported. You have to install at least 1.8.0."
        )

    @pytest.mark.unit
    @pytest.mark.parametrize("version", [None, "", "not found"])
    def test_unparsable(self, make_resolver, version):
        warnings = make_resolver(HostFamily.DARWIN).validate_compiler_version(version)

        assert len(warnings) == 1
        assert warnings[0].message.startswith("Error executing command 'javac'.")
        assert "ns-setup-os-x.html" in warnings[0].remediation


class TestToolPaths:
    """Tests for adb and emulator lookup."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_adb_from_sdk(self, make_resolver, fake_runner):
        adb = os.path.join(SDK, "platform-tools", "adb")
        fake_runner.respond(f"{adb} help", stdout="Android Debug Bridge")
        assert await make_resolver().get_path_to_adb_from_android_home() == adb

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_adb_not_runnable(self, make_resolver):
        assert await make_resolver().get_path_to_adb_from_android_home() is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_adb_without_sdk(self, make_resolver, fake_runner):
        assert await make_resolver(android_home="").get_path_to_adb_from_android_home() is None
        assert fake_runner.calls == []

    @pytest.mark.unit
    def test_standalone_emulator(self, make_resolver, fake_fs):
        fake_fs.add(os.path.join(SDK, "emulator", "emulator"))
        assert make_resolver().get_path_to_emulator_executable() == os.path.join(SDK, "emulator", "emulator")

    @pytest.mark.unit
    def test_standalone_emulator_on_windows(self, make_resolver, fake_fs):
        fake_fs.add(os.path.join(SDK, "emulator", "emulator.exe"))
        resolver = make_resolver(HostFamily.WINDOWS)
        assert resolver.get_path_to_emulator_executable() == os.path.join(SDK, "emulator", "emulator")

    @pytest.mark.unit
    def test_legacy_emulator(self, make_resolver):
        assert make_resolver().get_path_to_emulator_executable() == os.path.join(SDK, "tools", "emulator")

    @pytest.mark.unit
    def test_emulator_without_sdk(self, make_resolver):
        assert make_resolver(android_home="").get_path_to_emulator_executable() == "emulator"

    @pytest.mark.unit
    def test_emulator_looked_up_again_without_caching(self, make_resolver, fake_fs):
        resolver = make_resolver(caching=False)
        assert resolver.get_path_to_emulator_executable() == os.path.join(SDK, "tools", "emulator")

        fake_fs.add(os.path.join(SDK, "emulator", "emulator"))
        assert resolver.get_path_to_emulator_executable() == os.path.join(SDK, "emulator", "emulator")

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "family, fragment",
        [
            (HostFamily.LINUX, "ns-setup-linux"),
            (HostFamily.WINDOWS, "ns-setup-win"),
            (HostFamily.DARWIN, "ns-setup-os-x"),
        ],
    )
    def test_system_requirements_link(self, make_resolver, family, fragment):
        assert fragment in make_resolver(family).get_system_requirements_link()
