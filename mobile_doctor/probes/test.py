"""Tests for the system probes.

All probes run against the fakes from the root conftest, so every host
family can be simulated on any machine.
"""

import os

import pytest

from mobile_doctor.host import HostFamily
from mobile_doctor.process import ProcessError, ProcessResult

from .lib import DARWIN_CORE_FOUNDATION, DARWIN_MOBILE_DEVICE, DOTNET_VERSION_KEY, WINDOWS_VERSION_KEY
from .models import EnvironmentSnapshot, XcprojInfo

JAVA_8_OUTPUT = 'java version "1.8.0_211"\nJava(TM) SE Runtime Environment (build 1.8.0_211-b12)\n'
OPENJDK_11_OUTPUT = 'openjdk version "11.0.2" 2019-01-15\nOpenJDK Runtime Environment 18.9\n'


# =============================================================================
# Caching behaviour
# =============================================================================


class TestCaching:
    """Accessors memoize through the probe cache."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_idempotent_with_caching(self, make_probe, fake_runner):
        fake_runner.respond("git --version", stdout="git version 2.43.0\n")
        probe = make_probe()

        first = await probe.get_git_version()
        second = await probe.get_git_version()

        assert first == second == "2.43.0"
        assert fake_runner.count("git --version") == 1

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_absent_result_not_reattempted(self, make_probe, fake_runner):
        probe = make_probe()

        assert await probe.get_adb_version() is None
        assert await probe.get_adb_version() is None
        assert fake_runner.count("adb version") == 1

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_cache_bypass(self, make_probe, fake_runner):
        fake_runner.respond("git --version", stdout="git version 2.43.0\n")
        probe = make_probe(caching=False)

        await probe.get_git_version()
        await probe.get_git_version()
        assert fake_runner.count("git --version") == 2

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_set_caching_enabled(self, make_probe, fake_runner):
        fake_runner.respond("node --version", stdout="v18.17.1\n")
        probe = make_probe()
        probe.set_caching_enabled(False)

        await probe.get_node_version()
        await probe.get_node_version()
        assert fake_runner.count("node --version") == 2

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_reenabling_starts_fresh(self, make_probe, fake_runner):
        fake_runner.respond("git --version", stdout="git version 2.43.0\n")
        probe = make_probe()
        await probe.get_git_version()

        probe.set_caching_enabled(False)
        probe.set_caching_enabled(True)
        await probe.get_git_version()
        await probe.get_git_version()
        assert fake_runner.count("git --version") == 2


# =============================================================================
# Individual probes
# =============================================================================


class TestJavaProbes:
    """Tests for java and javac detection."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "stderr, expected",
        [(JAVA_8_OUTPUT, "1.8.0"), (OPENJDK_11_OUTPUT, "11.0.2"), ("Unrecognized option\n", None)],
    )
    async def test_java_version(self, make_probe, fake_runner, stderr, expected):
        fake_runner.respond("java -version", stderr=stderr)
        assert await make_probe().get_java_version() == expected

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_java_missing(self, make_probe):
        assert await make_probe().get_java_version() is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_javac_from_stderr(self, make_probe, fake_runner):
        fake_runner.respond("javac -version", stderr="javac 1.8.0_211\n")
        assert await make_probe().get_java_compiler_version() == "1.8.0_211"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_javac_from_stdout(self, make_probe, fake_runner):
        fake_runner.respond("javac -version", stdout="javac 17.0.8\n")
        assert await make_probe().get_java_compiler_version() == "17.0.8"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_javac_uses_java_home(self, make_probe, fake_runner, monkeypatch):
        monkeypatch.setenv("JAVA_HOME", "/opt/jdk")
        javac = os.path.join("/opt/jdk", "bin", "javac")
        fake_runner.respond(f"{javac} -version", stdout="javac 11.0.2\n")

        assert await make_probe().get_java_compiler_version() == "11.0.2"


class TestAppleProbes:
    """Tests for Xcode, CocoaPods and iTunes detection."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_xcode_version_on_darwin(self, make_probe, fake_runner):
        fake_runner.respond("xcodebuild -version", stdout="Xcode 9.4\nBuild version 9F1027a\n")
        assert await make_probe(HostFamily.DARWIN).get_xcode_version() == "9.4.0"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_xcode_not_probed_off_darwin(self, make_probe, fake_runner):
        fake_runner.respond("xcodebuild -version", stdout="Xcode 9.4\n")
        assert await make_probe(HostFamily.LINUX).get_xcode_version() is None
        assert fake_runner.count("xcodebuild -version") == 0

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_xcode_requires_xcode_line(self, make_probe, fake_runner):
        fake_runner.respond("xcodebuild -version", stdout="xcode-select: error 1.2\n")
        assert await make_probe(HostFamily.DARWIN).get_xcode_version() is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_cocoapods_version_skips_warnings(self, make_probe, fake_runner):
        fake_runner.respond(
            "pod --version",
            stdout="WARNING: CocoaPods requires your terminal to be using UTF-8 encoding.\n1.11.3\n",
        )
        assert await make_probe(HostFamily.DARWIN).get_cocoapods_version() == "1.11.3"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_xcodeproj_gem_location(self, make_probe, fake_runner):
        fake_runner.respond("gem which xcodeproj", stdout="/usr/lib/ruby/gems/xcodeproj.rb\n")
        assert await make_probe().get_xcodeproj_gem_location() == "/usr/lib/ruby/gems/xcodeproj.rb"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_itunes_never_on_linux(self, make_probe):
        assert await make_probe(HostFamily.LINUX).is_itunes_installed() is False

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_itunes_on_darwin(self, make_probe, fake_fs):
        fake_fs.add(DARWIN_CORE_FOUNDATION, DARWIN_MOBILE_DEVICE)
        assert await make_probe(HostFamily.DARWIN).is_itunes_installed() is True

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_itunes_needs_both_frameworks(self, make_probe, fake_fs):
        fake_fs.add(DARWIN_CORE_FOUNDATION)
        assert await make_probe(HostFamily.DARWIN).is_itunes_installed() is False

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_itunes_on_64bit_windows_uses_x86_folder(self, make_probe, fake_fs, monkeypatch):
        monkeypatch.setenv("CommonProgramFiles(x86)", "/cpf86")
        monkeypatch.setenv("CommonProgramFiles", "/cpf")
        fake_fs.add(
            os.path.join("/cpf86", "Apple", "Apple Application Support"),
            os.path.join("/cpf86", "Apple", "Mobile Device Support"),
        )
        assert await make_probe(HostFamily.WINDOWS, is_64bit=True).is_itunes_installed() is True

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_itunes_on_windows_without_env(self, make_probe, monkeypatch):
        monkeypatch.delenv("CommonProgramFiles(x86)", raising=False)
        monkeypatch.delenv("CommonProgramFiles", raising=False)
        assert await make_probe(HostFamily.WINDOWS).is_itunes_installed() is False


class TestCocoaPodsFunctionalCheck:
    """Tests for the pod install smoke test."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_success_requires_workspace(self, make_probe, fake_runner, fake_fs):
        def pod_install(cwd):
            fake_fs.add(os.path.join(cwd, "cocoapods.xcworkspace"))
            return ProcessResult(exit_code=0)

        fake_runner.responses["pod install"] = pod_install
        probe = make_probe(HostFamily.DARWIN)

        assert await probe.is_cocoapods_working_correctly() is True
        assert len(fake_fs.extracted) == 1
        archive, dest = fake_fs.extracted[0]
        assert archive.endswith("cocoapods.zip")
        assert fake_runner.cwds["pod install"] == os.path.join(dest, "cocoapods")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_missing_workspace_is_failure(self, make_probe, fake_runner):
        fake_runner.respond("pod install")
        assert await make_probe(HostFamily.DARWIN).is_cocoapods_working_correctly() is False

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_nonzero_exit_short_circuits(self, make_probe, fake_runner, fake_fs):
        checked = []
        original_exists = fake_fs.exists

        def tracking_exists(path):
            checked.append(str(path))
            return original_exists(path)

        fake_fs.exists = tracking_exists
        fake_runner.respond("pod install", stderr="[!] No Podfile", exit_code=1)

        assert await make_probe(HostFamily.DARWIN).is_cocoapods_working_correctly() is False
        assert not any(p.endswith("cocoapods.xcworkspace") for p in checked)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unrunnable_pod_is_unknown(self, make_probe):
        assert await make_probe(HostFamily.DARWIN).is_cocoapods_working_correctly() is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_extraction_error_is_unknown(self, make_probe, fake_fs):
        async def broken_extract(archive_path, dest_dir):
            raise OSError("disk full")

        fake_fs.extract_archive = broken_extract
        assert await make_probe(HostFamily.DARWIN).is_cocoapods_working_correctly() is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_temp_directory_removed(self, make_probe, fake_runner):
        fake_runner.respond("pod install", exit_code=1)
        await make_probe(HostFamily.DARWIN).is_cocoapods_working_correctly()

        project_dir = fake_runner.cwds["pod install"]
        assert not os.path.exists(os.path.dirname(project_dir))

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_temp_directory_removed_on_error(self, make_probe, fake_runner):
        fake_runner.responses["pod install"] = RuntimeError("interrupted")
        with pytest.raises(RuntimeError):
            await make_probe(HostFamily.DARWIN).is_cocoapods_working_correctly()

        project_dir = fake_runner.cwds["pod install"]
        assert not os.path.exists(os.path.dirname(project_dir))

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_not_darwin(self, make_probe, fake_runner):
        assert await make_probe(HostFamily.LINUX).is_cocoapods_working_correctly() is False
        assert fake_runner.calls == []


class TestXcprojInfo:
    """Tests for the xcproj compatibility shim requirement."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_old_cocoapods_new_xcode_needs_xcproj(self, make_probe, fake_runner):
        fake_runner.respond("pod --version", stdout="0.39.0\n")
        fake_runner.respond("xcodebuild -version", stdout="Xcode 7.3\n")
        probe = make_probe(HostFamily.DARWIN)

        assert await probe.get_xcproj_info() == XcprojInfo(should_use_xcproj=True, xcproj_available=False)
        assert await probe.is_cocoapods_update_required() is True

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_xcproj_present(self, make_probe, fake_runner):
        fake_runner.respond("pod --version", stdout="0.39.0\n")
        fake_runner.respond("xcodebuild -version", stdout="Xcode 8.0\n")
        fake_runner.respond("xcproj --version", stdout="0.1.2\n")
        probe = make_probe(HostFamily.DARWIN)

        assert (await probe.get_xcproj_info()).xcproj_available is True
        assert await probe.is_cocoapods_update_required() is False

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_modern_cocoapods_skips_xcproj_probe(self, make_probe, fake_runner):
        fake_runner.respond("pod --version", stdout="1.11.3\n")
        fake_runner.respond("xcodebuild -version", stdout="Xcode 14.2\n")
        probe = make_probe(HostFamily.DARWIN)

        assert await probe.get_xcproj_info() == XcprojInfo(should_use_xcproj=False)
        assert fake_runner.count("xcproj --version") == 0

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_missing_xcode(self, make_probe, fake_runner):
        fake_runner.respond("pod --version", stdout="0.39.0\n")
        probe = make_probe(HostFamily.DARWIN)
        assert (await probe.get_xcproj_info()).should_use_xcproj is False


class TestHostProbes:
    """Tests for OS and .NET detection."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unix_os(self, make_probe, fake_runner):
        fake_runner.respond("uname -a", stdout="Linux devbox 6.1.0 x86_64 GNU/Linux\n")
        assert await make_probe().get_os() == "Linux devbox 6.1.0 x86_64 GNU/Linux"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_windows_os_from_registry(self, make_probe, fake_registry, fake_runner):
        fake_registry.values.update(
            {
                ("ProductName", WINDOWS_VERSION_KEY): "Windows 10 Pro",
                ("CurrentVersion", WINDOWS_VERSION_KEY): "6.3",
                ("CurrentBuild", WINDOWS_VERSION_KEY): "19045",
            }
        )
        assert await make_probe(HostFamily.WINDOWS).get_os() == "Windows 10 Pro 6.3.19045"
        assert fake_runner.calls == []

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_windows_os_unreadable(self, make_probe):
        assert await make_probe(HostFamily.WINDOWS).get_os() is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_dotnet_only_on_windows(self, make_probe, fake_registry):
        fake_registry.values[("Version", DOTNET_VERSION_KEY)] = "4.8.09037"
        assert await make_probe(HostFamily.WINDOWS).get_dotnet_version() == "4.8.09037"
        assert await make_probe(HostFamily.LINUX).get_dotnet_version() is None


class TestToolProbes:
    """Tests for the remaining command-based probes."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_node_npm_gyp(self, make_probe, fake_runner):
        fake_runner.respond("node --version", stdout="v18.17.1\n")
        fake_runner.respond("npm -v", stdout="9.6.7\n")
        fake_runner.respond("node-gyp -v", stdout="v9.4.0\n")
        probe = make_probe()

        assert await probe.get_node_version() == "18.17.1"
        assert await probe.get_npm_version() == "9.6.7"
        assert await probe.get_node_gyp_version() == "9.4.0"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_adb_version(self, make_probe, fake_runner):
        fake_runner.respond("adb version", stdout="Android Debug Bridge version 1.0.41\nVersion 34.0.4\n")
        assert await make_probe().get_adb_version() == "1.0.41"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_adb_nonzero_exit_is_absent(self, make_probe, fake_runner):
        fake_runner.respond("adb version", stdout="adb 1.0.41", exit_code=1)
        assert await make_probe().get_adb_version() is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_android_installed_ignores_exit_code(self, make_probe, fake_runner):
        fake_runner.respond("android -h", stdout="Usage:\n  android [global options]", exit_code=1)
        assert await make_probe().is_android_installed() is True

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_android_bat_on_windows(self, make_probe, fake_runner):
        fake_runner.respond("android.bat -h", stdout="")
        assert await make_probe(HostFamily.WINDOWS).is_android_installed() is False

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_android_spawn_error_is_unknown(self, make_probe):
        assert await make_probe().is_android_installed() is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_mono_git_gradle(self, make_probe, fake_runner):
        fake_runner.respond("mono --version", stdout="Mono JIT compiler version 6.12.0 (tarball)\n")
        fake_runner.respond("git --version", stdout="git version 2.39.2 (Apple Git-143)\n")
        fake_runner.respond("gradle -v", stdout="\n------\nGradle 7.6\n------\n")
        probe = make_probe()

        assert await probe.get_mono_version() == "6.12.0"
        assert await probe.get_git_version() == "2.39.2 (Apple Git-143)"
        assert await probe.get_gradle_version() == "7.6"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_nativescript_cli(self, make_probe, fake_runner):
        fake_runner.respond("tns --version", stdout="8.5.3\n")
        assert await make_probe().get_nativescript_cli_version() == "8.5.3"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_probe_failures_never_raise(self, make_probe, fake_runner):
        fake_runner.responses["git --version"] = ProcessError("permission denied", "git --version")
        assert await make_probe().get_git_version() is None


# =============================================================================
# Snapshot
# =============================================================================


class TestEnvironmentSnapshot:
    """Tests for get_environment_snapshot."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_empty_linux_host(self, make_probe, monkeypatch):
        monkeypatch.setenv("SHELL", "/bin/zsh")
        snapshot = await make_probe(HostFamily.LINUX).get_environment_snapshot()

        assert isinstance(snapshot, EnvironmentSnapshot)
        assert snapshot.platform == "linux"
        assert snapshot.shell == "/bin/zsh"
        assert snapshot.proc_arch == "x86_64"
        assert snapshot.java_ver is None
        assert snapshot.itunes_installed is False
        assert snapshot.is_cocoapods_working_correctly is None
        assert snapshot.is_cocoapods_update_required is False

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_snapshot_is_frozen(self, make_probe):
        snapshot = await make_probe().get_environment_snapshot()
        with pytest.raises(Exception):
            snapshot.java_ver = "1.8.0"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_functional_check_skipped_without_xcode(self, make_probe, fake_runner):
        fake_runner.respond("pod --version", stdout="1.11.3\n")
        fake_runner.respond("pod install")

        snapshot = await make_probe(HostFamily.DARWIN).get_environment_snapshot()
        assert snapshot.cocoapods_ver == "1.11.3"
        assert snapshot.is_cocoapods_working_correctly is None
        assert fake_runner.count("pod install") == 0

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_functional_check_runs_with_xcode_and_pods(self, make_probe, fake_runner):
        fake_runner.respond("pod --version", stdout="1.11.3\n")
        fake_runner.respond("xcodebuild -version", stdout="Xcode 14.2\n")
        fake_runner.respond("pod install", exit_code=1)

        snapshot = await make_probe(HostFamily.DARWIN).get_environment_snapshot()
        assert snapshot.is_cocoapods_working_correctly is False
        assert fake_runner.count("pod install") == 1

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_probes_run_in_fixed_order(self, make_probe, fake_runner):
        await make_probe(HostFamily.LINUX).get_environment_snapshot()
        assert fake_runner.calls[:4] == ["uname -a", "node --version", "npm -v", "node-gyp -v"]
        assert fake_runner.calls[-1] == "tns --version"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_json_serializable(self, make_probe, fake_runner):
        fake_runner.respond("git --version", stdout="git version 2.43.0\n")
        snapshot = await make_probe().get_sys_info()
        assert '"git_ver":"2.43.0"' in snapshot.model_dump_json()
