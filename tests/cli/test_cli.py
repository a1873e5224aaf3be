"""Tests for the mobile-doctor CLI entry point."""

import importlib.util
import json
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from mobile_doctor.android import SdkCapabilityResolver
from mobile_doctor.doctor import Doctor
from mobile_doctor.host import HostFamily

ROOT = Path(__file__).resolve().parents[2]
SDK = "/sdk"


def load_cli():
    """Import the root __main__.py under a private module name."""
    spec = importlib.util.spec_from_file_location("mobile_doctor_cli", ROOT / "__main__.py")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def cli():
    return load_cli()


@pytest.fixture
def fake_doctor_factory(make_probe, fake_fs, fake_runner):
    """Replacement for create_doctor recording the caching flag it got."""
    requested = []

    def _create(caching=None):
        requested.append(caching)
        probe = make_probe(HostFamily.LINUX, caching=caching is not False)
        resolver = SdkCapabilityResolver(
            host=probe.host, fs=fake_fs, runner=fake_runner, android_home=SDK, caching=caching is not False
        )
        return Doctor(probe, resolver)

    _create.requested = requested
    return _create


class TestHelp:
    """Tests for top-level dispatch."""

    @pytest.mark.unit
    def test_no_command(self, cli, capsys):
        assert cli.main([]) == 1
        assert "Usage: python ." in capsys.readouterr().out

    @pytest.mark.unit
    def test_help(self, cli, capsys):
        assert cli.main(["--help"]) == 0
        assert "can-build" in capsys.readouterr().out

    @pytest.mark.unit
    def test_unknown_command(self, cli):
        assert cli.main(["frobnicate"]) == 1

    @pytest.mark.unit
    def test_dev_without_subcommand(self, cli, capsys):
        assert cli.main(["dev"]) == 1
        assert "Run pytest" in capsys.readouterr().out


class TestDoctorCommand:
    """Tests for `python . doctor`."""

    @pytest.mark.unit
    def test_reports_warnings(self, cli, fake_doctor_factory, capsys):
        with patch.object(cli, "create_doctor", fake_doctor_factory):
            exit_code = cli.main(["doctor"])

        out = capsys.readouterr().out
        assert exit_code == 1
        assert "Doctor Report" in out
        assert out.index("adb from the Android SDK") < out.index("Git is not installed")

    @pytest.mark.unit
    def test_json_output(self, cli, fake_doctor_factory, capsys):
        with patch.object(cli, "create_doctor", fake_doctor_factory):
            cli.main(["doctor", "--json"])

        warnings = json.loads(capsys.readouterr().out)
        assert warnings[0]["platforms"] == ["Android"]
        assert warnings[-1]["message"].startswith("WARNING: Git")

    @pytest.mark.unit
    def test_no_cache_flag(self, cli, fake_doctor_factory):
        with patch.object(cli, "create_doctor", fake_doctor_factory):
            cli.main(["--no-cache", "doctor"])
            cli.main(["doctor"])
        assert fake_doctor_factory.requested == [False, None]

    @pytest.mark.unit
    def test_platform_filter(self, cli, fake_doctor_factory, capsys):
        with patch.object(cli, "create_doctor", fake_doctor_factory):
            assert cli.main(["doctor", "--platform", "ios", "--json"]) == 1

        warnings = json.loads(capsys.readouterr().out)
        assert warnings
        assert all(w["platforms"] in ([], ["iOS"]) for w in warnings)
        assert any(w["message"].startswith("NOTE: You can develop for iOS") for w in warnings)

    @pytest.mark.unit
    def test_unsupported_platform_filter(self, cli, fake_doctor_factory, capsys):
        with patch.object(cli, "create_doctor", fake_doctor_factory):
            assert cli.main(["doctor", "--platform", "blackberry"]) == 2
        assert "Doctor Report" not in capsys.readouterr().out


class TestInfoCommand:
    """Tests for `python . info`."""

    @pytest.mark.unit
    def test_table(self, cli, fake_doctor_factory, fake_runner, capsys):
        fake_runner.respond("git --version", stdout="git version 2.43.0\n")
        with patch.object(cli, "create_doctor", fake_doctor_factory):
            assert cli.main(["info"]) == 0

        out = capsys.readouterr().out
        assert "Environment Report" in out
        assert "Linux (64-bit)" in out
        assert "2.43.0" in out
        assert "not found" in out

    @pytest.mark.unit
    def test_json(self, cli, fake_doctor_factory, fake_runner, capsys):
        fake_runner.respond("node --version", stdout="v20.11.0\n")
        with patch.object(cli, "create_doctor", fake_doctor_factory):
            assert cli.main(["info", "--json"]) == 0

        snapshot = json.loads(capsys.readouterr().out)
        assert snapshot["node_ver"] == "20.11.0"
        assert snapshot["platform"] == "linux"


class TestCanBuildCommand:
    """Tests for `python . can-build`."""

    @pytest.mark.unit
    def test_android_ready(self, cli, fake_doctor_factory, fake_fs, capsys):
        fake_fs.add(
            os.path.join(SDK, "platforms", "android-25"),
            os.path.join(SDK, "build-tools", "25.0.2"),
            os.path.join(SDK, "extras", "android", "m2repository", "com", "android", "support", "appcompat-v7", "25.3.1"),
        )
        with patch.object(cli, "create_doctor", fake_doctor_factory):
            assert cli.main(["can-build", "Android"]) == 0
        assert "can build" in capsys.readouterr().out

    @pytest.mark.unit
    def test_ios_off_mac(self, cli, fake_doctor_factory):
        with patch.object(cli, "create_doctor", fake_doctor_factory):
            assert cli.main(["can-build", "ios"]) == 1

    @pytest.mark.unit
    @pytest.mark.parametrize("argv", [["can-build"], ["can-build", "blackberry"]])
    def test_invalid_platform(self, cli, fake_doctor_factory, argv):
        with patch.object(cli, "create_doctor", fake_doctor_factory):
            assert cli.main(argv) == 2


class TestDevTest:
    """Tests for `python . dev test`."""

    @pytest.mark.unit
    def test_tier_flags_become_markers(self, cli):
        with patch.object(cli.subprocess, "call", return_value=0) as call:
            assert cli.main(["dev", "test", "--unit", "-q"]) == 0

        cmd = call.call_args.args[0]
        assert cmd[1:3] == ["-m", "pytest"]
        assert cmd[3:] == ["-m", "unit", "-q"]
