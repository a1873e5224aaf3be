"""Tests for local build requirement checks."""

import os

import pytest

from mobile_doctor.android import SdkCapabilityResolver
from mobile_doctor.host import HostFamily, HostInfo

from .lib import AndroidLocalBuildRequirements, IosLocalBuildRequirements

SDK = "/sdk"


def mac_toolchain(fake_runner, pods="1.11.3"):
    fake_runner.respond("xcodebuild -version", stdout="Xcode 14.2\nBuild version 14C18\n")
    fake_runner.respond("gem which xcodeproj", stdout="/gems/xcodeproj.rb\n")
    fake_runner.respond("pod --version", stdout=f"{pods}\n")


class TestAndroidRequirements:
    """Tests for AndroidLocalBuildRequirements."""

    @pytest.fixture
    def requirements(self, fake_fs, fake_runner):
        resolver = SdkCapabilityResolver(
            host=HostInfo(family=HostFamily.LINUX), fs=fake_fs, runner=fake_runner, android_home=SDK
        )
        return AndroidLocalBuildRequirements(resolver)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_complete_sdk(self, requirements, fake_fs):
        fake_fs.add(
            os.path.join(SDK, "platforms", "android-25"),
            os.path.join(SDK, "build-tools", "25.0.2"),
            os.path.join(SDK, "extras", "android", "m2repository", "com", "android", "support", "appcompat-v7", "25.3.1"),
        )
        assert await requirements.check_requirements() is True

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_missing_support_library(self, requirements, fake_fs):
        fake_fs.add(
            os.path.join(SDK, "platforms", "android-25"),
            os.path.join(SDK, "build-tools", "25.0.2"),
        )
        assert await requirements.check_requirements() is False

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_no_sdk(self, requirements):
        assert await requirements.check_requirements() is False


class TestIosRequirements:
    """Tests for IosLocalBuildRequirements."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_complete_toolchain(self, make_probe, fake_runner):
        mac_toolchain(fake_runner)
        probe = make_probe(HostFamily.DARWIN)
        assert await IosLocalBuildRequirements(probe, probe.host).check_requirements() is True

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_not_on_mac(self, make_probe, fake_runner):
        mac_toolchain(fake_runner)
        probe = make_probe(HostFamily.WINDOWS)
        assert await IosLocalBuildRequirements(probe, probe.host).check_requirements() is False
        assert fake_runner.calls == []

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_missing_xcodeproj(self, make_probe, fake_runner):
        mac_toolchain(fake_runner)
        del fake_runner.responses["gem which xcodeproj"]
        probe = make_probe(HostFamily.DARWIN)
        assert await IosLocalBuildRequirements(probe, probe.host).check_requirements() is False

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_cocoapods_update_required(self, make_probe, fake_runner):
        mac_toolchain(fake_runner, pods="0.39.0")
        probe = make_probe(HostFamily.DARWIN)
        assert await IosLocalBuildRequirements(probe, probe.host).check_requirements() is False
