"""Tests for the registry reader."""

import sys

import pytest

from .lib import RegistryHive, RegistryReader


@pytest.mark.unit
class TestRegistryReader:
    """Tests for registry reads."""

    @pytest.mark.asyncio
    async def test_non_windows_host_reads_nothing(self, monkeypatch):
        monkeypatch.setattr("mobile_doctor.registry.lib.sys.platform", "linux")
        value = await RegistryReader().read_value(
            "ProductName", RegistryHive.HKLM, r"\Software\Microsoft\Windows NT\CurrentVersion"
        )
        assert value is None

    @pytest.mark.asyncio
    @pytest.mark.skipif(sys.platform != "win32", reason="Requires Windows registry")
    async def test_missing_value_is_absent(self):
        value = await RegistryReader().read_value(
            "NoSuchValue", RegistryHive.HKLM, r"\Software\NoSuchVendor\NoSuchKey"
        )
        assert value is None

    def test_hive_names_match_winreg_constants(self):
        assert RegistryHive.HKLM.value == "HKEY_LOCAL_MACHINE"
        assert RegistryHive.HKCU.value == "HKEY_CURRENT_USER"
