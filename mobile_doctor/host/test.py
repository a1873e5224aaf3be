"""Tests for host family detection."""

from unittest.mock import patch

import pytest

from .lib import HostFamily, HostInfo, detect_host


@pytest.mark.unit
class TestHostDetection:
    """Tests for detect_host."""

    def test_detect_windows_platform(self):
        with patch("mobile_doctor.host.lib.sys.platform", "win32"):
            host = detect_host()
            assert host.is_windows is True
            assert host.family is HostFamily.WINDOWS

    def test_detect_darwin_platform(self):
        with patch("mobile_doctor.host.lib.sys.platform", "darwin"):
            assert detect_host().is_darwin is True

    def test_detect_linux_platform(self):
        with patch("mobile_doctor.host.lib.sys.platform", "linux"):
            host = detect_host()
            assert host.is_linux is True
            assert host.is_windows is False

    def test_other_unix_treated_as_linux(self):
        with patch("mobile_doctor.host.lib.sys.platform", "freebsd13"):
            assert detect_host().family is HostFamily.LINUX

    def test_platform_recorded(self):
        with patch("mobile_doctor.host.lib.sys.platform", "darwin"):
            assert detect_host().platform == "darwin"


@pytest.mark.unit
class TestHostInfo:
    """Tests for HostInfo properties."""

    def test_summary(self):
        assert HostInfo(family=HostFamily.DARWIN).summary == "macOS (64-bit)"
        assert HostInfo(family=HostFamily.WINDOWS, is_64bit=False).summary == "Windows (32-bit)"

    def test_family_flags_are_exclusive(self):
        host = HostInfo(family=HostFamily.LINUX)
        assert (host.is_windows, host.is_darwin, host.is_linux) == (False, False, True)
