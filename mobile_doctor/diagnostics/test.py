"""Unit tests for diagnostics records."""

import pytest

from .lib import (
    ANDROID_PLATFORM_NAME,
    IOS_PLATFORM_NAME,
    DoctorWarning,
    ValidationError,
    validate_platform,
)


class TestValidatePlatform:
    """Tests for platform name validation."""

    @pytest.mark.unit
    def test_case_insensitive(self):
        assert validate_platform("ANDROID") == ANDROID_PLATFORM_NAME
        assert validate_platform("ios") == IOS_PLATFORM_NAME

    @pytest.mark.unit
    def test_empty_rejected(self):
        with pytest.raises(ValidationError, match="must specify a platform"):
            validate_platform("")
        with pytest.raises(ValidationError):
            validate_platform(None)

    @pytest.mark.unit
    def test_unsupported_lists_supported_platforms(self):
        with pytest.raises(ValidationError, match="Android, iOS"):
            validate_platform("blackberry")

    @pytest.mark.unit
    def test_is_value_error(self):
        assert issubclass(ValidationError, ValueError)


class TestDoctorWarning:
    """Tests for DoctorWarning."""

    @pytest.mark.unit
    def test_empty_platforms_apply_everywhere(self):
        warning = DoctorWarning(message="Git is missing")
        assert warning.applies_to("Android") is True
        assert warning.applies_to("iOS") is True

    @pytest.mark.unit
    def test_scoped_warning(self):
        warning = DoctorWarning(message="adb missing", platforms=frozenset({"Android"}))
        assert warning.applies_to("android") is True
        assert warning.applies_to("iOS") is False

    @pytest.mark.unit
    def test_to_dict(self):
        warning = DoctorWarning("m", "r", frozenset({"iOS", "Android"}))
        assert warning.to_dict() == {
            "message": "m",
            "remediation": "r",
            "platforms": ["Android", "iOS"],
        }
