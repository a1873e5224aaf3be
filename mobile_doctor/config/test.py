"""Tests for configuration management."""

from pathlib import Path

import pytest

from .lib import (
    EnvConfig,
    EnvVar,
    _convert_value,
    get_android_home,
    get_common_program_files,
    get_environment,
    get_environment_info,
    get_java_home,
    get_user_shell,
    is_caching_enabled_by_default,
    list_environment_variables,
)

# =============================================================================
# Tests for get_environment (main interface)
# =============================================================================


class TestGetEnvironment:
    """Tests for the unified get_environment interface."""

    @pytest.mark.unit
    def test_returns_default_when_not_set(self, monkeypatch):
        """Returns default value when env var is not set."""
        monkeypatch.delenv("MOBILE_DOCTOR_CACHE", raising=False)
        assert get_environment(EnvVar.MOBILE_DOCTOR_CACHE) is True

    @pytest.mark.unit
    def test_override_takes_priority(self, monkeypatch):
        """Override parameter takes highest priority."""
        monkeypatch.setenv("ANDROID_HOME", "/from/env")
        result = get_environment(EnvVar.ANDROID_HOME, override="/from/override")
        assert result == "/from/override"

    @pytest.mark.unit
    def test_env_var_overrides_default(self, monkeypatch):
        """Environment variable overrides default value."""
        monkeypatch.setenv("MOBILE_DOCTOR_LOG_LEVEL", "DEBUG")
        assert get_environment(EnvVar.MOBILE_DOCTOR_LOG_LEVEL) == "DEBUG"

    @pytest.mark.unit
    def test_bool_type_conversion_false(self, monkeypatch):
        """Boolean type conversion for false values."""
        for value in ("false", "0", "no", "FALSE", "No"):
            monkeypatch.setenv("MOBILE_DOCTOR_CACHE", value)
            assert get_environment(EnvVar.MOBILE_DOCTOR_CACHE) is False

    @pytest.mark.unit
    def test_unrecognized_bool_returns_default(self, monkeypatch):
        """Unrecognized boolean text keeps the default."""
        monkeypatch.setenv("MOBILE_DOCTOR_CACHE", "sometimes")
        assert get_environment(EnvVar.MOBILE_DOCTOR_CACHE) is True

    @pytest.mark.unit
    def test_empty_value_counts_as_unset(self, monkeypatch):
        """An exported but empty variable resolves to the default."""
        monkeypatch.setenv("ANDROID_HOME", "")
        assert get_environment(EnvVar.ANDROID_HOME) is None

    @pytest.mark.unit
    def test_env_name_with_parentheses(self, monkeypatch):
        """Windows-style names such as CommonProgramFiles(x86) resolve."""
        monkeypatch.setenv("CommonProgramFiles(x86)", r"C:\Program Files (x86)\Common Files")
        assert get_environment(EnvVar.COMMON_PROGRAM_FILES_X86).endswith("Common Files")


class TestConvertValue:
    """Tests for raw string conversion."""

    @pytest.mark.unit
    def test_numeric_conversion(self):
        assert _convert_value("12", int, 0) == 12
        assert _convert_value("1.5", float, 0.0) == 1.5

    @pytest.mark.unit
    def test_invalid_numeric_returns_default(self):
        assert _convert_value("soon", float, 30.0) == 30.0

    @pytest.mark.unit
    def test_path_conversion(self):
        assert _convert_value("/opt/sdk", Path, None) == Path("/opt/sdk")


class TestGetEnvironmentInfo:
    """Tests for environment variable metadata."""

    @pytest.mark.unit
    def test_returns_env_config(self):
        """Returns EnvConfig dataclass."""
        info = get_environment_info(EnvVar.ANDROID_HOME)
        assert isinstance(info, EnvConfig)
        assert info.name == "ANDROID_HOME"
        assert info.default is None
        assert info.var_type is str
        assert info.category == "sdk"

    @pytest.mark.unit
    def test_description_present(self):
        """Description field is populated."""
        info = get_environment_info(EnvVar.JAVA_HOME)
        assert "javac" in info.description


class TestListEnvironmentVariables:
    """Tests for listing environment variables."""

    @pytest.mark.unit
    def test_returns_all_variables(self):
        """Returns all EnvVar members when no category."""
        result = list_environment_variables()
        assert len(result) == len(EnvVar)

    @pytest.mark.unit
    def test_filter_by_category(self):
        """Filters by category correctly."""
        sdk_vars = list_environment_variables("sdk")
        assert sdk_vars == [EnvVar.ANDROID_HOME, EnvVar.JAVA_HOME]
        assert EnvVar.SHELL not in sdk_vars


# =============================================================================
# Tests for convenience functions
# =============================================================================


class TestConvenienceFunctions:
    """Tests for toolchain and host helpers."""

    @pytest.mark.unit
    def test_android_and_java_home(self, monkeypatch):
        monkeypatch.setenv("ANDROID_HOME", "/opt/android-sdk")
        monkeypatch.delenv("JAVA_HOME", raising=False)
        assert get_android_home() == "/opt/android-sdk"
        assert get_java_home() is None
        assert get_java_home(override="/usr/lib/jvm/java-11") == "/usr/lib/jvm/java-11"

    @pytest.mark.unit
    def test_common_program_files_variant(self, monkeypatch):
        """64-bit hosts read the x86 variant."""
        monkeypatch.setenv("CommonProgramFiles", "C:\\CPF")
        monkeypatch.setenv("CommonProgramFiles(x86)", "C:\\CPF86")
        assert get_common_program_files(is_64bit=True) == "C:\\CPF86"
        assert get_common_program_files(is_64bit=False) == "C:\\CPF"

    @pytest.mark.unit
    def test_user_shell(self, monkeypatch):
        monkeypatch.setenv("SHELL", "/bin/zsh")
        monkeypatch.delenv("ComSpec", raising=False)
        assert get_user_shell(is_windows=False) == "/bin/zsh"
        assert get_user_shell(is_windows=True) == "cmd"

    @pytest.mark.unit
    def test_caching_default(self, monkeypatch):
        monkeypatch.setenv("MOBILE_DOCTOR_CACHE", "0")
        assert is_caching_enabled_by_default() is False
