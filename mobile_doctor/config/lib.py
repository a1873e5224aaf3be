"""Centralized environment configuration management for mobile-doctor.

Provides a unified interface for all environment variables with:
- Single `get_environment()` function for all configuration
- Type-safe enum with metadata (default, type, description)
- Consistent resolution: override > environment > default

Example:
    >>> from mobile_doctor.config import EnvVar, get_environment
    >>>
    >>> # Get values with automatic type conversion
    >>> android_home = get_environment(EnvVar.ANDROID_HOME)  # Returns str | None
    >>> cache = get_environment(EnvVar.MOBILE_DOCTOR_CACHE)  # Returns bool
    >>>
    >>> # Override at runtime
    >>> cache = get_environment(EnvVar.MOBILE_DOCTOR_CACHE, override=False)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, overload

# =============================================================================
# Environment Variable Configuration
# =============================================================================


@dataclass(frozen=True)
class EnvConfig:
    """Metadata for an environment variable.

    Attributes:
        name: Environment variable name (e.g., "ANDROID_HOME").
        default: Default value if not set in environment.
        var_type: Python type for value conversion (str, int, float, bool, Path).
        description: Human-readable description.
        category: Grouping category for documentation.
    """

    name: str
    default: Any
    var_type: type
    description: str = ""
    category: str = "general"


class EnvVar(Enum):
    """All environment variables used by mobile-doctor.

    Each member contains an EnvConfig with name, default, type, and description.
    Use with `get_environment()` for type-safe access.

    Categories:
        - sdk: Toolchain install locations
        - host: Host shell and common program files folders
        - doctor: mobile-doctor behaviour
    """

    # -------------------------------------------------------------------------
    # Toolchain Locations
    # -------------------------------------------------------------------------
    ANDROID_HOME = EnvConfig(
        name="ANDROID_HOME",
        default=None,
        var_type=str,
        description="Root of the Android SDK installation",
        category="sdk",
    )
    JAVA_HOME = EnvConfig(
        name="JAVA_HOME",
        default=None,
        var_type=str,
        description="Root of the Java Development Kit used to locate javac",
        category="sdk",
    )

    # -------------------------------------------------------------------------
    # Host Environment
    # -------------------------------------------------------------------------
    SHELL = EnvConfig(
        name="SHELL",
        default="bash",
        var_type=str,
        description="Login shell on Unix hosts",
        category="host",
    )
    COMSPEC = EnvConfig(
        name="ComSpec",
        default="cmd",
        var_type=str,
        description="Command interpreter on Windows hosts",
        category="host",
    )
    COMMON_PROGRAM_FILES = EnvConfig(
        name="CommonProgramFiles",
        default=None,
        var_type=str,
        description="Windows common program files folder (32-bit hosts)",
        category="host",
    )
    COMMON_PROGRAM_FILES_X86 = EnvConfig(
        name="CommonProgramFiles(x86)",
        default=None,
        var_type=str,
        description="Windows 32-bit common program files folder on 64-bit hosts",
        category="host",
    )

    # -------------------------------------------------------------------------
    # mobile-doctor Behaviour
    # -------------------------------------------------------------------------
    MOBILE_DOCTOR_CACHE = EnvConfig(
        name="MOBILE_DOCTOR_CACHE",
        default=True,
        var_type=bool,
        description="Cache probe results for the lifetime of the process",
        category="doctor",
    )
    MOBILE_DOCTOR_LOG_LEVEL = EnvConfig(
        name="MOBILE_DOCTOR_LOG_LEVEL",
        default="INFO",
        var_type=str,
        description="Log level used by the command line interface",
        category="doctor",
    )


# =============================================================================
# Type Conversion Helpers
# =============================================================================


def _parse_bool(value: str) -> bool | None:
    """Parse string to boolean.

    Recognizes: true/false, 1/0, yes/no (case-insensitive).
    Returns None for unrecognized values.
    """
    normalized = value.lower().strip()
    if normalized in ("true", "1", "yes"):
        return True
    if normalized in ("false", "0", "no"):
        return False
    return None


def _convert_value(value: str | None, var_type: type, default: Any) -> Any:
    """Convert string value to target type.

    Args:
        value: Raw string value from environment (or None).
        var_type: Target Python type.
        default: Default value if conversion fails or value is None.

    Returns:
        Converted value or default.
    """
    if value is None:
        return default

    if var_type is str:
        return value

    if var_type in (int, float):
        try:
            return var_type(value)
        except ValueError:
            return default

    if var_type is bool:
        result = _parse_bool(value)
        return result if result is not None else default

    if var_type is Path:
        return Path(value)

    # Unknown type, return as-is
    return value


# =============================================================================
# Main Interface
# =============================================================================


@overload
def get_environment(env_var: EnvVar, override: int) -> int: ...
@overload
def get_environment(env_var: EnvVar, override: str) -> str: ...
@overload
def get_environment(env_var: EnvVar, override: bool) -> bool: ...
@overload
def get_environment(env_var: EnvVar, override: Path) -> Path: ...
@overload
def get_environment(env_var: EnvVar, override: None = None) -> Any: ...


def get_environment(env_var: EnvVar, override: Any = None) -> Any:
    """Get environment variable value with type conversion.

    Resolution priority:
        1. Explicit override parameter (highest)
        2. Environment variable value
        3. Default from EnvConfig (lowest)

    An empty string in the environment counts as unset.

    Args:
        env_var: Environment variable enum member.
        override: Optional override value (bypasses env lookup).

    Returns:
        Value converted to the appropriate type.

    Example:
        >>> get_environment(EnvVar.MOBILE_DOCTOR_CACHE)
        True
        >>> get_environment(EnvVar.ANDROID_HOME, override="/opt/android-sdk")
        '/opt/android-sdk'
    """
    config: EnvConfig = env_var.value

    # Override takes highest priority
    if override is not None:
        return override

    # Check environment
    raw_value = os.environ.get(config.name) or None

    # Convert and return
    return _convert_value(raw_value, config.var_type, config.default)


def get_environment_info(env_var: EnvVar) -> EnvConfig:
    """Get metadata for an environment variable.

    Args:
        env_var: Environment variable enum member.

    Returns:
        EnvConfig with name, default, type, and description.
    """
    return env_var.value


# =============================================================================
# Convenience Functions
# =============================================================================


def get_android_home(override: str | None = None) -> str | None:
    """Get the Android SDK root, or None when ANDROID_HOME is unset."""
    return get_environment(EnvVar.ANDROID_HOME, override)


def get_java_home(override: str | None = None) -> str | None:
    """Get the JDK root, or None when JAVA_HOME is unset."""
    return get_environment(EnvVar.JAVA_HOME, override)


def get_common_program_files(is_64bit: bool) -> str | None:
    """Get the folder holding 32-bit shared components on Windows.

    64-bit Windows keeps them under CommonProgramFiles(x86).
    """
    if is_64bit:
        return get_environment(EnvVar.COMMON_PROGRAM_FILES_X86)
    return get_environment(EnvVar.COMMON_PROGRAM_FILES)


def get_user_shell(is_windows: bool) -> str:
    """Get the user's shell: ComSpec on Windows, SHELL elsewhere."""
    if is_windows:
        return get_environment(EnvVar.COMSPEC)
    return get_environment(EnvVar.SHELL)


def is_caching_enabled_by_default() -> bool:
    """Whether probe results are cached unless callers say otherwise."""
    return get_environment(EnvVar.MOBILE_DOCTOR_CACHE)


def list_environment_variables(category: str | None = None) -> list[EnvVar]:
    """List all environment variables, optionally filtered by category.

    Args:
        category: Filter by category (sdk, host, doctor).
                 None returns all variables.

    Returns:
        List of EnvVar enum members.
    """
    if category is None:
        return list(EnvVar)

    return [var for var in EnvVar if var.value.category == category]


__all__ = [
    # Core types
    "EnvConfig",
    "EnvVar",
    # Main interface
    "get_environment",
    "get_environment_info",
    # Convenience functions
    "get_android_home",
    "get_java_home",
    "get_common_program_files",
    "get_user_shell",
    "is_caching_enabled_by_default",
    # Introspection
    "list_environment_variables",
]
