"""Centralized configuration management for mobile-doctor.

Provides unified access to all configuration via the `get_environment()` function.

Example:
    >>> from mobile_doctor.config import EnvVar, get_environment
    >>>
    >>> # Get any environment variable with automatic type conversion
    >>> android_home = get_environment(EnvVar.ANDROID_HOME)  # str | None
    >>> cache = get_environment(EnvVar.MOBILE_DOCTOR_CACHE)  # bool: True
    >>>
    >>> # Override at runtime
    >>> cache = get_environment(EnvVar.MOBILE_DOCTOR_CACHE, override=False)

Environment Variable Categories:
    sdk: Toolchain locations (Android SDK root, JDK home)
    host: Host shell and Windows common program files folders
    doctor: Behaviour of mobile-doctor itself (caching, log level)
"""

from .lib import (
    # Core types
    EnvConfig,
    EnvVar,
    # Main interface
    get_android_home,
    get_common_program_files,
    get_environment,
    get_environment_info,
    get_java_home,
    get_user_shell,
    is_caching_enabled_by_default,
    # Introspection
    list_environment_variables,
)

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
