"""Version extraction, comparison and range matching.

Example:
    >>> from mobile_doctor.version import VersionRange, max_satisfying
    >>> max_satisfying(["23.0.1", "24.0.0"], VersionRange.parse(">=23 <=25"))
    '24.0.0'
"""

from .lib import (
    VERSION_REGEXP,
    VersionRange,
    compare_versions,
    extract_version_triplet,
    get_version_from_string,
    is_valid_version,
    max_satisfying,
    parse_version,
    version_gte,
    version_lt,
)

__all__ = [
    "VERSION_REGEXP",
    "VersionRange",
    "compare_versions",
    "extract_version_triplet",
    "get_version_from_string",
    "is_valid_version",
    "max_satisfying",
    "parse_version",
    "version_gte",
    "version_lt",
]
