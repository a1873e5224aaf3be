"""Dotted numeric version handling.

Supports exactly what the doctor needs: pulling a version out of tool
output, ordering dotted versions, and inclusive/exclusive bound ranges.

Bounds may be partial ("23", "25.1"). A partial bound constrains only the
components it names, so ``<=25`` admits every 25.x.y and ``>=23`` admits
23.0.1.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

# major.minor with an optional patch or suffix, e.g. "1.9", "5.6.0", "2.0-beta"
VERSION_REGEXP = re.compile(r"(\d+)\.(\d+)\.*([\w-]*)", re.MULTILINE)

# Exactly three dotted components, e.g. the "23.0.1" in "build-tools;23.0.1"
TRIPLET_REGEXP = re.compile(r"((?:\d+\.){2}\d+)")

_STRICT_REGEXP = re.compile(r"^v?\d+\.\d+\.\d+(?:[-+][0-9A-Za-z.-]+)?$")
_LEADING_DIGITS = re.compile(r"^\d+")
_BOUND_REGEXP = re.compile(r"(>=|<=|>|<|=)?\s*v?(\d+(?:\.\d+)*)")


def get_version_from_string(text: str | None) -> str | None:
    """Normalize the first version in ``text`` to ``major.minor.patch``.

    The patch component defaults to 0 when absent.

    Example:
        >>> get_version_from_string("Xcode 9.4\\nBuild version 9F1027a")
        '9.4.0'
    """
    if not text:
        return None
    match = VERSION_REGEXP.search(text)
    if not match:
        return None
    return f"{match.group(1)}.{match.group(2)}.{match.group(3) or 0}"


def extract_version_triplet(text: str | None) -> str | None:
    """First ``x.y.z`` token in ``text``, or None."""
    if not text:
        return None
    match = TRIPLET_REGEXP.search(text)
    return match.group(1) if match else None


def is_valid_version(text: str | None) -> bool:
    """True for a full ``major.minor.patch`` version with optional tag."""
    return bool(text) and _STRICT_REGEXP.match(text.strip()) is not None


def parse_version(text: str | None) -> tuple[int, ...] | None:
    """Numeric components of a dotted version.

    Each component contributes its leading digits, so "1.8.0_211" parses as
    (1, 8, 0). Returns None when the first component is not numeric.
    """
    if not text:
        return None
    parts: list[int] = []
    for component in text.strip().lstrip("v").split("."):
        match = _LEADING_DIGITS.match(component)
        if not match:
            break
        parts.append(int(match.group()))
        if len(match.group()) != len(component):
            break
    return tuple(parts) if parts else None


def _pad(parts: tuple[int, ...], size: int) -> tuple[int, ...]:
    return parts + (0,) * (size - len(parts))


def compare_versions(left: str, right: str) -> int:
    """Three-way comparison of two dotted versions.

    Raises:
        ValueError: If either side is not a version.
    """
    a, b = parse_version(left), parse_version(right)
    if a is None or b is None:
        raise ValueError(f"Cannot compare '{left}' with '{right}'")
    size = max(len(a), len(b))
    a, b = _pad(a, size), _pad(b, size)
    return (a > b) - (a < b)


def version_lt(left: str, right: str) -> bool:
    return compare_versions(left, right) < 0


def version_gte(left: str, right: str) -> bool:
    return compare_versions(left, right) >= 0


def _compare_to_bound(candidate: tuple[int, ...], bound: tuple[int, ...]) -> int:
    head = _pad(candidate[: len(bound)], len(bound))
    return (head > bound) - (head < bound)


@dataclass(frozen=True)
class VersionRange:
    """A lower and/or upper bound on dotted versions.

    Attributes:
        lower: Lower bound, or None for unbounded.
        upper: Upper bound, or None for unbounded.
        lower_inclusive: Whether ``lower`` itself satisfies the range.
        upper_inclusive: Whether ``upper`` itself satisfies the range.
    """

    lower: str | None = None
    upper: str | None = None
    lower_inclusive: bool = True
    upper_inclusive: bool = True

    @classmethod
    def parse(cls, expression: str) -> VersionRange:
        """Parse a space separated bound list such as ``">=23 <=25"``.

        A bare or ``=`` version pins both bounds.

        Raises:
            ValueError: If the expression holds no bound.
        """
        lower = upper = None
        lower_inclusive = upper_inclusive = True
        bounds = _BOUND_REGEXP.findall(expression)
        if not bounds:
            raise ValueError(f"Invalid version range: '{expression}'")

        for operator, version in bounds:
            if operator in (">=", ">"):
                lower, lower_inclusive = version, operator == ">="
            elif operator in ("<=", "<"):
                upper, upper_inclusive = version, operator == "<="
            else:
                lower = upper = version
                lower_inclusive = upper_inclusive = True

        return cls(lower, upper, lower_inclusive, upper_inclusive)

    @property
    def exact_version(self) -> str | None:
        """The single version admitted when both bounds collapse, else None."""
        if (
            self.lower is not None
            and self.lower == self.upper
            and self.lower_inclusive
            and self.upper_inclusive
        ):
            return self.lower
        return None

    def satisfied_by(self, version: str) -> bool:
        """True if ``version`` lies within both bounds."""
        candidate = parse_version(version)
        if candidate is None:
            return False

        if self.lower is not None:
            order = _compare_to_bound(candidate, parse_version(self.lower))
            if order < 0 or (order == 0 and not self.lower_inclusive):
                return False

        if self.upper is not None:
            order = _compare_to_bound(candidate, parse_version(self.upper))
            if order > 0 or (order == 0 and not self.upper_inclusive):
                return False

        return True

    def __str__(self) -> str:
        parts = []
        if self.lower is not None:
            parts.append(f"{'>=' if self.lower_inclusive else '>'}{self.lower}")
        if self.upper is not None:
            parts.append(f"{'<=' if self.upper_inclusive else '<'}{self.upper}")
        return " ".join(parts) or "*"


def max_satisfying(candidates: Iterable[str], version_range: VersionRange) -> str | None:
    """Highest candidate inside ``version_range``, or None.

    Example:
        >>> max_satisfying(["23.0.1", "23.0.2", "24.0.0"], VersionRange.parse(">=23 <=25"))
        '24.0.0'
    """
    best: str | None = None
    for candidate in candidates:
        if not version_range.satisfied_by(candidate):
            continue
        if best is None or compare_versions(candidate, best) > 0:
            best = candidate
    return best
