"""Platform build readiness evaluation.

Example:
    >>> from mobile_doctor.doctor import Doctor
    >>> warnings = await Doctor(probe, resolver).get_warnings()
"""

from .lib import (
    MIN_SUPPORTED_MONO_VERSION,
    MIN_SUPPORTED_POD_VERSION,
    Check,
    Doctor,
    create_doctor,
)

__all__ = [
    "MIN_SUPPORTED_MONO_VERSION",
    "MIN_SUPPORTED_POD_VERSION",
    "Check",
    "Doctor",
    "create_doctor",
]
