"""Logging micro API for mobile-doctor."""

from .lib import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
