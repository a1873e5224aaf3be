"""Tests for core logging module."""

import logging
from io import StringIO

import pytest

from .lib import get_logger, setup_logging


@pytest.mark.unit
class TestLogging:
    """Test core logging API."""

    def test_get_logger(self) -> None:
        """Verify logger instance creation."""
        logger = get_logger("test")
        assert logger.name == "test"
        assert isinstance(logger, logging.Logger)

    def test_get_logger_default_name(self) -> None:
        """Verify default logger name."""
        logger = get_logger()
        assert logger.name == "mobile-doctor"

    def test_setup_logging_accepts_level_name(self) -> None:
        """String level names are accepted like numeric levels."""
        stream = StringIO()
        setup_logging(level="debug", stream=stream)
        logger = get_logger("test_setup")
        logger.debug("test message")

        # basicConfig is a no-op once the root logger has handlers
        assert logger.level == logging.NOTSET

    def test_setup_logging_unknown_level_name(self) -> None:
        """Unknown level names fall back to INFO instead of raising."""
        setup_logging(level="chatty", stream=StringIO())
