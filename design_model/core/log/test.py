"""Tests for core logging module."""

import logging
from io import StringIO

from .lib import _coerce_level, get_logger, setup_logging


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
        assert logger.name == "design-model"

    def test_setup_logging(self) -> None:
        """Verify logging setup accepts a stream."""
        stream = StringIO()
        setup_logging(level=logging.DEBUG, stream=stream)
        logger = get_logger("test_setup")
        logger.debug("test message")

        # basicConfig is a no-op once the root logger has handlers,
        # so only the API contract is checked here.
        assert logger.level == logging.NOTSET

    def test_level_names_are_accepted(self) -> None:
        """Level names resolve case-insensitively."""
        assert _coerce_level("debug") == logging.DEBUG
        assert _coerce_level("WARNING") == logging.WARNING
        assert _coerce_level(logging.ERROR) == logging.ERROR

    def test_unknown_level_name_falls_back_to_info(self) -> None:
        """Unrecognized names fall back to INFO."""
        assert _coerce_level("chatty") == logging.INFO
