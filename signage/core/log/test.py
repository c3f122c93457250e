"""Tests for core logging module."""

import logging
from io import StringIO

import pytest

from .lib import LOG_FORMAT, get_logger, setup_logging


class TestLogging:
    """Test core logging API."""

    @pytest.mark.unit
    def test_get_logger(self) -> None:
        """Verify logger instance creation."""
        logger = get_logger("signage.test")
        assert logger.name == "signage.test"
        assert isinstance(logger, logging.Logger)

    @pytest.mark.unit
    def test_get_logger_default_name(self) -> None:
        """Verify default logger name."""
        assert get_logger().name == "signage"

    @pytest.mark.unit
    def test_module_loggers_are_children(self) -> None:
        """Loggers named after modules propagate to the package logger."""
        child = get_logger("signage.layout.lib")
        assert child.parent is not None
        assert child.parent.name in ("signage.layout", "signage")

    @pytest.mark.unit
    def test_setup_logging(self) -> None:
        """setup_logging accepts a level and a stream without raising."""
        stream = StringIO()
        setup_logging(level=logging.DEBUG, stream=stream)
        logger = get_logger("signage.test_setup")
        logger.debug("test message")

        # basicConfig is a no-op if the root logger was configured earlier,
        # so only the API contract is checked here.
        assert logger.level == logging.NOTSET

    @pytest.mark.unit
    def test_format_fields(self) -> None:
        """The log format carries time, name, level and message."""
        for field in ("asctime", "name", "levelname", "message"):
            assert field in LOG_FORMAT
