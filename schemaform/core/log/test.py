"""Tests for core logging module."""

import logging
from io import StringIO

import pytest

from .lib import get_logger, setup_logging


@pytest.fixture(autouse=True)
def restore_package_level():
    """Keep level changes from leaking into other tests."""
    package_logger = get_logger()
    level = package_logger.level
    yield
    package_logger.setLevel(level)


class TestLogging:
    """Test core logging API."""

    def test_get_logger(self) -> None:
        """Verify logger instance creation."""
        logger = get_logger("test")
        assert logger.name == "schemaform.test"
        assert isinstance(logger, logging.Logger)

    def test_get_logger_default_name(self) -> None:
        """Verify default logger name."""
        logger = get_logger()
        assert logger.name == "schemaform"

    def test_get_logger_keeps_qualified_name(self) -> None:
        """Already-qualified names are not prefixed twice."""
        logger = get_logger("schemaform.compiler")
        assert logger.name == "schemaform.compiler"

    def test_module_loggers_share_package_parent(self) -> None:
        """Module loggers propagate to the package logger."""
        logger = get_logger("conditional")
        assert logger.parent is get_logger()

    def test_setup_logging(self) -> None:
        """Verify logging setup."""
        stream = StringIO()
        setup_logging(level=logging.DEBUG, stream=stream)
        logger = get_logger("test_setup")
        logger.debug("test message")

        # basicConfig is a no-op once the root logger has handlers, so only
        # the package level is asserted here.
        assert get_logger().level == logging.DEBUG
        assert logger.level == logging.NOTSET

    def test_setup_logging_accepts_level_name(self) -> None:
        """Level names are resolved to numeric levels."""
        setup_logging(level="warning", stream=StringIO())
        assert get_logger().level == logging.WARNING

    def test_setup_logging_unknown_level_name(self) -> None:
        """Unknown level names fall back to INFO."""
        setup_logging(level="chatty", stream=StringIO())
        assert get_logger().level == logging.INFO
