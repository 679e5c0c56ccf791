#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for logging configuration."""

import logging

import pytest

from block2html.logging_utils import configure_logging, resolve_log_level


@pytest.mark.unit
class TestResolveLogLevel:
    """Tests for resolve_log_level."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (logging.DEBUG, logging.DEBUG),
            ("warning", logging.WARNING),
            ("ERROR", logging.ERROR),
            ("bogus", logging.INFO),
        ],
    )
    def test_levels(self, value, expected):
        """Test names and numbers map to logging constants."""
        assert resolve_log_level(value) == expected


@pytest.mark.unit
@pytest.mark.usefixtures("reset_package_logger")
class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_console_handler(self):
        """Test a single stderr handler is attached at the requested level."""
        logger = configure_logging("WARNING")

        assert logger.level == logging.WARNING
        assert len(logger.handlers) == 1
        assert logger.propagate is False

    def test_log_file(self, tmp_path):
        """Test records are written to the log file."""
        log_file = tmp_path / "block2html.log"
        logger = configure_logging("INFO", log_file=str(log_file))
        logger.info("converted")
        for handler in logger.handlers:
            handler.flush()

        assert "converted" in log_file.read_text(encoding="utf-8")

    def test_reconfigure_closes_previous_handlers(self, tmp_path):
        """Test configuring again closes the file handlers it replaces."""
        logger = configure_logging("INFO", log_file=str(tmp_path / "first.log"))
        first_file_handlers = [handler for handler in logger.handlers if isinstance(handler, logging.FileHandler)]

        configure_logging("INFO", log_file=str(tmp_path / "second.log"))

        assert len(first_file_handlers) == 1
        assert first_file_handlers[0].stream is None
        assert first_file_handlers[0] not in logger.handlers
        assert len(logger.handlers) == 2

    def test_unwritable_log_file(self, tmp_path):
        """Test a log file that cannot be opened leaves console logging in place."""
        logger = configure_logging("INFO", log_file=str(tmp_path / "missing" / "x.log"))

        assert len(logger.handlers) == 1
