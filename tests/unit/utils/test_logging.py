"""Tests for logging utility."""

import logging
from io import StringIO

import pytest


@pytest.fixture(autouse=True)
def clean_logging():
    """Start every test from an unconfigured logger tree."""
    from src.utils.logging import reset_logging

    reset_logging()
    yield
    reset_logging()


class TestLoggerConfiguration:
    """Test that logger configures correctly from settings."""

    def test_configure_logging_creates_logger(self):
        """configure_logging should return the application logger."""
        from src.utils.logging import configure_logging

        logger = configure_logging()
        assert isinstance(logger, logging.Logger)
        assert logger.name == "resume_relay"

    def test_configure_logging_respects_level(self):
        """Logger should respect the configured log level."""
        from src.utils.logging import configure_logging

        logger = configure_logging(level="DEBUG")
        assert logger.level == logging.DEBUG

        logger = configure_logging(level="WARNING")
        assert logger.level == logging.WARNING

    def test_configure_logging_default_level_is_info(self):
        """Default log level should be INFO."""
        from src.utils.logging import configure_logging

        logger = configure_logging()
        assert logger.level == logging.INFO

    def test_package_loggers_share_handlers(self):
        """Module loggers under src should be configured too."""
        from src.utils.logging import configure_logging

        configure_logging(level="DEBUG")

        module_logger = logging.getLogger("src.rendering.pipeline")
        assert module_logger.getEffectiveLevel() == logging.DEBUG
        assert logging.getLogger("src").handlers

    def test_noisy_loggers_raised_to_warning(self):
        """HTTP client loggers should not emit INFO records."""
        from src.utils.logging import configure_logging

        configure_logging(level="INFO")

        assert logging.getLogger("httpx").level == logging.WARNING

    def test_log_file_receives_records(self, tmp_path):
        """A log file handler should be added when requested."""
        from src.utils.logging import configure_logging

        log_file = tmp_path / "logs" / "relay.log"
        logger = configure_logging(level="INFO", log_file=log_file)
        logger.info("written to file")
        for handler in logger.handlers:
            handler.flush()

        assert "written to file" in log_file.read_text(encoding="utf-8")


class TestLogOutput:
    """Test that log output format is correct."""

    def test_log_message_includes_level(self):
        """Log messages should include the log level."""
        from src.utils.logging import configure_logging

        logger = configure_logging(level="INFO")

        buffer = StringIO()
        handler = logging.StreamHandler(buffer)
        handler.setFormatter(logger.handlers[0].formatter)
        logger.addHandler(handler)

        logger.info("Test message")

        output = buffer.getvalue()
        assert "INFO" in output
        assert "Test message" in output


class TestGetLogger:
    """Test the get_logger convenience function."""

    def test_get_logger_returns_child_logger(self):
        """get_logger should return a child of the main logger."""
        from src.utils.logging import configure_logging, get_logger

        configure_logging()

        logger = get_logger("my_module")
        assert logger.name == "resume_relay.my_module"

    def test_get_logger_inherits_level(self):
        """Child logger should inherit parent's level."""
        from src.utils.logging import configure_logging, get_logger

        configure_logging(level="DEBUG")

        logger = get_logger("test_module")
        assert logger.getEffectiveLevel() == logging.DEBUG
