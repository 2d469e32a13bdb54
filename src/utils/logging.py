"""Logging configuration for Resume Relay."""

import logging
import sys
from pathlib import Path

# Logger name for the application
LOGGER_NAME = "resume_relay"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that are chatty at INFO (request lines, model banners)
NOISY_LOGGERS = ("httpx", "httpcore", "LiteLLM", "weasyprint", "fontTools")

_configured = False


def configure_logging(
    level: str | None = None,
    log_file: Path | str | None = None,
    format_string: str = LOG_FORMAT,
    date_format: str = DATE_FORMAT,
) -> logging.Logger:
    """Configure and return the main application logger.

    Module loggers are created with ``logging.getLogger(__name__)`` under the
    ``src`` package, so both the ``resume_relay`` logger and the ``src``
    hierarchy receive the same handlers.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               Defaults to INFO if not specified.
        log_file: Optional file that receives a copy of every record.
        format_string: Format string for log messages.
        date_format: Format string for timestamps.

    Returns:
        The configured application logger.
    """
    global _configured

    logger = logging.getLogger(LOGGER_NAME)
    package_logger = logging.getLogger("src")

    log_level = getattr(logging, (level or "INFO").upper(), logging.INFO)

    for target in (logger, package_logger):
        target.setLevel(log_level)

    if not _configured:
        formatter = logging.Formatter(format_string, datefmt=date_format)
        handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
        if log_file is not None:
            path = Path(log_file)
            path.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(path, encoding="utf-8"))

        for target in (logger, package_logger):
            target.handlers.clear()
            for handler in handlers:
                handler.setLevel(log_level)
                handler.setFormatter(formatter)
                target.addHandler(handler)
            target.propagate = False

        # Keep vendor request logs out of INFO output
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

        _configured = True
    else:
        for target in (logger, package_logger):
            for handler in target.handlers:
                handler.setLevel(log_level)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a child logger for a specific module.

    Args:
        name: The module name (will be prefixed with 'resume_relay.').

    Returns:
        A child logger for the module.
    """
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def reset_logging() -> None:
    """Reset logging configuration (useful for testing)."""
    global _configured

    for name in (LOGGER_NAME, "src"):
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            handler.close()
        logger.handlers.clear()
        logger.setLevel(logging.NOTSET)
        logger.propagate = True

    _configured = False
