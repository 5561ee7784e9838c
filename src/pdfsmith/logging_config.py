"""Logging configuration for pdfsmith."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

# Package-level logger name
LOGGER_NAME = "pdfsmith"

# Third-party loggers that are noisy at INFO/WARNING for malformed-but-readable files
LIBRARY_LOGGERS = ("pypdf",)

LOG_FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger for a pdfsmith module.

    Args:
        name: Module name (e.g., __name__). If None, returns root pdfsmith logger.

    Returns:
        Logger instance
    """
    if name is None:
        return logging.getLogger(LOGGER_NAME)
    if name == LOGGER_NAME or name.startswith(f"{LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


class ConsoleFormatter(logging.Formatter):
    """Console formatter: bare INFO lines, prefixed warnings and errors."""

    PREFIXES = {
        logging.DEBUG: "[debug] ",
        logging.WARNING: "Warning: ",
        logging.ERROR: "Error: ",
        logging.CRITICAL: "Error: ",
    }

    def format(self, record: logging.LogRecord) -> str:
        prefix = self.PREFIXES.get(record.levelno, "")
        message = f"{prefix}{record.getMessage()}"
        if record.exc_info and record.levelno <= logging.DEBUG:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return message


class BelowWarningFilter(logging.Filter):
    """Filter that only allows records below WARNING level."""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < logging.WARNING


def _console_handler(stream, level: int, below_warning: bool = False) -> logging.Handler:
    handler = logging.StreamHandler(stream)
    handler.setLevel(level)
    handler.setFormatter(ConsoleFormatter())
    if below_warning:
        handler.addFilter(BelowWarningFilter())
    return handler


def setup_logging(
    verbosity: int = 0,
    quiet: bool = False,
    log_file: Path | None = None,
) -> None:
    """Configure logging for the pdfsmith CLI.

    Progress and results go to stdout, warnings and errors to stderr, so
    output can be piped while problems stay visible.

    Args:
        verbosity: 0=normal, 1=verbose (-v), 2=debug (-vv)
        quiet: If True, suppress all output except errors
        log_file: Optional file path for logging
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(logging.DEBUG)

    if quiet:
        console_level = logging.ERROR
    elif verbosity >= 2:
        console_level = logging.DEBUG
    else:
        console_level = logging.INFO

    logger.addHandler(_console_handler(sys.stdout, console_level, below_warning=True))
    logger.addHandler(_console_handler(sys.stderr, logging.WARNING))

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(LOG_FILE_FORMAT))
        logger.addHandler(file_handler)

    # pypdf warns about recoverable xref damage; only surface it in debug runs
    library_level = logging.WARNING if verbosity >= 2 else logging.ERROR
    for name in LIBRARY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)
