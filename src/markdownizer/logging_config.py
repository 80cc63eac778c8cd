"""Logging setup for the markdownizer command line."""

import logging
import sys
from typing import Optional, TextIO

PACKAGE_LOGGER = "markdownizer"

# Console records go to stderr next to the converted Markdown on stdout,
# so they stay short; file records carry timestamps.
CONSOLE_FORMAT = "%(levelname)s %(name)s: %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def level_for(verbose: bool = False, quiet: bool = False) -> str:
    """Map -v/-q flags to a level name. Quiet wins over verbose."""
    if quiet:
        return "ERROR"
    if verbose:
        return "DEBUG"
    return "WARNING"


def setup_logging(
    level: str = "WARNING",
    log_file: Optional[str] = None,
    format_string: Optional[str] = None,
    force: bool = False,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Configure the ``markdownizer`` logger.

    Library modules only create loggers; handlers are attached here, once,
    by the application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path for logging output
        format_string: Format for every handler (defaults differ per handler)
        force: If True, reconfigure even if handlers exist
        stream: Console stream (stderr by default)

    Returns:
        Configured logger instance
    """
    numeric_level = getattr(logging, level.upper(), logging.WARNING)
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(numeric_level)

    # Only clear and reconfigure if forced or no handlers exist
    if force or not logger.handlers:
        logger.handlers.clear()

        console_handler = logging.StreamHandler(stream or sys.stderr)
        console_handler.setFormatter(logging.Formatter(format_string or CONSOLE_FORMAT))
        logger.addHandler(console_handler)

        if log_file:
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
            file_handler.setFormatter(logging.Formatter(format_string or FILE_FORMAT))
            logger.addHandler(file_handler)

    for handler in logger.handlers:
        handler.setLevel(numeric_level)

    # Records stop here; embedding applications configure their own root handlers
    logger.propagate = False

    return logger
