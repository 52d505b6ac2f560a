"""Centralized logging configuration for the countrycache application.

Sets up standard Python logging with a level, a formatter and handlers
(console, optional file). Library modules only create module-level loggers;
configuring handlers is left to the application entry point.
"""

import logging
import sys
from typing import List, Optional, Union

logger = logging.getLogger(__name__)

DEFAULT_LOG_LEVEL = logging.WARNING
DEFAULT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def resolve_log_level(level: Union[int, str, None], fallback: int = DEFAULT_LOG_LEVEL) -> int:
    """Maps a level name ('debug', 'INFO') or number to a logging level."""
    if level is None:
        return fallback
    if isinstance(level, int):
        return level
    return getattr(logging, str(level).upper(), fallback)


def setup_logging(
    log_level: int = DEFAULT_LOG_LEVEL,
    log_format: str = DEFAULT_LOG_FORMAT,
    log_file: Optional[str] = None
) -> None:
    """Replaces the root logger's handlers with a stderr handler and an optional file handler.

    Args:
        log_level: The minimum logging level (e.g., logging.DEBUG, logging.INFO).
        log_format: The format string for log messages.
        log_file: Optional path to a file for logging output.
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # stdout is reserved for command output
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    file_error: Optional[OSError] = None
    if log_file:
        try:
            handlers.append(logging.FileHandler(log_file, encoding='utf-8'))
        except OSError as e:
            file_error = e

    formatter = logging.Formatter(log_format)
    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    if file_error is not None:
        logger.error(f"Failed to set up file logging to {log_file}: {file_error}")
    logger.debug(f"Logging configured. Level={logging.getLevelName(log_level)}, file={log_file}")
