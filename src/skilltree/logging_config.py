"""
Logging setup for the skilltree command line and tools.

Library modules only call ``logging.getLogger(__name__)``; handlers are
attached here, once, by the entry point.
"""
import logging
import sys
from pathlib import Path

DEFAULT_LOG_LEVEL = logging.INFO

SKILLTREE_LOGGER_NAME = "skilltree"


def setup_logger(
    name: str = SKILLTREE_LOGGER_NAME,
    level: int = DEFAULT_LOG_LEVEL,
    log_file: str = None,
    console: bool = True
) -> logging.Logger:
    """
    Configure and return the package logger.

    Args:
        name: Logger name (default: 'skilltree')
        level: Logging level (default: INFO)
        log_file: Optional file path for log output
        console: Whether to log to stderr (default: True)

    Returns:
        Configured logger instance

    Examples:
        >>> logger = setup_logger(level=logging.DEBUG)
        >>> logger.debug("node added")
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # stderr keeps stdout clean for command output
    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, mode='a')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = None) -> logging.Logger:
    """Child logger of the package logger, e.g. ``get_logger("cli")`` -> ``skilltree.cli``."""
    logger_name = f"{SKILLTREE_LOGGER_NAME}.{name}" if name else SKILLTREE_LOGGER_NAME
    return logging.getLogger(logger_name)
