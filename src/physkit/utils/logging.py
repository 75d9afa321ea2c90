"""
Logging utilities.

Library modules only ask for loggers; handlers are attached by the
application (or a script) through ``setup_logging``.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union


DEFAULT_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'


def setup_logging(
    log_file: Optional[str] = None,
    level: Union[int, str] = logging.INFO,
    format_string: str = None,
    name: str = None
) -> logging.Logger:
    """
    Set up logging configuration.

    Args:
        log_file: Path to log file (if None, only console output)
        level: Logging level (int or level name such as 'DEBUG')
        format_string: Custom format string
        name: Logger name (if None, uses the 'physkit' logger)

    Returns:
        Configured logger
    """
    if format_string is None:
        format_string = DEFAULT_FORMAT
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {level}")

    logger = logging.getLogger(name or 'physkit')
    logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(format_string, datefmt='%Y-%m-%d %H:%M:%S')

    # Console handler (minimal output - scripts use rich for main display)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(max(level, logging.WARNING))
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # File handler (detailed logs)
    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = None) -> logging.Logger:
    """
    Get a logger by name.

    Args:
        name: Logger name

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
