"""Logging utilities for the MCP REST bridge"""

import logging
import os
import sys
from typing import Optional


DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """
    Get a configured logger instance

    Args:
        name: Logger name (usually __name__)
        level: Optional log level override

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if level:
        log_level = getattr(logging, level.upper(), logging.INFO)
        logger.setLevel(log_level)

    return logger


def setup_bridge_logging(debug: bool = False, log_file: Optional[str] = None,
                         fmt: str = DEFAULT_FORMAT, level: Optional[str] = None) -> logging.Logger:
    """
    Setup logging for a process hosting the bridge

    Logs go to stderr so they never interleave with response bodies
    written by the hosting server. A file handler is added when
    ``log_file`` is given and can be created.

    Args:
        debug: Enable debug logging
        log_file: Optional path of an additional log file
        fmt: Log record format
        level: Log level name, defaults to the LOG_LEVEL environment variable
    """
    log_level_str = (level or os.getenv('LOG_LEVEL', 'INFO')).upper()
    log_level = getattr(logging, log_level_str, logging.INFO)
    if not isinstance(log_level, int):
        log_level = logging.INFO

    if debug:
        log_level = logging.DEBUG

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    formatter = logging.Formatter(fmt, datefmt='%Y-%m-%d %H:%M:%S')

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(log_level)
    stderr_handler.setFormatter(formatter)
    root_logger.addHandler(stderr_handler)

    if log_file:
        try:
            log_dir = os.path.dirname(log_file)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)
            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(log_level)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
        except OSError as e:
            root_logger.warning(f"Could not create log file {log_file}: {e}")

    # Suppress noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    return root_logger
