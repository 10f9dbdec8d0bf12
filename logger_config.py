"""
Logging configuration for the demo scripts.

Every demo prints its progress and the raw SDK responses through loggers
created here, so a single level controls the whole console output.
"""
import logging
import os
import sys
from typing import Dict

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

_loggers: Dict[str, logging.Logger] = {}


def _resolve_level(level_name: str) -> int:
    return getattr(logging, level_name.upper(), logging.INFO)


def get_logger(name: str = None) -> logging.Logger:
    """
    Get a configured console logger.

    Args:
        name: Logger name (defaults to this module's name if not provided)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name or __name__)

    # Avoid adding handlers multiple times
    if logger.handlers:
        return logger

    logger.setLevel(_resolve_level(os.environ.get('LOG_LEVEL', 'INFO')))

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)

    # Prevent propagation to root logger to avoid duplicate lines
    logger.propagate = False

    _loggers[logger.name] = logger
    return logger


def set_log_level(level_name: str) -> None:
    """Apply a level to every logger handed out by get_logger so far."""
    level = _resolve_level(level_name)
    for logger in _loggers.values():
        logger.setLevel(level)
