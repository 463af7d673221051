"""
Logging for the reviewer service

All loggers hang off the ``pr_code_reviewer`` package logger, which gets a
single stdout handler the first time a logger is requested.
"""

import logging
import sys
from typing import Optional

from ..config import get_settings

ROOT_LOGGER_NAME = "pr_code_reviewer"


def setup_logging(level: Optional[str] = None, format_string: Optional[str] = None) -> logging.Logger:
    """
    Configure the package logger from settings

    Args:
        level: Log level, defaults to ``settings.log_level``
        format_string: Log format, defaults to ``settings.log_format``

    Returns:
        The package logger
    """
    settings = get_settings()
    log_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(log_level)
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(format_string or settings.log_format))
    root.addHandler(handler)
    root.propagate = False

    return root


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the package logger, configuring it on first use."""
    if not logging.getLogger(ROOT_LOGGER_NAME).handlers:
        setup_logging()
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


class LoggerMixin:
    """Give a class a logger named after its module and class"""

    @property
    def logger(self) -> logging.Logger:
        cls = self.__class__
        return get_logger(f"{cls.__module__}.{cls.__name__}")
