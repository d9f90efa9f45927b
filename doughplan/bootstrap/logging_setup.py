"""
bootstrap/logging_setup.py - Logging configuration for the doughplan package.
"""

from __future__ import annotations
from typing import Optional
import logging
import sys

from .config import LoggingConfig

PACKAGE_LOGGER = "doughplan"


def configure_logging(config: Optional[LoggingConfig] = None) -> logging.Logger:
    """
    Attach handlers to the package logger.

    Handlers installed by an earlier call are replaced, so calling this
    twice does not duplicate output.

    Args:
        config: LoggingConfig (defaults to LoggingConfig())

    Returns:
        The configured package logger
    """
    config = config or LoggingConfig()
    log_level = getattr(logging, str(config.level).upper(), logging.INFO)
    formatter = logging.Formatter(config.format)

    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        if getattr(handler, "_doughplan", False):
            logger.removeHandler(handler)
            handler.close()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(log_level)
    console_handler._doughplan = True
    logger.addHandler(console_handler)

    if config.log_file:
        file_handler = logging.FileHandler(config.log_file)
        file_handler.setFormatter(formatter)
        file_handler.setLevel(log_level)
        file_handler._doughplan = True
        logger.addHandler(file_handler)

    logger.setLevel(log_level)
    return logger
