"""
bootstrap/ - Configuration and logging setup.
"""

from .config import (
    EngineConfig,
    LoggingConfig,
    DoughplanConfig,
    load_config,
    get_config,
    reset_config,
)

from .logging_setup import configure_logging

__all__ = [
    "EngineConfig",
    "LoggingConfig",
    "DoughplanConfig",
    "load_config",
    "get_config",
    "reset_config",
    "configure_logging",
]
