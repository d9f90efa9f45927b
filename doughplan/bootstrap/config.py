"""
bootstrap/config.py - Engine configuration

Provides configuration loading from files, environment variables, and defaults.
Configuration is read during a calculation, never written.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from pathlib import Path
import os
import json
import logging

from ..core.enums import MixType
from ..errors import ConfigurationError
from ..utils import parse_enum

logger = logging.getLogger(__name__)

ENV_PREFIX = "DOUGHPLAN_"


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def _env_bool(name: str, default: bool) -> bool:
    raw = _env(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_float(name: str, default: float) -> float:
    raw = _env(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{ENV_PREFIX}{name}", raw)


def _mix_type(key: str, value: Any) -> MixType:
    mt = parse_enum(MixType, value)
    if mt is None:
        raise ConfigurationError(key, value)
    return mt


@dataclass
class EngineConfig:
    """Defaults the engine falls back to when a recipe leaves a value open."""

    default_mix_type: MixType = MixType.IMPROVED_MIX
    default_ddt: float = 24.0
    default_autolyse_duration_min: float = 20
    resolve_nested_preferments: bool = True  # decompose preferments nested in preferments
    default_companion_mix_type: MixType = MixType.IMPROVED_MIX

    @classmethod
    def from_env(cls) -> "EngineConfig":
        return cls(
            default_mix_type=_mix_type(
                f"{ENV_PREFIX}DEFAULT_MIX_TYPE", _env("DEFAULT_MIX_TYPE", MixType.IMPROVED_MIX.value)
            ),
            default_ddt=_env_float("DEFAULT_DDT", 24.0),
            default_autolyse_duration_min=_env_float("DEFAULT_AUTOLYSE_MIN", 20),
            resolve_nested_preferments=_env_bool("RESOLVE_NESTED_PREFERMENTS", True),
            default_companion_mix_type=_mix_type(
                f"{ENV_PREFIX}COMPANION_MIX_TYPE",
                _env("COMPANION_MIX_TYPE", MixType.IMPROVED_MIX.value),
            ),
        )

    def update(self, data: Dict[str, Any]) -> None:
        """Override fields from a plain dict (config file section)."""
        for key, value in data.items():
            if not hasattr(self, key):
                logger.warning(f"Unknown engine config key ignored: {key}")
                continue
            if key in ("default_mix_type", "default_companion_mix_type"):
                value = _mix_type(f"engine.{key}", value)
            elif key in ("default_ddt", "default_autolyse_duration_min"):
                try:
                    value = float(value)
                except (TypeError, ValueError):
                    raise ConfigurationError(f"engine.{key}", value)
            elif key == "resolve_nested_preferments":
                value = bool(value)
            setattr(self, key, value)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "default_mix_type": self.default_mix_type.value,
            "default_ddt": self.default_ddt,
            "default_autolyse_duration_min": self.default_autolyse_duration_min,
            "resolve_nested_preferments": self.resolve_nested_preferments,
            "default_companion_mix_type": self.default_companion_mix_type.value,
        }


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    log_file: Optional[str] = None

    @classmethod
    def from_env(cls) -> "LoggingConfig":
        return cls(
            level=_env("LOG_LEVEL", "INFO"),
            format=_env("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
            log_file=_env("LOG_FILE"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"level": self.level, "format": self.format, "log_file": self.log_file}


@dataclass
class DoughplanConfig:
    """Root configuration."""

    environment: str = "development"
    debug: bool = False

    engine: EngineConfig = field(default_factory=EngineConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls) -> "DoughplanConfig":
        """Create configuration from environment variables."""
        return cls(
            environment=_env("ENVIRONMENT", "development"),
            debug=_env_bool("DEBUG", False),
            engine=EngineConfig.from_env(),
            logging=LoggingConfig.from_env(),
        )

    @classmethod
    def from_file(cls, filepath: str) -> "DoughplanConfig":
        """Load configuration from JSON file; missing files fall back to the environment."""
        path = Path(filepath)
        if not path.exists():
            logger.warning(f"Config file not found: {filepath}, using defaults")
            return cls.from_env()

        with open(path) as f:
            data = json.load(f)

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "DoughplanConfig":
        """Environment values overridden by file values."""
        config = cls.from_env()

        if "environment" in data:
            config.environment = data["environment"]
        if "debug" in data:
            config.debug = bool(data["debug"])

        if "engine" in data:
            config.engine.update(data["engine"])

        if "logging" in data:
            for key, value in data["logging"].items():
                if hasattr(config.logging, key):
                    setattr(config.logging, key, value)

        return config

    def to_dict(self) -> Dict[str, Any]:
        """Serialize config to dictionary."""
        return {
            "environment": self.environment,
            "debug": self.debug,
            "engine": self.engine.to_dict(),
            "logging": self.logging.to_dict(),
        }


# Global config instance
_config: Optional[DoughplanConfig] = None


def load_config(filepath: str = None) -> DoughplanConfig:
    """
    Load configuration from file or environment.

    Args:
        filepath: Optional path to JSON config file

    Returns:
        DoughplanConfig instance
    """
    global _config

    if filepath:
        _config = DoughplanConfig.from_file(filepath)
    else:
        default_paths = [
            "./doughplan.json",
            "./config/doughplan.json",
            os.path.expanduser("~/.doughplan/config.json"),
        ]

        for path in default_paths:
            if Path(path).exists():
                logger.info(f"Loading config from: {path}")
                _config = DoughplanConfig.from_file(path)
                return _config

        _config = DoughplanConfig.from_env()

    logger.info(f"Configuration loaded: environment={_config.environment}")
    return _config


def get_config() -> DoughplanConfig:
    """Get current configuration, loading if needed."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Drop the cached configuration so the next get_config() reloads it."""
    global _config
    _config = None
