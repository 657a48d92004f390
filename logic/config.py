"""
Engine configuration.

Settings live in a small YAML file (``config/engine.yaml`` by default,
overridable through ``LOGIC_ENGINE_CONFIG``):

    truth_table:
      max_variables: 16
    analysis:
      counterexample_limit: 5
    logging:
      level: INFO

A missing file means defaults; a malformed one raises ConfigError.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_CONFIG_PATH = "config/engine.yaml"
CONFIG_ENV_VAR = "LOGIC_ENGINE_CONFIG"

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


class ConfigError(Exception):
    """Raised when the configuration file cannot be parsed."""
    pass


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Tunables for the logic engine."""

    # Truth tables grow as 2**n; formulas above this count are rejected.
    max_variables: int = 16
    counterexample_limit: int = 5
    log_level: str = "INFO"

    @classmethod
    def from_file(cls, path: Path | str) -> "EngineConfig":
        try:
            data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Error parsing YAML file: {path}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Malformed config file: expected a mapping in {path}")

        truth_table = data.get("truth_table") or {}
        analysis = data.get("analysis") or {}
        logging_cfg = data.get("logging") or {}
        try:
            config = cls(
                max_variables=int(truth_table.get("max_variables", 16)),
                counterexample_limit=int(analysis.get("counterexample_limit", 5)),
                log_level=str(logging_cfg.get("level", "INFO")).upper(),
            )
        except (AttributeError, TypeError, ValueError) as e:
            raise ConfigError(f"Malformed config value in {path}: {e}") from e
        if config.max_variables < 0:
            raise ConfigError(f"truth_table.max_variables must be >= 0 in {path}")
        return config


def load_config_from_env() -> EngineConfig:
    """Load config from the path in LOGIC_ENGINE_CONFIG, or defaults."""
    path = Path(os.getenv(CONFIG_ENV_VAR, DEFAULT_CONFIG_PATH))
    if not path.exists():
        return EngineConfig()
    return EngineConfig.from_file(path)


_config: Optional[EngineConfig] = None


def get_config() -> EngineConfig:
    global _config
    if _config is None:
        _config = load_config_from_env()
    return _config


def set_config(config: EngineConfig) -> None:
    global _config
    _config = config


def reset_config() -> None:
    """Forget the cached config so the next get_config() reloads it."""
    global _config
    _config = None


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging for scripts and services embedding the engine."""
    logging.basicConfig(
        level=level or get_config().log_level,
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
    )


__all__ = [
    "ConfigError",
    "EngineConfig",
    "DEFAULT_CONFIG_PATH",
    "CONFIG_ENV_VAR",
    "load_config_from_env",
    "get_config",
    "set_config",
    "reset_config",
    "configure_logging",
]
