"""
Numerics configuration.

Coordinate transitions and log-determinants lose noticeable precision in
float32, so 64-bit mode is on by default. Settings come from keyword
arguments or from the environment:

    INFOGEO_ENABLE_X64   "1"/"true"/"yes" or "0"/"false"/"no"
    INFOGEO_LOG_LEVEL    standard logging level name, e.g. "DEBUG"

Usage:
    from infogeo.config import configure
    configure()                                   # from the environment
    configure(NumericsConfig(log_level="DEBUG"))
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

from jax import config as jax_config

logger = logging.getLogger(__name__)

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean flag, got {value!r}")


@dataclass(frozen=True)
class NumericsConfig:
    """
    Process-wide numerics settings.

    Attributes:
        enable_x64: Run jax in 64-bit precision
        log_level: Level of the ``infogeo`` logger
    """
    enable_x64: bool = True
    log_level: str = "WARNING"

    def __post_init__(self):
        level = logging.getLevelName(self.log_level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level {self.log_level!r}")

    @classmethod
    def from_env(cls) -> 'NumericsConfig':
        """Read settings from INFOGEO_* environment variables."""
        defaults = cls()
        x64 = os.environ.get("INFOGEO_ENABLE_X64")
        return cls(
            enable_x64=defaults.enable_x64 if x64 is None else _parse_bool("INFOGEO_ENABLE_X64", x64),
            log_level=os.environ.get("INFOGEO_LOG_LEVEL", defaults.log_level),
        )


def configure(config: Optional[NumericsConfig] = None) -> NumericsConfig:
    """
    Apply a configuration (the environment's, if none is given).

    Returns:
        The configuration that was applied
    """
    if config is None:
        config = NumericsConfig.from_env()
    jax_config.update("jax_enable_x64", config.enable_x64)
    logging.getLogger("infogeo").setLevel(config.log_level.upper())
    logger.debug(f"Applied {config}")
    return config


__all__ = [
    'NumericsConfig',
    'configure',
]
