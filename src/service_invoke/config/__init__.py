"""Configuration helpers."""

from .loader import ConfigError, configure_logging, load_config
from .models import DispatchConfig

__all__ = [
    "ConfigError",
    "DispatchConfig",
    "configure_logging",
    "load_config",
]
