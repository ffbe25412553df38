from __future__ import annotations

import logging
import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from service_invoke.observability.logging import get_logger

from .models import DispatchConfig


class ConfigError(RuntimeError):
    """Raised when configuration loading fails."""


_ENV_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-(.*?))?\}")
_ROOT_KEY = "service_invoke"


def load_config(path: str | Path) -> DispatchConfig:
    """Load a YAML config file into DispatchConfig.

    ``${VAR}`` and ``${VAR:-default}`` references in string values are
    expanded from the environment. Settings may sit at the top level or
    under a ``service_invoke:`` key.
    """
    data = _load_config_mapping(path)
    try:
        return DispatchConfig.from_dict(data)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid config in {path}: {exc}") from exc


def configure_logging(config: DispatchConfig, *, stream: Any | None = None) -> logging.Logger:
    """Attach a structured handler to the package logger per ``config``."""
    return get_logger(
        "service_invoke",
        log_format=config.log_format,
        level=config.level,
        stream=stream,
    )


def _load_config_mapping(path: str | Path) -> dict[str, Any]:
    config_path = Path(path).expanduser()
    if config_path.suffix.lower() not in {".yaml", ".yml"}:
        raise ConfigError(f"Unsupported config file type: {config_path.suffix}")
    if not config_path.is_file():
        raise ConfigError(f"Config file not found: {config_path}")
    try:
        content = config_path.read_text(encoding="utf-8")
        parsed = yaml.safe_load(content) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to load config file: {config_path}") from exc
    if not isinstance(parsed, Mapping):
        raise ConfigError("Configuration must be a mapping")
    data = _expand_env_in_data(parsed)
    return _normalize_config_root(data)


def _expand_env_in_data(value: Any) -> Any:
    if isinstance(value, str):
        return _expand_env_value(value)
    if isinstance(value, Mapping):
        return {key: _expand_env_in_data(val) for key, val in value.items()}
    if isinstance(value, list):
        return [_expand_env_in_data(item) for item in value]
    return value


def _expand_env_value(value: str) -> str:
    def replace(match: re.Match[str]) -> str:
        name = match.group(1)
        default = match.group(2)
        env_value = os.getenv(name)
        if env_value is None or env_value == "":
            if default is None:
                raise ConfigError(
                    f"Environment variable '{name}' is not set and no default provided"
                )
            return default
        return env_value

    return _ENV_PATTERN.sub(replace, value)


def _normalize_config_root(data: Mapping[str, Any]) -> dict[str, Any]:
    if _ROOT_KEY not in data:
        return dict(data)
    nested = data[_ROOT_KEY]
    if not isinstance(nested, Mapping):
        raise ConfigError(f"{_ROOT_KEY} section must be a mapping")
    merged = {key: value for key, value in data.items() if key != _ROOT_KEY}
    merged.update(nested)
    return merged
