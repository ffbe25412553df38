from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, cast

from service_invoke.observability.logging import LEVEL_NAME_TO_INT, LOG_FORMAT_CONSOLE, LOG_FORMAT_JSON

FieldSpec = tuple[str, Callable[[Any, str], Any], str]


def _ensure_mapping(value: Any, field_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise TypeError(f"{field_name} must be a mapping")
    return cast(Mapping[str, Any], value)


def _coerce_bool(value: Any, field_name: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return bool(value)
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"1", "true", "yes", "on"}:
            return True
        if normalized in {"0", "false", "no", "off"}:
            return False
    raise TypeError(f"{field_name} must be a bool")


def _coerce_log_format(value: Any, field_name: str) -> str:
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {LOG_FORMAT_JSON, LOG_FORMAT_CONSOLE}:
            return normalized
    raise ValueError(f"{field_name} must be one of: {LOG_FORMAT_JSON}, {LOG_FORMAT_CONSOLE}")


def _coerce_level(value: Any, field_name: str) -> str:
    if isinstance(value, int) and not isinstance(value, bool):
        for name, level in LEVEL_NAME_TO_INT.items():
            if level == value:
                return name
    if isinstance(value, str):
        normalized = value.strip().upper()
        if normalized in LEVEL_NAME_TO_INT:
            return normalized
    raise ValueError(f"{field_name} must be a valid log level")


def _extract_fields(payload: Mapping[str, Any], specs: Sequence[FieldSpec]) -> dict[str, Any]:
    kwargs: dict[str, Any] = {}
    for name, coerce, label in specs:
        if name in payload:
            kwargs[name] = coerce(payload[name], label)
    return kwargs


def _apply_field_specs(target: Any, specs: Sequence[FieldSpec]) -> None:
    for name, coerce, label in specs:
        setattr(target, name, coerce(getattr(target, name), label))


_DISPATCH_FIELD_SPECS: tuple[FieldSpec, ...] = (
    ("log_format", _coerce_log_format, "dispatch.log_format"),
    ("log_level", _coerce_level, "dispatch.log_level"),
    ("log_cancellations", _coerce_bool, "dispatch.log_cancellations"),
)


@dataclass
class DispatchConfig:
    """Settings for the dispatch core.

    Attributes:
        log_format: ``json`` or ``console`` output for the package logger.
        log_level: Level name applied to the package logger.
        log_cancellations: Whether vetoed dispatches are logged at INFO.
    """

    log_format: str = LOG_FORMAT_JSON
    log_level: str = "INFO"
    log_cancellations: bool = True

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "DispatchConfig":
        if data is None:
            return cls()
        if isinstance(data, cls):
            return data
        payload = _ensure_mapping(data, "dispatch")
        return cls(**_extract_fields(payload, _DISPATCH_FIELD_SPECS))

    def __post_init__(self) -> None:
        _apply_field_specs(self, _DISPATCH_FIELD_SPECS)

    @property
    def level(self) -> int:
        return LEVEL_NAME_TO_INT[self.log_level]
