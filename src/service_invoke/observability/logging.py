"""Structured logging bound to the dispatch in progress.

The dispatcher enters a :class:`LogContext` for every call, so records
emitted while a call is dispatched carry the service type, method name and
dispatch mode. Output is JSON unless ``SERVICE_INVOKE_LOG_FORMAT`` selects
``console``.
"""

from __future__ import annotations

import contextvars
import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, TextIO

__all__ = [
    "LEVEL_NAME_TO_INT",
    "LOG_FORMAT_CONSOLE",
    "LOG_FORMAT_ENV",
    "LOG_FORMAT_JSON",
    "ContextFilter",
    "LogContext",
    "StructuredConsoleFormatter",
    "StructuredJSONFormatter",
    "get_logger",
]

LOG_FORMAT_ENV = "SERVICE_INVOKE_LOG_FORMAT"
LOG_FORMAT_JSON = "json"
LOG_FORMAT_CONSOLE = "console"

LEVEL_NAME_TO_INT: dict[str, int] = {
    name: getattr(logging, name) for name in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
}

_DISPATCH_KEYS = ("service", "method", "mode")

_dispatch_context: contextvars.ContextVar[dict[str, Any]] = contextvars.ContextVar("service_invoke_dispatch")

_CONSOLE_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s service=%(service)s method=%(method)s mode=%(mode)s"

_PAYLOAD_FIELDS = frozenset({"timestamp", "level", "logger", "message", "exception", "stack"})

# attributes every LogRecord carries; anything else came in through ``extra``
_STANDARD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


def _current_context() -> dict[str, Any]:
    values = _dispatch_context.get({})
    return {**dict.fromkeys(_DISPATCH_KEYS), **values}


def _resolve_format(value: str | None) -> str:
    normalized = (value or "").strip().lower()
    return LOG_FORMAT_CONSOLE if normalized == LOG_FORMAT_CONSOLE else LOG_FORMAT_JSON


class LogContext:
    """Binds dispatch details to every record logged inside a ``with`` block.

    Contexts nest. An inner context overrides only the keys it sets and
    the outer values come back when it exits.
    """

    def __init__(
        self,
        service: str | None = None,
        method: str | None = None,
        mode: str | None = None,
        **extra: str | None,
    ) -> None:
        given = {"service": service, "method": method, "mode": mode, **extra}
        self._values = {key: value for key, value in given.items() if value is not None}
        self._token: contextvars.Token[dict[str, Any]] | None = None

    def __enter__(self) -> LogContext:
        self._token = _dispatch_context.set({**_dispatch_context.get({}), **self._values})
        return self

    def __exit__(self, exc_type: Any, exc: Any, traceback: Any) -> None:
        if self._token is not None:
            _dispatch_context.reset(self._token)
            self._token = None

    @classmethod
    def clear(cls) -> None:
        _dispatch_context.set({})


class ContextFilter(logging.Filter):
    """Copies the dispatch context onto records for %-style formats."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _current_context().items():
            if not hasattr(record, key):
                setattr(record, key, "-" if value is None else value)
        return True


class StructuredJSONFormatter(logging.Formatter):
    """One JSON object per record: base fields, dispatch context, extras."""

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        if datefmt:
            return created.strftime(datefmt)
        return created.isoformat(timespec="milliseconds").replace("+00:00", "Z")

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        extras = {
            key: value
            for key, value in vars(record).items()
            if key not in _STANDARD_ATTRS and not key.startswith("_")
        }
        for key, value in {**_current_context(), **extras}.items():
            if key not in _PAYLOAD_FIELDS:
                payload[key] = value
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack"] = record.stack_info
        return json.dumps(payload, default=str)


class StructuredConsoleFormatter(logging.Formatter):
    def __init__(self, datefmt: str | None = None) -> None:
        super().__init__(fmt=_CONSOLE_FORMAT, datefmt=datefmt)


class _DispatchLogHandler(logging.StreamHandler):
    def __init__(self, format_kind: str, stream: TextIO | None) -> None:
        super().__init__(stream or sys.stdout)
        self.format_kind = format_kind
        if format_kind == LOG_FORMAT_CONSOLE:
            self.setFormatter(StructuredConsoleFormatter())
            self.addFilter(ContextFilter())
        else:
            self.setFormatter(StructuredJSONFormatter())


def get_logger(
    name: str,
    *,
    log_format: str | None = None,
    level: int | None = None,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Return ``name`` with one structured handler attached.

    Args:
        name: Logger name.
        log_format: ``json`` or ``console``. Defaults to the
            ``SERVICE_INVOKE_LOG_FORMAT`` environment variable, then JSON.
        level: Level applied to the logger; INFO when the logger has none.
        stream: Handler output stream, stdout by default.

    Repeated calls with the same format reuse the existing handler.
    """
    format_kind = _resolve_format(log_format or os.getenv(LOG_FORMAT_ENV))
    logger = logging.getLogger(name)
    attached = any(
        isinstance(handler, _DispatchLogHandler) and handler.format_kind == format_kind
        for handler in logger.handlers
    )
    if not attached:
        logger.addHandler(_DispatchLogHandler(format_kind, stream))
        logger.propagate = False
    if level is not None:
        logger.setLevel(level)
    elif logger.level == logging.NOTSET:
        logger.setLevel(logging.INFO)
    return logger
