from __future__ import annotations

from collections.abc import Callable
from enum import StrEnum
from typing import Any


class InvocationMode(StrEnum):
    """How a request is resolved to a call."""

    CONCRETE = "concrete"
    VIRTUAL = "virtual"
    UNPUBLISHED_CONCRETE = "unpublished_concrete"


class InvocationRequest:
    """Describes one call to make against a service object.

    ``mode`` and ``public_method_name`` are fixed at construction. The
    dispatch layer may rewrite ``method_name`` (public -> internal name
    mapping) and interceptors may add to ``params``.

    Attributes:
        method_name: Underlying method to invoke on the service object.
        params: Positional arguments for the call.
        block_params: Leading arguments passed to ``continuation`` only.
        continuation: Callable that receives Virtual calls in place of a
            same-named service method.
    """

    __slots__ = ("_mode", "_public_method_name", "method_name", "params", "block_params", "continuation")

    def __init__(
        self,
        mode: InvocationMode | str,
        public_method_name: str,
        method_name: str,
        params: list[Any] | None = None,
    ) -> None:
        self._mode = InvocationMode(mode)
        self._public_method_name = public_method_name
        self.method_name = method_name
        self.params: list[Any] = params if params is not None else []
        self.block_params: list[Any] = []
        self.continuation: Callable[..., Any] | None = None

    @property
    def mode(self) -> InvocationMode:
        return self._mode

    @property
    def public_method_name(self) -> str:
        return self._public_method_name

    def is_concrete(self) -> bool:
        return self._mode is InvocationMode.CONCRETE

    def is_unpublished_concrete(self) -> bool:
        return self._mode is InvocationMode.UNPUBLISHED_CONCRETE

    def is_virtual(self) -> bool:
        return not (self.is_concrete() or self.is_unpublished_concrete())

    def __repr__(self) -> str:
        return (
            f"InvocationRequest(mode={self._mode.value!r}, "
            f"public_method_name={self._public_method_name!r}, "
            f"method_name={self.method_name!r}, params={self.params!r})"
        )
