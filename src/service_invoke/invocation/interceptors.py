"""Invocation interceptors.

An interceptor runs before or after a service method call. A before
interceptor can veto the call by returning ``False``, or a
``(False, "reason")`` pair when it wants to explain why.

Available variants:
    - NamedMethodInterceptor: calls a method of the service object by name.
    - CallableInterceptor: calls a plain callable with the service object.
    - HandlerInterceptor: calls ``intercept`` on a handler class or object.

The variant is chosen once, when the reference is registered, by
:func:`as_interceptor`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Protocol

from service_invoke.exceptions import InvalidInterceptorError

NO_RESULT = object()


class Phase(StrEnum):
    """Points in the call lifecycle where interceptors run."""

    BEFORE = "before"
    AFTER = "after"


@dataclass(frozen=True)
class InterceptorResult:
    """Normalized interceptor outcome.

    Attributes:
        proceed: False only when the interceptor vetoed the call.
        reason: Optional human readable cancellation reason.
    """

    proceed: bool = True
    reason: str | None = None

    @property
    def canceled(self) -> bool:
        return not self.proceed

    @classmethod
    def from_value(cls, value: Any) -> InterceptorResult:
        """Interpret a raw interceptor return value.

        A two-element tuple or list is read as ``(outcome, reason)``. Any
        other value is the outcome itself. Only an outcome that is exactly
        ``False`` cancels; ``None`` and other falsy values proceed.
        """
        if isinstance(value, InterceptorResult):
            return value
        reason = None
        if isinstance(value, (tuple, list)) and len(value) == 2:
            value, reason = value
            reason = None if reason is None or reason is False else str(reason)
        if value is False:
            return cls(proceed=False, reason=reason)
        return cls(proceed=True)


def _ref_key(ref: Any) -> Any:
    try:
        hash(ref)
    except TypeError:
        return id(ref)
    return ref


class Interceptor(ABC):
    """Abstract interceptor bound to a reference supplied at registration.

    Two interceptors are equal when they wrap the same reference, so a
    method filter recorded for a reference applies wherever it is
    registered.
    """

    def __init__(self, ref: Any) -> None:
        self._ref = ref

    @property
    def ref(self) -> Any:
        return self._ref

    @abstractmethod
    def invoke(self, service: Any, args: Sequence[Any]) -> Any:
        """Run the interceptor against ``service`` and return its raw result."""

    def __call__(
        self,
        service: Any,
        method_name: str,
        params: list[Any],
        result: Any = NO_RESULT,
    ) -> InterceptorResult:
        args: tuple[Any, ...] = (method_name, params)
        if result is not NO_RESULT:
            args += (result,)
        return InterceptorResult.from_value(self.invoke(service, args))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Interceptor) or type(other) is not type(self):
            return NotImplemented
        return self._ref is other._ref or _ref_key(self._ref) == _ref_key(other._ref)

    def __hash__(self) -> int:
        return hash((type(self).__name__, _ref_key(self._ref)))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._ref!r})"


class NamedMethodInterceptor(Interceptor):
    """Calls ``service.<name>(method_name, params[, result])``."""

    def invoke(self, service: Any, args: Sequence[Any]) -> Any:
        method = getattr(service, self._ref, None)
        if method is None or not callable(method):
            raise InvalidInterceptorError(
                message=f"interceptor method '{self._ref}' not found on {type(service).__name__}",
                data={"interceptor": self._ref},
            )
        return method(*args)


class CallableInterceptor(Interceptor):
    """Calls ``fn(service, method_name, params[, result])``."""

    def invoke(self, service: Any, args: Sequence[Any]) -> Any:
        return self._ref(service, *args)


class HandlerInterceptor(Interceptor):
    """Calls ``handler.intercept(service, method_name, params[, result])``."""

    def invoke(self, service: Any, args: Sequence[Any]) -> Any:
        return self._ref.intercept(service, *args)


class SupportsIntercept(Protocol):
    """Handler exposing a class-level or instance ``intercept`` operation."""

    def intercept(self, service: Any, method_name: str, params: list[Any], *result: Any) -> Any: ...


InterceptorRef = str | Callable[..., Any] | SupportsIntercept | Interceptor


def as_interceptor(ref: InterceptorRef) -> Interceptor:
    """Pick the interceptor variant for a raw reference.

    Handlers are probed before plain callables because handler classes are
    themselves callable.

    Raises:
        InvalidInterceptorError: If ``ref`` matches none of the variants.
    """
    if isinstance(ref, Interceptor):
        return ref
    if isinstance(ref, str):
        return NamedMethodInterceptor(ref)
    if callable(getattr(ref, "intercept", None)):
        return HandlerInterceptor(ref)
    if callable(ref):
        return CallableInterceptor(ref)
    raise InvalidInterceptorError(
        message=(
            "interceptors need to be a method name, a callable, "
            "or a handler implementing an 'intercept' method"
        ),
        data={"interceptor": repr(ref)},
    )
