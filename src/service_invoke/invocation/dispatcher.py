"""Dispatch engine.

Resolves an :class:`InvocationRequest` to a call according to its mode and
wraps that call with the before/after interceptor chains:

- CONCRETE: the method must exist on the service object and be published
  in its declared API.
- UNPUBLISHED_CONCRETE: the method is called without either check.
- VIRTUAL: the request continuation receives
  ``(public_method_name, *block_params, *params)``; without a
  continuation the method is called as for UNPUBLISHED_CONCRETE.

Resolution happens before any interceptor runs, so a missing or
unpublished CONCRETE method always faults, whatever the chain would do.
"""

from __future__ import annotations

import functools
import inspect
import logging
from collections.abc import Callable
from typing import Any

from service_invoke.api import PublishedApi
from service_invoke.config import DispatchConfig
from service_invoke.exceptions import MethodNotFoundError
from service_invoke.invocation.chain import InterceptorChainRunner
from service_invoke.invocation.interceptors import Phase
from service_invoke.invocation.registry import InterceptorRegistry
from service_invoke.invocation.request import InvocationRequest
from service_invoke.observability.logging import LogContext

logger = logging.getLogger(__name__)

CancelCallback = Callable[[str], Any]


_MISSING = object()


def _is_method(static: Any) -> bool:
    # static lookups never run descriptors, so lazy attributes stay unevaluated
    if isinstance(static, (staticmethod, classmethod)):
        return True
    if isinstance(static, (property, functools.cached_property)):
        return False
    return static is not _MISSING and callable(static)


class MethodTable:
    """Resolves method names of a service instance to bound callables.

    Names are looked up statically and only the requested attribute is
    ever read from the service.
    """

    def __init__(self, service: Any) -> None:
        self._service = service

    @classmethod
    def from_service(cls, service: Any) -> MethodTable:
        return cls(service)

    def responds_to(self, name: str) -> bool:
        """Return whether ``name`` is a public method of the service."""
        if not name or name.startswith("_"):
            return False
        return _is_method(inspect.getattr_static(self._service, name, _MISSING))

    def resolve(self, name: str) -> Callable[..., Any]:
        """Return the bound callable for ``name``, public or not.

        Raises:
            MethodNotFoundError: If the service has no such callable.
        """
        if _is_method(inspect.getattr_static(self._service, name, _MISSING)):
            method = getattr(self._service, name)
            if callable(method):
                return method
        raise MethodNotFoundError(
            message=f"no such method '{name}' on service object",
            data={"method": name},
        )

    def names(self) -> list[str]:
        return sorted(name for name in dir(self._service) if self.responds_to(name))


class Dispatcher:
    """Runs single in-process invocations against one service object.

    Args:
        service: The service object to call.
        registry: Interceptor configuration for the service type.
        api: Declared API consulted for CONCRETE requests.
        config: Dispatch settings.
    """

    def __init__(
        self,
        service: Any,
        registry: InterceptorRegistry | None = None,
        api: PublishedApi | None = None,
        config: DispatchConfig | None = None,
    ) -> None:
        self.service = service
        self.registry = registry or InterceptorRegistry.empty()
        self.api = api
        self.config = config or DispatchConfig()
        self.methods = MethodTable.from_service(service)
        self._runner = InterceptorChainRunner(self.registry)

    def dispatch(self, request: InvocationRequest, on_cancel: CancelCallback | None = None) -> Any:
        """Invoke the target of ``request`` wrapped by the interceptor chains.

        Args:
            request: The call to make.
            on_cancel: Receives the reason when a before interceptor cancels
                the call and supplies one.

        Returns:
            The target's return value, or ``None`` when the call was
            canceled. After interceptors never change the returned value.

        Raises:
            MethodNotFoundError: If a CONCRETE method is missing or
                unpublished, or the resolved method does not exist.
            InvalidInterceptorError: If a named interceptor cannot be found.
        """
        with LogContext(
            service=type(self.service).__name__,
            method=request.method_name,
            mode=request.mode.value,
        ):
            target = self._resolve(request)

            before = self._runner.run_chain(Phase.BEFORE, self.service, request)
            if before.canceled:
                if self.config.log_cancellations:
                    logger.info("Invocation of %s canceled: %s", request.method_name, before.reason)
                if on_cancel is not None and before.reason is not None:
                    on_cancel(before.reason)
                return None

            result = target()

            after = self._runner.run_chain(Phase.AFTER, self.service, request, result)
            if after.canceled:
                logger.debug("After interceptor returned false for %s; ignored", request.method_name)
            return result

    def _resolve(self, request: InvocationRequest) -> Callable[[], Any]:
        name = request.method_name
        if request.is_concrete():
            if not (self.methods.responds_to(name) and self.api is not None and self.api.has_api_method(name)):
                raise MethodNotFoundError(
                    message=f"no such web service method '{name}' on service object",
                    data={"method": name, "public_method": request.public_method_name},
                )
        elif request.is_virtual() and request.continuation is not None:
            continuation = request.continuation
            return lambda: continuation(request.public_method_name, *request.block_params, *request.params)

        method = self.methods.resolve(name)
        return lambda: method(*request.params)
