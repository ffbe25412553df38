"""Service base class.

A service type declares its published API and its invocation interceptors
at definition time::

    class CalculatorService(ServiceBase):
        service_api = calculator_api

        def add(self, a, b):
            return a + b

        def _check(self, name, args):
            return [False, "permission denied"]

    CalculatorService.before_invocation("_check", only=["add"])

Each subclass starts from a copy of its parent's interceptor registry, so
registrations on a subclass never leak into the parent.
"""

from __future__ import annotations

from typing import Any, ClassVar

from service_invoke.api import ServiceApi
from service_invoke.config import DispatchConfig
from service_invoke.invocation.dispatcher import CancelCallback, Dispatcher
from service_invoke.invocation.interceptors import InterceptorRef
from service_invoke.invocation.registry import InterceptorRegistry, MethodNames
from service_invoke.invocation.request import InvocationMode, InvocationRequest


class ServiceBase:
    """Base class for service objects dispatched through interceptors."""

    service_api: ClassVar[ServiceApi | None] = None
    interceptor_registry: ClassVar[InterceptorRegistry] = InterceptorRegistry.empty()
    dispatch_config: ClassVar[DispatchConfig | None] = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls.interceptor_registry = cls.interceptor_registry.extend().build()

    @classmethod
    def web_service_api(cls, api: ServiceApi) -> None:
        cls.service_api = api

    @classmethod
    def append_before_invocation(cls, *interceptors: InterceptorRef, only: MethodNames = None, except_: MethodNames = None) -> None:
        cls.interceptor_registry = (
            cls.interceptor_registry.extend()
            .append_before_invocation(*interceptors, only=only, except_=except_)
            .build()
        )

    @classmethod
    def prepend_before_invocation(cls, *interceptors: InterceptorRef, only: MethodNames = None, except_: MethodNames = None) -> None:
        cls.interceptor_registry = (
            cls.interceptor_registry.extend()
            .prepend_before_invocation(*interceptors, only=only, except_=except_)
            .build()
        )

    @classmethod
    def append_after_invocation(cls, *interceptors: InterceptorRef, only: MethodNames = None, except_: MethodNames = None) -> None:
        cls.interceptor_registry = (
            cls.interceptor_registry.extend()
            .append_after_invocation(*interceptors, only=only, except_=except_)
            .build()
        )

    @classmethod
    def prepend_after_invocation(cls, *interceptors: InterceptorRef, only: MethodNames = None, except_: MethodNames = None) -> None:
        cls.interceptor_registry = (
            cls.interceptor_registry.extend()
            .prepend_after_invocation(*interceptors, only=only, except_=except_)
            .build()
        )

    before_invocation = append_before_invocation
    after_invocation = append_after_invocation

    @classmethod
    def invocation_request(
        cls,
        public_method_name: str,
        params: list[Any] | None = None,
        mode: InvocationMode = InvocationMode.CONCRETE,
    ) -> InvocationRequest:
        """Build a request, mapping the public name through the declared API."""
        method_name = None
        if cls.service_api is not None:
            method_name = cls.service_api.api_method_name(public_method_name)
        return InvocationRequest(mode, public_method_name, method_name or public_method_name, params)

    def perform_invocation(self, request: InvocationRequest, on_cancel: CancelCallback | None = None) -> Any:
        cls = type(self)
        dispatcher = Dispatcher(
            self,
            registry=cls.interceptor_registry,
            api=cls.service_api,
            config=cls.dispatch_config,
        )
        return dispatcher.dispatch(request, on_cancel=on_cancel)
