from service_invoke.invocation.chain import InterceptorChainRunner
from service_invoke.invocation.dispatcher import Dispatcher, MethodTable
from service_invoke.invocation.interceptors import (
    CallableInterceptor,
    HandlerInterceptor,
    Interceptor,
    InterceptorResult,
    NamedMethodInterceptor,
    Phase,
    as_interceptor,
)
from service_invoke.invocation.registry import InterceptorRegistry, RegistryBuilder
from service_invoke.invocation.request import InvocationMode, InvocationRequest

__all__ = [
    "CallableInterceptor",
    "Dispatcher",
    "HandlerInterceptor",
    "Interceptor",
    "InterceptorChainRunner",
    "InterceptorRegistry",
    "InterceptorResult",
    "InvocationMode",
    "InvocationRequest",
    "MethodTable",
    "NamedMethodInterceptor",
    "Phase",
    "RegistryBuilder",
    "as_interceptor",
]
