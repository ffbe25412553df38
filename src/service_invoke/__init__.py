"""Public API for service_invoke.

This module re-exports the stable, supported surface area of the
library. Import from here when possible.
"""

from service_invoke.api import ApiMethod, PublishedApi, ServiceApi
from service_invoke.config import DispatchConfig, load_config
from service_invoke.exceptions import (
    InvalidInterceptorError,
    InvocationError,
    MethodNotFoundError,
    ServiceInvokeError,
)
from service_invoke.invocation import (
    Dispatcher,
    InterceptorChainRunner,
    InterceptorRegistry,
    InterceptorResult,
    InvocationMode,
    InvocationRequest,
    Phase,
    RegistryBuilder,
)
from service_invoke.service import ServiceBase

__all__ = [
    # api
    "ApiMethod",
    "PublishedApi",
    "ServiceApi",
    # config
    "DispatchConfig",
    "load_config",
    # errors
    "InvalidInterceptorError",
    "InvocationError",
    "MethodNotFoundError",
    "ServiceInvokeError",
    # dispatch
    "Dispatcher",
    "InterceptorChainRunner",
    "InterceptorRegistry",
    "InterceptorResult",
    "InvocationMode",
    "InvocationRequest",
    "Phase",
    "RegistryBuilder",
    "ServiceBase",
]
