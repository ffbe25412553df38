from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ServiceInvokeError(Exception):
    """Base class for service-invoke exceptions with a canonical error shape."""

    code: int
    message: str
    data: Any | None = None
    cause: Exception | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", (self.message,))
        if self.cause is not None:
            object.__setattr__(self, "__cause__", self.cause)
            object.__setattr__(self, "__suppress_context__", True)

    def to_error_dict(self) -> dict[str, Any]:
        """Return a dict the calling layer can map onto a protocol fault."""
        return {"code": self.code, "message": self.message, "data": self.data}


@dataclass(frozen=True)
class InvocationError(ServiceInvokeError):
    """Raised when a dispatch cannot be performed as requested."""

    code: int = 4000
    message: str = "Invocation error"


@dataclass(frozen=True)
class MethodNotFoundError(InvocationError):
    """Raised when the target method is missing or not published."""

    code: int = 4001
    message: str = "Method not found"


@dataclass(frozen=True)
class InvalidInterceptorError(InvocationError):
    """Raised when an interceptor reference cannot be invoked."""

    code: int = 4002
    message: str = "Invalid interceptor"
