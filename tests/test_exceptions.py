from __future__ import annotations

from dataclasses import FrozenInstanceError

import pytest

from service_invoke.exceptions import (
    InvalidInterceptorError,
    InvocationError,
    MethodNotFoundError,
    ServiceInvokeError,
)


@pytest.mark.parametrize(
    ("exc_type", "code", "message"),
    [
        (InvocationError, 4000, "Invocation error"),
        (MethodNotFoundError, 4001, "Method not found"),
        (InvalidInterceptorError, 4002, "Invalid interceptor"),
    ],
)
def test_exception_defaults(exc_type: type[ServiceInvokeError], code: int, message: str) -> None:
    exc = exc_type()

    assert exc.code == code
    assert exc.message == message
    assert str(exc) == message
    assert isinstance(exc, InvocationError)
    assert exc.to_error_dict() == {"code": code, "message": message, "data": None}


def test_exceptions_are_frozen() -> None:
    exc = MethodNotFoundError(message="no such web service method 'x'")

    with pytest.raises(FrozenInstanceError):
        exc.code = 1  # type: ignore[misc]


def test_cause_is_chained() -> None:
    cause = KeyError("add")
    exc = MethodNotFoundError(cause=cause, data={"method": "add"})

    assert exc.__cause__ is cause
    assert exc.__suppress_context__ is True
    assert exc.to_error_dict()["data"] == {"method": "add"}
