from __future__ import annotations

from collections.abc import Iterator
from typing import Any

import pytest

from service_invoke.api import ServiceApi
from service_invoke.observability.logging import LogContext


class Calculator:
    """Plain service object used across dispatch tests."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[Any, ...]]] = []

    def add(self, a: int, b: int) -> int:
        self.calls.append(("add", (a, b)))
        return a + b

    def subtract(self, a: int, b: int) -> int:
        self.calls.append(("subtract", (a, b)))
        return a - b

    def hidden(self) -> str:
        self.calls.append(("hidden", ()))
        return "hidden"

    def fail(self) -> None:
        raise ValueError("boom")


@pytest.fixture()
def calculator() -> Calculator:
    return Calculator()


@pytest.fixture()
def calculator_api() -> ServiceApi:
    api = ServiceApi()
    api.api_method("add", expects=[int, int], returns=[int])
    api.api_method("subtract", expects=[int, int], returns=[int])
    api.api_method("fail")
    return api


@pytest.fixture(autouse=True)
def clear_log_context() -> Iterator[None]:
    """Reset LogContext between tests."""
    LogContext.clear()
    yield
    LogContext.clear()
