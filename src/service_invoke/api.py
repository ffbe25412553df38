"""Declared service APIs.

The dispatch core only asks a declared API whether a method name is
published. :class:`ServiceApi` is a small in-process declaration that
answers that question and maps internal method names to the public names
callers use.

Usage:
    api = ServiceApi()
    api.api_method("find_person", expects=[str], returns=[list])
    api.has_api_method("find_person")          # True
    api.api_method_name("FindPerson")          # "find_person"
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field


@runtime_checkable
class PublishedApi(Protocol):
    """Anything that can tell whether a method name is published."""

    def has_api_method(self, name: str) -> bool: ...


def _public_name(name: str) -> str:
    return "".join(part[:1].upper() + part[1:] for part in name.split("_") if part)


class ApiMethod(BaseModel):
    """A published operation.

    ``expects`` and ``returns`` are descriptive only; the dispatch core does
    not validate arguments against them.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    name: str = Field(description="Method name on the service object")
    public_name: str = Field(description="Name seen by external callers")
    expects: list[Any] | None = Field(default=None, description="Declared parameter types")
    returns: list[Any] | None = Field(default=None, description="Declared return types")


class ServiceApi:
    """In-process declaration of the operations a service publishes."""

    def __init__(self, methods: list[ApiMethod] | None = None) -> None:
        self._methods: dict[str, ApiMethod] = {}
        self._public_names: dict[str, str] = {}
        for method in methods or []:
            self._add(method)

    def api_method(
        self,
        name: str,
        expects: list[Any] | None = None,
        returns: list[Any] | None = None,
        public_name: str | None = None,
    ) -> ApiMethod:
        """Publish ``name``; the public name defaults to its CamelCase form."""
        method = ApiMethod(
            name=str(name),
            public_name=public_name or _public_name(str(name)),
            expects=expects,
            returns=returns,
        )
        self._add(method)
        return method

    def has_api_method(self, name: str) -> bool:
        return name in self._methods

    def has_public_api_method(self, public_name: str) -> bool:
        return public_name in self._public_names

    def api_method_name(self, public_name: str) -> str | None:
        return self._public_names.get(public_name)

    def public_api_method_name(self, name: str) -> str | None:
        method = self._methods.get(name)
        return method.public_name if method else None

    @property
    def api_methods(self) -> dict[str, ApiMethod]:
        return dict(self._methods)

    def _add(self, method: ApiMethod) -> None:
        previous = self._methods.get(method.name)
        if previous is not None:
            self._public_names.pop(previous.public_name, None)
        self._methods[method.name] = method
        self._public_names[method.public_name] = method.name
