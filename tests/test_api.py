from __future__ import annotations

from service_invoke.api import ApiMethod, PublishedApi, ServiceApi


def test_api_method_publishes_name_and_public_name() -> None:
    api = ServiceApi()

    method = api.api_method("find_person", expects=[str], returns=[list])

    assert method == ApiMethod(name="find_person", public_name="FindPerson", expects=[str], returns=[list])
    assert api.has_api_method("find_person") is True
    assert api.has_public_api_method("FindPerson") is True
    assert api.api_method_name("FindPerson") == "find_person"
    assert api.public_api_method_name("find_person") == "FindPerson"
    assert api.has_api_method("FindPerson") is False


def test_explicit_public_name_and_redeclaration() -> None:
    api = ServiceApi()
    api.api_method("add", public_name="Sum")
    api.api_method("add", public_name="Plus")

    assert api.api_method_name("Sum") is None
    assert api.api_method_name("Plus") == "add"
    assert list(api.api_methods) == ["add"]


def test_unknown_names() -> None:
    api = ServiceApi([ApiMethod(name="ping", public_name="Ping")])

    assert api.has_api_method("pong") is False
    assert api.public_api_method_name("pong") is None
    assert api.api_method_name("Ping") == "ping"


def test_service_api_satisfies_published_api_protocol() -> None:
    assert isinstance(ServiceApi(), PublishedApi)
