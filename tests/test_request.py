from __future__ import annotations

import pytest

from service_invoke.invocation import InvocationMode, InvocationRequest


def test_params_default_to_empty_list() -> None:
    first = InvocationRequest(InvocationMode.CONCRETE, "Add", "add")
    second = InvocationRequest(InvocationMode.CONCRETE, "Add", "add")

    assert first.params == []
    assert first.block_params == []
    assert first.continuation is None
    first.params.append(1)
    assert second.params == []


@pytest.mark.parametrize(
    ("mode", "concrete", "unpublished", "virtual"),
    [
        (InvocationMode.CONCRETE, True, False, False),
        (InvocationMode.UNPUBLISHED_CONCRETE, False, True, False),
        (InvocationMode.VIRTUAL, False, False, True),
        ("virtual", False, False, True),
    ],
)
def test_mode_predicates(mode: InvocationMode | str, concrete: bool, unpublished: bool, virtual: bool) -> None:
    request = InvocationRequest(mode, "Add", "add", [1, 2])

    assert request.is_concrete() is concrete
    assert request.is_unpublished_concrete() is unpublished
    assert request.is_virtual() is virtual


def test_mode_and_public_name_are_read_only() -> None:
    request = InvocationRequest(InvocationMode.CONCRETE, "Add", "add")

    with pytest.raises(AttributeError):
        request.mode = InvocationMode.VIRTUAL  # type: ignore[misc]
    with pytest.raises(AttributeError):
        request.public_method_name = "Other"  # type: ignore[misc]
    assert request.mode is InvocationMode.CONCRETE


def test_method_name_and_params_are_mutable() -> None:
    request = InvocationRequest(InvocationMode.CONCRETE, "AddNumbers", "AddNumbers", [1])

    request.method_name = "add"
    request.params.append(2)

    assert request.method_name == "add"
    assert request.params == [1, 2]
    assert request.public_method_name == "AddNumbers"


def test_unknown_mode_is_rejected() -> None:
    with pytest.raises(ValueError):
        InvocationRequest("direct", "Add", "add")
