from __future__ import annotations

from typing import Any

from service_invoke.invocation import (
    InterceptorChainRunner,
    InvocationMode,
    InvocationRequest,
    Phase,
    RegistryBuilder,
)


class Recorder:
    def __init__(self) -> None:
        self.calls: list[tuple[Any, ...]] = []

    def make(self, label: str, outcome: Any = True):
        def interceptor(service: Any, name: str, args: list[Any], *rest: Any) -> Any:
            self.calls.append((label, name, list(args), *rest))
            return outcome

        return interceptor


def _request(method_name: str = "add", params: list[Any] | None = None) -> InvocationRequest:
    return InvocationRequest(InvocationMode.CONCRETE, method_name, method_name, params or [1, 2])


def test_runs_interceptors_in_order() -> None:
    recorder = Recorder()
    registry = (
        RegistryBuilder()
        .before_invocation(recorder.make("b"))
        .prepend_before_invocation(recorder.make("a"))
        .build()
    )

    result = InterceptorChainRunner(registry).run_chain(Phase.BEFORE, object(), _request())

    assert result.proceed is True
    assert [call[0] for call in recorder.calls] == ["a", "b"]
    assert recorder.calls[0][1:] == ("add", [1, 2])


def test_false_stops_remaining_interceptors() -> None:
    recorder = Recorder()
    registry = (
        RegistryBuilder()
        .before_invocation(recorder.make("first"), recorder.make("veto", False), recorder.make("never"))
        .build()
    )

    result = InterceptorChainRunner(registry).run_chain(Phase.BEFORE, object(), _request())

    assert result.canceled is True
    assert result.reason is None
    assert [call[0] for call in recorder.calls] == ["first", "veto"]


def test_cancellation_carries_reason() -> None:
    recorder = Recorder()
    registry = RegistryBuilder().before_invocation(recorder.make("veto", (False, "denied"))).build()

    result = InterceptorChainRunner(registry).run_chain(Phase.BEFORE, object(), _request())

    assert result.canceled is True
    assert result.reason == "denied"


def test_falsy_values_other_than_false_proceed() -> None:
    recorder = Recorder()
    registry = (
        RegistryBuilder()
        .before_invocation(recorder.make("none", None), recorder.make("zero", 0), recorder.make("last"))
        .build()
    )

    result = InterceptorChainRunner(registry).run_chain(Phase.BEFORE, object(), _request())

    assert result.proceed is True
    assert len(recorder.calls) == 3


def test_filtered_interceptors_are_skipped() -> None:
    recorder = Recorder()
    only_add = recorder.make("only_add")
    not_add = recorder.make("not_add")
    registry = (
        RegistryBuilder()
        .before_invocation(only_add, only=["add"])
        .before_invocation(not_add, except_=["add"])
        .build()
    )
    runner = InterceptorChainRunner(registry)

    runner.run_chain(Phase.BEFORE, object(), _request("add"))
    runner.run_chain(Phase.BEFORE, object(), _request("subtract"))

    assert [(call[0], call[1]) for call in recorder.calls] == [("only_add", "add"), ("not_add", "subtract")]


def test_after_phase_passes_result() -> None:
    recorder = Recorder()
    registry = RegistryBuilder().after_invocation(recorder.make("after")).build()

    InterceptorChainRunner(registry).run_chain(Phase.AFTER, object(), _request(), 3)

    assert recorder.calls == [("after", "add", [1, 2], 3)]


def test_named_interceptor_resolves_on_service() -> None:
    class Service:
        def __init__(self) -> None:
            self.seen: list[str] = []

        def _audit(self, name: str, args: list[Any]) -> None:
            self.seen.append(name)

    service = Service()
    registry = RegistryBuilder().before_invocation("_audit").build()

    InterceptorChainRunner(registry).run_chain(Phase.BEFORE, service, _request("subtract"))

    assert service.seen == ["subtract"]
