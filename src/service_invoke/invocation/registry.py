from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from service_invoke.invocation.interceptors import Interceptor, InterceptorRef, Phase, as_interceptor

logger = logging.getLogger(__name__)

MethodNames = Iterable[object] | str | None


def _method_set(methods: Iterable[object] | str) -> frozenset[str]:
    if isinstance(methods, str):
        return frozenset((methods,))
    return frozenset(str(method) for method in methods)


class InterceptorRegistry:
    """Immutable interceptor configuration for one service type.

    Args:
        before_chain: Interceptors run before the target call, in order.
        after_chain: Interceptors run after a successful target call.
        inclusion_filter: Interceptor -> method names it is limited to.
        exclusion_filter: Interceptor -> method names it skips.
    """

    __slots__ = ("_before_chain", "_after_chain", "_inclusion_filter", "_exclusion_filter")

    def __init__(
        self,
        before_chain: Iterable[Interceptor] = (),
        after_chain: Iterable[Interceptor] = (),
        inclusion_filter: Mapping[Interceptor, frozenset[str]] | None = None,
        exclusion_filter: Mapping[Interceptor, frozenset[str]] | None = None,
    ) -> None:
        self._before_chain = tuple(before_chain)
        self._after_chain = tuple(after_chain)
        self._inclusion_filter = MappingProxyType(dict(inclusion_filter or {}))
        self._exclusion_filter = MappingProxyType(dict(exclusion_filter or {}))

    @classmethod
    def empty(cls) -> InterceptorRegistry:
        return cls()

    @property
    def before_chain(self) -> tuple[Interceptor, ...]:
        return self._before_chain

    @property
    def after_chain(self) -> tuple[Interceptor, ...]:
        return self._after_chain

    @property
    def inclusion_filter(self) -> Mapping[Interceptor, frozenset[str]]:
        return self._inclusion_filter

    @property
    def exclusion_filter(self) -> Mapping[Interceptor, frozenset[str]]:
        return self._exclusion_filter

    def chain(self, phase: Phase | str) -> tuple[Interceptor, ...]:
        """Return the interceptor chain for ``phase``."""
        if Phase(phase) is Phase.BEFORE:
            return self._before_chain
        return self._after_chain

    def is_applicable(self, interceptor: Interceptor, method_name: str) -> bool:
        """Return whether ``interceptor`` runs for ``method_name``.

        An inclusion filter, when recorded, is the only test. Otherwise an
        exclusion filter skips the names it lists. With neither, the
        interceptor always runs.
        """
        included = self._inclusion_filter.get(interceptor)
        if included is not None:
            return method_name in included
        excluded = self._exclusion_filter.get(interceptor)
        if excluded is not None:
            return method_name not in excluded
        return True

    def extend(self) -> RegistryBuilder:
        """Return a builder seeded with a copy of this registry."""
        return RegistryBuilder(self)

    def __repr__(self) -> str:
        return f"InterceptorRegistry(before={list(self._before_chain)!r}, after={list(self._after_chain)!r})"


class RegistryBuilder:
    """Collects interceptor registrations and builds an InterceptorRegistry.

    Registrations only ever add to a chain. Filters are recorded per
    interceptor reference; registering the same reference again replaces
    its filter of the same kind.
    """

    def __init__(self, base: InterceptorRegistry | None = None) -> None:
        base = base or InterceptorRegistry.empty()
        self._chains: dict[Phase, list[Interceptor]] = {
            Phase.BEFORE: list(base.before_chain),
            Phase.AFTER: list(base.after_chain),
        }
        self._inclusion_filter: dict[Interceptor, frozenset[str]] = dict(base.inclusion_filter)
        self._exclusion_filter: dict[Interceptor, frozenset[str]] = dict(base.exclusion_filter)

    def append_interceptors(
        self,
        phase: Phase | str,
        *interceptors: InterceptorRef,
        only: MethodNames = None,
        except_: MethodNames = None,
    ) -> RegistryBuilder:
        """Add ``interceptors`` to the end of the ``phase`` chain."""
        batch = self._prepare(interceptors, only, except_)
        self._chains[Phase(phase)].extend(batch)
        logger.debug("Appended %d %s interceptor(s)", len(batch), Phase(phase).value)
        return self

    def prepend_interceptors(
        self,
        phase: Phase | str,
        *interceptors: InterceptorRef,
        only: MethodNames = None,
        except_: MethodNames = None,
    ) -> RegistryBuilder:
        """Insert ``interceptors``, in order, ahead of the ``phase`` chain."""
        batch = self._prepare(interceptors, only, except_)
        phase = Phase(phase)
        self._chains[phase] = batch + self._chains[phase]
        logger.debug("Prepended %d %s interceptor(s)", len(batch), phase.value)
        return self

    def append_before_invocation(
        self,
        *interceptors: InterceptorRef,
        only: MethodNames = None,
        except_: MethodNames = None,
    ) -> RegistryBuilder:
        return self.append_interceptors(Phase.BEFORE, *interceptors, only=only, except_=except_)

    def prepend_before_invocation(
        self,
        *interceptors: InterceptorRef,
        only: MethodNames = None,
        except_: MethodNames = None,
    ) -> RegistryBuilder:
        return self.prepend_interceptors(Phase.BEFORE, *interceptors, only=only, except_=except_)

    def append_after_invocation(
        self,
        *interceptors: InterceptorRef,
        only: MethodNames = None,
        except_: MethodNames = None,
    ) -> RegistryBuilder:
        return self.append_interceptors(Phase.AFTER, *interceptors, only=only, except_=except_)

    def prepend_after_invocation(
        self,
        *interceptors: InterceptorRef,
        only: MethodNames = None,
        except_: MethodNames = None,
    ) -> RegistryBuilder:
        return self.prepend_interceptors(Phase.AFTER, *interceptors, only=only, except_=except_)

    before_invocation = append_before_invocation
    after_invocation = append_after_invocation

    def build(self) -> InterceptorRegistry:
        return InterceptorRegistry(
            before_chain=self._chains[Phase.BEFORE],
            after_chain=self._chains[Phase.AFTER],
            inclusion_filter=self._inclusion_filter,
            exclusion_filter=self._exclusion_filter,
        )

    def _prepare(
        self,
        refs: Iterable[InterceptorRef],
        only: MethodNames,
        except_: MethodNames,
    ) -> list[Interceptor]:
        batch = [as_interceptor(ref) for ref in refs]
        # only wins; the exclusion list of the same batch is dropped
        if only is not None:
            methods = _method_set(only)
            for interceptor in batch:
                self._inclusion_filter[interceptor] = methods
        elif except_ is not None:
            methods = _method_set(except_)
            for interceptor in batch:
                self._exclusion_filter[interceptor] = methods
        return batch
