from __future__ import annotations

import logging
from typing import Any

from service_invoke.invocation.interceptors import InterceptorResult, Phase, NO_RESULT
from service_invoke.invocation.registry import InterceptorRegistry
from service_invoke.invocation.request import InvocationRequest

logger = logging.getLogger(__name__)

_PROCEED = InterceptorResult(proceed=True)


class InterceptorChainRunner:
    """Runs the configured interceptors of one phase against a request."""

    def __init__(self, registry: InterceptorRegistry) -> None:
        self.registry = registry

    def run_chain(
        self,
        phase: Phase | str,
        service: Any,
        request: InvocationRequest,
        result: Any = NO_RESULT,
    ) -> InterceptorResult:
        """Run every applicable interceptor of ``phase`` in order.

        Before interceptors get ``(method_name, params)``; after
        interceptors also get the call result. The first interceptor whose
        outcome is exactly ``False`` stops the chain and its result is
        returned.

        Args:
            phase: ``Phase.BEFORE`` or ``Phase.AFTER``.
            service: Service object the request targets.
            request: Request being dispatched.
            result: Target call result, for the after phase.

        Returns:
            The cancelling ``InterceptorResult``, or a proceeding one when
            the chain completes.
        """
        phase = Phase(phase)
        method_name = request.method_name
        for interceptor in self.registry.chain(phase):
            if not self.registry.is_applicable(interceptor, method_name):
                logger.debug("Skipping %s interceptor %r for %s", phase.value, interceptor, method_name)
                continue
            if phase is Phase.BEFORE:
                outcome = interceptor(service, method_name, request.params)
            else:
                outcome = interceptor(service, method_name, request.params, result)
            if outcome.canceled:
                logger.debug(
                    "%s interceptor %r canceled %s: %s",
                    phase.value.capitalize(),
                    interceptor,
                    method_name,
                    outcome.reason,
                )
                return outcome
        return _PROCEED
