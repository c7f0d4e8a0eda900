"""Chain executor for mediated operations.

Runs the before hooks in registration order, calls the strategy, then
runs the after hooks in reverse order, so the first wrapper to see the
arguments is the last to see the result. Failures are not caught: any
exception from a hook or the strategy aborts the chain and reaches the
caller unchanged.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from ..logging import TRACE, get_logger, log_trace
from .plan import DispatchPlan


class ChainExecutor:
    """Executes a DispatchPlan for a single call.

    Stateless; wrapper instances are created per call and discarded
    when it returns.

    Example:
        >>> executor = ChainExecutor()
        >>> executor.execute(plan, "hi", lambda args: Echo().op(args))
        'HI!'
    """

    def execute(
        self,
        plan: DispatchPlan,
        args: Any,
        backend_call: Callable[[Any], Any],
    ) -> Any:
        """Run the interceptor chain around a backend call.

        One instance is created per distinct wrapper type, so a wrapper
        hooking both phases sees its own before-hook state in its after
        hook.

        Args:
            plan: Resolved plan for the operation.
            args: Argument payload passed to the first before hook.
            backend_call: Callable that performs the strategy call with
                the (possibly transformed) arguments.

        Returns:
            The return value after every after hook has run.
        """
        wrappers = {wrapper_type: wrapper_type() for wrapper_type in plan.interceptor_types}

        if not plan.skip_before_interceptors:
            chain = [wrappers[w] for w in plan.before_interceptors]
            args = self._run_before(chain, plan.before_method_name, args)

        ret = backend_call(args)

        if plan.skip_after_interceptors:
            return ret
        chain = [wrappers[w] for w in plan.after_chain]
        return self._run_after(chain, plan.after_method_name, args, ret)

    @staticmethod
    def _run_before(wrappers: list[Any], hook_name: str, args: Any) -> Any:
        tracing = get_logger().isEnabledFor(TRACE)
        for wrapper in wrappers:
            hook = getattr(wrapper, hook_name, None)
            if hook is None:
                continue
            if tracing:
                log_trace(f"Running {type(wrapper).__name__}.{hook_name}")
            args = hook(args)
        return args

    @staticmethod
    def _run_after(wrappers: list[Any], hook_name: str, args: Any, ret: Any) -> Any:
        tracing = get_logger().isEnabledFor(TRACE)
        for wrapper in wrappers:
            hook = getattr(wrapper, hook_name, None)
            if hook is None:
                continue
            if tracing:
                log_trace(f"Running {type(wrapper).__name__}.{hook_name}")
            ret = hook(ret, args)
        return ret


_default_executor = ChainExecutor()


def execute_chain(
    plan: DispatchPlan,
    args: Any,
    backend_call: Callable[[Any], Any],
) -> Any:
    """Run a plan with the shared ChainExecutor."""
    return _default_executor.execute(plan, args, backend_call)
